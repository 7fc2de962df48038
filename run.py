#!/usr/bin/env python3
"""
Voicenote Station launcher.
Boots the web service (uploads, staff dashboard, live updates) on the configured port.
"""
# Gevent must patch before any other imports that use socket/threading (so Socket.IO can serve many clients).
from gevent import monkey
monkey.patch_all()

import logging

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from shared.config import Settings
from station.api import create_app
from station.context import build_context

console = Console()
logger = logging.getLogger("station")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


@click.command()
@click.option('--host', default=None, help='Listen address (default: HOST or 0.0.0.0)')
@click.option('--port', type=int, default=None, help='Listen port (default: PORT or 3000)')
@click.option('--env-file', type=click.Path(dir_okay=False), default=None,
              help='Read settings from this .env file')
@click.option('--debug', is_flag=True, help='Enable Flask debug mode')
def main(host, port, env_file, debug):
    """Start the Voicenote Station."""
    settings = Settings.from_env(env_file)
    configure_logging(settings.log_level)

    ctx = build_context(settings)
    purged = ctx.sessions.purge_expired()
    app, socketio = create_app(ctx)

    host = host or settings.host
    port = port or settings.port
    console.print(Panel.fit(
        f"[bold cyan]Voicenote Station[/bold cyan]\n\n"
        f"Upload page: http://localhost:{port}/\n"
        f"Staff:       http://localhost:{port}/staff\n"
        f"Data:        {settings.data_dir}",
        border_style="cyan",
    ))
    logger.info("Connected to the SQLite database at %s", settings.database_path)
    if purged:
        logger.info("Removed %d expired session(s)", purged)

    socketio.run(app, host=host, port=port, debug=debug)


if __name__ == "__main__":
    main()

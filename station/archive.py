"""
Streaming zip export of stored voice notes.

The archive is produced chunk by chunk into the response instead of being
assembled on disk first.
"""
import logging
import zipfile
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Tuple

from shared.constants import ARCHIVE_CHUNK_SIZE

logger = logging.getLogger(__name__)


class _ChunkBuffer:
    """Write-only, unseekable sink; zipfile falls back to data descriptors."""

    def __init__(self):
        self._data = bytearray()

    def write(self, b) -> int:
        self._data.extend(b)
        return len(b)

    def flush(self) -> None:
        pass

    def __len__(self) -> int:
        return len(self._data)

    def drain(self) -> bytes:
        data = bytes(self._data)
        self._data.clear()
        return data


def stream_zip(entries: Iterable[Tuple[Path, str]],
               on_complete: Optional[Callable[[], None]] = None,
               chunk_size: int = ARCHIVE_CHUNK_SIZE) -> Iterator[bytes]:
    """
    Yield a zip archive of `(path, arcname)` entries.

    Paths that do not exist are skipped. `on_complete` runs once the last
    byte has been handed to the consumer; it does not run if the consumer
    stops early.
    """
    buffer = _ChunkBuffer()
    with zipfile.ZipFile(buffer, mode='w', compression=zipfile.ZIP_DEFLATED) as archive:
        for path, arcname in entries:
            try:
                src = open(path, 'rb')
            except (FileNotFoundError, IsADirectoryError):
                logger.info("Skipping %s: not on disk", arcname)
                continue
            with src, archive.open(arcname, mode='w') as dest:
                for chunk in iter(lambda: src.read(chunk_size), b''):
                    dest.write(chunk)
                    if len(buffer) >= chunk_size:
                        yield buffer.drain()
            if len(buffer):
                yield buffer.drain()

    tail = buffer.drain()
    if tail:
        yield tail

    if on_complete is not None:
        on_complete()

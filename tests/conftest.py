import io
from pathlib import Path

import pytest

from shared.config import Settings
from shared.crypto import PasswordHasher
from shared.errors import EncodeError
from station.api import create_app
from station.audio import EncodedAudio
from station.context import build_context

STAFF_EMAIL = "staff@example.com"
STAFF_PASSWORD = "correct horse"


class FakeEncoder:
    """Stands in for ffmpeg: copies the upload behind an ID3 marker."""

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def encode(self, input_path, output_path):
        self.calls.append((input_path, output_path))
        if self.fail:
            raise EncodeError("File conversion failed.")
        data = b"ID3" + Path(input_path).read_bytes()
        Path(output_path).write_bytes(data)
        return EncodedAudio(path=Path(output_path), duration_sec=1, bitrate_kbps=192,
                            size_bytes=len(data))


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=tmp_path, session_secret="test-secret", gemini_api_key="test-key")


@pytest.fixture
def ctx(settings):
    ctx = build_context(settings)
    ctx.encoder = FakeEncoder()
    ctx.passwords = PasswordHasher(iterations=1000)
    return ctx


@pytest.fixture
def app_and_socketio(ctx):
    app, socketio = create_app(ctx)
    app.config['TESTING'] = True
    return app, socketio


@pytest.fixture
def app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def staff_client(client):
    client.post('/api/register', json={"email": STAFF_EMAIL, "password": STAFF_PASSWORD})
    resp = client.post('/api/login', json={"email": STAFF_EMAIL, "password": STAFF_PASSWORD})
    assert resp.status_code == 200
    return client


def audio_part(content=b"fake-audio", name="note.webm"):
    return (io.BytesIO(content), name)

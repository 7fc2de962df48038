import pytest

from uploader.errors import WaitTimeout
from uploader.items import derive_title, load_items
from uploader.waits import poll


def test_poll_returns_first_truthy_result():
    answers = iter([None, None, "found"])
    sleeps = []
    assert poll(lambda: next(answers), 6, 45, sleep=sleeps.append) == "found"
    assert sleeps == [6, 6]


def test_poll_gives_up_after_max_attempts():
    calls = []
    sleeps = []

    def probe():
        calls.append(1)
        return None

    with pytest.raises(WaitTimeout) as exc:
        poll(probe, 1, 20, sleep=sleeps.append, what="file input")
    assert len(calls) == 20
    assert len(sleeps) == 19
    assert "file input" in str(exc.value)


def test_derive_title_strips_extension_and_separators():
    assert derive_title("Jo-SW1A.mp3") == "Jo SW1A"
    assert derive_title("my_first__episode.m4a") == "my first  episode"
    assert derive_title("Jo-Ann_SW1A-1AA.mp3") == "Jo Ann SW1A 1AA"
    assert derive_title("episode.final.m4a") == "episode.final"
    assert derive_title("no_extension") == "no extension"
    assert derive_title(".hidden") == ".hidden"


def test_load_items_keeps_order_and_expands_directories(tmp_path):
    folder = tmp_path / "batch"
    folder.mkdir()
    (folder / "b.mp3").write_bytes(b"")
    (folder / "a.mp3").write_bytes(b"")
    (folder / "notes.txt").write_text("skip")
    single = tmp_path / "z.wav"
    single.write_bytes(b"")

    items = load_items([single, folder])
    assert [i.name for i in items] == ["z.wav", "a.mp3", "b.mp3"]
    assert [i.title for i in items] == ["z", "a", "b"]

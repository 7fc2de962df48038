"""
Files queued for upload.
"""
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from uploader.constants import AUDIO_EXTENSIONS

_SEPARATORS = re.compile(r"[-_]")


@dataclass(frozen=True)
class UploadItem:
    path: Path
    title: str

    @property
    def name(self) -> str:
        return self.path.name


def derive_title(filename: str) -> str:
    """Episode title: the filename without its extension, each `-` or `_` read as a space."""
    name = Path(filename).name
    stem, dot, _ = name.rpartition('.')
    if not dot or not stem:
        stem = name
    return _SEPARATORS.sub(" ", stem)


def load_items(paths: Iterable) -> List[UploadItem]:
    """
    Build the batch in the order given.

    Directories expand to the audio files directly inside them, sorted by name.
    """
    items = []
    for raw in paths:
        path = Path(raw).expanduser()
        if path.is_dir():
            children = sorted(p for p in path.iterdir()
                              if p.is_file() and p.suffix.lower() in AUDIO_EXTENSIONS)
            items.extend(UploadItem(path=p.resolve(), title=derive_title(p.name)) for p in children)
        else:
            items.append(UploadItem(path=path.resolve(), title=derive_title(path.name)))
    return items

import re
from pathlib import Path
from typing import Optional

from shared.constants import DEFAULT_FIRST_NAME, DEFAULT_POSTCODE, OUTPUT_EXTENSION

_UNSAFE = re.compile(r"[^a-zA-Z0-9-]")


def sanitize_part(value: Optional[str]) -> str:
    """Replace everything but ASCII letters, digits and hyphens with underscores."""
    return _UNSAFE.sub("_", value or "")


def build_base_filename(first_name: Optional[str], postcode: Optional[str]) -> str:
    """`<firstName>-<postcode>` with defaults for blank fields, no extension."""
    first = sanitize_part(first_name or DEFAULT_FIRST_NAME)
    code = sanitize_part(postcode or DEFAULT_POSTCODE)
    return f"{first}-{code}"


def reserve_output_path(directory: Path, base: str, extension: str = OUTPUT_EXTENSION) -> Path:
    """
    Claim the first free name among `base.mp3`, `base-1.mp3`, `base-2.mp3`, ...

    The name is reserved by creating an empty placeholder exclusively, so a
    concurrent upload can never be handed the same path.
    """
    directory = Path(directory)
    counter = 0
    while True:
        name = f"{base}{extension}" if counter == 0 else f"{base}-{counter}{extension}"
        candidate = directory / name
        try:
            with open(candidate, "x"):
                pass
            return candidate
        except FileExistsError:
            counter += 1


def safe_basename(filename: Optional[str]) -> str:
    """Strip any directory part a client may have sent along with a filename.

    Returns an empty string when nothing usable is left (`..`, `/`, blank).
    """
    name = Path(filename or "").name
    if name in ("", ".", ".."):
        return ""
    return name

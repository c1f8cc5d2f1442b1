"""Cross-platform filename helpers shared by output naming and the CLI."""
import re

DEFAULT_MAX_LENGTH = 120

_FORBIDDEN_CHARS = re.compile(r'[\\/:*?"<>|]')
_WHITESPACE = re.compile(r"\s+")
_RESERVED_NAMES = re.compile(r"^(CON|PRN|AUX|NUL|COM[1-9]|LPT[1-9])$", re.IGNORECASE)


def sanitize_filename(name: str | None, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Make a name safe for Windows/ZIP extractors.

    Forbidden characters become ``-``, whitespace collapses, leading/trailing
    dots and spaces are stripped, reserved device names get a ``_`` suffix and
    the result is capped at `max_length` characters. Never returns "".
    """
    safe = _FORBIDDEN_CHARS.sub("-", str(name or ""))
    safe = _WHITESPACE.sub(" ", safe).strip()
    safe = safe.strip(". ")
    if not safe:
        safe = "image"
    if _RESERVED_NAMES.match(safe):
        safe = f"{safe}_"
    return safe[:max_length]


def strip_extension(filename: str | None) -> str:
    """``photo.final.jpg`` → ``photo.final``; names without a dot are unchanged."""
    return re.sub(r"\.[^.]+$", "", str(filename or "image"))

"""Human-friendly archive filename derived from the source filenames."""
import re
from collections.abc import Sequence
from datetime import datetime, timezone

from utils.filenames import sanitize_filename, strip_extension

_SEPARATORS = re.compile(r"[\s_.-]")

# A common prefix shorter than this is not worth using
_MIN_PREFIX_LENGTH = 3


def compute_archive_name(filenames: Sequence[str], now: datetime | None = None) -> str:
    """Return ``<base>_<timestamp>.zip``.

    - no files:       ``images``
    - one file:       its sanitized stem
    - several files:  their common token-aligned prefix, else ``<first>+<N-1>``
    """
    stems = [sanitize_filename(strip_extension(name)) for name in filenames]

    base = "images"
    if len(stems) == 1:
        base = stems[0] or "image"
    elif len(stems) > 1:
        base = common_prefix(stems) or f"{stems[0] or 'image'}+{len(stems) - 1}"

    now = now or datetime.now(timezone.utc)
    timestamp = now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    timestamp = re.sub(r"[:.]", "-", timestamp)
    return f"{sanitize_filename(f'{base}_{timestamp}')}.zip"


def common_prefix(values: Sequence[str]) -> str:
    if not values:
        return ""
    if len(values) == 1:
        return values[0]

    prefix = values[0]
    for value in values[1:]:
        i = 0
        limit = min(len(prefix), len(value))
        while i < limit and prefix[i] == value[i]:
            i += 1
        prefix = prefix[:i]
        if not prefix:
            break

    # Don't cut in the middle of a token: back up to the last separator
    separators = [m.start() for m in _SEPARATORS.finditer(prefix)]
    if separators and separators[-1] > 2:
        prefix = prefix[:separators[-1]]

    prefix = prefix.strip()
    return prefix if len(prefix) >= _MIN_PREFIX_LENGTH else ""

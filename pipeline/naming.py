"""Step 8: output naming.

Renders the naming pattern, sanitizes the result for archive/filesystem use
and reserves a per-folder unique name. The `NameRegistry` lives for exactly
one batch run.
"""
from models.options import DEFAULT_NAMING_PATTERN
from models.preset import Preset
from utils.filenames import sanitize_filename

# Placeholders understood by naming patterns
PLACEHOLDERS = ("name", "index", "preset", "width", "height", "format", "product")


def render_pattern(
    pattern: str | None,
    *,
    name: str,
    index: int,
    preset: Preset,
    width: int,
    height: int,
    product: str = "",
) -> str:
    """Substitute ``{placeholder}`` tokens; unknown tokens are left as-is."""
    values = {
        "name": name or "image",
        "index": str(index),
        "preset": preset.name or "preset",
        "width": str(width),
        "height": str(height),
        "format": preset.format.value,
        "product": product or "",
    }
    result = pattern or DEFAULT_NAMING_PATTERN
    for key in PLACEHOLDERS:
        result = result.replace("{" + key + "}", values[key])
    return result


class NameRegistry:
    """Per-folder sets of names already handed out during one batch run."""

    def __init__(self) -> None:
        self._used: dict[str, set[str]] = {}

    def reserve(self, folder: str, base_name: str) -> str:
        """Return `base_name`, or `base_name-2`, `-3`, … if already taken in `folder`."""
        used = self._used.setdefault(folder, set())
        candidate = base_name
        counter = 2
        while candidate in used:
            candidate = f"{base_name}-{counter}"
            counter += 1
        used.add(candidate)
        return candidate

    def used_names(self, folder: str) -> frozenset[str]:
        return frozenset(self._used.get(folder, ()))


def folder_name(preset: Preset) -> str:
    return sanitize_filename(preset.name or "preset")

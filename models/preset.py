"""Preset model — one named output specification.

A batch run applies every preset to every source image. Presets are
validated on construction and on every assignment so quality and sharpen
always sit inside [0, 1].
"""
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

# Upper bound on an explicit target dimension (pixels)
MAX_DIMENSION = 8000


class FitMode(str, Enum):
    COVER = "cover"
    CONTAIN = "contain"
    INSIDE = "inside"
    OUTSIDE = "outside"
    STRETCH = "stretch"


class OutputFormat(str, Enum):
    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"
    AVIF = "avif"

    @property
    def extension(self) -> str:
        return "jpg" if self is OutputFormat.JPEG else self.value

    @property
    def pil_format(self) -> str:
        return self.value.upper()

    @property
    def supports_alpha(self) -> bool:
        return self is not OutputFormat.JPEG


class Preset(BaseModel):
    """A named, reusable output specification.

    `width` / `height` left unset mean "auto": when exactly one is given and
    `keep_aspect` is true, the other is derived from the source aspect ratio.
    """

    model_config = ConfigDict(validate_assignment=True)

    name: str = "preset"
    width: int | None = None
    height: int | None = None
    fit: FitMode = FitMode.COVER
    format: OutputFormat = OutputFormat.JPEG
    quality: float = 0.85
    sharpen: float = 0.0
    background: str | None = None
    keep_aspect: bool = True
    naming_pattern: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def blank_name_becomes_default(cls, v):
        if v is None or not str(v).strip():
            return "preset"
        return str(v).strip()

    @field_validator("width", "height", mode="before")
    @classmethod
    def non_positive_means_auto(cls, v):
        if v is None or v == "":
            return None
        try:
            v = int(v)
        except TypeError as exc:
            raise ValueError(f"expected a whole number of pixels, got {v!r}") from exc
        if v <= 0:
            return None
        return min(v, MAX_DIMENSION)

    @field_validator("quality", "sharpen", mode="before")
    @classmethod
    def clamp_fraction(cls, v, info: ValidationInfo) -> float:
        # Left empty in YAML: fall back to the field default
        if v is None or v == "":
            return cls.model_fields[info.field_name].default
        try:
            v = float(v)
        except TypeError as exc:
            raise ValueError(f"{info.field_name} must be a number between 0 and 1") from exc
        return max(0.0, min(1.0, v))

    @property
    def is_single_dimension(self) -> bool:
        return (self.width is None) != (self.height is None)


class PresetLibrary(BaseModel):
    """File-backed list of presets (``presets:`` key in a YAML document)."""

    presets: list[Preset] = Field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "PresetLibrary":
        """Load from a YAML file. Missing preset fields use Pydantic defaults.

        Raises FileNotFoundError if path does not exist.
        """
        import yaml  # lazy — only needed at load time
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return cls.model_validate(data)

    @classmethod
    def load_or_default(cls, path: Path) -> "PresetLibrary":
        """Load from path if it exists, otherwise return a single default preset."""
        if path.exists():
            return cls.load(path)
        return cls(presets=[Preset()])

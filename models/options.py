from pydantic import BaseModel, ConfigDict, Field

DEFAULT_NAMING_PATTERN = "{name}_{preset}"
DEFAULT_BACKGROUND = "#ffffff"


class GlobalOptions(BaseModel):
    """Run-wide options shared read-only by every job of a batch."""

    model_config = ConfigDict(frozen=True)

    jpeg_dpi: int = Field(default=0, ge=0)  # 0 = keep the encoder's default
    background_color: str = DEFAULT_BACKGROUND
    preserve_transparency: bool = True
    naming_pattern: str = DEFAULT_NAMING_PATTERN
    product_name: str = ""
    comment: str = ""

    @property
    def description(self) -> str | None:
        """Product name and comment joined for the JPEG description field."""
        parts = [p for p in (self.product_name, self.comment) if p]
        return " - ".join(parts) or None

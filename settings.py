from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from models.options import DEFAULT_BACKGROUND, DEFAULT_NAMING_PATTERN, GlobalOptions


class Settings(BaseSettings):
    input_dir: Path = Path("./data/input")
    output_dir: Path = Path("./data/output")
    presets_path: Path = Path("./data/presets.yaml")

    jpeg_dpi: int = 0
    background_color: str = DEFAULT_BACKGROUND
    preserve_transparency: bool = True
    naming_pattern: str = DEFAULT_NAMING_PATTERN
    product_name: str = ""
    comment: str = ""

    compression_level: int = 6
    yield_every: int = 5
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BATCHRESIZE_",
        env_file_encoding="utf-8",
    )

    @field_validator("jpeg_dpi")
    @classmethod
    def dpi_must_not_be_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("jpeg_dpi must be 0 (no override) or positive")
        return v

    @field_validator("compression_level")
    @classmethod
    def compression_level_in_zlib_range(cls, v: int) -> int:
        if not 0 <= v <= 9:
            raise ValueError("compression_level must be between 0 and 9")
        return v

    @field_validator("yield_every")
    @classmethod
    def yield_every_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("yield_every must be at least 1")
        return v

    def global_options(self) -> GlobalOptions:
        return GlobalOptions(
            jpeg_dpi=self.jpeg_dpi,
            background_color=self.background_color,
            preserve_transparency=self.preserve_transparency,
            naming_pattern=self.naming_pattern,
            product_name=self.product_name,
            comment=self.comment,
        )

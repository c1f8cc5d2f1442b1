from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from utils.filenames import strip_extension


class SourceImage(BaseModel):
    """Raw source bytes plus the filename they were read from. Never mutated."""

    model_config = ConfigDict(frozen=True)

    filename: str
    data: bytes

    @property
    def stem(self) -> str:
        """Filename without its last extension (``holiday.final.jpg`` → ``holiday.final``)."""
        return strip_extension(self.filename)


class OutputArtifact(BaseModel):
    """One encoded output. `folder` / `filename` are the final archive location."""

    payload: bytes
    filename: str
    folder: str = ""

    @property
    def archive_path(self) -> str:
        return f"{self.folder}/{self.filename}" if self.folder else self.filename


class JobFailure(BaseModel):
    source: str
    preset: str
    kind: Literal["decode", "encode"]
    message: str


class BatchResult(BaseModel):
    archive: bytes
    total_jobs: int = Field(ge=0)
    artifacts: list[OutputArtifact] = Field(default_factory=list)
    failures: list[JobFailure] = Field(default_factory=list)

    @property
    def skipped_sources(self) -> list[str]:
        """Distinct source filenames with at least one failed job, in failure order."""
        return list(dict.fromkeys(f.source for f in self.failures))

class PipelineError(Exception):
    """Base class for all batch pipeline errors."""


class JobError(PipelineError):
    """Fails a single (source × preset) job; the batch continues."""

    kind = "job"

    def __init__(self, filename: str, message: str):
        super().__init__(f"{filename}: {message}")
        self.filename = filename
        self.message = message


class DecodeError(JobError):
    kind = "decode"


class EncodeError(JobError):
    kind = "encode"


class MetadataParseError(PipelineError):
    """Orientation or injected metadata could not be parsed. Never fatal."""


class ArchiveError(PipelineError):
    """The archive could not be finalized. Fatal to the whole batch."""

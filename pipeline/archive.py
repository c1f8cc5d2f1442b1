"""Folder-per-preset ZIP archive, assembled in memory.

Entries are collected as jobs finish and compressed once by `finalize()`.
"""
import io
import logging
import zipfile

from pipeline.errors import ArchiveError

logger = logging.getLogger(__name__)

DEFAULT_COMPRESSION_LEVEL = 6


class ArchiveBuilder:
    def __init__(self, compression_level: int = DEFAULT_COMPRESSION_LEVEL) -> None:
        self.compression_level = compression_level
        self._entries: list[tuple[str, bytes]] = []
        self._finalized = False

    def add(self, folder: str, name: str, payload: bytes) -> str:
        """Record an entry; returns its path inside the archive."""
        if self._finalized:
            raise ArchiveError("archive already finalized")
        path = f"{folder}/{name}" if folder else name
        self._entries.append((path, payload))
        return path

    @property
    def entry_paths(self) -> list[str]:
        return [path for path, _ in self._entries]

    def finalize(self) -> bytes:
        """Compress all entries into one ZIP payload. May be called once."""
        if self._finalized:
            raise ArchiveError("archive already finalized")
        self._finalized = True

        buf = io.BytesIO()
        try:
            with zipfile.ZipFile(
                buf, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=self.compression_level
            ) as zf:
                for path, payload in self._entries:
                    zf.writestr(path, payload)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, ValueError) as exc:
            raise ArchiveError(f"could not write archive: {exc}") from exc

        data = buf.getvalue()
        logger.debug("Archive finalized: %d entries, %d bytes", len(self._entries), len(data))
        return data

#!/usr/bin/env python3
"""Resize every image in the input directory with every preset and write one ZIP.

Usage:
    python run_batch.py                                   # paths from settings / .env
    python run_batch.py --input-dir photos --presets presets.yaml
    python run_batch.py --output-dir out/
"""
import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from models.batch import SourceImage
from models.preset import PresetLibrary
from pipeline import batch
from pipeline.errors import ArchiveError
from settings import Settings
from utils.archive_name import compute_archive_name

_IMAGE_EXTENSIONS = frozenset({
    ".jpg", ".jpeg", ".png", ".webp", ".gif", ".bmp", ".tif", ".tiff", ".avif",
})

logger = logging.getLogger("run_batch")


def load_sources(input_dir: Path) -> list[SourceImage]:
    """Read every image file in `input_dir`, sorted by filename."""
    if not input_dir.exists():
        logger.warning("Input directory not found: %s", input_dir)
        return []
    files = sorted(
        f for f in input_dir.iterdir()
        if f.is_file() and f.suffix.lower() in _IMAGE_EXTENSIONS
    )
    return [SourceImage(filename=f.name, data=f.read_bytes()) for f in files]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--input-dir", type=Path, dest="input_dir",
                        help="Directory with source images (overrides settings)")
    parser.add_argument("--presets", type=Path, dest="presets_path",
                        help="YAML file with a 'presets:' list (overrides settings)")
    parser.add_argument("--output-dir", type=Path, dest="output_dir",
                        help="Directory the ZIP is written to (overrides settings)")
    args = parser.parse_args(argv)

    overrides = {k: v for k, v in vars(args).items() if v is not None}
    settings = Settings(**overrides)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )

    sources = load_sources(settings.input_dir)
    if not sources:
        logger.error("No images found in %s", settings.input_dir)
        return 1

    library = PresetLibrary.load_or_default(settings.presets_path)
    logger.info("=== %d image(s), %d preset(s) ===", len(sources), len(library.presets))

    def _progress(completed: int, total: int) -> None:
        logger.info("Progress %d/%d", completed, total)

    try:
        result = batch.run(
            sources,
            library.presets,
            settings.global_options(),
            on_progress=_progress,
            compression_level=settings.compression_level,
            yield_every=settings.yield_every,
        )
    except ArchiveError as exc:
        logger.error("Archive could not be created — no output written: %s", exc)
        return 2

    if result.failures:
        logger.warning("Skipped %d job(s):", len(result.failures))
        for failure in result.failures:
            logger.warning("  %s × %s (%s): %s", failure.source, failure.preset, failure.kind, failure.message)

    if not result.artifacts:
        logger.error("Every job failed; no archive written")
        return 1

    settings.output_dir.mkdir(parents=True, exist_ok=True)
    output_path = settings.output_dir / compute_archive_name([s.filename for s in sources])
    output_path.write_bytes(result.archive)
    logger.info("=== Done → %s ===", output_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Batch orchestration — every source image × every preset into one archive.

Jobs run strictly one at a time in row-major order (all presets for file 0,
then file 1, …). A failed decode or encode skips that job only; archive
finalization failure aborts the batch. Control is handed back to the event
loop after every `yield_every` completed jobs.

Reads:  SourceImage bytes, Preset list, GlobalOptions
Writes: nothing — the archive is returned in memory as part of BatchResult
"""
import asyncio
import logging
from collections.abc import Callable, Sequence

from models.batch import BatchResult, JobFailure, OutputArtifact, SourceImage
from models.options import GlobalOptions
from models.preset import Preset
from pipeline import composite, decode, encode, fit, metadata, naming, orient, sharpen
from pipeline.archive import DEFAULT_COMPRESSION_LEVEL, ArchiveBuilder
from pipeline.codec import ImageCodec, PillowCodec
from pipeline.errors import JobError
from utils.filenames import sanitize_filename

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

DEFAULT_YIELD_EVERY = 5


def run(
    sources: Sequence[SourceImage],
    presets: Sequence[Preset],
    options: GlobalOptions | None = None,
    **kwargs,
) -> BatchResult:
    """Blocking wrapper around `run_async` for callers without an event loop."""
    return asyncio.run(run_async(sources, presets, options, **kwargs))


async def run_async(
    sources: Sequence[SourceImage],
    presets: Sequence[Preset],
    options: GlobalOptions | None = None,
    *,
    codec: ImageCodec | None = None,
    on_progress: ProgressCallback | None = None,
    compression_level: int = DEFAULT_COMPRESSION_LEVEL,
    yield_every: int = DEFAULT_YIELD_EVERY,
) -> BatchResult:
    """Process all (source × preset) jobs and return the finalized archive.

    `on_progress(completed, total)` is called once per job, failed jobs
    included. Raises ArchiveError if the archive cannot be finalized.
    """
    options = options or GlobalOptions()
    codec = codec or PillowCodec()
    yield_every = max(1, yield_every)

    total = len(sources) * len(presets)
    archive = ArchiveBuilder(compression_level)
    registry = naming.NameRegistry()
    artifacts: list[OutputArtifact] = []
    failures: list[JobFailure] = []
    completed = 0

    logger.info("Batch: %d file(s) × %d preset(s) = %d job(s)", len(sources), len(presets), total)

    for index, source in enumerate(sources):
        for preset in presets:
            try:
                artifact = transform_single(source, preset, options, index, codec)
            except JobError as exc:
                logger.warning("  [%s × %s] SKIPPED: %s", source.filename, preset.name, exc.message)
                failures.append(JobFailure(
                    source=source.filename,
                    preset=preset.name,
                    kind=exc.kind,
                    message=exc.message,
                ))
            else:
                artifact = _place_in_archive(artifact, preset, archive, registry)
                artifacts.append(artifact)
                logger.info("  [%s × %s] → %s", source.filename, preset.name, artifact.archive_path)

            completed += 1
            _emit_progress(on_progress, completed, total)
            if completed % yield_every == 0:
                await _yield_to_scheduler()

    payload = archive.finalize()

    logger.info("Batch complete → %d bytes", len(payload))
    logger.info("  Outputs: %d", len(artifacts))
    logger.info("  Skipped: %d", len(failures))

    return BatchResult(archive=payload, total_jobs=total, artifacts=artifacts, failures=failures)


def transform_single(
    source: SourceImage,
    preset: Preset,
    options: GlobalOptions,
    index: int,
    codec: ImageCodec,
) -> OutputArtifact:
    """Run one job: bytes → upright raster → canvas → sharpened → encoded → tagged.

    The returned artifact carries the rendered (not yet unique) filename.
    """
    orientation = decode.read_orientation(source, codec)
    raw = decode.decode(source, codec)
    upright = orient.normalize(raw, orientation)

    placement = fit.resolve(upright.width, upright.height, preset)
    canvas = composite.composite(upright, placement, preset, options)
    if preset.sharpen > 0:
        canvas = sharpen.sharpen(canvas, preset.sharpen)

    payload = encode.encode(canvas, preset.format, preset.quality, codec, source.filename)
    payload = metadata.inject(payload, preset.format, options, source.filename)

    base = naming.render_pattern(
        preset.naming_pattern or options.naming_pattern,
        name=source.stem,
        index=index,
        preset=preset,
        width=placement.width,
        height=placement.height,
        product=options.product_name,
    )
    return OutputArtifact(payload=payload, filename=f"{base}.{preset.format.extension}")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _place_in_archive(
    artifact: OutputArtifact,
    preset: Preset,
    archive: ArchiveBuilder,
    registry: naming.NameRegistry,
) -> OutputArtifact:
    folder = naming.folder_name(preset)
    base, _, ext = artifact.filename.rpartition(".")
    unique = registry.reserve(folder, sanitize_filename(base or "image"))
    filename = f"{unique}.{ext}"
    archive.add(folder, filename, artifact.payload)
    return artifact.model_copy(update={"folder": folder, "filename": filename})


def _emit_progress(cb: ProgressCallback | None, completed: int, total: int) -> None:
    if cb is None:
        return
    try:
        cb(completed, total)
    except Exception as exc:
        logger.warning("Progress callback failed at %d/%d: %s", completed, total, exc)


async def _yield_to_scheduler() -> None:
    await asyncio.sleep(0)

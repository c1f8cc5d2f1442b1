"""Tests for output naming, filename sanitizing and archive naming."""
from datetime import datetime, timezone

import pytest

from models.preset import Preset
from pipeline.naming import NameRegistry, folder_name, render_pattern
from utils.archive_name import common_prefix, compute_archive_name
from utils.filenames import sanitize_filename, strip_extension

_NOW = datetime(2026, 10, 19, 3, 22, 0, 123000, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# render_pattern
# ---------------------------------------------------------------------------

class TestRenderPattern:
    def _render(self, pattern, **overrides):
        kwargs = dict(name="photo", index=3, preset=Preset(name="web", format="webp"),
                      width=800, height=600, product="Shop")
        kwargs.update(overrides)
        return render_pattern(pattern, **kwargs)

    def test_default_pattern(self):
        assert self._render(None) == "photo_web"

    def test_all_placeholders(self):
        result = self._render("{product}-{name}-{index}-{preset}-{width}x{height}.{format}")
        assert result == "Shop-photo-3-web-800x600.webp"

    def test_repeated_placeholder(self):
        assert self._render("{name}/{name}") == "photo/photo"

    def test_unknown_placeholder_left_alone(self):
        assert self._render("{name}_{date}") == "photo_{date}"

    def test_empty_product(self):
        assert self._render("{product}{name}", product="") == "photo"


# ---------------------------------------------------------------------------
# NameRegistry
# ---------------------------------------------------------------------------

class TestNameRegistry:
    def test_collisions_get_numbered_suffixes(self):
        registry = NameRegistry()
        assert registry.reserve("web", "photo") == "photo"
        assert registry.reserve("web", "photo") == "photo-2"
        assert registry.reserve("web", "photo") == "photo-3"

    def test_folders_are_independent(self):
        registry = NameRegistry()
        assert registry.reserve("web", "photo") == "photo"
        assert registry.reserve("thumb", "photo") == "photo"

    def test_suffixed_name_is_reserved_too(self):
        registry = NameRegistry()
        registry.reserve("web", "photo")
        registry.reserve("web", "photo")  # → photo-2
        assert registry.reserve("web", "photo-2") == "photo-2-2"

    def test_used_names(self):
        registry = NameRegistry()
        registry.reserve("web", "a")
        registry.reserve("web", "a")
        assert registry.used_names("web") == {"a", "a-2"}
        assert registry.used_names("other") == frozenset()

    def test_registries_do_not_share_state(self):
        NameRegistry().reserve("web", "photo")
        assert NameRegistry().reserve("web", "photo") == "photo"


class TestFolderName:
    def test_sanitized_preset_name(self):
        assert folder_name(Preset(name="Web: 1200/800")) == "Web- 1200-800"


# ---------------------------------------------------------------------------
# sanitize_filename
# ---------------------------------------------------------------------------

class TestSanitizeFilename:
    @pytest.mark.parametrize("raw, expected", [
        ('a\\b/c:d*e?f"g<h>i|j', "a-b-c-d-e-f-g-h-i-j"),
        ("  many   spaces  ", "many spaces"),
        ("..hidden..", "hidden"),
        ("", "image"),
        (None, "image"),
        ("...", "image"),
        ("CON", "CON_"),
        ("lpt1", "lpt1_"),
        ("CONSOLE", "CONSOLE"),
    ])
    def test_cases(self, raw, expected):
        assert sanitize_filename(raw) == expected

    def test_length_capped(self):
        assert len(sanitize_filename("x" * 300)) == 120

    def test_custom_cap(self):
        assert sanitize_filename("abcdef", max_length=3) == "abc"


class TestStripExtension:
    def test_last_extension_only(self):
        assert strip_extension("a.b.png") == "a.b"

    def test_no_extension(self):
        assert strip_extension("photo") == "photo"


# ---------------------------------------------------------------------------
# compute_archive_name
# ---------------------------------------------------------------------------

class TestArchiveName:
    def test_single_file(self):
        assert compute_archive_name(["holiday.jpg"], now=_NOW) == "holiday_2026-10-19T03-22-00-123Z.zip"

    def test_no_files(self):
        assert compute_archive_name([], now=_NOW) == "images_2026-10-19T03-22-00-123Z.zip"

    def test_common_prefix_trimmed_to_token(self):
        name = compute_archive_name(["trip_day1.jpg", "trip_day2.jpg"], now=_NOW)
        assert name == "trip_2026-10-19T03-22-00-123Z.zip"

    def test_no_common_prefix_counts_others(self):
        name = compute_archive_name(["a.jpg", "b.jpg", "c.jpg"], now=_NOW)
        assert name == "a+2_2026-10-19T03-22-00-123Z.zip"

    def test_short_prefix_discarded(self):
        assert common_prefix(["ab1", "ab2"]) == ""

    def test_prefix_without_separator_kept(self):
        assert common_prefix(["sunset01", "sunset02"]) == "sunset0"

    def test_sanitized(self):
        name = compute_archive_name(["bad:name.jpg"], now=_NOW)
        assert name.startswith("bad-name_")

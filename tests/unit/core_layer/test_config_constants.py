"""
Unit Tests for Configuration Constants
"""

import pytest

from pixelcache.core.config.constants import (
    CONTENT_TYPES,
    FETCH_RETRYABLE_STATUS_CODES,
    CropStrategy,
    FitMode,
    OutputFormat,
    PlaceholderMode,
    Stage,
)


@pytest.mark.unit
class TestEnums:
    def test_fit_modes(self):
        assert {m.value for m in FitMode} == {"cover", "contain", "fill", "inside", "outside", "crop"}

    def test_output_formats(self):
        assert {f.value for f in OutputFormat} == {"webp", "avif", "jpeg", "png"}

    def test_crop_and_placeholder(self):
        assert {c.value for c in CropStrategy} == {"smart", "center"}
        assert {p.value for p in PlaceholderMode} == {"none", "blur"}

    def test_stage_values_are_unique(self):
        values = [s.value for s in Stage]
        assert len(values) == len(set(values))


@pytest.mark.unit
class TestContentTypes:
    def test_every_output_format_has_a_content_type(self):
        for fmt in OutputFormat:
            assert CONTENT_TYPES[fmt.value] == f"image/{fmt.value}"


@pytest.mark.unit
class TestRetryableStatusCodes:
    def test_server_errors_are_retryable(self):
        assert {500, 502, 503, 504} <= FETCH_RETRYABLE_STATUS_CODES

    def test_not_found_is_not_retryable(self):
        assert 404 not in FETCH_RETRYABLE_STATUS_CODES
        assert 403 not in FETCH_RETRYABLE_STATUS_CODES

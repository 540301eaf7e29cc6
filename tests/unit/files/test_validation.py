"""Upload metadata validation: allow-list, extension match, size limits, rule order."""

from __future__ import annotations

import pytest

from src.files.validation import (
    ALLOWED_TYPES,
    FILE_SIZE_LIMITS,
    size_limit_for,
    validate_metadata,
    validate_profile_image,
)
from src.shared.errors import InvalidMetadataError, ValidationError
from src.shared.types import UploadMetadata

_MIB = 1024 * 1024


def _meta(name: str = "photo.png", content_type: str = "image/png", size: int = 1024):
    return UploadMetadata(original_filename=name, content_type=content_type, size=size)


def _rule(metadata: UploadMetadata) -> str:
    with pytest.raises(InvalidMetadataError) as exc_info:
        validate_metadata(metadata)
    return exc_info.value.rule


@pytest.mark.unit
class TestAllowList:
    @pytest.mark.parametrize(
        ("content_type", "extension"),
        [(ct, ext) for ct, exts in ALLOWED_TYPES.items() for ext in sorted(exts)],
    )
    def test_every_allowed_pair_passes(self, content_type: str, extension: str) -> None:
        validate_metadata(_meta(f"file.{extension}", content_type, 1024))

    def test_extension_match_is_case_insensitive(self) -> None:
        validate_metadata(_meta("photo.PNG", "image/png"))
        validate_metadata(_meta("scan.JpEg", "image/jpeg"))

    def test_unknown_content_type_rejected(self) -> None:
        assert _rule(_meta("virus.exe", "application/x-msdownload")) == "content_type"

    def test_text_plain_not_allowed(self) -> None:
        assert _rule(_meta("notes.txt", "text/plain")) == "content_type"

    def test_extension_mismatch_rejected(self) -> None:
        assert _rule(_meta("x.jpg", "image/png")) == "extension"

    def test_missing_extension_rejected(self) -> None:
        assert _rule(_meta("README", "application/pdf")) == "extension"

    def test_trailing_dot_rejected(self) -> None:
        assert _rule(_meta("photo.", "image/png")) == "extension"


@pytest.mark.unit
class TestFilename:
    def test_empty_rejected(self) -> None:
        assert _rule(_meta("")) == "filename_empty"

    def test_whitespace_only_rejected(self) -> None:
        assert _rule(_meta("   ")) == "filename_empty"

    def test_255_bytes_accepted(self) -> None:
        name = "a" * 251 + ".png"
        validate_metadata(_meta(name))

    def test_256_bytes_rejected(self) -> None:
        name = "a" * 252 + ".png"
        assert _rule(_meta(name)) == "filename_too_long"

    def test_length_counted_in_utf8_bytes(self) -> None:
        # 90 * 3 bytes = 270 bytes but only 94 characters
        name = "中" * 90 + ".png"
        assert _rule(_meta(name)) == "filename_too_long"


@pytest.mark.unit
class TestSize:
    def test_zero_rejected(self) -> None:
        assert _rule(_meta(size=0)) == "size"

    def test_negative_rejected(self) -> None:
        assert _rule(_meta(size=-5)) == "size"

    def test_bool_rejected(self) -> None:
        assert _rule(_meta(size=True)) == "size"

    def test_image_exactly_at_limit_passes(self) -> None:
        validate_metadata(_meta(size=10 * _MIB))

    def test_image_over_limit_rejected_with_message(self) -> None:
        with pytest.raises(InvalidMetadataError) as exc_info:
            validate_metadata(_meta(size=11 * _MIB))
        assert exc_info.value.rule == "size_limit"
        assert exc_info.value.limit_mb == 10
        assert str(exc_info.value) == "Image files cannot exceed 10MB"

    def test_video_limit(self) -> None:
        validate_metadata(_meta("clip.mp4", "video/mp4", 50 * _MIB))
        assert _rule(_meta("clip.mp4", "video/mp4", 50 * _MIB + 1)) == "size_limit"

    def test_audio_limit(self) -> None:
        assert _rule(_meta("song.mp3", "audio/mpeg", 20 * _MIB + 1)) == "size_limit"

    def test_document_limit_message(self) -> None:
        with pytest.raises(InvalidMetadataError) as exc_info:
            validate_metadata(_meta("doc.pdf", "application/pdf", 21 * _MIB))
        assert str(exc_info.value) == "Document files cannot exceed 20MB"

    def test_size_limit_for_families(self) -> None:
        assert size_limit_for("image/gif") == FILE_SIZE_LIMITS["image"]
        assert size_limit_for("video/webm") == FILE_SIZE_LIMITS["video"]
        assert size_limit_for("application/msword") == FILE_SIZE_LIMITS["application"]


@pytest.mark.unit
class TestRuleOrder:
    def test_filename_checked_before_content_type(self) -> None:
        assert _rule(_meta("", "text/plain", 0)) == "filename_empty"

    def test_content_type_checked_before_extension(self) -> None:
        assert _rule(_meta("x.jpg", "text/plain", 0)) == "content_type"

    def test_extension_checked_before_size(self) -> None:
        assert _rule(_meta("x.jpg", "image/png", 0)) == "extension"

    def test_error_is_a_validation_error(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_metadata(_meta(""))
        assert exc_info.value.code == "INVALID_METADATA"


@pytest.mark.unit
class TestProfileImage:
    def test_png_within_limit_passes(self) -> None:
        validate_profile_image(_meta("me.png", "image/png", 5 * _MIB))

    def test_non_image_rejected(self) -> None:
        with pytest.raises(InvalidMetadataError) as exc_info:
            validate_profile_image(_meta("cv.pdf", "application/pdf", 1024))
        assert exc_info.value.rule == "profile_content_type"

    def test_over_profile_limit_rejected(self) -> None:
        with pytest.raises(InvalidMetadataError) as exc_info:
            validate_profile_image(_meta("me.png", "image/png", 6 * _MIB))
        assert exc_info.value.rule == "profile_size_limit"
        assert exc_info.value.limit_mb == 5

    def test_custom_max_size(self) -> None:
        with pytest.raises(InvalidMetadataError):
            validate_profile_image(_meta("me.png", "image/png", 2 * _MIB), max_size=1 * _MIB)

    def test_general_rules_run_first(self) -> None:
        with pytest.raises(InvalidMetadataError) as exc_info:
            validate_profile_image(_meta("me.jpg", "image/png", 1024))
        assert exc_info.value.rule == "extension"

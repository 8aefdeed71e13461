import pytest

from app.validations.file_validators import validate_image_file
from conftest import MB, MiB, make_file


@pytest.mark.parametrize("content_type", ["application/pdf", "text/plain", "video/mp4", ""])
def test_non_image_types_are_rejected(content_type):
    result = validate_image_file(make_file(2 * MB, content_type))
    assert not result.valid
    assert result.reason == "not an image type"


def test_image_type_match_is_case_insensitive():
    assert validate_image_file(make_file(2 * MB, "IMAGE/PNG")).valid


@pytest.mark.parametrize("content_type", ["image/png", "image/webp", "application/zip"])
def test_files_over_five_mib_never_pass(content_type):
    result = validate_image_file(make_file(5 * MiB + 1, content_type), at_upload=True)
    assert not result.valid


def test_oversized_image_reports_size_reason():
    result = validate_image_file(make_file(10 * MB, "image/png", "big.png"))
    assert result.reason == "exceeds maximum size"


def test_exactly_five_mib_is_allowed():
    assert validate_image_file(make_file(5 * MiB, "image/jpeg")).valid


def test_tiny_file_passes_selection_but_fails_upload_check():
    tiny = make_file(512, "image/gif", "dot.gif")

    assert validate_image_file(tiny).valid

    result = validate_image_file(tiny, at_upload=True)
    assert not result.valid
    assert result.reason == "file is empty or corrupted"


def test_minimum_size_boundary():
    assert validate_image_file(make_file(1024, "image/png"), at_upload=True).valid
    assert not validate_image_file(make_file(1023, "image/png"), at_upload=True).valid


def test_type_rule_wins_over_size_rule():
    result = validate_image_file(make_file(0, "text/plain"), at_upload=True)
    assert result.reason == "not an image type"

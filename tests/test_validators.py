import pytest

from diamond_loader.schemas.validation import RawRecord
from diamond_loader.schemas.validators import is_valid_url, parse_number, validate_field, validate_record


def test_unknown_columns_are_ignored():
    assert validate_field("Supplier", "anything at all", 1) == []


def test_empty_optional_field_is_fine():
    assert validate_field("Cut", "", 1) == []
    assert validate_field("TablePercent", "   ", 1) == []


@pytest.mark.parametrize("field", ["Shape", "Weight", "Color", "Clarity", "VendorStockNumber", "Lab", "Price"])
def test_empty_mandatory_field_is_one_error(field):
    issues = validate_field(field, "  ", 4)
    assert len(issues) == 1
    assert issues[0].code == "mandatory_empty"
    assert issues[0].message == f"{field} is mandatory and cannot be empty"
    assert issues[0].row == 4
    assert issues[0].severity == "error"


@pytest.mark.parametrize("field, value", [
    ("Shape", "rd"), ("Shape", "HT"), ("Color", "g"), ("Color", "Z"),
    ("Clarity", "vvs1"), ("Cut", "ex"), ("Lab", "none"), ("Lab", "gia"),
])
def test_enum_values_match_case_insensitively(field, value):
    assert validate_field(field, value, 1) == []


def test_invalid_enum_lists_allowed_values():
    [issue] = validate_field("Shape", "XX", 2)
    assert issue.code == "invalid_enum"
    assert issue.message == "Invalid shape. Must be one of: BR, PS, RAD, CU, EM, OV, MQ, AS, HT, RD"
    assert issue.raw_value == "XX"


def test_invalid_color_uses_grade_label():
    [issue] = validate_field("Color", "A", 2)
    assert issue.message.startswith("Invalid color grade. Must be one of: D, E, F")


@pytest.mark.parametrize("value", ["-1", "0", "abc", "nan", "inf", "1.0ct"])
def test_weight_must_be_positive(value):
    [issue] = validate_field("Weight", value, 3)
    assert issue.message == "Weight must be a positive number"
    assert issue.code == "not_positive_number"


@pytest.mark.parametrize("value", ["0.01", "5000", " 1.5 "])
def test_positive_numbers_pass(value):
    assert validate_field("Price", value, 1) == []


@pytest.mark.parametrize("value", ["0", "100", "57.5"])
def test_percent_in_range(value):
    assert validate_field("TablePercent", value, 1) == []


@pytest.mark.parametrize("value", ["-0.5", "100.1", "sixty"])
def test_percent_out_of_range(value):
    [issue] = validate_field("DepthPercent", value, 1)
    assert issue.message == "DepthPercent must be a number between 0 and 100"
    assert issue.severity == "error"


def test_bad_url_is_a_warning():
    [issue] = validate_field("Image", "not-a-url", 5)
    assert issue.severity == "warning"
    assert issue.code == "invalid_url"
    assert issue.message == "Invalid image URL format. Must be a valid URL."


def test_video_and_sarin_labels():
    assert validate_field("Video link", "nope", 1)[0].message.startswith("Invalid video URL")
    assert validate_field("SarinFile", "nope", 1)[0].message.startswith("Invalid 3D file URL")


def test_good_url_passes():
    assert validate_field("Image", "https://cdn.example.com/stones/a1.jpg", 1) == []


def test_text_fields_accept_anything():
    assert validate_field("Comments", "!!! {weird} ???", 1) == []


def test_parse_number():
    assert parse_number(" 1.5 ") == 1.5
    assert parse_number("1e3") == 1000.0
    assert parse_number("") is None
    assert parse_number("nan") is None


def test_is_valid_url():
    assert is_valid_url("http://example.com")
    assert not is_valid_url("www.example.com/x.jpg")


def test_validate_record_checks_each_column():
    record = RawRecord(row=7, values={"Shape": "XX", "Color": "A", "Supplier": "?", "Weight": "1"})
    issues = validate_record(record)
    assert sorted(i.field for i in issues) == ["Color", "Shape"]
    assert all(i.row == 7 for i in issues)

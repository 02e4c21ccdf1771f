import pytest

from diamond_loader.schemas.validation import RawRecord
from diamond_loader.services.mapping import apply_mapping, match_header, normalize_header, suggest_mapping


@pytest.mark.parametrize("header, field", [
    ("Shape", "Shape"),
    ("shape", "Shape"),
    ("Carat", "Weight"),
    ("Stock#", "VendorStockNumber"),
    ("Stock No", "VendorStockNumber"),
    ("Cert No.", "CertificateID"),
    ("Fluor", "FluorescenceIntensity"),
    ("Video Link", "Video link"),
    ("Table %", "TablePercent"),
    ("Depth_Percent", "DepthPercent"),
    ("Price/Crt", "Price"),
])
def test_match_header(header, field):
    assert match_header(header) == field


def test_unknown_header_has_no_match():
    assert match_header("Supplier") is None


def test_normalize_header():
    assert normalize_header(" Stock # No. ") == "stockno"


def test_suggest_mapping_skips_unknown_headers():
    mapping = suggest_mapping(["Stock#", "Carat", "Shape", "Supplier"])
    assert mapping == {"Stock#": "VendorStockNumber", "Carat": "Weight", "Shape": "Shape"}


def test_exact_names_win_over_aliases():
    # "Table" aliases TablePercent, which the file already carries
    assert suggest_mapping(["Table", "TablePercent"]) == {"TablePercent": "TablePercent"}


def test_first_alias_claims_the_field():
    assert suggest_mapping(["Carat", "Size"]) == {"Carat": "Weight"}


def test_apply_mapping_renames_columns_and_keeps_rows():
    records = [RawRecord(row=3, values={"Carat": "1.01", "Supplier": "Acme"})]
    headers, mapped = apply_mapping(["Carat", "Supplier"], records, {"Carat": "Weight"})
    assert headers == ["Weight", "Supplier"]
    assert mapped[0].row == 3
    assert mapped[0].values == {"Weight": "1.01", "Supplier": "Acme"}


def test_apply_mapping_rejects_collisions():
    with pytest.raises(ValueError, match="Weight"):
        apply_mapping(["Carat", "Weight"], [], {"Carat": "Weight"})

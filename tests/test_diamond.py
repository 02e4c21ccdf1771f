import pytest
from pydantic import ValidationError

from diamond_loader.schemas.diamond import DiamondPayload
from diamond_loader.schemas.validation import RawRecord


def record(**values):
    base = {
        "VendorStockNumber": " STK1 ", "Shape": "ps", "Weight": "1.01", "Color": "g",
        "Clarity": "vs1", "Cut": "VG", "FluorescenceIntensity": "Faint", "Lab": "GIA", "Price": "5000.7",
    }
    base.update(values)
    return RawRecord(row=1, values=base)


def test_codes_become_api_names():
    payload = DiamondPayload.from_record(record())
    assert payload.stock == "STK1"
    assert payload.shape == "pear"
    assert payload.weight == 1.01
    assert payload.color == "G"
    assert payload.clarity == "VS1"
    assert payload.cut == "VERY GOOD"
    assert payload.fluorescence == "FAINT"
    assert payload.price_per_carat == 5000


def test_round_codes_share_a_name():
    assert DiamondPayload.from_record(record(Shape="RD")).shape == "round brilliant"
    assert DiamondPayload.from_record(record(Shape="br")).shape == "round brilliant"


def test_unset_grades_take_defaults():
    payload = DiamondPayload.from_record(record())
    assert payload.polish == "EXCELLENT"
    assert payload.symmetry == "EXCELLENT"
    assert payload.culet == "NONE"
    assert payload.certificate_number == 0


def test_optional_columns_are_carried():
    payload = DiamondPayload.from_record(record(
        CertificateID="GIA 2141438171", TablePercent="57", DepthPercent="61.8",
        GirdleMin="Thin", GirdleMax="Medium", CuletSize="vs", Polish="ex", Symmetry="g",
        RapnetAskingPrice="7200", Comments="Eye clean", Image="https://cdn.example.com/a.jpg",
    ))
    assert payload.certificate_number == 2141438171
    assert payload.table == 57.0
    assert payload.depth_percentage == 61.8
    assert payload.gridle == "Thin - Medium"
    assert payload.culet == "VERY SMALL"
    assert payload.polish == "EXCELLENT"
    assert payload.symmetry == "GOOD"
    assert payload.rapnet == 7200
    assert payload.certificate_comment == "Eye clean"
    assert payload.picture == "https://cdn.example.com/a.jpg"


def test_api_payload_drops_empty_optionals():
    data = DiamondPayload.from_record(record(Lab="")).to_api_payload()
    assert "lab" not in data
    assert "picture" not in data
    assert "certificate_comment" not in data
    assert data["stock"] == "STK1"


def test_weight_must_be_positive():
    with pytest.raises(ValidationError):
        DiamondPayload.from_record(record(Weight="0"))


@pytest.mark.parametrize("value", ["inf", "1e400", "nan", "-5", "n/a"])
def test_unusable_asking_price_is_left_out(value):
    payload = DiamondPayload.from_record(record(RapnetAskingPrice=value))
    assert payload.rapnet is None
    assert "rapnet" not in payload.to_api_payload()


def test_fair_cut_is_listed_as_poor():
    assert DiamondPayload.from_record(record(Cut="F")).cut == "POOR"

# diamond_loader/schemas/diamond.py

import re
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from diamond_loader.schemas.validation import RawRecord
from diamond_loader.schemas.validators import parse_number

SHAPE_NAMES = {
    "RD": "round brilliant",
    "BR": "round brilliant",
    "PS": "pear",
    "RAD": "radiant",
    "CU": "cushion",
    "EM": "emerald",
    "OV": "oval",
    "MQ": "marquise",
    "AS": "asscher",
    "HT": "heart",
}

QUALITY_NAMES = {
    "EX": "EXCELLENT",
    "EXC": "EXCELLENT",
    "VG": "VERY GOOD",
    "G": "GOOD",
    "GD": "GOOD",
    # the inventory API has no FAIR grade; Fair stones are listed as POOR
    "F": "POOR",
    "FAIR": "POOR",
    "P": "POOR",
    "PR": "POOR",
}
QUALITIES = {"EXCELLENT", "VERY GOOD", "GOOD", "POOR"}

FLUORESCENCE_NAMES = {
    "N": "NONE", "NON": "NONE",
    "F": "FAINT", "FNT": "FAINT",
    "M": "MEDIUM", "MED": "MEDIUM",
    "S": "STRONG", "STR": "STRONG", "STG": "STRONG",
    "VS": "VERY STRONG", "VST": "VERY STRONG", "VSTG": "VERY STRONG",
}
FLUORESCENCES = {"NONE", "FAINT", "MEDIUM", "STRONG", "VERY STRONG"}

CULET_NAMES = {
    "N": "NONE", "NON": "NONE",
    "VS": "VERY SMALL", "VSM": "VERY SMALL",
    "S": "SMALL", "SM": "SMALL",
    "M": "MEDIUM", "MED": "MEDIUM",
    "SL": "SLIGHTLY LARGE",
    "L": "LARGE", "LG": "LARGE",
    "VL": "VERY LARGE",
    "EL": "EXTREMELY LARGE", "XL": "EXTREMELY LARGE",
}
CULETS = {"NONE", "VERY SMALL", "SMALL", "MEDIUM", "SLIGHTLY LARGE", "LARGE", "VERY LARGE",
          "EXTREMELY LARGE"}


def _lookup(value: Optional[str], names: Dict[str, str], valid: set, default: str) -> str:
    if not value:
        return default
    upper = value.strip().upper()
    if upper in valid:
        return upper
    return names.get(upper, default)


def _positive(value: Optional[str]) -> Optional[float]:
    number = parse_number(value or "")
    return number if number is not None and number > 0 else None


class DiamondPayload(BaseModel):
    """One stone in the inventory API's batch create request."""

    stock: str = Field(..., min_length=1)
    shape: str
    weight: float = Field(..., gt=0)
    color: str
    clarity: str
    certificate_number: int = 0
    lab: Optional[str] = None
    cut: Optional[str] = None
    polish: str = "EXCELLENT"
    symmetry: str = "EXCELLENT"
    fluorescence: str = "NONE"
    table: float = 0.0
    depth_percentage: float = 0.0
    gridle: str = ""
    culet: str = "NONE"
    certificate_comment: Optional[str] = None
    rapnet: Optional[int] = None
    price_per_carat: Optional[int] = None
    picture: Optional[str] = None

    @field_validator("lab", "certificate_comment", "picture", mode="before")
    @classmethod
    def empty_str_to_none(cls, v):
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    @classmethod
    def from_record(cls, record: RawRecord) -> "DiamondPayload":
        v = record.value
        shape = v("Shape").strip().upper()
        cert_digits = re.sub(r"\D", "", v("CertificateID"))
        rapnet = _positive(v("RapnetAskingPrice"))
        price = _positive(v("Price"))

        girdle = " - ".join(p for p in (v("GirdleMin").strip(), v("GirdleMax").strip()) if p)

        return cls(
            stock=v("VendorStockNumber").strip(),
            shape=SHAPE_NAMES.get(shape, shape.lower()),
            weight=float(v("Weight")),
            color=v("Color").strip().upper(),
            clarity=v("Clarity").strip().upper(),
            certificate_number=int(cert_digits) if cert_digits else 0,
            lab=v("Lab").strip(),
            cut=_lookup(v("Cut"), QUALITY_NAMES, QUALITIES, "") or None,
            polish=_lookup(v("Polish"), QUALITY_NAMES, QUALITIES, "EXCELLENT"),
            symmetry=_lookup(v("Symmetry"), QUALITY_NAMES, QUALITIES, "EXCELLENT"),
            fluorescence=_lookup(v("FluorescenceIntensity"), FLUORESCENCE_NAMES, FLUORESCENCES, "NONE"),
            table=_positive(v("TablePercent")) or 0.0,
            depth_percentage=_positive(v("DepthPercent")) or 0.0,
            gridle=girdle,
            culet=_lookup(v("CuletSize"), CULET_NAMES, CULETS, "NONE"),
            certificate_comment=v("Comments").strip(),
            rapnet=int(rapnet) if rapnet else None,
            price_per_carat=int(price) if price else None,
            picture=v("Image").strip(),
        )

    def to_api_payload(self) -> Dict[str, Any]:
        """Drop unset optionals; the API treats missing and null the same."""
        return self.model_dump(exclude_none=True)

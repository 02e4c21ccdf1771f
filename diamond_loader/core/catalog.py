# diamond_loader/core/catalog.py
from typing import Dict, FrozenSet, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

FieldKind = Literal["enum", "number", "percent", "url", "text"]


class FieldSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    mandatory: bool = False
    kind: FieldKind = "text"
    allowed_values: Optional[FrozenSet[str]] = None
    min: Optional[float] = None
    max: Optional[float] = None
    label: Optional[str] = None  # used in messages, e.g. "image" for Image

    def allows(self, value: str) -> bool:
        """Case-insensitive membership test against the allow-list."""
        if not self.allowed_values:
            return False
        candidate = value.strip().upper()
        return any(candidate == allowed.upper() for allowed in self.allowed_values)


# Column order of the dealer export
ALL_FIELDS: List[str] = [
    "Shape", "Weight", "Color", "Clarity", "Measurements", "Cut", "Lab",
    "RapnetAskingPrice", "IndexAskingPrice", "RapnetDiscountPercent", "IndexDiscountPercent",
    "DepthPercent", "TablePercent", "GirdleMin", "GirdleMax", "GirdlePercent",
    "CuletSize", "CuletCondition", "Polish", "Symmetry", "FluorescenceIntensity",
    "FluorescenceColor", "CrownHeight", "CrownAngle", "PavilionDepth", "PavilionAngle",
    "Enhancement", "LaserInscription", "FancyColor", "FancyColorIntensity", "FancyColorOvertone",
    "Member Comments", "Comments", "CertificateID", "Image", "SarinFile",
    "VendorStockNumber", "MatchingVendorStockNumber", "IsMatchedPairSeparable",
    "StateLocation", "ParcelStoneCount", "Availability", "ShowOnRapnet", "ShowOnIndex",
    "Make", "CountryLocation", "CityLocation", "Video link", "Brand", "Trade Show",
    "Location", "Price",
]

MANDATORY_FIELDS: List[str] = [
    "Shape", "Weight", "Color", "Clarity", "VendorStockNumber", "Lab", "Price",
]

# Rows sent to the inventory API must carry all of these
UPLOAD_FIELDS: List[str] = [
    "VendorStockNumber", "Shape", "Weight", "Color", "Clarity", "Cut",
    "FluorescenceIntensity", "Price",
]

VALID_SHAPES = ["BR", "PS", "RAD", "CU", "EM", "OV", "MQ", "AS", "HT", "RD"]
VALID_COLORS = [chr(c) for c in range(ord("D"), ord("Z") + 1)]
VALID_CLARITIES = ["FL", "IF", "VVS1", "VVS2", "VS1", "VS2", "SI1", "SI2", "SI3", "I1", "I2", "I3"]
VALID_CUTS = ["EX", "VG", "G", "F", "P"]
VALID_LABS = ["GIA", "AGS", "GCAL", "EGL", "None"]

ENUM_VALUES: Dict[str, List[str]] = {
    "Shape": VALID_SHAPES,
    "Color": VALID_COLORS,
    "Clarity": VALID_CLARITIES,
    "Cut": VALID_CUTS,
    "Lab": VALID_LABS,
}

ENUM_LABELS = {
    "Shape": "shape",
    "Color": "color grade",
    "Clarity": "clarity grade",
    "Cut": "cut grade",
    "Lab": "lab",
}

NUMBER_FIELDS = ["Weight", "Price"]
PERCENT_FIELDS = ["TablePercent", "DepthPercent", "RapnetDiscountPercent", "IndexDiscountPercent"]
URL_LABELS = {
    "Image": "image",
    "Video link": "video",
    "SarinFile": "3D file",
}


def _build_schema(name: str) -> FieldSchema:
    mandatory = name in MANDATORY_FIELDS
    if name in ENUM_VALUES:
        return FieldSchema(
            name=name,
            mandatory=mandatory,
            kind="enum",
            allowed_values=frozenset(ENUM_VALUES[name]),
            label=ENUM_LABELS[name],
        )
    if name in NUMBER_FIELDS:
        return FieldSchema(name=name, mandatory=mandatory, kind="number", min=0.0)
    if name in PERCENT_FIELDS:
        return FieldSchema(name=name, mandatory=mandatory, kind="percent", min=0.0, max=100.0)
    if name in URL_LABELS:
        return FieldSchema(name=name, mandatory=mandatory, kind="url", label=URL_LABELS[name])
    return FieldSchema(name=name, mandatory=mandatory)


FIELD_CATALOG: Dict[str, FieldSchema] = {name: _build_schema(name) for name in ALL_FIELDS}


def get_schema(field: str) -> Optional[FieldSchema]:
    return FIELD_CATALOG.get(field)


def mandatory_fields() -> List[str]:
    return [s.name for s in FIELD_CATALOG.values() if s.mandatory]


def optional_fields() -> List[str]:
    return [s.name for s in FIELD_CATALOG.values() if not s.mandatory]


def check_catalog(catalog: Dict[str, FieldSchema] = FIELD_CATALOG) -> None:
    """Raise ValueError if the catalog breaks its own invariants."""
    missing = set(MANDATORY_FIELDS) - set(catalog)
    if missing:
        raise ValueError(f"Mandatory fields not declared: {sorted(missing)}")
    for schema in catalog.values():
        if schema.kind == "enum" and not schema.allowed_values:
            raise ValueError(f"Enum field {schema.name} has an empty allow-list")
    unknown_upload = set(UPLOAD_FIELDS) - set(catalog)
    if unknown_upload:
        raise ValueError(f"Upload fields not declared: {sorted(unknown_upload)}")


check_catalog()

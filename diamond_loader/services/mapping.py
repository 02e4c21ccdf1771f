# diamond_loader/services/mapping.py
import re
from typing import Dict, List, Optional, Sequence

from diamond_loader.core.catalog import ALL_FIELDS
from diamond_loader.schemas.validation import RawRecord

# Dealer header spellings seen in the wild → catalog field
HEADER_ALIASES: Dict[str, str] = {
    "carat": "Weight",
    "carats": "Weight",
    "ct": "Weight",
    "size": "Weight",
    "stock": "VendorStockNumber",
    "stockno": "VendorStockNumber",
    "stocknumber": "VendorStockNumber",
    "sku": "VendorStockNumber",
    "ref": "VendorStockNumber",
    "cert": "CertificateID",
    "certificate": "CertificateID",
    "certno": "CertificateID",
    "certnumber": "CertificateID",
    "report": "CertificateID",
    "fluo": "FluorescenceIntensity",
    "fluor": "FluorescenceIntensity",
    "fluorescence": "FluorescenceIntensity",
    "sym": "Symmetry",
    "symm": "Symmetry",
    "pol": "Polish",
    "table": "TablePercent",
    "depth": "DepthPercent",
    "video": "Video link",
    "videourl": "Video link",
    "imageurl": "Image",
    "picture": "Image",
    "photo": "Image",
    "price/crt": "Price",
    "pricecrt": "Price",
    "pricepercarat": "Price",
    "ppc": "Price",
    "laboratory": "Lab",
    "cutshape": "Shape",
    "diamondshape": "Shape",
    "culet": "CuletSize",
}


def normalize_header(header: str) -> str:
    return re.sub(r"[\s_\-#%.]+", "", header.strip().lower())


_FIELD_SET = set(ALL_FIELDS)
_NORMALIZED_FIELDS = {normalize_header(f): f for f in ALL_FIELDS}


def match_header(header: str) -> Optional[str]:
    """Best catalog field for a dealer header, or None."""
    lowered = header.strip().lower()
    for field in ALL_FIELDS:
        if lowered == field.lower():
            return field

    if lowered in HEADER_ALIASES:
        return HEADER_ALIASES[lowered]

    key = normalize_header(header)
    if key in _NORMALIZED_FIELDS:
        return _NORMALIZED_FIELDS[key]
    return HEADER_ALIASES.get(key)


def suggest_mapping(headers: Sequence[str]) -> Dict[str, str]:
    """
    {"CSV Header": "CatalogField"} for every header that can be matched.
    Headers that already use catalog names keep them; an alias never takes
    a field another header already carries, and when two aliases claim the
    same field the first one wins.
    """
    mapping: Dict[str, str] = {h: h for h in headers if h in _FIELD_SET}
    taken = set(mapping.values())
    for header in headers:
        if header in mapping:
            continue
        field = match_header(header)
        if field and field not in taken:
            mapping[header] = field
            taken.add(field)
    return mapping


def apply_mapping(headers: List[str], records: List[RawRecord], mapping: Dict[str, str]):
    """Rename columns per mapping; unmapped columns keep their header."""
    renamed = [mapping.get(h, h) for h in headers]
    if len(set(renamed)) != len(renamed):
        dupes = sorted({h for h in renamed if renamed.count(h) > 1})
        raise ValueError(f"Mapping assigns several columns to: {', '.join(dupes)}")

    mapped = [
        RawRecord(row=r.row, values={mapping.get(k, k): v for k, v in r.values.items()})
        for r in records
    ]
    return renamed, mapped

import httpx
import pytest

MANDATORY_HEADER = ["Shape", "Weight", "Color", "Clarity", "VendorStockNumber", "Lab", "Price"]
GOOD_ROW = ["RD", "1.01", "G", "VS1", "STK1", "GIA", "5000"]

UPLOAD_HEADER = [
    "VendorStockNumber", "Shape", "Weight", "Color", "Clarity", "Cut",
    "FluorescenceIntensity", "Lab", "Price",
]


def tsv(header, *rows):
    """Tab-separated export text with a trailing newline."""
    lines = ["\t".join(header)] + ["\t".join(r) for r in rows]
    return "\n".join(lines) + "\n"


def mock_client(handler, base_url="http://collaborator.test"):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=base_url)


@pytest.fixture
def good_text():
    return tsv(MANDATORY_HEADER, GOOD_ROW)

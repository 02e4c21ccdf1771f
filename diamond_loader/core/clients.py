# diamond_loader/core/clients.py
import httpx

from diamond_loader.core.config import settings


def get_inventory_client(transport: httpx.AsyncBaseTransport = None) -> httpx.AsyncClient:
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    if settings.INVENTORY_API_TOKEN:
        headers["Authorization"] = f"Bearer {settings.INVENTORY_API_TOKEN}"

    return httpx.AsyncClient(
        base_url=settings.INVENTORY_API_URL,
        headers=headers,
        timeout=settings.UPLOAD_TIMEOUT,
        transport=transport,
    )


def get_assistant_client(transport: httpx.AsyncBaseTransport = None) -> httpx.AsyncClient:
    headers = {"Content-Type": "application/json"}
    if settings.ASSISTANT_API_KEY:
        headers["Authorization"] = f"Bearer {settings.ASSISTANT_API_KEY}"
        headers["apikey"] = settings.ASSISTANT_API_KEY

    return httpx.AsyncClient(
        base_url=settings.ASSISTANT_API_URL,
        headers=headers,
        timeout=settings.ADVISORY_TIMEOUT,
        transport=transport,
    )

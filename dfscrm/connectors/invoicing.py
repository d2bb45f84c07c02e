"""Invoicing store client — read-only customers, estimates, invoices.

The invoicing system owns these records; this client never writes.
Records are returned as the JSON dicts the API sends (camelCase keys:
id, firstName, lastName, companyName, phone, address{street, city, state,
zip}, customerType, emailContacts; estimates/invoices carry id,
customerId, date, status, total, and amountPaid/balanceDue on invoices).

Unlike best-effort enrichment connectors, HTTP failures propagate as
httpx errors: callers decide whether a failure is fatal.
"""

import httpx
from loguru import logger

from ..config import settings
from ..http_client import http


def _items(payload) -> list[dict]:
    """Accept either a bare JSON array or a {"data": [...]} envelope."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, list):
            return data
    return []


class InvoicingClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._client = client or http

    async def _get(self, path: str, params: dict | None = None) -> httpx.Response:
        resp = await self._client.get(
            f"{self.base_url}{path}",
            params=params,
            headers={"Authorization": f"Bearer {self.api_key}", "Accept": "application/json"},
            timeout=self.timeout,
        )
        if resp.status_code >= 400 and resp.status_code != 404:
            logger.warning("Invoicing GET {} failed: {} {}", path, resp.status_code, resp.text[:200])
        return resp

    async def list_customers(self, search: str | None = None) -> list[dict]:
        params = {"search": search} if search else None
        resp = await self._get("/customers", params)
        resp.raise_for_status()
        return _items(resp.json())

    async def get_customer(self, customer_id: str) -> dict | None:
        resp = await self._get(f"/customers/{customer_id}")
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        data = resp.json()
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            return data["data"]
        return data or None

    async def list_estimates(self, customer_id: str) -> list[dict]:
        resp = await self._get("/estimates", {"customerId": customer_id})
        resp.raise_for_status()
        return _items(resp.json())

    async def list_invoices(self, customer_id: str) -> list[dict]:
        resp = await self._get("/invoices", {"customerId": customer_id})
        resp.raise_for_status()
        return _items(resp.json())


def get_invoicing_client() -> InvoicingClient | None:
    """FastAPI dependency: a client when the integration is configured, else None."""
    if not settings.invoicing_configured:
        return None
    return InvoicingClient(
        settings.invoicing_api_url,
        settings.invoicing_api_key,
        timeout=settings.invoicing_timeout_seconds,
    )

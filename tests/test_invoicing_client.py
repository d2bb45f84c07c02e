"""
test_invoicing_client.py — Tests for connectors/invoicing.py

Uses httpx.MockTransport so no network is touched. Covers response
envelopes, 404 handling, auth header, query params, error propagation,
and the configured/not-configured dependency.

Called by: pytest
Depends on: dfscrm/connectors/invoicing.py
"""

from unittest.mock import patch

import httpx
import pytest

from dfscrm.connectors.invoicing import InvoicingClient, _items, get_invoicing_client


def _client(handler) -> InvoicingClient:
    transport = httpx.MockTransport(handler)
    return InvoicingClient(
        "https://invoicing.test/api/",
        "secret-key",
        client=httpx.AsyncClient(transport=transport),
    )


class TestItems:
    def test_bare_list(self):
        assert _items([{"id": 1}]) == [{"id": 1}]

    def test_data_envelope(self):
        assert _items({"data": [{"id": 1}], "total": 1}) == [{"id": 1}]

    def test_unexpected_shape(self):
        assert _items({"customers": []}) == []
        assert _items(None) == []


class TestInvoicingClient:
    @pytest.mark.asyncio
    async def test_list_customers_sends_bearer(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"data": [{"id": 1, "companyName": "Acme"}]})

        customers = await _client(handler).list_customers()
        assert customers == [{"id": 1, "companyName": "Acme"}]
        assert seen["auth"] == "Bearer secret-key"
        assert seen["url"] == "https://invoicing.test/api/customers"

    @pytest.mark.asyncio
    async def test_list_customers_search_param(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["search"] == "acme"
            return httpx.Response(200, json=[])

        assert await _client(handler).list_customers(search="acme") == []

    @pytest.mark.asyncio
    async def test_get_customer_unwraps_data(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/customers/501"
            return httpx.Response(200, json={"data": {"id": 501}})

        assert await _client(handler).get_customer("501") == {"id": 501}

    @pytest.mark.asyncio
    async def test_get_customer_404_is_none(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"error": "not found"})

        assert await _client(handler).get_customer("nope") is None

    @pytest.mark.asyncio
    async def test_invoices_filter_by_customer(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/invoices"
            assert request.url.params["customerId"] == "501"
            return httpx.Response(200, json=[{"id": "i1", "customerId": "501", "date": "2024-03-20"}])

        invoices = await _client(handler).list_invoices("501")
        assert invoices[0]["id"] == "i1"

    @pytest.mark.asyncio
    async def test_estimates_filter_by_customer(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/estimates"
            assert request.url.params["customerId"] == "501"
            return httpx.Response(200, json={"data": []})

        assert await _client(handler).list_estimates("501") == []

    @pytest.mark.asyncio
    async def test_server_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="boom")

        with pytest.raises(httpx.HTTPStatusError):
            await _client(handler).list_customers()


class TestGetInvoicingClient:
    def test_not_configured_returns_none(self):
        with patch("dfscrm.connectors.invoicing.settings") as s:
            s.invoicing_configured = False
            assert get_invoicing_client() is None

    def test_configured_returns_client(self):
        with patch("dfscrm.connectors.invoicing.settings") as s:
            s.invoicing_configured = True
            s.invoicing_api_url = "https://invoicing.test/"
            s.invoicing_api_key = "k"
            s.invoicing_timeout_seconds = 5
            client = get_invoicing_client()
        assert isinstance(client, InvoicingClient)
        assert client.base_url == "https://invoicing.test"
        assert client.timeout == 5

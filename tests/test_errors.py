"""
test_errors.py — Tests for dfscrm/errors.py and connector status logging

Called by: pytest
Depends on: dfscrm/errors.py, dfscrm/connector_status.py
"""

from unittest.mock import patch

from dfscrm.connector_status import log_connector_status
from dfscrm.errors import (
    ConfigurationError,
    CRMError,
    InvalidInputError,
    NotFoundError,
    build_error_payload,
)


class TestErrorPayload:
    def test_without_details(self):
        assert build_error_payload("not_found", "gone") == {
            "error": {"code": "not_found", "message": "gone"}
        }

    def test_with_details(self):
        payload = build_error_payload("invalid_input", "bad", {"field": "name"})
        assert payload["error"]["details"] == {"field": "name"}

    def test_subclass_status_codes(self):
        assert ConfigurationError("x").status_code == 503
        assert NotFoundError("x").status_code == 404
        assert InvalidInputError("x").status_code == 422
        assert isinstance(NotFoundError("x"), CRMError)

    def test_payload_property(self):
        err = ConfigurationError("Invoicing integration is not configured")
        assert err.payload["error"]["code"] == "integration_not_configured"
        assert str(err) == "Invoicing integration is not configured"


class TestConnectorStatus:
    def test_disabled_without_credentials(self):
        with patch("dfscrm.connector_status.settings") as s:
            s.invoicing_configured = False
            assert log_connector_status() == {"Invoicing": False}

    def test_enabled(self):
        with patch("dfscrm.connector_status.settings") as s:
            s.invoicing_configured = True
            assert log_connector_status() == {"Invoicing": True}

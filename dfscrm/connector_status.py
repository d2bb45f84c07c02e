"""Connector startup visibility — log which integrations are enabled."""

from loguru import logger

from .config import settings


def log_connector_status() -> dict[str, bool]:
    """Check each connector's credentials and log enabled/disabled status.

    Returns dict mapping connector name to enabled (True/False).
    """
    connectors = {
        "Invoicing": settings.invoicing_configured,
    }

    enabled = {k for k, v in connectors.items() if v}
    disabled = {k for k, v in connectors.items() if not v}

    if enabled:
        logger.info("Connectors enabled: {}", ", ".join(sorted(enabled)))
    if disabled:
        logger.warning(
            "Connectors disabled (missing credentials): {} — matching and linking will return 503",
            ", ".join(sorted(disabled)),
        )

    return connectors

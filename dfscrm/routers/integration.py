"""
routers/integration.py — Invoicing match, reconcile, link, unlink

Business Rules:
- 503 integration_not_configured when the invoicing store has no credentials
  (never an empty result)
- "No match" is a 200 with matched=false
- Invoicing HTTP failures while listing customers are a 502
- Unlink works without the integration configured

Called by: main.py (router mount)
Depends on: services/integration_service.py, connectors/invoicing.py
"""

import httpx
from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from sqlalchemy.orm import Session

from ..connectors.invoicing import InvoicingClient, get_invoicing_client
from ..database import get_db
from ..dependencies import require_user
from ..models import User
from ..schemas.errors import ErrorResponse
from ..schemas.integration import (
    LinkRequest,
    LinkResponse,
    MatchResponse,
    ReconcileItem,
    UnlinkResponse,
)
from ..services import integration_service

router = APIRouter(
    tags=["integration"],
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)


def _upstream_error(e: httpx.HTTPError) -> HTTPException:
    logger.error("Invoicing request failed: {}", e)
    return HTTPException(502, "Invoicing service request failed")


@router.get("/api/integration/companies/{company_id}/match", response_model=MatchResponse)
async def match_company(
    company_id: str,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
    client: InvoicingClient | None = Depends(get_invoicing_client),
):
    try:
        return await integration_service.match_company(db, client, company_id)
    except httpx.HTTPError as e:
        raise _upstream_error(e)


@router.get("/api/integration/reconcile", response_model=list[ReconcileItem])
async def reconcile(
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
    client: InvoicingClient | None = Depends(get_invoicing_client),
):
    try:
        return await integration_service.bulk_reconcile(db, client)
    except httpx.HTTPError as e:
        raise _upstream_error(e)


@router.post("/api/integration/companies/{company_id}/link", response_model=LinkResponse)
async def link_company(
    company_id: str,
    payload: LinkRequest,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
    client: InvoicingClient | None = Depends(get_invoicing_client),
):
    try:
        return await integration_service.link_company(
            db, client, company_id, payload.external_customer_id, user
        )
    except httpx.HTTPError as e:
        raise _upstream_error(e)


@router.delete("/api/integration/companies/{company_id}/link", response_model=UnlinkResponse)
async def unlink_company(
    company_id: str,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return integration_service.unlink_company(db, company_id, user)

"""Invoicing integration — match, reconcile, link, unlink.

Fetches the snapshot (companies from Postgres, customers from the invoicing
store) and hands it to the pure matching / reconciliation / enrichment
code. Every operation except unlink needs the invoicing client and fails
fast with ConfigurationError when it is not configured, so "integration
down" is never mistaken for "no match".

Link does a read-then-write on the company with no row lock; concurrent
links to the same company are last-writer-wins.

Called by: routers/integration.py
Depends on: connectors/invoicing.py, services/matching.py,
            services/reconciliation.py, services/enrichment.py
"""

import httpx
from loguru import logger
from sqlalchemy.orm import Session

from ..errors import ConfigurationError, InvalidInputError, NotFoundError
from ..models import AuditLog, Company, User
from ..utils.normalization_helpers import clean_str
from .enrichment import apply_link, apply_unlink
from .matching import customer_full_name, find_best_match
from .reconciliation import reconcile


def require_invoicing(client) -> None:
    if client is None:
        raise ConfigurationError("Invoicing integration is not configured")


def _get_company(db: Session, company_id: str) -> Company:
    if not company_id or not str(company_id).strip():
        raise InvalidInputError("company_id is required")
    company = db.get(Company, company_id)
    if not company:
        raise NotFoundError(f"Company {company_id} not found")
    return company


def _audit(db: Session, user: User | None, action: str, company: Company, details: dict) -> None:
    db.add(
        AuditLog(
            user_id=user.id if user else None,
            action_type=action,
            entity_type="company",
            entity_id=company.id,
            details=details,
        )
    )


async def match_company(db: Session, client, company_id: str) -> dict:
    """Best invoicing customer for one company.

    Returns {"matched": True, "company_id", "external_customer_id",
    "customer_name", "score"} or {"matched": False, "company_id",
    "best_score"}.
    """
    require_invoicing(client)
    company = _get_company(db, company_id)

    customers = await client.list_customers()
    best = find_best_match(company, customers)
    if not best["matched"]:
        logger.info("No invoicing match for company {} (best score {})", company.id, best["score"])
        return {"matched": False, "company_id": company.id, "best_score": best["score"]}

    customer = best["customer"]
    return {
        "matched": True,
        "company_id": company.id,
        "external_customer_id": str(customer.get("id")),
        "customer_name": clean_str(customer.get("companyName")) or customer_full_name(customer),
        "score": best["score"],
    }


async def bulk_reconcile(db: Session, client) -> list[dict]:
    """Suggested / unmatched / linked triage list for every invoicing customer."""
    require_invoicing(client)
    customers = await client.list_customers()
    companies = db.query(Company).order_by(Company.name).all()
    return reconcile(companies, customers)


async def link_company(
    db: Session,
    client,
    company_id: str,
    external_customer_id: str,
    user: User | None = None,
) -> dict:
    """Link a company to an invoicing customer and enrich empty fields.

    Estimates and invoices are fetched best-effort: if that fails the link
    is still saved and ``enrichment_skipped`` is True.
    """
    require_invoicing(client)
    if not external_customer_id or not str(external_customer_id).strip():
        raise InvalidInputError("external_customer_id is required")
    external_customer_id = str(external_customer_id).strip()
    company = _get_company(db, company_id)

    customer = await client.get_customer(external_customer_id)
    if not customer:
        raise NotFoundError(f"Invoicing customer {external_customer_id} not found")

    estimates = invoices = None
    try:
        estimates = await client.list_estimates(external_customer_id)
        invoices = await client.list_invoices(external_customer_id)
    except httpx.HTTPError as e:
        estimates = invoices = None
        logger.warning(
            "Invoice/estimate fetch failed for customer {} — linking without enrichment: {}",
            external_customer_id, e,
        )

    result = apply_link(company, external_customer_id, customer, estimates, invoices)
    if result["changes"]:
        _audit(db, user, "link", company, {
            "external_customer_id": external_customer_id,
            "changes": result["changes"],
        })
    db.commit()

    logger.info(
        "Linked company {} to invoicing customer {}: {}",
        company.id, external_customer_id, ", ".join(result["changes"]) or "no changes",
    )
    return {
        "company_id": company.id,
        "external_customer_id": external_customer_id,
        "updated_fields": {k: _jsonable(v) for k, v in result["updated_fields"].items()},
        "changes": result["changes"],
        "enrichment_skipped": invoices is None,
    }


def unlink_company(db: Session, company_id: str, user: User | None = None) -> dict:
    """Remove the invoicing link. Copied fields and type stay as they are."""
    company = _get_company(db, company_id)
    previous = company.external_customer_id
    if apply_unlink(company):
        _audit(db, user, "unlink", company, {"external_customer_id": previous})
        db.commit()
        logger.info("Unlinked company {} from invoicing customer {}", company.id, previous)
    return {"company_id": company.id, "unlinked": bool(previous)}


def _jsonable(value):
    return value.isoformat() if hasattr(value, "isoformat") else value

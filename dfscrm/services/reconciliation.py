"""Bulk reconciliation — propose company links for every invoicing customer.

Pure: no queries, no writes. Persisting a suggestion goes through
integration_service.link_company.

Output is a triage queue: suggested first, then unmatched, then already
linked; highest score first within each group.
"""

from loguru import logger

from ..config import settings
from ..utils.normalization_helpers import clean_str
from .matching import customer_full_name, score_match

STATUS_LINKED = "linked"
STATUS_SUGGESTED = "suggested"
STATUS_UNMATCHED = "unmatched"

_STATUS_ORDER = {STATUS_SUGGESTED: 0, STATUS_UNMATCHED: 1, STATUS_LINKED: 2}


def _customer_label(customer: dict) -> str:
    return clean_str(customer.get("companyName")) or customer_full_name(customer)


def _result(customer: dict, company, score: int, status: str) -> dict:
    return {
        "external_customer_id": str(customer.get("id")),
        "customer_name": _customer_label(customer),
        "company_id": company.id if company is not None else None,
        "company_name": company.name if company is not None else None,
        "score": score,
        "status": status,
    }


def reconcile(companies: list, customers: list[dict], suggest_threshold: int | None = None) -> list[dict]:
    """Score every unlinked customer against every unlinked company.

    Customers already referenced by a company's external_customer_id are
    emitted as ``linked`` with score 100 and are not re-scored. Companies
    linked to any customer are never offered as candidates.
    """
    if suggest_threshold is None:
        suggest_threshold = settings.reconcile_suggest_threshold

    linked_by_customer = {}
    unlinked = []
    for c in companies:
        if c.external_customer_id:
            linked_by_customer.setdefault(str(c.external_customer_id), c)
        else:
            unlinked.append(c)

    results = []
    for customer in customers:
        cust_id = str(customer.get("id"))
        linked = linked_by_customer.get(cust_id)
        if linked is not None:
            results.append(_result(customer, linked, 100, STATUS_LINKED))
            continue

        best, best_score = None, 0
        for company in unlinked:
            s = score_match(company, customer)
            if s > best_score:
                best, best_score = company, s

        status = STATUS_SUGGESTED if best_score >= suggest_threshold else STATUS_UNMATCHED
        results.append(_result(customer, best, best_score, status))

    results.sort(key=lambda r: (_STATUS_ORDER[r["status"]], -r["score"]))

    counts = {s: 0 for s in _STATUS_ORDER}
    for r in results:
        counts[r["status"]] += 1
    logger.info(
        "Reconciled {} customers against {} companies: {}",
        len(customers), len(companies), counts,
    )
    return results

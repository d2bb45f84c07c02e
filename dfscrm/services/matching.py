"""Matching engine — score a CRM company against an invoicing customer.

Rules (all applicable rules are evaluated, the highest wins):
  100  company name equals customer companyName
   80  one company name contains the other
   75  customer full name equals company name (sole proprietor)
   70  customer full name equals company contact_name
  Phone equality (last 10 digits) lifts the score to at least 90; it never
  lowers a higher name score.

Empty values never match: two blank names are not "equal".

Called by: services/reconciliation.py, services/integration_service.py
Depends on: utils/normalization_helpers.py
"""

from ..config import settings
from ..utils.normalization_helpers import clean_str, normalize_phone_digits, normalize_text

SCORE_EXACT_NAME = 100
SCORE_PHONE = 90
SCORE_NAME_CONTAINS = 80
SCORE_PERSON_IS_COMPANY = 75
SCORE_CONTACT_NAME = 70


def customer_full_name(customer: dict) -> str:
    """First and last name joined by one space, blank parts dropped."""
    parts = [
        clean_str(customer.get("firstName")),
        clean_str(customer.get("lastName")),
    ]
    return " ".join(p for p in parts if p)


def score_match(company, customer: dict) -> int:
    """Return a 0-100 confidence that ``company`` and ``customer`` are the same entity."""
    company_name = normalize_text(company.name)
    customer_company = normalize_text(customer.get("companyName"))
    full_name = normalize_text(customer_full_name(customer))
    contact_name = normalize_text(company.contact_name)

    score = 0
    if company_name and customer_company:
        if company_name == customer_company:
            score = SCORE_EXACT_NAME
        elif company_name in customer_company or customer_company in company_name:
            score = SCORE_NAME_CONTAINS

    if full_name:
        if full_name == company_name:
            score = max(score, SCORE_PERSON_IS_COMPANY)
        if full_name == contact_name:
            score = max(score, SCORE_CONTACT_NAME)

    company_phone = normalize_phone_digits(company.phone)
    if company_phone and company_phone == normalize_phone_digits(customer.get("phone")):
        score = max(score, SCORE_PHONE)

    return score


def find_best_match(company, customers: list[dict], threshold: int | None = None) -> dict:
    """Pick the highest-scoring customer for one company.

    Returns {"matched": bool, "customer": dict | None, "score": int}.
    ``matched`` is True only when score >= threshold (default
    settings.match_found_threshold). The first customer wins ties.
    """
    if threshold is None:
        threshold = settings.match_found_threshold

    best, best_score = None, 0
    for customer in customers:
        s = score_match(company, customer)
        if s > best_score:
            best, best_score = customer, s
            if s == SCORE_EXACT_NAME:
                break

    return {
        "matched": best is not None and best_score >= threshold,
        "customer": best,
        "score": best_score,
    }

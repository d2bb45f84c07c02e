"""Link enrichment — apply an accepted invoicing match to a company.

Linking always sets external_customer_id. Contact fields are copied only
into fields that are currently empty, so enrichment never overwrites data
a salesperson typed in. Paid business (any invoice) promotes the company
type to "Customer"; nothing here ever demotes it, and unlinking leaves
copied fields alone.

Called by: services/integration_service.py
Depends on: utils (parse_iso_date)
"""

from datetime import date

from loguru import logger

from ..utils import parse_iso_date
from ..utils.normalization_helpers import clean_str
from .matching import customer_full_name

CUSTOMER_TYPE = "Customer"

# company attribute → (customer address key, change label)
_ADDRESS_FIELDS = (
    ("address", "street", "address added"),
    ("city", "city", "city added"),
    ("state", "state", "state added"),
    ("zip", "zip", "zip added"),
)


def _is_empty(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def first_contact_email(customer: dict) -> str | None:
    """First entry of ``emailContacts``: its ``email`` key, or the entry itself if a string."""
    contacts = customer.get("emailContacts") or []
    if not isinstance(contacts, list) or not contacts:
        return None
    first = contacts[0]
    if isinstance(first, dict):
        email = first.get("email")
    else:
        email = first
    if isinstance(email, str) and email.strip():
        return email.strip()
    return None


def latest_date(records: list[dict] | None, key: str = "date") -> date | None:
    """Most recent parsed date across records; unparseable dates are skipped."""
    latest = None
    for rec in records or []:
        raw = rec.get(key)
        d = parse_iso_date(raw)
        if d is None:
            if raw:
                logger.warning("Skipping unparseable {} {!r} on record {}", key, raw, rec.get("id"))
            continue
        if latest is None or d > latest:
            latest = d
    return latest


def apply_link(
    company,
    external_customer_id: str,
    customer: dict,
    estimates: list[dict] | None = None,
    invoices: list[dict] | None = None,
) -> dict:
    """Link ``company`` to an invoicing customer and copy missing fields.

    ``estimates`` / ``invoices`` of None mean the documents could not be
    fetched: the type promotion and date sync are skipped, the link still
    happens.

    Returns {"updated_fields": {field: new_value}, "changes": [str]}.
    """
    updated = {}
    changes = []

    def _set(field, value, label):
        if getattr(company, field) != value:
            setattr(company, field, value)
            updated[field] = value
            changes.append(label)

    _set("external_customer_id", str(external_customer_id), f"linked to customer {external_customer_id}")

    phone = clean_str(customer.get("phone"))
    if phone and _is_empty(company.phone):
        _set("phone", phone, "phone added")

    email = first_contact_email(customer)
    if email and _is_empty(company.email):
        _set("email", email, "email added")

    full_name = customer_full_name(customer)
    if full_name and _is_empty(company.contact_name):
        _set("contact_name", full_name, "contact name added")

    address = customer.get("address") or {}
    if isinstance(address, dict):
        for field, key, label in _ADDRESS_FIELDS:
            value = clean_str(address.get(key))
            if value and _is_empty(getattr(company, field)):
                _set(field, value, label)

    if invoices and company.type != CUSTOMER_TYPE:
        _set("type", CUSTOMER_TYPE, "type set to Customer")

    last_estimate = latest_date(estimates)
    if last_estimate is not None:
        _set("last_estimate_date", last_estimate, "last estimate date updated")

    last_order = latest_date(invoices)
    if last_order is not None:
        _set("last_order_date", last_order, "last order date updated")

    return {"updated_fields": updated, "changes": changes}


def apply_unlink(company) -> bool:
    """Clear the invoicing link. Returns True if a link was removed."""
    if not company.external_customer_id:
        return False
    company.external_customer_id = None
    return True

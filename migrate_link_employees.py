"""Link login accounts to employee records by id instead of by name.

Problem:
  - Logins used to find their employee row by matching users.name to an
    active employees.name at login time. Renaming either side broke it.

Solution:
  1. For every non-admin user with no employee_id, find the single active
     employee with exactly the same name
  2. Store that id in users.employee_id
  3. Report users with no match or more than one match (left unlinked)

Run: python migrate_link_employees.py
"""
from loguru import logger

from dfscrm.database import SessionLocal
from dfscrm.logging_config import setup_logging
from dfscrm.services.crm_service import backfill_user_employee_links


def run():
    db = SessionLocal()
    try:
        stats = backfill_user_employee_links(db)
    finally:
        db.close()

    for username in stats["unmatched"]:
        logger.warning("No active employee named like user {}", username)
    for username in stats["ambiguous"]:
        logger.warning("Several employees match user {} — link manually", username)
    return stats


if __name__ == "__main__":
    setup_logging()
    run()

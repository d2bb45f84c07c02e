"""DFS CRM — sales CRM backend with invoicing reconciliation and reports."""

__version__ = "1.0.0"

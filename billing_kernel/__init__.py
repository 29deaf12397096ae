"""
Billing Kernel

Domain records, money values, typed errors, structured logging and the
SQLAlchemy-backed data store for the home-care billing system:
- Houses with per-day pay/charge rates and an invoice style
- Employees (caregivers and administrators)
- Timesheet entries with snapshotted pay and charge amounts
"""

__version__ = "0.1.0"

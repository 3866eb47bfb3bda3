"""
Pocketbook - Source Package

Personal finance back end: budgets, recurring and one-time expenses,
income sources and a per-month bank balance, persisted to a local
SQLite database.

DESIGN PRINCIPLES:
1. Master records are live, month snapshots are frozen
2. A month is initialized once, regenerated explicitly
3. Paid/received state belongs to the user, never reset silently
4. Every lifecycle step is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Pocketbook Team"

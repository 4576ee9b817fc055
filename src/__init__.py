"""
Expense Tracker - Source Package

A small personal expense tracker: add, edit and delete expenses,
see the running total, switch between a dark and a light theme.

DESIGN PRINCIPLES:
1. One owner per piece of state (expense list, theme)
2. Every change is persisted locally and audited
3. Bad input is rejected at the form, never coerced
4. Corrupt saved state never crashes the app
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"

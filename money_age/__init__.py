"""
Age of Money - Source Package

Computes how many days pass between when money is earned and when it is
spent, by matching a budget's income and spending first-in-first-out.
Also projects the age of scheduled (not yet posted) spending.

DESIGN PRINCIPLES:
1. Exact integer milliunits, never floats for money
2. Fail early, fail visibly on a broken ledger
3. Unfunded projections are data, not errors
4. Every run step is auditable
5. Ledger source is swappable
"""

__version__ = "1.0.0"
__author__ = "Age of Money Team"

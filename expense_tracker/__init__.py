"""
Expense Tracker - Source Package

A personal expense tracker that records transactions against a single
monthly budget and raises escalating alerts as spending approaches the limit.

DESIGN PRINCIPLES:
1. One owner for ledger state, flushed after every mutation
2. Aggregations are pure functions over an immutable snapshot
3. Reject bad input before touching the ledger
4. Every user action is audited
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"

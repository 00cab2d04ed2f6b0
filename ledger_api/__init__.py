"""
Ledger API

An in-memory account ledger: create accounts, deposit and withdraw funds,
query balances and list transactions by date range. All amounts use Decimal.
"""

__version__ = "1.0.0"

"""
Ledger Service Module

Stateless query layer over the ledger store. Turns date ranges into
filtered, most-recent-first transaction views and passes account and
transaction commands straight through to the store.
"""

from decimal import Decimal
from datetime import date
from operator import attrgetter
from typing import List

from .exceptions import InvalidDateRangeError
from .store import LedgerStore
from .transactions import Transaction, TransactionRequest, AmountLike


class LedgerService:
    """Read/transform layer over a LedgerStore; store errors propagate unchanged"""

    def __init__(self, store: LedgerStore):
        self.store = store

    def create_account(self, account_id: int, balance: AmountLike) -> bool:
        return self.store.create_account(account_id, balance)

    def get_balance(self, account_id: int) -> Decimal:
        return self.store.get_balance(account_id)

    def record_transaction(self, request: TransactionRequest) -> bool:
        return self.store.apply_transaction(request)

    def list_transactions(self, account_id: int, start_date: date, end_date: date) -> List[Transaction]:
        """
        Transactions of an account within a date range, most recent first

        A transaction matches when its calendar date lies in
        [start_date, end_date]. Transactions with equal timestamps are
        returned most recently inserted first.

        Args:
            account_id: Account to query
            start_date: First calendar date included
            end_date: Last calendar date included

        Returns:
            Matching transactions sorted by timestamp descending

        Raises:
            InvalidDateRangeError: If start_date is after end_date
            AccountNotFoundError: If the account does not exist
        """
        if start_date > end_date:
            raise InvalidDateRangeError(
                f"Start date {start_date.isoformat()} is after end date {end_date.isoformat()}"
            )

        history = self.store.get_transactions(account_id)
        matching = [
            transaction for transaction in history
            if start_date <= transaction.transaction_date <= end_date
        ]

        # Reversing first keeps ties in reverse insertion order: sorted() is stable even with reverse=True
        return sorted(reversed(matching), key=attrgetter("timestamp"), reverse=True)

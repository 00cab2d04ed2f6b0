"""
Ledger Store Module

Authoritative in-memory keeper of account balances and transaction
histories. Every account owns its own lock; mutations of one account are
serialized while different accounts never contend with each other.
"""

from decimal import Decimal
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple
import threading

from .exceptions import (
    LedgerError, AccountAlreadyExistsError, AccountNotFoundError,
    InvalidAmountError, InsufficientFundsError, InvalidTransactionTypeError
)
from .transactions import (
    Transaction, TransactionRequest, TransactionType, AmountLike,
    to_amount, parse_transaction_type
)
from .logging_config import get_logger, log_action


class _AccountRecord:
    """Mutable state of one account, guarded by its own lock"""

    __slots__ = ("account_id", "lock", "balance", "transactions")

    def __init__(self, account_id: int, opening: Transaction):
        self.account_id = account_id
        self.lock = threading.Lock()
        self.balance: Decimal = opening.amount
        self.transactions: List[Transaction] = [opening]


class LedgerStore:
    """
    Per-account balance and transaction history with concurrent-safe mutation.

    The registry lock only guards the ID -> account map and is never held
    together with an account lock.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._accounts: Dict[int, _AccountRecord] = {}
        self._registry_lock = threading.Lock()
        self._clock = clock or datetime.now
        self.logger = get_logger("ledger.store")

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._accounts)

    def _get_record(self, account_id: int) -> _AccountRecord:
        with self._registry_lock:
            record = self._accounts.get(account_id)
        if record is None:
            raise AccountNotFoundError(account_id)
        return record

    def has_account(self, account_id: int) -> bool:
        with self._registry_lock:
            return account_id in self._accounts

    def account_ids(self) -> List[int]:
        """Registered account IDs in ascending order"""
        with self._registry_lock:
            return sorted(self._accounts)

    def create_account(self, account_id: int, initial_balance: AmountLike) -> bool:
        """
        Register a new account and record its opening deposit

        The opening deposit bypasses the positive-deposit rule so a zero
        balance can be opened; negative opening balances are rejected.

        Args:
            account_id: Externally supplied account ID
            initial_balance: Opening balance, zero or positive

        Returns:
            True once the account is registered

        Raises:
            AccountAlreadyExistsError: If the ID is already registered
            InvalidAmountError: If the opening balance is negative or not a number
        """
        if self.has_account(account_id):
            raise AccountAlreadyExistsError(account_id)

        amount = to_amount(initial_balance)
        if amount < 0:
            raise InvalidAmountError("Initial balance must not be negative.")

        opening = Transaction(
            account_id=account_id,
            timestamp=self._clock(),
            transaction_type=TransactionType.DEPOSIT,
            amount=amount
        )
        record = _AccountRecord(account_id, opening)

        with self._registry_lock:
            if account_id in self._accounts:
                raise AccountAlreadyExistsError(account_id)
            self._accounts[account_id] = record

        log_action(
            self.logger, "info", f"Account created: {account_id}",
            action="create_account", resource=f"account:{account_id}",
            extra={"initial_balance": str(amount)}
        )
        return True

    def get_balance(self, account_id: int) -> Decimal:
        """Current balance of the account"""
        return self._get_record(account_id).balance

    def get_transactions(self, account_id: int) -> Tuple[Transaction, ...]:
        """Snapshot of the account's transactions in insertion order"""
        return tuple(self._get_record(account_id).transactions)

    def snapshot(self, account_id: int) -> Tuple[Decimal, Tuple[Transaction, ...]]:
        """Balance and transactions read together under the account lock"""
        record = self._get_record(account_id)
        with record.lock:
            return record.balance, tuple(record.transactions)

    def apply_transaction(self, request: TransactionRequest) -> bool:
        """
        Validate and apply a deposit or withdrawal

        The balance is read, validated against and updated while holding the
        account lock, so the appended transaction and the new balance become
        visible together. A rejected request changes nothing.

        Args:
            request: Account ID, transaction type and signed amount

        Returns:
            True when the transaction was applied

        Raises:
            AccountNotFoundError: If the account does not exist
            InvalidTransactionTypeError: If the type is not Deposit or Withdrawal
            InvalidAmountError: If the amount has the wrong sign
            InsufficientFundsError: If a withdrawal exceeds the balance
        """
        record = self._get_record(request.account_id)

        try:
            with record.lock:
                balance = record.balance
                transaction_type, amount = self._validate(request, balance)

                transaction = Transaction(
                    account_id=record.account_id,
                    timestamp=self._clock(),
                    transaction_type=transaction_type,
                    amount=amount
                )
                record.transactions.append(transaction)
                record.balance = balance + amount
                new_balance = record.balance
        except LedgerError as e:
            log_action(
                self.logger, "warning", f"Transaction rejected: {e}",
                action="apply_transaction", resource=f"account:{request.account_id}",
                extra={
                    "transaction_type": str(request.transaction_type),
                    "amount": str(request.amount),
                    "error": type(e).__name__
                }
            )
            raise

        log_action(
            self.logger, "info", f"Transaction applied: {transaction_type.value}",
            action="apply_transaction", resource=f"account:{record.account_id}",
            extra={
                "transaction_type": transaction_type.value,
                "amount": str(amount),
                "balance": str(new_balance)
            }
        )
        return True

    @staticmethod
    def _validate(request: TransactionRequest, balance: Decimal) -> Tuple[TransactionType, Decimal]:
        """Check a request against the balance snapshot, returning its type and amount"""
        transaction_type = parse_transaction_type(request.transaction_type)
        if transaction_type is None:
            raise InvalidTransactionTypeError(
                f"Invalid transaction type: {request.transaction_type!r}"
            )

        amount = to_amount(request.amount)

        if transaction_type == TransactionType.DEPOSIT:
            if amount <= 0:
                raise InvalidAmountError("Deposit amount must be positive.")
        else:
            if amount >= 0:
                raise InvalidAmountError("Withdrawal amount must be negative.")
            if abs(amount) > balance:
                raise InsufficientFundsError("Insufficient funds for withdrawal.")

        return transaction_type, amount

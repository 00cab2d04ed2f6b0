"""
Transaction Model Module

Immutable transaction records, transaction requests and the amount
normalization shared by the store and the API layer. All monetary
values are Decimal; floats are converted through their string form.
"""

from decimal import Decimal, InvalidOperation
from datetime import datetime
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
from enum import Enum

from .exceptions import InvalidAmountError


DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

AmountLike = Union[Decimal, int, float, str]


class TransactionType(Enum):
    """Types of ledger transactions"""
    DEPOSIT = "Deposit"        # Money into the account, positive amount
    WITHDRAWAL = "Withdrawal"  # Money out of the account, negative amount


def to_amount(value: AmountLike) -> Decimal:
    """
    Convert a caller-supplied amount to Decimal

    Args:
        value: Decimal, int, float or numeric string

    Returns:
        Finite Decimal value

    Raises:
        InvalidAmountError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise InvalidAmountError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    return amount


def parse_transaction_type(value: Any) -> Optional[TransactionType]:
    """Resolve a transaction type from an enum member or its exact wire value, None if unknown"""
    if isinstance(value, TransactionType):
        return value
    if isinstance(value, str):
        for member in TransactionType:
            if value == member.value:
                return member
    return None


@dataclass(frozen=True)
class Transaction:
    """
    Immutable, timestamped balance adjustment on one account.

    Deposits carry positive amounts and withdrawals negative ones, so the
    account balance is the plain sum of its transaction amounts.
    """
    account_id: int
    timestamp: datetime
    transaction_type: TransactionType
    amount: Decimal

    @property
    def transaction_date(self):
        """Calendar date the transaction falls on"""
        return self.timestamp.date()

    @property
    def is_deposit(self) -> bool:
        return self.transaction_type == TransactionType.DEPOSIT

    @property
    def is_withdrawal(self) -> bool:
        return self.transaction_type == TransactionType.WITHDRAWAL

    def to_dict(self, date_format: str = DEFAULT_DATE_FORMAT) -> Dict[str, Any]:
        """Convert to the wire representation"""
        return {
            "accountId": self.account_id,
            "transactionDate": self.timestamp.strftime(date_format),
            "transactionType": self.transaction_type.value,
            "amount": float(self.amount),
        }


@dataclass(frozen=True)
class TransactionRequest:
    """
    Request to apply a transaction to an account.

    transaction_type is kept loose (enum member, string or None) so the
    store can reject unknown types with its own error.
    """
    account_id: int
    transaction_type: Any
    amount: AmountLike

    @classmethod
    def deposit(cls, account_id: int, amount: AmountLike) -> 'TransactionRequest':
        return cls(account_id, TransactionType.DEPOSIT, amount)

    @classmethod
    def withdrawal(cls, account_id: int, amount: AmountLike) -> 'TransactionRequest':
        return cls(account_id, TransactionType.WITHDRAWAL, amount)

"""Ledger domain specific exceptions."""


class LedgerError(ValueError):
    """Base class for ledger errors. All of them are caller-input errors."""


class AccountAlreadyExistsError(LedgerError):
    """Raised when creating an account whose ID is already registered."""

    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__(f"Account with ID {account_id} already exists")


class AccountNotFoundError(LedgerError):
    """Raised when the requested account cannot be found."""

    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__(f"Account {account_id} does not exist.")


class InvalidAmountError(LedgerError):
    """Raised when an amount has the wrong sign or is not a number."""


class InsufficientFundsError(LedgerError):
    """Raised when a withdrawal exceeds the current balance."""


class InvalidTransactionTypeError(LedgerError):
    """Raised when a transaction type is neither Deposit nor Withdrawal."""


class InvalidDateRangeError(LedgerError):
    """Raised when a query's start date is after its end date."""

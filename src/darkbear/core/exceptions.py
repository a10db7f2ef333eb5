"""Custom exceptions for darkbear."""


class DarkBearError(Exception):
    """Base exception."""
    pass


class LedgerError(DarkBearError):
    pass


class TransactionNotFoundError(LedgerError):
    pass


class DuplicateTransactionError(LedgerError):
    pass


class InvalidTransactionError(DarkBearError):
    pass


class InsufficientQuantityError(InvalidTransactionError):
    pass


class QuoteFetchError(DarkBearError):
    pass


class ConfigError(DarkBearError):
    pass


class InvalidQuoteError(DarkBearError):
    pass

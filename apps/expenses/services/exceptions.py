"""
Domain exceptions for expenses app.

Views map these to HTTP responses by their taxonomy base class.
"""

from apps.core.exceptions import (
    ServiceError,
    NotFoundError,
    InvalidArgumentError,
)


class ExpensesServiceError(ServiceError):
    """Base exception for expense service errors."""
    pass


class ExpenseNotFoundError(ExpensesServiceError, NotFoundError):
    """Raised when an expense does not exist."""
    pass


class InvalidExpenseError(ExpensesServiceError, InvalidArgumentError):
    """Raised when expense fields are missing or the amount is not positive."""
    pass

"""
Expenses app services layer.

The ledger records expenses and approval casts; the approval engine holds
the majority arithmetic they are judged by.
"""

from .exceptions import (
    ExpensesServiceError,
    ExpenseNotFoundError,
    InvalidExpenseError,
)

from .approval_engine import (
    ApprovalDecision,
    approval_threshold,
    is_approved,
    evaluate_approval,
)

from .expense_management import (
    parse_amount,
    get_expense_by_id,
    list_group_expenses,
    submit_expense,
    cast_approval,
)


__all__ = [
    # Exceptions
    'ExpensesServiceError',
    'ExpenseNotFoundError',
    'InvalidExpenseError',

    # Approval Engine
    'ApprovalDecision',
    'approval_threshold',
    'is_approved',
    'evaluate_approval',

    # Expense Ledger
    'parse_amount',
    'get_expense_by_id',
    'list_group_expenses',
    'submit_expense',
    'cast_approval',
]

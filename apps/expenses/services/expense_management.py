"""
Expense ledger service.

Records expenses and approval casts. Casting an approval is a
read-modify-write on the expense's approval set and approved flag, so it
runs under the expense's entity lock with the expense row locked for
update; the unique (expense, user) index makes the insert idempotent.
"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.services import get_user_by_id
from apps.core.locks import entity_lock
from apps.core.storage import storage_guard
from apps.expenses.models import Expense, ExpenseApproval
from apps.expenses.serializers import ExpenseSerializer
from apps.groups.models import Group, GroupMembership
from apps.groups.services import get_group_by_id
from apps.notifications import events
from apps.notifications.channel import NotificationChannel
from apps.notifications.services import publish_on_commit

from .approval_engine import evaluate_approval
from .exceptions import ExpenseNotFoundError, InvalidExpenseError

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')
MAX_AMOUNT = Decimal('9999999999.99')


def parse_amount(amount) -> Decimal:
    """
    Convert a submitted amount to a positive two-place Decimal.

    Accepts numbers and numeric strings. Booleans, blanks, NaN, infinities,
    and anything that rounds to zero or below are rejected.

    Raises:
        InvalidExpenseError: If the amount is not a positive number
    """
    if amount is None or isinstance(amount, bool):
        raise InvalidExpenseError("Amount is required")

    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        raise InvalidExpenseError(f"Amount must be a number, got {amount!r}")

    if not value.is_finite():
        raise InvalidExpenseError("Amount must be a finite number")

    # Bounds are checked before quantize, which overflows on huge magnitudes
    if value <= 0:
        raise InvalidExpenseError("Amount must be positive")
    if value > MAX_AMOUNT:
        raise InvalidExpenseError(f"Amount must not exceed {MAX_AMOUNT}")

    value = value.quantize(CENT, rounding=ROUND_HALF_UP)
    if value <= 0:
        raise InvalidExpenseError("Amount must be positive")
    if value > MAX_AMOUNT:
        raise InvalidExpenseError(f"Amount must not exceed {MAX_AMOUNT}")

    return value


def expense_payload(expense: Expense) -> dict:
    return {'expense': ExpenseSerializer(expense).data}


@storage_guard
def get_expense_by_id(*, expense_id: UUID) -> Expense:
    """
    Get an expense with submitter and approvals prefetched.

    Raises:
        ExpenseNotFoundError: If expense doesn't exist
    """
    try:
        return Expense.objects.with_details().get(id=expense_id)
    except (Expense.DoesNotExist, ValidationError):
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")


@storage_guard
def list_group_expenses(*, group_id: UUID) -> QuerySet[Expense]:
    """
    Get all expenses of a group, newest first.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    group = get_group_by_id(group_id=group_id)
    return Expense.objects.for_group(group.id)


@storage_guard
def submit_expense(
    *,
    group_id: UUID,
    submitter_id: UUID,
    amount,
    description: str = '',
    channel: Optional[NotificationChannel] = None
) -> Expense:
    """
    Record a new expense for a group.

    The expense starts with no approvals and ``approved=False``. The
    submitter is not required to be a member of the group.

    Args:
        group_id: UUID of the group the expense belongs to
        submitter_id: UUID of the submitting user
        amount: Positive amount (number or numeric string)
        description: Free-text description
        channel: Notification channel, defaults to the configured one

    Returns:
        Created Expense instance

    Raises:
        InvalidExpenseError: If ids are missing or amount is not positive
        GroupNotFoundError: If group doesn't exist
        UserNotFoundError: If submitter doesn't exist
    """
    if not group_id or not submitter_id:
        raise InvalidExpenseError("group_id and submitter_id are required")

    amount = parse_amount(amount)

    group = get_group_by_id(group_id=group_id)
    submitter = get_user_by_id(user_id=submitter_id)

    with transaction.atomic():
        expense = Expense.objects.create(
            group=group,
            added_by=submitter,
            description=(description or '').strip(),
            amount=amount,
        )
        group.touch()

    logger.info("Expense %s of %s submitted to group %s by user %s", expense.id, amount, group.id, submitter.id)

    expense = get_expense_by_id(expense_id=expense.id)
    publish_on_commit(
        room=events.room_for_group(group.id),
        event=events.EXPENSE_ADDED,
        payload=expense_payload(expense),
        channel=channel,
    )
    return expense


@storage_guard
def cast_approval(
    *,
    expense_id: UUID,
    user_id: UUID,
    channel: Optional[NotificationChannel] = None
) -> Expense:
    """
    Record a user's approval of an expense.

    A repeated approval by the same user is a silent no-op. Otherwise the
    approval is added and the approved flag is evaluated against the
    group's member count at this instant. ``expenseUpdated`` is published
    for every new approval, ``expenseApproved`` only for the one that
    reaches the threshold.

    Args:
        expense_id: UUID of the expense
        user_id: UUID of the approving user
        channel: Notification channel, defaults to the configured one

    Returns:
        Updated Expense instance

    Raises:
        ExpenseNotFoundError: If expense doesn't exist
        UserNotFoundError: If user doesn't exist
    """
    expense = get_expense_by_id(expense_id=expense_id)
    user = get_user_by_id(user_id=user_id)

    with entity_lock('expense', expense.id):
        with transaction.atomic():
            locked = Expense.objects.select_for_update().get(id=expense.id)

            _, created = ExpenseApproval.objects.get_or_create(expense=locked, user=user)

            if created:
                decision = evaluate_approval(
                    currently_approved=locked.approved,
                    approval_count=locked.approvals.count(),
                    member_count=GroupMembership.objects.filter(group_id=locked.group_id).count(),
                )
                update_fields = ['updated_at']
                if decision.just_approved:
                    locked.approved = True
                    locked.approved_at = timezone.now()
                    update_fields += ['approved', 'approved_at']
                locked.save(update_fields=update_fields)

                Group.objects.filter(id=locked.group_id).update(updated_at=timezone.now())

    expense = get_expense_by_id(expense_id=expense.id)

    if not created:
        logger.debug("User %s already approved expense %s", user.id, expense.id)
        return expense

    room = events.room_for_group(expense.group_id)
    payload = expense_payload(expense)

    publish_on_commit(room=room, event=events.EXPENSE_UPDATED, payload=payload, channel=channel)

    if decision.just_approved:
        logger.info("Expense %s approved by majority of group %s", expense.id, expense.group_id)
        publish_on_commit(room=room, event=events.EXPENSE_APPROVED, payload=payload, channel=channel)

    return expense

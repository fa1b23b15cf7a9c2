"""
Service layer unit tests for expenses app.

Tests cover:
- Amount parsing
- Expense submission
- Approval casting and the majority rule
- Notifications published by the ledger
"""

import threading
from decimal import Decimal
from uuid import uuid4

import pytest
from django.db import connection, transaction
from django.test import TransactionTestCase

from apps.accounts.models import User
from apps.accounts.services.exceptions import UserNotFoundError
from apps.expenses.models import Expense, ExpenseApproval
from apps.expenses.services import (
    parse_amount,
    get_expense_by_id,
    list_group_expenses,
    submit_expense,
    cast_approval,
)
from apps.expenses.services.exceptions import ExpenseNotFoundError, InvalidExpenseError
from apps.groups.models import Group, GroupMembership
from apps.groups.services import approve_join
from apps.groups.services.exceptions import GroupNotFoundError
from apps.notifications import events
from apps.notifications.channel import InMemoryNotificationChannel


# =============================================================================
# Amount Parsing Tests
# =============================================================================

class TestParseAmount:

    @pytest.mark.parametrize('raw, expected', [
        (12, Decimal('12.00')),
        ('12.5', Decimal('12.50')),
        (' 7.125 ', Decimal('7.13')),
        (0.1, Decimal('0.10')),
        (Decimal('3.999'), Decimal('4.00')),
    ])
    def test_valid_amounts(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize('raw', [
        None, '', 'abc', True, False, 0, '-5', '0.004', 'NaN', 'Infinity', '1e20',
        '-1e30', -1e30, '-0.01', '9999999999.995',
    ])
    def test_invalid_amounts(self, raw):
        with pytest.raises(InvalidExpenseError):
            parse_amount(raw)


# =============================================================================
# Expense Submission Tests
# =============================================================================

@pytest.mark.django_db
class TestSubmitExpense:
    """Tests for submit_expense()."""

    def test_submit_expense(self, solo_group, owner, recorder, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            expense = submit_expense(
                group_id=solo_group.id,
                submitter_id=owner.id,
                description=' Taxi ',
                amount='18.40',
                channel=recorder,
            )

        assert expense.group_id == solo_group.id
        assert expense.added_by == owner
        assert expense.description == 'Taxi'
        assert expense.amount == Decimal('18.40')
        assert expense.approved is False
        assert expense.approved_at is None
        assert expense.approval_count == 0
        assert recorder.events(solo_group.id) == [events.EXPENSE_ADDED]

        payload = recorder.payloads(events.EXPENSE_ADDED)[0]
        assert payload['expense']['id'] == str(expense.id)
        assert payload['expense']['amount'] == '18.40'
        assert payload['expense']['approvals'] == []

    def test_submit_bumps_group_updated_at(self, solo_group, owner):
        before = solo_group.updated_at

        submit_expense(group_id=solo_group.id, submitter_id=owner.id, amount=5)

        solo_group.refresh_from_db()
        assert solo_group.updated_at > before

    def test_submitter_need_not_be_member(self, solo_group, make_user):
        outsider = make_user(display_name='Outsider')

        expense = submit_expense(group_id=solo_group.id, submitter_id=outsider.id, amount=1)

        assert expense.added_by == outsider

    def test_submit_non_positive_amount(self, solo_group, owner):
        with pytest.raises(InvalidExpenseError):
            submit_expense(group_id=solo_group.id, submitter_id=owner.id, amount='0')

        assert not Expense.objects.exists()

    def test_submit_missing_ids(self, owner):
        with pytest.raises(InvalidExpenseError):
            submit_expense(group_id=None, submitter_id=owner.id, amount=1)

    def test_submit_unknown_group(self, owner):
        with pytest.raises(GroupNotFoundError):
            submit_expense(group_id=uuid4(), submitter_id=owner.id, amount=1)

    def test_submit_unknown_submitter(self, solo_group):
        with pytest.raises(UserNotFoundError):
            submit_expense(group_id=solo_group.id, submitter_id=uuid4(), amount=1)

    def test_notification_failure_keeps_expense(self, solo_group, owner, failing_channel,
                                                django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            expense = submit_expense(
                group_id=solo_group.id,
                submitter_id=owner.id,
                amount=3,
                channel=failing_channel,
            )

        assert Expense.objects.filter(id=expense.id).exists()


@pytest.mark.django_db
class TestExpenseReads:

    def test_get_expense_not_found(self):
        with pytest.raises(ExpenseNotFoundError):
            get_expense_by_id(expense_id=uuid4())

    def test_list_group_expenses(self, solo_group, owner, expense):
        later = submit_expense(group_id=solo_group.id, submitter_id=owner.id, amount=2)

        assert [e.id for e in list_group_expenses(group_id=solo_group.id)] == [later.id, expense.id]

    def test_list_unknown_group(self):
        with pytest.raises(GroupNotFoundError):
            list_group_expenses(group_id=uuid4())


# =============================================================================
# Approval Tests
# =============================================================================

@pytest.mark.django_db
class TestCastApproval:
    """Tests for cast_approval()."""

    def test_single_member_approves_alone(self, expense, owner, recorder, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            updated = cast_approval(expense_id=expense.id, user_id=owner.id, channel=recorder)

        assert updated.approved is True
        assert updated.approved_at is not None
        assert updated.approval_count == 1
        assert recorder.events() == [events.EXPENSE_UPDATED, events.EXPENSE_APPROVED]

    def test_duplicate_approval_is_noop(self, trio, expense, recorder, django_capture_on_commit_callbacks):
        owner = trio[0]
        cast_approval(expense_id=expense.id, user_id=owner.id, channel=recorder)

        with django_capture_on_commit_callbacks() as callbacks:
            updated = cast_approval(expense_id=expense.id, user_id=owner.id, channel=recorder)

        assert updated.approval_count == 1
        assert updated.approved is False
        assert ExpenseApproval.objects.filter(expense=expense).count() == 1
        assert callbacks == []

    def test_three_members_two_approvals(self, trio, expense, recorder, django_capture_on_commit_callbacks):
        alice, bob, carol = trio

        with django_capture_on_commit_callbacks(execute=True):
            first = cast_approval(expense_id=expense.id, user_id=alice.id, channel=recorder)
            second = cast_approval(expense_id=expense.id, user_id=bob.id, channel=recorder)
            third = cast_approval(expense_id=expense.id, user_id=carol.id, channel=recorder)

        assert first.approved is False
        assert second.approved is True
        assert third.approved is True
        assert third.approval_count == 3
        assert third.approved_at == second.approved_at

        assert recorder.events() == [
            events.EXPENSE_UPDATED,
            events.EXPENSE_UPDATED,
            events.EXPENSE_APPROVED,
            events.EXPENSE_UPDATED,
        ]
        assert recorder.payloads(events.EXPENSE_APPROVED)[0]['expense']['approvals'] == [
            str(alice.id), str(bob.id)
        ]

    def test_second_member_raises_threshold(self, solo_group, owner, expense, make_user):
        """An expense logged alone needs both votes once a second member joins."""
        bob = make_user(display_name='Bob')
        approve_join(group_id=solo_group.id, user_id=bob.id)

        first = cast_approval(expense_id=expense.id, user_id=owner.id)
        assert first.approved is False

        second = cast_approval(expense_id=expense.id, user_id=bob.id)
        assert second.approved is True

    def test_approval_survives_membership_growth(self, trio, expense, make_user, recorder,
                                                 django_capture_on_commit_callbacks):
        alice, bob, carol = trio

        with django_capture_on_commit_callbacks(execute=True):
            cast_approval(expense_id=expense.id, user_id=alice.id, channel=recorder)
            cast_approval(expense_id=expense.id, user_id=bob.id, channel=recorder)

            for name in ('Dan', 'Erin', 'Frank'):
                approve_join(group_id=expense.group_id, user_id=make_user(display_name=name).id)

            updated = cast_approval(expense_id=expense.id, user_id=carol.id, channel=recorder)

        assert updated.approved is True
        assert recorder.events().count(events.EXPENSE_APPROVED) == 1
        assert recorder.events().count(events.EXPENSE_UPDATED) == 3

    def test_non_member_approval_counts(self, solo_group, owner, make_user):
        """Approvals are not restricted to members, matching submission."""
        bob = make_user(display_name='Bob')
        GroupMembership.objects.create(group=solo_group, user=bob)
        expense = submit_expense(group_id=solo_group.id, submitter_id=owner.id, amount=10)
        outsider = make_user(display_name='Outsider')

        cast_approval(expense_id=expense.id, user_id=owner.id)
        updated = cast_approval(expense_id=expense.id, user_id=outsider.id)

        assert updated.approved is True

    def test_approval_bumps_group_updated_at(self, solo_group, expense, owner):
        solo_group.refresh_from_db()
        before = solo_group.updated_at

        cast_approval(expense_id=expense.id, user_id=owner.id)

        solo_group.refresh_from_db()
        assert solo_group.updated_at > before

    def test_unknown_expense(self, owner):
        with pytest.raises(ExpenseNotFoundError):
            cast_approval(expense_id=uuid4(), user_id=owner.id)

    def test_unknown_user(self, expense):
        with pytest.raises(UserNotFoundError):
            cast_approval(expense_id=expense.id, user_id=uuid4())

        assert not ExpenseApproval.objects.exists()

    def test_notification_failure_keeps_approval(self, expense, owner, failing_channel,
                                                 django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            updated = cast_approval(expense_id=expense.id, user_id=owner.id, channel=failing_channel)

        assert len(callbacks) == 2
        assert updated.approved is True


@pytest.mark.django_db(transaction=True)
class TestNotificationsFollowCommit:
    """Events go out only once the caller's transaction has committed."""

    def test_rolled_back_approval_is_not_announced(self, expense, owner, recorder):
        with pytest.raises(RuntimeError):
            with transaction.atomic():
                cast_approval(expense_id=expense.id, user_id=owner.id, channel=recorder)
                raise RuntimeError("caller failed after approving")

        expense.refresh_from_db()
        assert expense.approved is False
        assert not ExpenseApproval.objects.filter(expense=expense).exists()
        assert recorder.published == []

    def test_announced_when_outer_transaction_commits(self, expense, owner, recorder):
        with transaction.atomic():
            cast_approval(expense_id=expense.id, user_id=owner.id, channel=recorder)
            assert recorder.published == []

        assert recorder.events() == [events.EXPENSE_UPDATED, events.EXPENSE_APPROVED]

    def test_rolled_back_submission_is_not_announced(self, solo_group, owner, recorder):
        with pytest.raises(RuntimeError):
            with transaction.atomic():
                submit_expense(group_id=solo_group.id, submitter_id=owner.id, amount=5, channel=recorder)
                raise RuntimeError("caller failed after submitting")

        assert not Expense.objects.exists()
        assert recorder.published == []

    def test_without_outer_transaction_publishes_immediately(self, solo_group, owner, recorder):
        submit_expense(group_id=solo_group.id, submitter_id=owner.id, amount=5, channel=recorder)

        assert recorder.events(solo_group.id) == [events.EXPENSE_ADDED]


# =============================================================================
# Concurrency Tests
# =============================================================================

class TestConcurrentApprovals(TransactionTestCase):
    """Simultaneous approval casts on one expense."""

    def setUp(self):
        self.users = [
            User.objects.create(device_id=f'device-{i}', display_name=f'User {i}')
            for i in range(3)
        ]
        self.group = Group.objects.create(name='Race', creator=self.users[0])
        for user in self.users:
            GroupMembership.objects.create(group=self.group, user=user)
        self.expense = Expense.objects.create(group=self.group, added_by=self.users[0], amount='30.00')

    def _cast_in_parallel(self, user_ids, channel=None):
        errors = []
        barrier = threading.Barrier(len(user_ids))

        def worker(user_id):
            try:
                barrier.wait()
                cast_approval(expense_id=self.expense.id, user_id=user_id, channel=channel)
            except Exception as e:
                errors.append(e)
            finally:
                connection.close()

        threads = [threading.Thread(target=worker, args=(user_id,)) for user_id in user_ids]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        return errors

    def test_two_distinct_approvers_both_count(self):
        channel = InMemoryNotificationChannel()
        received = []
        channel.subscribe(str(self.group.id), lambda event, payload: received.append(event))

        errors = self._cast_in_parallel([self.users[1].id, self.users[2].id], channel=channel)

        self.assertEqual(errors, [])
        expense = get_expense_by_id(expense_id=self.expense.id)
        self.assertEqual(expense.approval_count, 2)
        self.assertTrue(expense.approved)
        self.assertEqual(received.count(events.EXPENSE_APPROVED), 1)
        self.assertEqual(received.count(events.EXPENSE_UPDATED), 2)

    def test_same_approver_twice_counts_once(self):
        errors = self._cast_in_parallel([self.users[1].id, self.users[1].id])

        self.assertEqual(errors, [])
        self.assertEqual(ExpenseApproval.objects.filter(expense=self.expense).count(), 1)

"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data

This creates:
- 4 device users (alice, bob, charlie, dana)
- 2 groups (Flat 3B, Ski Trip)
- Pending join requests
- Expenses at various stages of approval
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User
from apps.accounts.services import resolve_user
from apps.expenses.models import Expense, ExpenseApproval
from apps.expenses.services import submit_expense, cast_approval
from apps.groups.models import Group, GroupMembership, JoinRequest
from apps.groups.services import create_group, request_join, approve_join

SAMPLE_DEVICE_PREFIX = 'sample-'


class Command(BaseCommand):
    help = 'Create sample data for trying out the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing sample data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing sample data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        groups = self.create_groups(users)
        self.create_expenses(users, groups)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Sample devices:')
        for user in users.values():
            self.stdout.write(f'  {user.device_id} -> {user.display_name} ({user.id})')
        self.stdout.write('Join codes:')
        for group in groups.values():
            self.stdout.write(f'  {group.name}: {group.join_code}')

    def clear_data(self):
        """Delete everything owned by sample devices."""
        sample_users = User.objects.filter(device_id__startswith=SAMPLE_DEVICE_PREFIX)
        sample_groups = Group.objects.filter(creator__in=sample_users)

        ExpenseApproval.objects.filter(expense__group__in=sample_groups).delete()
        Expense.objects.filter(group__in=sample_groups).delete()
        JoinRequest.objects.filter(group__in=sample_groups).delete()
        GroupMembership.objects.filter(group__in=sample_groups).delete()
        sample_users.update(current_group=None)
        sample_groups.delete()
        sample_users.delete()

    def create_users(self):
        """Create device users."""
        self.stdout.write('  Creating users...')

        return {
            name: resolve_user(
                device_id=f'{SAMPLE_DEVICE_PREFIX}{name}',
                display_name=display_name,
            )
            for name, display_name in [
                ('alice', 'Alice'),
                ('bob', 'Bob'),
                ('charlie', 'Charlie'),
                ('dana', 'Dana'),
            ]
        }

    def create_groups(self, users):
        """Create groups, admit some members and leave one request pending."""
        self.stdout.write('  Creating groups...')

        flat = create_group(name='Flat 3B', owner_id=users['alice'].id)
        for name in ('bob', 'charlie'):
            request_join(join_code=flat.join_code, user_id=users[name].id)
            approve_join(group_id=flat.id, user_id=users[name].id, approved_by=users['alice'])
        request_join(join_code=flat.join_code, user_id=users['dana'].id)

        trip = create_group(name='Ski Trip', owner_id=users['bob'].id)
        request_join(join_code=trip.join_code, user_id=users['dana'].id)
        approve_join(group_id=trip.id, user_id=users['dana'].id, approved_by=users['bob'])

        return {'flat': flat, 'trip': trip}

    def create_expenses(self, users, groups):
        """Create expenses, some approved and some still waiting."""
        self.stdout.write('  Creating expenses...')

        expenses_data = [
            # (group, submitter, description, amount, approvers)
            ('flat', 'alice', 'Groceries', '64.20', ['alice', 'bob']),
            ('flat', 'bob', 'Internet, March', '39.99', ['bob']),
            ('flat', 'charlie', 'Cleaning supplies', '12.75', []),
            ('trip', 'bob', 'Lift passes', '240.00', ['bob', 'dana']),
            ('trip', 'dana', 'Fuel', '58.10', ['dana']),
        ]

        for group_key, submitter, description, amount, approvers in expenses_data:
            expense = submit_expense(
                group_id=groups[group_key].id,
                submitter_id=users[submitter].id,
                description=description,
                amount=amount,
            )
            for approver in approvers:
                cast_approval(expense_id=expense.id, user_id=users[approver].id)

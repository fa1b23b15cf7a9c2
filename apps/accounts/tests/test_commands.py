import pytest
from io import StringIO

from django.core.management import call_command

from apps.accounts.models import User
from apps.expenses.models import Expense
from apps.groups.models import Group, JoinRequest


@pytest.mark.django_db
class TestCreateSampleData:

    def test_creates_sample_data(self):
        out = StringIO()

        call_command('create_sample_data', stdout=out)

        assert User.objects.filter(device_id__startswith='sample-').count() == 4
        assert Group.objects.count() == 2
        assert JoinRequest.objects.count() == 1
        assert Expense.objects.count() == 5
        assert set(Expense.objects.filter(approved=True).values_list('description', flat=True)) == {
            'Groceries', 'Lift passes'
        }
        assert 'Sample data created successfully!' in out.getvalue()

    def test_clear_replaces_previous_run(self):
        call_command('create_sample_data', stdout=StringIO())

        call_command('create_sample_data', '--clear', stdout=StringIO())

        assert User.objects.filter(device_id__startswith='sample-').count() == 4
        assert Group.objects.count() == 2
        assert Expense.objects.count() == 5

"""
Concurrency tests for group membership.

Uses TransactionTestCase so every thread commits for real.
"""

import threading

from django.db import connection
from django.test import TransactionTestCase

from apps.accounts.models import User
from apps.groups.models import GroupMembership, JoinRequest
from apps.groups.services import create_group, request_join, approve_join


class TestConcurrentMembership(TransactionTestCase):
    """Simultaneous join requests and approvals on one group."""

    def setUp(self):
        self.owner = User.objects.create(device_id='device-owner', display_name='Owner')
        self.group = create_group(name='Concurrent', owner_id=self.owner.id)
        self.users = [
            User.objects.create(device_id=f'device-{i}', display_name=f'User {i}')
            for i in range(4)
        ]

    def _run_threads(self, target, args_list):
        errors = []

        def worker(*args):
            try:
                target(*args)
            except Exception as e:
                errors.append(e)
            finally:
                connection.close()

        threads = [threading.Thread(target=worker, args=args) for args in args_list]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        return errors

    def test_duplicate_join_requests_create_one_record(self):
        user = self.users[0]

        errors = self._run_threads(
            lambda: request_join(join_code=self.group.join_code, user_id=user.id),
            [()] * 5,
        )

        self.assertEqual(errors, [])
        self.assertEqual(JoinRequest.objects.filter(group=self.group, user=user).count(), 1)

    def test_parallel_approvals_keep_every_member(self):
        for user in self.users:
            request_join(join_code=self.group.join_code, user_id=user.id)

        errors = self._run_threads(
            lambda user_id: approve_join(group_id=self.group.id, user_id=user_id),
            [(user.id,) for user in self.users],
        )

        self.assertEqual(errors, [])
        self.assertEqual(GroupMembership.objects.filter(group=self.group).count(), 5)
        self.assertFalse(JoinRequest.objects.filter(group=self.group).exists())

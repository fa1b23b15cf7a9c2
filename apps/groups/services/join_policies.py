"""
Join approval policies.

``approve_join`` does not decide on its own who may admit a new member.
It asks the policy configured by ``GROUPS_JOIN_APPROVAL_POLICY`` (or one
passed in by the caller). The mobile client only shows the approve button
to the group creator, and the server historically trusted that, which is
what ``AllowAnyApprover`` keeps doing.
"""

from django.conf import settings
from django.utils.module_loading import import_string

from .exceptions import InsufficientPermissionsError


class JoinApprovalPolicy:
    """Decides whether ``approved_by`` may admit members to ``group``."""

    def check(self, *, group, approved_by) -> None:
        """Raise ``InsufficientPermissionsError`` to refuse the approval."""
        raise NotImplementedError


class AllowAnyApprover(JoinApprovalPolicy):
    """Anyone, including an unidentified caller, may approve."""

    def check(self, *, group, approved_by) -> None:
        return None


class CreatorOnlyApprover(JoinApprovalPolicy):
    """Only the group creator may approve."""

    def check(self, *, group, approved_by) -> None:
        if approved_by is None or str(approved_by.pk) != str(group.creator_id):
            raise InsufficientPermissionsError(
                "Only the group creator can approve join requests"
            )


def get_join_approval_policy() -> JoinApprovalPolicy:
    return import_string(settings.GROUPS_JOIN_APPROVAL_POLICY)()

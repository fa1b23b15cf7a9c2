"""
Invite management service.

Join codes are stored upper-case; lookups accept any case and surrounding
whitespace, since codes are usually typed in by hand.
"""

from apps.core.storage import storage_guard
from apps.groups.models import Group

from .exceptions import InvalidJoinCodeError


def normalize_join_code(join_code: str) -> str:
    return (join_code or '').strip().upper()


@storage_guard
def get_group_by_join_code(*, join_code: str) -> Group:
    """
    Find the group a join code belongs to.

    Raises:
        InvalidJoinCodeError: If no group has this code
    """
    code = normalize_join_code(join_code)
    if not code:
        raise InvalidJoinCodeError("Join code is required")

    try:
        return Group.objects.select_related('creator').get(join_code=code)
    except Group.DoesNotExist:
        raise InvalidJoinCodeError(f"No group found for join code {code}")


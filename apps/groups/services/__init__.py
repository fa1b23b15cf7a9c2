"""
Groups app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and concurrency protection.
"""

from .exceptions import (
    GroupsServiceError,
    GroupNotFoundError,
    InvalidJoinCodeError,
    InvalidGroupError,
    JoinCodeCollisionError,
    JoinCodeExhaustedError,
    InsufficientPermissionsError,
)

from .group_management import (
    GroupView,
    create_group,
    get_group_by_id,
    get_group_detail,
    list_groups_for_user,
)

from .invite_management import (
    get_group_by_join_code,
    normalize_join_code,
)

from .membership_management import (
    JoinRequestResult,
    request_join,
    approve_join,
)


__all__ = [
    # Exceptions
    'GroupsServiceError',
    'GroupNotFoundError',
    'InvalidJoinCodeError',
    'InvalidGroupError',
    'JoinCodeCollisionError',
    'JoinCodeExhaustedError',
    'InsufficientPermissionsError',

    # Group Management
    'GroupView',
    'create_group',
    'get_group_by_id',
    'get_group_detail',
    'list_groups_for_user',

    # Invite Management
    'get_group_by_join_code',
    'normalize_join_code',

    # Membership Management
    'JoinRequestResult',
    'request_join',
    'approve_join',
]

"""Event names published to group rooms."""

JOIN_REQUEST = 'joinRequest'
MEMBER_APPROVED = 'memberApproved'
EXPENSE_ADDED = 'expenseAdded'
EXPENSE_UPDATED = 'expenseUpdated'
EXPENSE_APPROVED = 'expenseApproved'

ALL_EVENTS = (
    JOIN_REQUEST,
    MEMBER_APPROVED,
    EXPENSE_ADDED,
    EXPENSE_UPDATED,
    EXPENSE_APPROVED,
)


def room_for_group(group_id) -> str:
    """Room name used for a group's subscribers."""
    return str(group_id)

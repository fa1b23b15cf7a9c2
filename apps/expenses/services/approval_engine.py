"""
Approval engine.

Pure majority arithmetic. An expense needs strictly more than half of the
group's members to approve it:

    members  threshold
    1        1
    2        2
    3        2
    4        3
    5        3

The decision is taken at the moment an approval is cast, against the
member count at that instant. Later membership changes do not revisit it.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ApprovalDecision:
    """Result of evaluating an expense after an approval cast."""

    approved: bool
    just_approved: bool


def approval_threshold(member_count: int) -> int:
    """Minimum number of distinct approvals for a strict majority."""
    if member_count < 0:
        raise ValueError(f"member_count must be non-negative, got {member_count}")
    return member_count // 2 + 1


def is_approved(approval_count: int, member_count: int) -> bool:
    return approval_count >= approval_threshold(member_count)


def evaluate_approval(
    *,
    currently_approved: bool,
    approval_count: int,
    member_count: int
) -> ApprovalDecision:
    """
    Decide the approved flag after an approval has been recorded.

    ``approved`` never goes back to False once set, and ``just_approved``
    is True only for the evaluation that flips it.
    """
    if currently_approved:
        return ApprovalDecision(approved=True, just_approved=False)

    approved = is_approved(approval_count, member_count)
    return ApprovalDecision(approved=approved, just_approved=approved)

"""ORM models for the group_ledger domain."""

from group_ledger.db.models.expense import Expense
from group_ledger.db.models.group import Group, GroupMember, GroupRole
from group_ledger.db.models.payment import Payment, PaymentStatus
from group_ledger.db.models.user import User

__all__ = [
    "Expense",
    "Group",
    "GroupMember",
    "GroupRole",
    "Payment",
    "PaymentStatus",
    "User",
]

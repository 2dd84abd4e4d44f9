from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string.
    """

    def __str__(self):
        return str(self.value)


# -----------------------------------------------------
# USER ROLE
# -----------------------------------------------------
class UserRole(BaseStrEnum):
    """`member` is reserved for users holding a checked agreement."""

    user = "user"
    member = "member"
    admin = "admin"


# -----------------------------------------------------
# AGREEMENT STATUS
# -----------------------------------------------------
class AgreementStatus(BaseStrEnum):
    """Workflow state for a tenancy agreement."""

    pending = "pending"
    checked = "checked"
    rejected = "rejected"
    terminated = "terminated"

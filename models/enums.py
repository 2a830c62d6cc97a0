"""
Centralized Enum definitions for the project.
"""

from enum import Enum


class SpoilageRisk(str, Enum):
    """How quickly unsold stock loses its sale value"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PriceDirection(str, Enum):
    """Direction of a suggested price relative to the current price"""

    RAISE = "raise"
    LOWER = "lower"
    HOLD = "hold"


class UserRole(str, Enum):
    """Dashboard roles supplied by the identity provider"""

    SUPERADMIN = "superadmin"
    MANAGER = "manager"
    EMPLOYEE = "employee"


class ApprovalStatus(str, Enum):
    """Account approval states (new sign-ups wait for a manager)"""

    PENDING = "pending"
    APPROVED = "approved"

"""Shared enums for models."""

from enum import Enum


class MembershipRole(str, Enum):
    """Role a principal holds within an organization."""

    MEMBER = "member"
    OWNER = "owner"


class MembershipStatus(str, Enum):
    """Lifecycle state of a membership edge."""

    ACTIVE = "active"
    PENDING_USER_SETUP = "pending_user_setup"
    INACTIVE = "inactive"


class Currency(str, Enum):
    """Currencies an organization may report in."""

    INR = "INR"
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CAD = "CAD"
    AUD = "AUD"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    IN_REVIEW = "in_review"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ExpenseCategory(str, Enum):
    TECH_INFRASTRUCTURE = "Tech Infrastructure"
    MARKETING_AND_SALES = "Marketing & Sales"
    SALARIES_AND_WAGES = "Salaries & Wages"
    LEGAL_AND_PROFESSIONAL = "Legal & Professional"
    RENT_AND_UTILITIES = "Rent & Utilities"
    SOFTWARE_AND_SUBSCRIPTIONS = "Software & Subscriptions"
    TRAVEL_AND_ENTERTAINMENT = "Travel & Entertainment"
    OFFICE_SUPPLIES = "Office Supplies"
    OTHER = "Other"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "Bank Transfer"
    CREDIT_CARD = "Credit Card"
    CASH = "Cash"
    UPI = "UPI"
    OTHER = "Other"


def enum_values(enum_cls) -> list:
    """Persist enum values (not member names) in string columns."""
    return [member.value for member in enum_cls]

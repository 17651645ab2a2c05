"""Notification-related enumerations.

This module contains enums for notification read status, classification
and recipients as exposed by the console notifications API.
"""

from enum import Enum


class NotificationStatus(str, Enum):
    """Read status of a notification.

    The only client-side transition is UNREAD -> READ.
    """

    UNREAD = "unread"
    READ = "read"


class NotificationType(str, Enum):
    """Business area that raised the notification."""

    REFUND = "refund"
    INVENTORY = "inventory"
    PAYMENT = "payment"
    ORDER = "order"
    SYSTEM = "system"


class NotificationCategory(str, Enum):
    """Severity-style category used for display."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"


class NotificationPriority(str, Enum):
    """Notification priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class RecipientType(str, Enum):
    """Kinds of accounts that can receive notifications."""

    CUSTOMER_EMPLOYEE = "customer_employee"
    ADMIN = "admin"
    SUPPLIER = "supplier"

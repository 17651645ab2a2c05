"""Payload factories for console API test data.

Builders return wire-format dicts (camelCase, ``_id``) as the console API
sends them, so tests exercise the same parsing path as production code.
"""

from datetime import UTC
from typing import Any

from faker import Faker

fake = Faker()


def _timestamp() -> str:
    return fake.date_time_this_year(tzinfo=UTC).isoformat()


def notification_payload(**overrides: Any) -> dict[str, Any]:
    """Build a notification as returned by the notifications API.

    A ``status`` of ``read`` gets a ``readAt`` timestamp unless one is given.
    """
    payload: dict[str, Any] = {
        "_id": fake.hexify(text="^" * 24),
        "uniqueId": f"NOT-{fake.random_number(digits=6, fix_len=True)}",
        "recipientId": fake.hexify(text="^" * 24),
        "recipientType": "admin",
        "title": fake.sentence(nb_words=4),
        "message": fake.text(max_nb_chars=120),
        "type": fake.random_element(["refund", "inventory", "payment", "order", "system"]),
        "category": fake.random_element(["success", "warning", "error", "info"]),
        "priority": fake.random_element(["low", "medium", "high", "urgent"]),
        "status": "unread",
        "metadata": {"source": fake.word()},
        "readAt": None,
        "createdAt": _timestamp(),
        "updatedAt": _timestamp(),
    }
    payload.update(overrides)
    if payload["status"] == "read" and payload.get("readAt") is None:
        payload["readAt"] = _timestamp()
    return payload


def review_payload(**overrides: Any) -> dict[str, Any]:
    """Build a customer review as returned by the review API."""
    payload: dict[str, Any] = {
        "_id": fake.hexify(text="^" * 24),
        "uniqueId": f"REV-{fake.random_number(digits=6, fix_len=True)}",
        "customer": {
            "_id": fake.hexify(text="^" * 24),
            "name": fake.name(),
            "email": fake.email(),
        },
        "product": {"_id": fake.hexify(text="^" * 24), "name": fake.word(), "images": []},
        "rating": fake.random_int(min=1, max=5),
        "title": fake.sentence(nb_words=3),
        "review": fake.text(max_nb_chars=200),
        "images": [],
        "status": "pending",
        "isVerifiedPurchase": fake.boolean(),
        "helpfulVotes": 0,
        "reportCount": 0,
        "createdAt": _timestamp(),
        "updatedAt": _timestamp(),
    }
    payload.update(overrides)
    return payload


def notification_list_payload(
    notifications: list[dict[str, Any]],
    page: int = 1,
    limit: int = 10,
    total: int | None = None,
) -> dict[str, Any]:
    total = len(notifications) if total is None else total
    return {
        "success": True,
        "data": {
            "notifications": notifications,
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": -(-total // limit),
        },
    }


def review_list_payload(
    reviews: list[dict[str, Any]],
    page: int = 1,
    limit: int = 10,
    total: int | None = None,
) -> dict[str, Any]:
    total = len(reviews) if total is None else total
    return {
        "success": True,
        "data": {
            "reviews": reviews,
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": -(-total // limit),
        },
    }

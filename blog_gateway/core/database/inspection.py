"""SQLAlchemy instance inspection helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect as sa_inspect

if TYPE_CHECKING:
    from sqlalchemy.orm import InstanceState


def is_loaded(instance: Any, attr: str) -> bool:
    """Check if a relationship/attribute is loaded without triggering a load.

    Args:
        instance: SQLAlchemy ORM model instance
        attr: Attribute name to check

    Returns:
        True if attribute is loaded, False if access would trigger a lazy load.

    Example:
        >>> user = await session.get(User, uid)  # No eager loading
        >>> is_loaded(user, "user_subscribed_to")
        False
    """
    state: InstanceState[Any] = sa_inspect(instance)
    if attr in state.dict:
        return True
    return attr not in state.unloaded

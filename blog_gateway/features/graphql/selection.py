"""Helpers for inspecting the selection set of the field being resolved."""

from __future__ import annotations

from typing import TYPE_CHECKING

from strawberry.types.nodes import SelectedField

if TYPE_CHECKING:
    from collections.abc import Iterable

    from strawberry.types import Info
    from strawberry.types.nodes import Selection

# GraphQL field name -> User relationship attribute (see USER_RELATIONS)
USER_RELATION_FIELDS = {
    "userSubscribedTo": "user_subscribed_to",
    "subscribedToUser": "subscribed_to_user",
}


def _collect_field_names(selections: Iterable[Selection], names: set[str]) -> None:
    for selection in selections:
        if isinstance(selection, SelectedField):
            names.add(selection.name)
        else:
            # Fragment spreads and inline fragments
            _collect_field_names(selection.selections, names)


def selected_field_names(info: Info) -> set[str]:
    """Names of the sub-fields selected under the field being resolved.

    Fragment spreads and inline fragments are flattened.

    Example:
        users { id ...F }  fragment F on User { posts { id } }
        -> {"id", "posts"} while resolving ``users``
    """
    names: set[str] = set()
    for field in info.selected_fields:
        _collect_field_names(field.selections, names)
    return names


def requested_user_relations(info: Info) -> tuple[str, ...]:
    """User relationship attributes needed by the current User-typed field."""
    names = selected_field_names(info)
    return tuple(
        relation for field_name, relation in USER_RELATION_FIELDS.items() if field_name in names
    )

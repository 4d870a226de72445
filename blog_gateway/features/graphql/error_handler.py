"""GraphQL error classification, formatting, and logging.

Resolvers raise ``GraphQLError`` with an ``extensions.code`` for expected
failures (not found, constraint violation). Everything else is an internal
error: logged with its traceback and, outside debug mode, masked by the
``MaskErrors`` extension.

Usage:
    # In schema.py:
    class BlogSchema(strawberry.Schema):
        def process_errors(self, errors, execution_context=None):
            process_graphql_errors(errors, execution_context)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from graphql import GraphQLError

if TYPE_CHECKING:
    from strawberry.types import ExecutionContext

    from blog_gateway.core.database import ConstraintViolationError

logger = logging.getLogger(__name__)

__all__ = [
    "MASKED_ERROR_MESSAGE",
    "ErrorCategory",
    "format_constraint_violation_error",
    "format_not_found_error",
    "is_user_facing_error",
    "log_error",
    "process_graphql_errors",
    "should_mask_error",
]

MASKED_ERROR_MESSAGE = "An internal error occurred. Please try again later."


# ============================================================================
# Error Categories
# ============================================================================


class ErrorCategory:
    """Error codes placed in ``extensions.code``."""

    VALIDATION = "VALIDATION_ERROR"
    DEPTH_LIMIT = "DEPTH_LIMIT_EXCEEDED"
    NOT_FOUND = "NOT_FOUND"
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
    INTERNAL = "INTERNAL_ERROR"


USER_FACING_CODES = frozenset({
    ErrorCategory.VALIDATION,
    ErrorCategory.DEPTH_LIMIT,
    ErrorCategory.NOT_FOUND,
    ErrorCategory.CONSTRAINT_VIOLATION,
})


# ============================================================================
# Main Error Processing
# ============================================================================


def process_graphql_errors(
    errors: list[GraphQLError],
    execution_context: ExecutionContext | None = None,
) -> None:
    """Classify and log errors before they are returned to the client.

    Document errors (syntax, validation, depth limit) carry no original
    exception; they get a VALIDATION_ERROR or DEPTH_LIMIT_EXCEEDED code.
    Errors raised by resolvers without a code are INTERNAL_ERROR.

    Args:
        errors: List of GraphQL errors from execution
        execution_context: Execution context with operation info
    """
    for error in errors:
        if not (error.extensions or {}).get("code"):
            error.extensions = {**(error.extensions or {}), "code": _classify(error)}
        log_error(error, execution_context)


# ============================================================================
# Error Classification
# ============================================================================


def _classify(error: GraphQLError) -> str:
    if error.original_error is not None:
        return ErrorCategory.INTERNAL
    if "maximum operation depth" in error.message:
        return ErrorCategory.DEPTH_LIMIT
    return ErrorCategory.VALIDATION


def is_user_facing_error(error: GraphQLError) -> bool:
    """Determine if error should be shown to user as-is.

    Args:
        error: GraphQL error to check

    Returns:
        True if error is safe to show to user, False if it should be masked
    """
    if (error.extensions or {}).get("code") in USER_FACING_CODES:
        return True
    # Document errors never wrap an exception
    return error.original_error is None


def should_mask_error(error: GraphQLError) -> bool:
    """Predicate for ``MaskErrors``: hide everything that is not user facing."""
    return not is_user_facing_error(error)


# ============================================================================
# Error Logging
# ============================================================================


def log_error(error: GraphQLError, execution_context: ExecutionContext | None) -> None:
    """Log error with full details for server-side debugging.

    Args:
        error: GraphQL error to log
        execution_context: Execution context with operation info
    """
    log_context: dict[str, Any] = {
        "error_message": error.message,
        "error_path": error.path,
        "error_code": (error.extensions or {}).get("code"),
    }

    if execution_context is not None:
        if execution_context.operation_name:
            log_context["operation_name"] = execution_context.operation_name
        correlation_id = getattr(execution_context.context, "correlation_id", None)
        if correlation_id:
            log_context["correlation_id"] = correlation_id

    if is_user_facing_error(error):
        logger.info("GraphQL user-facing error", extra=log_context)
        return

    original = error.original_error
    if original is not None:
        log_context["exception_type"] = type(original).__name__
    logger.error(
        "GraphQL internal error",
        extra=log_context,
        exc_info=(type(original), original, original.__traceback__) if original else None,
    )


# ============================================================================
# Error Formatting
# ============================================================================


def format_not_found_error(
    resource_type: str,
    resource_id: object | None = None,
) -> GraphQLError:
    """Create a formatted not found error.

    Args:
        resource_type: Type of resource (e.g., "User", "Subscription")
        resource_id: ID of the resource that wasn't found

    Returns:
        GraphQL error with not found extensions

    Example:
        if not await repo.delete_by_id(session, id):
            raise format_not_found_error("Post", id)
    """
    message = f"{resource_type} not found"
    if resource_id is not None:
        message += f" (id: {resource_id})"

    return GraphQLError(
        message=message,
        extensions={
            "code": ErrorCategory.NOT_FOUND,
            "resource_type": resource_type,
            "resource_id": str(resource_id) if resource_id is not None else None,
        },
    )


def format_constraint_violation_error(error: ConstraintViolationError) -> GraphQLError:
    """Create a formatted error for a write rejected by a database constraint.

    The driver message stays in the server log only.
    """
    return GraphQLError(
        message=error.message,
        extensions={
            "code": ErrorCategory.CONSTRAINT_VIOLATION,
            "resource_type": error.model_name,
            "operation": error.operation,
        },
    )

"""Strawberry extensions for the GraphQL schema.

Provides:
- Query depth limiting (GRAPHQL_MAX_QUERY_DEPTH, default 5)
- Masking of internal errors outside debug mode
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from strawberry.extensions import MaskErrors, QueryDepthLimiter

from blog_gateway.core.settings import get_app_settings, get_graphql_settings
from blog_gateway.features.graphql.error_handler import (
    MASKED_ERROR_MESSAGE,
    ErrorCategory,
    should_mask_error,
)

if TYPE_CHECKING:
    from graphql import GraphQLError

logger = logging.getLogger(__name__)


class MaskInternalErrors(MaskErrors):
    """MaskErrors that tags the replacement error with INTERNAL_ERROR."""

    def anonymise_error(self, error: GraphQLError) -> GraphQLError:
        masked = super().anonymise_error(error)
        masked.extensions = {"code": ErrorCategory.INTERNAL}
        return masked


def get_extensions(*, max_depth: int | None = None, debug: bool | None = None) -> list:
    """Get list of Strawberry extensions for the schema.

    Args:
        max_depth: Depth bound; defaults to GraphQLSettings.max_query_depth
        debug: Leave internal errors unmasked; defaults to AppSettings.debug

    Returns:
        List of extension instances
    """
    if max_depth is None:
        max_depth = get_graphql_settings().max_query_depth
    if debug is None:
        debug = get_app_settings().debug

    extensions: list = [
        # Rejects the document at validation, before any resolver runs
        QueryDepthLimiter(max_depth=max_depth),
    ]
    if not debug:
        extensions.append(
            MaskInternalErrors(should_mask_error=should_mask_error, error_message=MASKED_ERROR_MESSAGE)
        )

    logger.debug("GraphQL extensions configured: depth limit=%d, masking=%s", max_depth, not debug)
    return extensions


__all__ = ["MaskInternalErrors", "get_extensions"]

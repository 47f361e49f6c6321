"""Drive query rewriting to a fixed point."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import QueryRewriteError

if TYPE_CHECKING:
    from .context import QueryRewriteContext
    from .queries.base import AbstractQuery

logger = logging.getLogger("search_query_dsl.rewrite")


def rewrite_query(
    query: AbstractQuery,
    context: QueryRewriteContext,
    *,
    max_rounds: int | None = None,
) -> AbstractQuery:
    """
    Rewrite *query* until a round returns the very same node.

    Each round is a full pass over the tree.  Termination is detected by
    identity, not equality, so unchanged subtrees cost nothing to compare.

    Raises:
        QueryRewriteError: If the tree is still changing after
            *max_rounds* rounds (default ``settings.max_rewrite_rounds``).
    """
    limit = max_rounds if max_rounds is not None else context.settings.max_rewrite_rounds
    current = query
    for round_no in range(1, limit + 1):
        rewritten = current.rewrite(context)
        if rewritten is current:
            logger.debug("Rewrite reached a fixed point after %d round(s)", round_no)
            return current
        logger.debug(
            "Rewrite round %d: [%s] -> [%s]",
            round_no,
            current.writeable_name,
            rewritten.writeable_name,
        )
        current = rewritten
    raise QueryRewriteError(limit)

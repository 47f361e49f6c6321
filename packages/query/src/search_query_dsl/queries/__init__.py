from ..registry import QueryRegistry
from .base import DEFAULT_BOOST, AbstractQuery
from .boolean import BoolQuery
from .constant_score import ConstantScoreQuery
from .empty import EmptyQuery
from .match_all import MatchAllQuery
from .term import TermQuery
from .wrapper import WrapperQuery


def build_default_registry() -> QueryRegistry:
    """
    Create a :class:`QueryRegistry` with every built-in query type.

    Returns:
        A new registry; callers may register additional types on it.
    """
    registry = QueryRegistry()
    registry.register_query(MatchAllQuery)
    registry.register_query(TermQuery)
    registry.register_query(BoolQuery)
    registry.register_query(ConstantScoreQuery)
    registry.register_query(WrapperQuery)
    # No clause name of its own, only reachable through "{}"
    registry.register(EmptyQuery.NAME, reader=EmptyQuery.read_from)
    return registry


__all__ = [
    "DEFAULT_BOOST",
    "AbstractQuery",
    "BoolQuery",
    "ConstantScoreQuery",
    "EmptyQuery",
    "MatchAllQuery",
    "TermQuery",
    "WrapperQuery",
    "build_default_registry",
]

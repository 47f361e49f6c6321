from .content import ContentBuilder, ContentParser, JsonContentParser, Token
from .context import (
    ParsedQuery,
    QueryParseContext,
    QueryRewriteContext,
    QueryShardContext,
)
from .exceptions import (
    DeprecatedFieldError,
    ParsingError,
    QueryDslError,
    QueryRewriteError,
    QueryShardError,
    StreamError,
    UnknownQueryError,
)
from .executable import (
    BooleanClause,
    BooleanMatch,
    Boosted,
    ConstantScore,
    ExecutableQuery,
    MatchAllDocs,
    MatchNoDocs,
    Occur,
    TermMatch,
)
from .parse_field import ParseField, ParseFieldMatcher
from .parser import parse_query
from .queries import (
    DEFAULT_BOOST,
    AbstractQuery,
    BoolQuery,
    ConstantScoreQuery,
    EmptyQuery,
    MatchAllQuery,
    TermQuery,
    WrapperQuery,
    build_default_registry,
)
from .registry import QueryEntry, QueryRegistry
from .rewrite import rewrite_query
from .settings import QueryParserSettings
from .stream import StreamInput, StreamOutput, query_from_bytes, query_to_bytes

__all__ = [
    # Query nodes
    "DEFAULT_BOOST",
    "AbstractQuery",
    "BoolQuery",
    "ConstantScoreQuery",
    "EmptyQuery",
    "MatchAllQuery",
    "TermQuery",
    "WrapperQuery",
    # Registry
    "QueryEntry",
    "QueryRegistry",
    "build_default_registry",
    # Parsing
    "ContentBuilder",
    "ContentParser",
    "JsonContentParser",
    "Token",
    "ParseField",
    "ParseFieldMatcher",
    "QueryParseContext",
    "QueryParserSettings",
    "parse_query",
    # Binary transport
    "StreamInput",
    "StreamOutput",
    "query_from_bytes",
    "query_to_bytes",
    # Rewrite / compile
    "ParsedQuery",
    "QueryRewriteContext",
    "QueryShardContext",
    "rewrite_query",
    "BooleanClause",
    "BooleanMatch",
    "Boosted",
    "ConstantScore",
    "ExecutableQuery",
    "MatchAllDocs",
    "MatchNoDocs",
    "Occur",
    "TermMatch",
    # Exceptions
    "QueryDslError",
    "ParsingError",
    "UnknownQueryError",
    "DeprecatedFieldError",
    "StreamError",
    "QueryRewriteError",
    "QueryShardError",
]

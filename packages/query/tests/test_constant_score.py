"""Tests for the constant_score query."""

from __future__ import annotations

import base64
import json
import logging

import pytest

from search_query_dsl import (
    AbstractQuery,
    BooleanClause,
    BooleanMatch,
    BoolQuery,
    Boosted,
    ConstantScore,
    ConstantScoreQuery,
    EmptyQuery,
    MatchAllDocs,
    MatchAllQuery,
    Occur,
    ParsingError,
    QueryRewriteContext,
    TermMatch,
    TermQuery,
    WrapperQuery,
    parse_query,
    query_from_bytes,
    query_to_bytes,
)


class FilterProbeQuery(AbstractQuery):
    """Records whether it was compiled in filter position."""

    NAME = "filter_probe"

    def __init__(self) -> None:
        super().__init__()
        self.seen_filter: bool | None = None

    def _do_content(self, builder):
        builder.start_object(self.NAME)
        builder.end_object()

    def _do_write_to(self, out):
        pass

    @classmethod
    def _do_read_from(cls, stream):
        return cls()

    def _do_to_query(self, context):
        self.seen_filter = context.is_filter
        return MatchAllDocs()

    def _do_equals(self, other):
        return True

    def _do_hash(self):
        return 0


def _term() -> TermQuery:
    return TermQuery("user", "kimchy")


def _wrapped_term() -> WrapperQuery:
    source = json.dumps({"term": {"user": "kimchy"}})
    return WrapperQuery(source)


# -- construction ------------------------------------------------------------


def test_construct_with_none_fails_fast():
    with pytest.raises(ValueError, match=r"inner clause \[filter\] cannot be null"):
        ConstantScoreQuery(None)  # type: ignore[arg-type]


def test_inner_query_accessor():
    inner = _term()
    query = ConstantScoreQuery(inner)
    assert query.inner_query is inner
    assert query.boost == 1.0
    assert query.query_name is None


def test_to_dict():
    query = ConstantScoreQuery(_term()).set_boost(2.5).set_query_name("label")
    assert query.to_dict() == {
        "constant_score": {
            "filter": {"term": {"user": {"value": "kimchy", "boost": 1.0}}},
            "boost": 2.5,
            "_name": "label",
        }
    }


# -- parsing -----------------------------------------------------------------


def test_parse_filter(registry):
    query = parse_query(
        {"constant_score": {"filter": {"term": {"user": "kimchy"}}}},
        registry=registry,
    )
    assert query == ConstantScoreQuery(_term())


def test_parse_query_alias(registry):
    query = parse_query(
        {"constant_score": {"query": {"term": {"user": "kimchy"}}}},
        registry=registry,
    )
    assert query == ConstantScoreQuery(_term())


def test_parse_applies_boost_and_name(registry):
    query = parse_query(
        {
            "constant_score": {
                "boost": 3.0,
                "filter": {"match_all": {}},
                "_name": "label",
            }
        },
        registry=registry,
    )
    assert isinstance(query, ConstantScoreQuery)
    assert query.boost == 3.0
    assert query.query_name == "label"
    assert query.inner_query == MatchAllQuery()


def test_parse_repeated_scalar_last_wins(registry):
    text = '{"constant_score": {"filter": {"match_all": {}}, "boost": 2, "boost": 4}}'
    query = parse_query(text, registry=registry)
    assert query.boost == 4.0


def test_parse_numeric_string_boost(registry):
    query = parse_query(
        {"constant_score": {"filter": {"match_all": {}}, "boost": "2.5"}},
        registry=registry,
    )
    assert query.boost == 2.5


def test_parse_rejects_both_aliases(registry):
    with pytest.raises(ParsingError, match="accepts only one 'filter' element"):
        parse_query(
            {
                "constant_score": {
                    "filter": {"match_all": {}},
                    "query": {"match_all": {}},
                }
            },
            registry=registry,
        )


def test_parse_rejects_repeated_filter_key(registry):
    text = (
        '{"constant_score": {"filter": {"match_all": {}}, '
        '"filter": {"match_all": {}}}}'
    )
    with pytest.raises(ParsingError, match="accepts only one"):
        parse_query(text, registry=registry)


def test_parse_requires_inner(registry):
    with pytest.raises(ParsingError, match="requires a 'filter' element"):
        parse_query({"constant_score": {}}, registry=registry)


def test_parse_requires_inner_with_only_metadata(registry):
    with pytest.raises(ParsingError, match="requires a 'filter' element"):
        parse_query({"constant_score": {"boost": 2.0}}, registry=registry)


def test_parse_unknown_scalar_field(registry):
    with pytest.raises(ParsingError) as exc_info:
        parse_query(
            {"constant_score": {"filter": {"match_all": {}}, "bogus": 1}},
            registry=registry,
        )
    assert "[constant_score] query does not support [bogus]" in str(exc_info.value)
    assert exc_info.value.location == "<root>.constant_score.bogus"


def test_parse_unknown_object_field(registry):
    with pytest.raises(ParsingError, match=r"does not support \[bogus\]"):
        parse_query(
            {"constant_score": {"bogus": {"match_all": {}}}},
            registry=registry,
        )


def test_parse_rejects_array(registry):
    with pytest.raises(ParsingError, match=r"unexpected token \[START_ARRAY\]"):
        parse_query(
            {"constant_score": {"filter": [{"match_all": {}}]}},
            registry=registry,
        )


def test_parse_error_aborts_whole_request(registry):
    with pytest.raises(ParsingError):
        parse_query(
            {
                "bool": {
                    "must": [
                        {"match_all": {}},
                        {"constant_score": {"filter": {"match_all": {}}, "x": 1}},
                    ]
                }
            },
            registry=registry,
        )


def test_parse_empty_inner_clause(registry):
    query = parse_query({"constant_score": {"filter": {}}}, registry=registry)
    assert query == ConstantScoreQuery(EmptyQuery())


# -- deprecated fields -------------------------------------------------------


def test_deprecated_cache_setting_is_skipped(registry, caplog):
    with caplog.at_level(logging.WARNING, logger="search_query_dsl.deprecation"):
        query = parse_query(
            {"constant_score": {"filter": {"match_all": {}}, "_cache": True}},
            registry=registry,
        )
    assert query == ConstantScoreQuery(MatchAllQuery())
    assert "Deprecated field [_cache]" in caplog.text


def test_deprecated_alias_logs_warning(registry, caplog):
    with caplog.at_level(logging.WARNING, logger="search_query_dsl.deprecation"):
        parse_query(
            {"constant_score": {"query": {"match_all": {}}}}, registry=registry
        )
    assert "Deprecated field [query] used, expected [filter] instead" in caplog.text


def test_strict_rejects_deprecated_alias(registry, strict_settings):
    with pytest.raises(ParsingError, match=r"Deprecated field \[query\]"):
        parse_query(
            {"constant_score": {"query": {"match_all": {}}}},
            registry=registry,
            settings=strict_settings,
        )


def test_strict_rejects_deprecated_setting(registry, strict_settings):
    with pytest.raises(ParsingError, match=r"Deprecated field \[_cache\]"):
        parse_query(
            {"constant_score": {"filter": {"match_all": {}}, "_cache": True}},
            registry=registry,
            settings=strict_settings,
        )


# -- round trips -------------------------------------------------------------


@pytest.mark.parametrize("boost", [0.0, 1.0, 2.5])
@pytest.mark.parametrize("name", [None, "label"])
def test_content_round_trip(registry, boost, name):
    original = ConstantScoreQuery(_term()).set_boost(boost).set_query_name(name)
    parsed = parse_query(original.to_json(), registry=registry)
    assert parsed == original
    assert hash(parsed) == hash(original)


@pytest.mark.parametrize("boost", [0.0, 1.0, 2.5])
@pytest.mark.parametrize("name", [None, "label"])
def test_binary_round_trip(registry, boost, name):
    original = ConstantScoreQuery(_term()).set_boost(boost).set_query_name(name)
    decoded = query_from_bytes(query_to_bytes(original), registry)
    assert decoded == original
    assert decoded is not original


def test_binary_round_trip_nested(registry):
    inner = ConstantScoreQuery(BoolQuery().must(_term()).filter(EmptyQuery()))
    original = ConstantScoreQuery(inner.set_boost(0.5)).set_query_name("outer")
    assert query_from_bytes(query_to_bytes(original), registry) == original


# -- rewrite -----------------------------------------------------------------


def test_rewrite_returns_same_instance_when_inner_unchanged(registry):
    query = ConstantScoreQuery(_term()).set_boost(2.0)
    assert query.rewrite(QueryRewriteContext(registry)) is query


def test_rewrite_rebuilds_when_inner_changes(registry):
    wrapper = _wrapped_term()
    query = ConstantScoreQuery(wrapper).set_boost(2.5).set_query_name("label")

    rewritten = query.rewrite(QueryRewriteContext(registry))

    assert rewritten is not query
    assert isinstance(rewritten, ConstantScoreQuery)
    assert rewritten.inner_query == _term()
    assert rewritten.boost == 2.5
    assert rewritten.query_name == "label"
    # the original tree is untouched
    assert query.inner_query is wrapper


def test_rewrite_of_rewritten_is_fixed_point(registry):
    context = QueryRewriteContext(registry)
    once = ConstantScoreQuery(_wrapped_term()).rewrite(context)
    assert once.rewrite(context) is once


# -- compile -----------------------------------------------------------------


def test_compile_wraps_inner_filter(shard_context):
    query = ConstantScoreQuery(_term())
    assert query.to_query(shard_context) == ConstantScore(TermMatch("user", "kimchy"))


def test_compile_inner_in_filter_position(shard_context):
    probe = FilterProbeQuery()
    ConstantScoreQuery(probe).to_query(shard_context)
    assert probe.seen_filter is True
    assert shard_context.is_filter is False


def test_compile_absent_inner_is_absent(shard_context):
    assert ConstantScoreQuery(EmptyQuery()).to_query(shard_context) is None


def test_compile_absence_dropped_by_bool(shard_context):
    query = BoolQuery().must(ConstantScoreQuery(EmptyQuery())).must(_term())
    assert query.to_query(shard_context) == BooleanMatch(
        (BooleanClause(TermMatch("user", "kimchy"), Occur.MUST),)
    )


def test_compile_boost_applied_once(shard_context):
    query = ConstantScoreQuery(_term()).set_boost(2.0)
    assert query.to_query(shard_context) == Boosted(
        ConstantScore(TermMatch("user", "kimchy")), 2.0
    )


def test_compile_registers_named_query(shard_context):
    query = ConstantScoreQuery(_term()).set_query_name("label")
    compiled = query.to_query(shard_context)
    assert shard_context.copy_named_queries() == {"label": compiled}


def test_compile_through_shard_context_rewrites_first(shard_context):
    query = ConstantScoreQuery(_wrapped_term())
    parsed = shard_context.compile(query)
    assert parsed.query == ConstantScore(TermMatch("user", "kimchy"))


# -- identity ----------------------------------------------------------------


def test_equal_nodes_hash_equal():
    a = ConstantScoreQuery(_term()).set_boost(2.0).set_query_name("x")
    b = ConstantScoreQuery(_term()).set_boost(2.0).set_query_name("x")
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1


def test_different_inner_not_equal():
    assert ConstantScoreQuery(_term()) != ConstantScoreQuery(TermQuery("user", "bob"))


@pytest.mark.parametrize(
    "other",
    [
        ConstantScoreQuery(TermQuery("user", "kimchy")).set_boost(2.0),
        ConstantScoreQuery(TermQuery("user", "kimchy")).set_query_name("x"),
        TermQuery("user", "kimchy"),
        BoolQuery().filter(TermQuery("user", "kimchy")),
    ],
)
def test_not_equal_to_other_metadata_or_type(other):
    assert ConstantScoreQuery(_term()) != other


def test_wrapper_source_is_base64_in_content():
    wrapper = _wrapped_term()
    encoded = ConstantScoreQuery(wrapper).to_dict()["constant_score"]["filter"]
    assert base64.b64decode(encoded["wrapper"]["query"]) == wrapper.source

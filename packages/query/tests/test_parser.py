"""Tests for parse_query and the built-in clause parsers."""

from __future__ import annotations

import pytest

from search_query_dsl import (
    BoolQuery,
    EmptyQuery,
    MatchAllQuery,
    ParsingError,
    TermQuery,
    UnknownQueryError,
    WrapperQuery,
    parse_query,
)

# -- entry point -------------------------------------------------------------


def test_parse_from_json_text(registry):
    query = parse_query('{"match_all": {"boost": 2}}', registry=registry)
    assert query == MatchAllQuery().set_boost(2.0)


def test_parse_empty_object(registry):
    assert parse_query("{}", registry=registry) == EmptyQuery()


def test_parse_unknown_query_suggests(registry):
    with pytest.raises(UnknownQueryError) as exc_info:
        parse_query({"constant_scor": {}}, registry=registry)
    error = exc_info.value
    assert error.name == "constant_scor"
    assert "constant_score" in error.suggestions
    assert "No query registered for [constant_scor]" in str(error)
    assert error.to_dict()["error"] == "UNKNOWN_QUERY"


def test_empty_query_is_not_a_clause_name(registry):
    with pytest.raises(UnknownQueryError):
        parse_query({"empty_query": {}}, registry=registry)


def test_parse_top_level_not_object(registry):
    with pytest.raises(ParsingError, match="must start with start_object"):
        parse_query("[1, 2]", registry=registry)


def test_parse_clause_body_not_object(registry):
    with pytest.raises(ParsingError, match="no start_object after query name"):
        parse_query({"match_all": 1}, registry=registry)


def test_parse_two_clauses_in_one_object(registry):
    with pytest.raises(ParsingError, match=r"expected \[END_OBJECT\]"):
        parse_query({"match_all": {}, "term": {"a": 1}}, registry=registry)


def test_parse_invalid_json(registry):
    with pytest.raises(ParsingError, match="Invalid JSON"):
        parse_query("{", registry=registry)


# -- match_all ---------------------------------------------------------------


def test_match_all_with_name(registry):
    query = parse_query({"match_all": {"_name": "all"}}, registry=registry)
    assert query.query_name == "all"


def test_match_all_unknown_field(registry):
    with pytest.raises(ParsingError, match=r"\[match_all\] query does not support"):
        parse_query({"match_all": {"field": "x"}}, registry=registry)


# -- term --------------------------------------------------------------------


def test_term_short_form(registry):
    query = parse_query({"term": {"user": "kimchy"}}, registry=registry)
    assert query == TermQuery("user", "kimchy")


def test_term_long_form(registry):
    query = parse_query(
        {"term": {"age": {"value": 30, "boost": 2.0, "_name": "age"}}},
        registry=registry,
    )
    assert query == TermQuery("age", 30).set_boost(2.0).set_query_name("age")


def test_term_rejects_two_fields(registry):
    with pytest.raises(ParsingError, match="does not support different field names"):
        parse_query({"term": {"a": 1, "b": 2}}, registry=registry)


def test_term_requires_value(registry):
    with pytest.raises(ParsingError, match="requires a field and a value"):
        parse_query({"term": {"a": None}}, registry=registry)


def test_term_constructor_validation():
    with pytest.raises(ValueError, match="field name"):
        TermQuery("", "x")
    with pytest.raises(ValueError, match="value cannot be null"):
        TermQuery("a", None)


# -- bool --------------------------------------------------------------------


def test_bool_object_and_array_clauses(registry):
    query = parse_query(
        {
            "bool": {
                "must": {"term": {"user": "kimchy"}},
                "should": [{"term": {"tag": "a"}}, {"term": {"tag": "b"}}],
                "must_not": [],
                "filter": [{}],
                "minimum_should_match": "1",
            }
        },
        registry=registry,
    )
    expected = (
        BoolQuery()
        .must(TermQuery("user", "kimchy"))
        .should(TermQuery("tag", "a"))
        .should(TermQuery("tag", "b"))
        .filter(EmptyQuery())
        .set_minimum_should_match(1)
    )
    assert query == expected


def test_bool_camel_case_alias(registry):
    query = parse_query(
        {"bool": {"mustNot": {"match_all": {}}}},
        registry=registry,
    )
    assert isinstance(query, BoolQuery)
    assert query.must_not_clauses == [MatchAllQuery()]


def test_bool_unknown_clause_field(registry):
    with pytest.raises(ParsingError, match=r"\[bool\] query does not support \[maybe\]"):
        parse_query({"bool": {"maybe": {"match_all": {}}}}, registry=registry)


def test_bool_array_of_scalars(registry):
    with pytest.raises(ParsingError, match="unexpected token"):
        parse_query({"bool": {"must": [1]}}, registry=registry)


def test_bool_content_round_trip(registry):
    query = (
        BoolQuery()
        .filter(TermQuery("a", 1))
        .must_not(TermQuery("b", True))
        .set_boost(0.5)
    )
    assert parse_query(query.to_json(), registry=registry) == query


# -- wrapper -----------------------------------------------------------------


def test_wrapper_content_round_trip(registry):
    query = WrapperQuery('{"term": {"user": "kimchy"}}').set_boost(2.0)
    assert parse_query(query.to_dict(), registry=registry) == query


def test_wrapper_requires_query_field(registry):
    with pytest.raises(ParsingError, match="query text missing"):
        parse_query({"wrapper": {"boost": 2.0}}, registry=registry)


def test_wrapper_rejects_unknown_field(registry):
    with pytest.raises(ParsingError, match=r"\[wrapper\] query does not support"):
        parse_query({"wrapper": {"source": "e30="}}, registry=registry)


def test_wrapper_rejects_object_value(registry):
    with pytest.raises(ParsingError, match="unexpected token"):
        parse_query({"wrapper": {"query": {"match_all": {}}}}, registry=registry)


# -- malformed input ---------------------------------------------------------


def test_parse_bytes_not_utf8(registry):
    source = b'{"constant_score": {"filter": {"term": {"u": "\xff"}}}}'
    with pytest.raises(ParsingError, match="Invalid JSON"):
        parse_query(source, registry=registry)


def test_null_name_is_unset(registry):
    query = parse_query(
        {"constant_score": {"filter": {"match_all": {}}, "_name": None}},
        registry=registry,
    )
    assert query.query_name is None


def test_bool_negative_minimum_should_match(registry):
    query = parse_query(
        {"bool": {"should": [{"term": {"a": 1}}], "minimum_should_match": -1}},
        registry=registry,
    )
    assert query.minimum_should_match == -1


def test_bool_minimum_should_match_out_of_range(registry):
    with pytest.raises(ParsingError, match="out of range"):
        parse_query(
            {"bool": {"minimum_should_match": 2**31}},
            registry=registry,
        )

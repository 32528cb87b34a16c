"""Tests for JSON fixture extraction."""

import pytest

from blot.exceptions import FixtureSyntaxError
from blot.pipeline.fixtures import extract_fixtures, iter_fixture_candidates


def test_fixtures_in_order_of_appearance():
    text = 'Hello {"a":1} World {"b":[1,2]}'
    assert extract_fixtures(text) == [{"a": 1}, {"b": [1, 2]}]


def test_multiline_and_nested_objects_are_single_fixtures():
    text = (
        "+ Response 200\n\n"
        "        {\n"
        '          "user": {"id": 1, "tags": [{"k": "v"}]}\n'
        "        }\n"
        "\n"
        'then {"second": true}\n'
    )
    assert extract_fixtures(text) == [
        {"user": {"id": 1, "tags": [{"k": "v"}]}},
        {"second": True},
    ]


def test_braces_inside_strings_ignored():
    text = 'x {"open": "{", "close": "}", "esc": "a\\"}b"} y'
    assert extract_fixtures(text) == [{"open": "{", "close": "}", "esc": 'a"}b'}]


def test_no_candidates_yields_empty_list():
    assert extract_fixtures("# Plain markdown\n\nNo data here.") == []


def test_invalid_candidate_rejects_and_names_fragment():
    with pytest.raises(FixtureSyntaxError) as excinfo:
        extract_fixtures("text {not json} more")
    err = excinfo.value
    assert "{not json}" in err.message
    assert err.fragment == "{not json}"
    assert err.context["line"] == 1
    assert err.context["column"] == 6


def test_first_invalid_candidate_aborts_without_partial_result():
    text = '{"ok": 1}\n\n{bad}\n\n{"later": 2}'
    with pytest.raises(FixtureSyntaxError) as excinfo:
        extract_fixtures(text, source="docs/api.apib")
    assert excinfo.value.context["line"] == 3
    assert "docs/api.apib" in excinfo.value.message


def test_non_standard_constants_rejected():
    with pytest.raises(FixtureSyntaxError):
        extract_fixtures('{"value": NaN}')


def test_unterminated_candidate_rejected():
    with pytest.raises(FixtureSyntaxError, match="unterminated"):
        extract_fixtures('start {"a": {"b": 1}')


def test_stray_closing_brace_ignored():
    assert extract_fixtures('} {"a": 1}') == [{"a": 1}]


def test_candidates_report_offsets():
    text = 'ab {"x": 1} cd {}'
    assert list(iter_fixture_candidates(text)) == [(3, '{"x": 1}'), (15, "{}")]

"""Tests for the structural parser and the default outline grammar."""

import pytest

from blot.exceptions import GrammarError, ValidationError
from blot.pipeline.grammar import GrammarSyntaxError, OutlineGrammar
from blot.pipeline.parser import parse

BLUEPRINT = """FORMAT: 1A
HOST: https://api.example.com

# Notes API

Notes API description.

# Group Notes

Notes related resources.

## Note Collection [/notes]

### List Notes [GET]

+ Response 200 (application/json)

        [{"id": 1, "title": "Jogging"}]

### Create a Note [POST]

+ Request (application/json)

    + Headers

            X-Trace: abc

    + Body

            {"title": "Buy cheese"}

+ Response 201 (application/json)

        {"id": 2, "title": "Buy cheese"}

## Note [GET /notes/one]

+ Response 200

        {"id": 1}
"""


def test_outline_grammar_builds_ast():
    ast = OutlineGrammar().parse(BLUEPRINT)
    assert ast["metadata"] == [
        {"name": "FORMAT", "value": "1A"},
        {"name": "HOST", "value": "https://api.example.com"},
    ]
    assert ast["name"] == "Notes API"
    assert ast["description"] == "Notes API description."
    group = ast["resourceGroups"][0]
    assert group["name"] == "Notes"
    assert group["description"] == "Notes related resources."
    collection, single = group["resources"]
    assert collection["uriTemplate"] == "/notes"
    listing, create = collection["actions"]
    assert listing["method"] == "GET"
    assert listing["examples"][0]["responses"][0]["body"] == (
        '[{"id": 1, "title": "Jogging"}]'
    )
    example = create["examples"][0]
    request = example["requests"][0]
    assert request["headers"] == [
        {"name": "Content-Type", "value": "application/json"},
        {"name": "X-Trace", "value": "abc"},
    ]
    assert request["body"] == '{"title": "Buy cheese"}'
    assert example["responses"][0]["name"] == "201"
    assert single["name"] == "Note"
    assert single["actions"][0]["method"] == "GET"
    assert single["uriTemplate"] == "/notes/one"


def test_resources_without_group_go_to_anonymous_group():
    ast = OutlineGrammar().parse("# API\n\n## Items [/items]\n")
    assert ast["resourceGroups"][0]["name"] == ""
    assert ast["resourceGroups"][0]["resources"][0]["uriTemplate"] == "/items"


@pytest.mark.parametrize(
    "text, fragment",
    [
        ("# API\n\n### Orphan [GET]\n", "not inside a resource"),
        ("# API\n## R [/r]\n### A [FETCH]\n", "unknown HTTP method"),
    ],
)
def test_outline_grammar_errors(text, fragment):
    with pytest.raises(GrammarSyntaxError, match=fragment):
        OutlineGrammar().parse(text)


@pytest.mark.asyncio
async def test_parse_delegates_to_default_engine():
    ast = await parse(BLUEPRINT)
    assert ast["name"] == "Notes API"


@pytest.mark.asyncio
async def test_parse_rejects_empty_input():
    with pytest.raises(ValidationError):
        await parse("")


@pytest.mark.asyncio
async def test_parse_wraps_engine_errors():
    class Failing:
        def parse(self, text):
            raise GrammarSyntaxError("unexpected token", 4)

    with pytest.raises(GrammarError) as excinfo:
        await parse("# doc", engine=Failing())
    assert "unexpected token" in excinfo.value.message
    assert excinfo.value.context["line"] == 4


@pytest.mark.asyncio
async def test_parse_uses_injected_engine():
    class Echo:
        def parse(self, text):
            return {"text": text}

    assert await parse("abc", engine=Echo()) == {"text": "abc"}


@pytest.mark.parametrize(
    "text, owner",
    [
        ("# API\n\n- Request IDs are echoed in every reply.\n", "api"),
        ("# API\n\n+ Response 200\n", "api"),
        ("# API\n## R [/r]\n### A [GET]\n\n- Response times are logged.\n", "action"),
        ("# API\n## R [/r]\n### A [GET]\n\n+ Response ok\n", "action"),
        ("# API\n## R [/r]\n### A [GET]\n\n* Requests, in general, are cached.\n", "action"),
    ],
)
def test_prose_bullets_stay_in_descriptions(text, owner):
    ast = OutlineGrammar().parse(text)
    bullet = text.rstrip("\n").splitlines()[-1]
    if owner == "api":
        assert bullet in ast["description"]
    else:
        action = ast["resourceGroups"][0]["resources"][0]["actions"][0]
        assert action["examples"] == []
        assert bullet in action["description"]


def test_named_request_and_bare_response_keywords():
    text = (
        "# API\n## R [/r]\n### A [POST]\n\n"
        "+ Request Create Note (application/json)\n\n        {}\n\n"
        "+ Response\n"
    )
    example = OutlineGrammar().parse(text)["resourceGroups"][0]["resources"][0]["actions"][0]["examples"][0]
    assert example["requests"][0]["name"] == "Create Note"
    assert example["requests"][0]["headers"] == [
        {"name": "Content-Type", "value": "application/json"}
    ]
    assert example["requests"][0]["body"] == "{}"
    assert example["responses"][0]["name"] == "200"

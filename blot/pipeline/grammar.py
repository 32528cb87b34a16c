"""Default grammar engine: an outline parser for API Blueprint documents.

The structural parser delegates to a grammar engine through a one-method
protocol. This module ships the engine used when none is supplied. It reads
the blueprint outline (metadata, API name, resource groups, resources,
actions and their request/response payloads) into a plain-dict AST:

.. code-block:: text

    {"_version", "metadata", "name", "description",
     "resourceGroups": [{"name", "description",
        "resources": [{"name", "uriTemplate", "description",
            "actions": [{"name", "method", "description",
                "examples": [{"requests": [...], "responses": [...]}]}]}]}]}

Payloads are ``{"name", "headers": [{"name", "value"}], "body"}``. Anything
that is not outline structure is kept as markdown in the nearest
``description``.
"""

from __future__ import annotations

import re
import textwrap
from typing import Any, Protocol

from blot.config import AST_VERSION, HTTP_METHODS

_HEADING = re.compile(r"^(?P<level>#{1,6})\s+(?P<text>.*?)\s*#*\s*$")
_BRACKETED = re.compile(r"^(?P<name>.*?)\s*\[(?P<spec>[^\]]+)\]\s*$")
_METADATA = re.compile(r"^(?P<name>[A-Za-z][\w-]*):\s*(?P<value>.*)$")
_REQUEST = re.compile(
    r"^(?P<indent>\s*)[+*-]\s+(?P<kind>Request)(?:\s+(?P<name>[^.,;:!?()\n]*?))?"
    r"\s*(?:\((?P<media>[^)]*)\))?\s*$"
)
_RESPONSE = re.compile(
    r"^(?P<indent>\s*)[+*-]\s+(?P<kind>Response)(?:\s+(?P<name>\d{3}))?"
    r"\s*(?:\((?P<media>[^)]*)\))?\s*$"
)
_SUBSECTION = re.compile(
    r"^(?P<indent>\s*)[+*-]\s+(?P<kind>Headers|Body|Schema|Attributes)\b.*$"
)


class GrammarSyntaxError(Exception):
    """Raised by a grammar engine for text that breaks the grammar.

    Parameters
    ----------
    message : str
        Description of the problem.
    line : int | None, optional
        1-based line number where the problem was found.
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(message if line is None else f"line {line}: {message}")
        self.message = message
        self.line = line


class GrammarEngine(Protocol):
    """Turn document text into a structured AST."""

    def parse(self, text: str) -> dict[str, Any]:
        ...


def _new_group(name: str) -> dict[str, Any]:
    return {"name": name, "description": "", "resources": []}


def _new_resource(name: str, uri: str) -> dict[str, Any]:
    return {"name": name, "uriTemplate": uri, "description": "", "actions": []}


def _new_action(name: str, method: str) -> dict[str, Any]:
    return {"name": name, "method": method, "description": "", "examples": []}


def _parse_headers(lines: list[str]) -> list[dict[str, str]]:
    headers = []
    for line in lines:
        name, sep, value = line.strip().partition(":")
        if sep and name:
            headers.append({"name": name.strip(), "value": value.strip()})
    return headers


def _dedent_block(lines: list[str]) -> str:
    return textwrap.dedent("\n".join(lines)).strip("\n")


class _OutlineParser:
    """Single-use parser state for one document."""

    def parse(self, text: str) -> dict[str, Any]:
        lines = text.splitlines()
        ast: dict[str, Any] = {
            "_version": AST_VERSION,
            "metadata": [],
            "name": "",
            "description": "",
            "resourceGroups": [],
        }
        index = self._parse_metadata(lines, ast)
        self._group: dict[str, Any] | None = None
        self._resource: dict[str, Any] | None = None
        self._action: dict[str, Any] | None = None
        self._ast = ast
        self._named = False
        descriptions: dict[int, list[str]] = {}
        owners: dict[int, dict[str, Any]] = {}

        def describe(line: str) -> None:
            owner = self._action or self._resource or self._group or ast
            owners[id(owner)] = owner
            descriptions.setdefault(id(owner), []).append(line)

        while index < len(lines):
            line = lines[index]
            number = index + 1
            heading = _HEADING.match(line)
            if heading:
                if not self._heading(heading.group("text"), len(heading.group("level")), number):
                    describe(line)
                index += 1
                continue
            payload = (
                (_REQUEST.match(line) or _RESPONSE.match(line))
                if self._action is not None
                else None
            )
            if payload:
                index = self._payload(lines, index, payload)
                continue
            describe(line)
            index += 1

        for key, collected in descriptions.items():
            owners[key]["description"] = "\n".join(collected).strip()
        return ast

    @staticmethod
    def _parse_metadata(lines: list[str], ast: dict[str, Any]) -> int:
        index = 0
        while index < len(lines):
            match = _METADATA.match(lines[index])
            if not match:
                break
            ast["metadata"].append(
                {"name": match.group("name"), "value": match.group("value").strip()}
            )
            index += 1
        return index

    def _ensure_group(self) -> dict[str, Any]:
        if self._group is None:
            self._group = _new_group("")
            self._ast["resourceGroups"].append(self._group)
        return self._group

    def _open_resource(self, name: str, uri: str) -> dict[str, Any]:
        resource = _new_resource(name, uri)
        self._ensure_group()["resources"].append(resource)
        self._resource = resource
        self._action = None
        return resource

    def _open_action(self, name: str, method: str, number: int) -> None:
        if method not in HTTP_METHODS:
            raise GrammarSyntaxError(f"unknown HTTP method {method!r}", number)
        if self._resource is None:
            raise GrammarSyntaxError(
                f"action {name or method!r} is not inside a resource", number
            )
        action = _new_action(name, method)
        self._resource["actions"].append(action)
        self._action = action

    def _heading(self, text: str, level: int, number: int) -> bool:
        """Apply a heading; return False when it is plain description markup."""
        if text.startswith("Group ") or text == "Group":
            self._group = _new_group(text[len("Group") :].strip())
            self._ast["resourceGroups"].append(self._group)
            self._resource = None
            self._action = None
            return True
        bracketed = _BRACKETED.match(text)
        name, spec = (
            (bracketed.group("name").strip(), bracketed.group("spec").strip())
            if bracketed
            else ("", text.strip())
        )
        parts = spec.split()
        if parts and parts[0].startswith("/") and len(parts) == 1:
            self._open_resource(name, parts[0])
            return True
        if parts and re.fullmatch(r"[A-Z]+", parts[0]) and (bracketed or len(parts) <= 2):
            if len(parts) == 2 and parts[1].startswith("/"):
                if parts[0] not in HTTP_METHODS:
                    raise GrammarSyntaxError(f"unknown HTTP method {parts[0]!r}", number)
                self._open_resource(name, parts[1])
                self._open_action(name, parts[0], number)
                return True
            if len(parts) == 1 and (bracketed or parts[0] in HTTP_METHODS):
                self._open_action(name, parts[0], number)
                return True
        if level == 1 and not self._named and self._group is None:
            self._ast["name"] = text.strip()
            self._named = True
            return True
        return False

    def _payload(self, lines: list[str], index: int, match: re.Match[str]) -> int:
        kind = match.group("kind")
        indent = len(match.group("indent"))
        name = (match.group("name") or "").strip()
        media = (match.group("media") or "").strip()
        if kind == "Response" and not name:
            name = "200"

        body_lines: list[str] = []
        index += 1
        while index < len(lines):
            line = lines[index]
            if line.strip() and len(line) - len(line.lstrip()) <= indent:
                break
            body_lines.append(line)
            index += 1

        headers: list[dict[str, str]] = []
        if media:
            headers.append({"name": "Content-Type", "value": media})
        sections: dict[str, list[str]] = {}
        current: str | None = None
        loose: list[str] = []
        for line in body_lines:
            sub = _SUBSECTION.match(line)
            if sub and len(sub.group("indent")) > indent:
                current = sub.group("kind")
                sections.setdefault(current, [])
                continue
            (sections[current] if current else loose).append(line)
        if sections:
            headers.extend(_parse_headers(sections.get("Headers", [])))
            body = _dedent_block(sections.get("Body", []))
        else:
            body = _dedent_block(loose)

        payload = {"name": name, "headers": headers, "body": body}
        examples = self._action["examples"]
        if kind == "Request":
            if not examples or examples[-1]["responses"]:
                examples.append({"requests": [], "responses": []})
            examples[-1]["requests"].append(payload)
        else:
            if not examples:
                examples.append({"requests": [], "responses": []})
            examples[-1]["responses"].append(payload)
        return index


class OutlineGrammar:
    """Parse the API Blueprint outline into a plain-dict AST.

    Stateless between calls, so one instance may serve concurrent parses.

    Examples
    --------
    >>> ast = OutlineGrammar().parse("FORMAT: 1A\\n\\n# Demo\\n\\n## Notes [/notes]\\n")
    >>> ast["name"], ast["resourceGroups"][0]["resources"][0]["uriTemplate"]
    ('Demo', '/notes')
    """

    def parse(self, text: str) -> dict[str, Any]:
        return _OutlineParser().parse(text)

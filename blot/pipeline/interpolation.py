"""Fixture interpolation: replace placeholder tokens with generated values.

Placeholders use the micro-syntax ``|~provider|`` or
``|~provider:key=value,key=value|``, where ``provider`` names a method on the
generation engine. The default engine wraps Faker, so ``|~email|``,
``|~uuid4|`` or ``|~pyint:min_value=1,max_value=9|`` produce sample data.

Interpolation runs after transclusion and before fixture extraction, so that
placeholders inside included files are generated and the extractor only ever
sees literal JSON.

The engine is an explicit value: pass ``generator=`` to :func:`interpolate`
(and to :class:`blot.blueprint.Blueprint`). A process-wide default exists for
convenience; it is consulted only when no generator is given and is not
synchronized, so concurrent replacement is last-write-wins.

Examples
--------
>>> gen = FakerGenerator(seed=7)
>>> text = interpolate('{"id": |~pyint:min_value=5,max_value=5|}', generator=gen)
>>> text
'{"id": 5}'
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Protocol

from faker import Faker

from blot.config import DEFAULT_FAKER_LOCALE, PLACEHOLDER_PATTERN
from blot.exceptions import InterpolationError

logger = logging.getLogger(__name__)


class FixtureGenerator(Protocol):
    """Engine that materializes placeholder tokens in a text."""

    def process(self, text: str) -> str:
        ...


def _split_arguments(raw: str) -> list[str]:
    """Split on commas outside brackets, braces and quoted strings."""
    items: list[str] = []
    depth = 0
    quoted = escaped = False
    start = 0
    for index, char in enumerate(raw):
        if quoted:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                quoted = False
        elif char == '"':
            quoted = True
        elif char in "[{":
            depth += 1
        elif char in "]}":
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0:
            items.append(raw[start:index])
            start = index + 1
    items.append(raw[start:])
    return items


def parse_arguments(raw: str | None) -> dict[str, Any]:
    """Parse ``key=value`` placeholder arguments.

    Values are decoded as JSON literals when possible (``5``, ``true``,
    ``"x"``, ``[1,2]``) and kept as plain strings otherwise.

    Raises
    ------
    InterpolationError
        If an argument is not of the form ``key=value``.
    """
    if not raw or not raw.strip():
        return {}
    arguments: dict[str, Any] = {}
    for item in _split_arguments(raw):
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key.isidentifier():
            raise InterpolationError(
                f"Invalid placeholder argument {item.strip()!r}",
                context={"arguments": raw},
            )
        value = value.strip()
        try:
            arguments[key] = json.loads(value)
        except json.JSONDecodeError:
            arguments[key] = value
    return arguments


def render_value(value: Any) -> str:
    """Serialize a generated value as text.

    Strings are inserted verbatim, JSON-native values as JSON text, and any
    other object (dates, UUIDs, decimals) through ``str``.
    """
    if isinstance(value, str):
        return value
    if value is None or isinstance(value, (bool, int, float, list, dict)):
        return json.dumps(value, default=str, ensure_ascii=False)
    return str(value)


class FakerGenerator:
    """Placeholder engine backed by Faker.

    Parameters
    ----------
    locale : str, optional
        Faker locale.
    seed : int | None, optional
        Instance-level seed for reproducible output; unseeded when None.

    Examples
    --------
    >>> gen = FakerGenerator(seed=1)
    >>> gen.process("no placeholders")
    'no placeholders'
    """

    def __init__(self, locale: str = DEFAULT_FAKER_LOCALE, seed: int | None = None) -> None:
        self.locale = locale
        self.seed = seed
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)

    def generate(self, provider: str, arguments: dict[str, Any]) -> Any:
        """Call the Faker provider named ``provider``.

        Raises
        ------
        InterpolationError
            If the provider is unknown or rejects the arguments.
        """
        if provider.startswith("_"):
            raise InterpolationError(
                f"Unknown placeholder provider {provider!r}",
                context={"provider": provider},
            )
        try:
            method = getattr(self.fake, provider)
        except AttributeError as exc:
            raise InterpolationError(
                f"Unknown placeholder provider {provider!r}",
                context={"provider": provider},
            ) from exc
        if not callable(method):
            raise InterpolationError(
                f"Placeholder provider {provider!r} is not callable",
                context={"provider": provider},
            )
        try:
            return method(**arguments)
        except (TypeError, ValueError) as exc:
            raise InterpolationError(
                f"Placeholder provider {provider!r} failed: {exc}",
                context={"provider": provider, "arguments": arguments},
            ) from exc

    def process(self, text: str) -> str:
        def replace(match: re.Match[str]) -> str:
            arguments = parse_arguments(match.group("args"))
            return render_value(self.generate(match.group("provider"), arguments))

        return PLACEHOLDER_PATTERN.sub(replace, text)

    def __repr__(self) -> str:
        return f"FakerGenerator(locale={self.locale!r}, seed={self.seed!r})"


_default_generator: FixtureGenerator | None = None


def get_default_generator() -> FixtureGenerator:
    """Return the process-wide default generator, creating it on first use."""
    global _default_generator
    if _default_generator is None:
        _default_generator = FakerGenerator()
    return _default_generator


def set_default_generator(generator: FixtureGenerator) -> None:
    """Replace the process-wide default generator."""
    global _default_generator
    _default_generator = generator


def reset_default_generator() -> None:
    """Drop the process-wide default so the next use builds a fresh one."""
    global _default_generator
    _default_generator = None


def interpolate(markdown: str, generator: FixtureGenerator | None = None) -> str:
    """Replace every placeholder in ``markdown`` with a generated value.

    Parameters
    ----------
    markdown : str
        Transcluded document text.
    generator : FixtureGenerator | None, optional
        Engine to use; the process-wide default when omitted.

    Returns
    -------
    str
        Text with all placeholders materialized. Text without placeholders is
        returned unchanged.

    Raises
    ------
    InterpolationError
        If the engine cannot generate a placeholder.
    """
    engine = generator if generator is not None else get_default_generator()
    return engine.process(markdown)

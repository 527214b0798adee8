# === NAVMAP v1 ===
# {
#   "module": "DocsToApi.EventFunctions.examples",
#   "purpose": "Recover return types, argument names and staticness from code samples.",
#   "sections": [
#     {
#       "id": "dialect",
#       "name": "Dialect",
#       "anchor": "class-dialect",
#       "kind": "class"
#     },
#     {
#       "id": "examplesignature",
#       "name": "ExampleSignature",
#       "anchor": "class-examplesignature",
#       "kind": "class"
#     },
#     {
#       "id": "normalize-example-text",
#       "name": "normalize_example_text",
#       "anchor": "function-normalize-example-text",
#       "kind": "function"
#     },
#     {
#       "id": "parse-example",
#       "name": "parse_example",
#       "anchor": "function-parse-example",
#       "kind": "function"
#     },
#     {
#       "id": "select-example",
#       "name": "select_example",
#       "anchor": "function-select-example",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""
Code-example heuristics.

Detail page headings frequently list argument types without names (for
instance ``OnCollisionExit2D(Collision2D)``), so the embedded usage sample is
mined for the missing pieces. Two sample dialects appear across releases:

``prototype``
    ``[static] function Name(arg : Type, ...) [: ReturnType] {``. Only the
    argument names are trusted; the declared types are too loose to keep.
``statically typed``
    ``[static] ReturnType Name(Type arg, ...)``. The trailing identifier of
    each argument is taken as its name.

Each dialect is a matcher returning an :class:`ExampleSignature` or ``None``;
:func:`parse_example` tries them in order and never raises on malformed input.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from .nodes import DocNode
from .typenames import TypeName, resolve_type

__all__ = [
    "Dialect",
    "EXAMPLE_SELECTORS",
    "ExampleSignature",
    "normalize_example_text",
    "parse_example",
    "select_example",
]

_BLANKS = re.compile(r"\s+")
_PUNCTUATION_SPACING = re.compile(r"\s*(\W)\s*")
_ARRAY_FIXUP = re.compile(r"(\[\])(\w)")
_TRAILING_IDENTIFIER = re.compile(r"^.*?\W(\w+)$")

NO_EXAMPLE_MARKER = "no example available"

# Most structurally informative sample first.
EXAMPLE_SELECTORS: Tuple[str, ...] = (
    "div.subsection > pre.codeExampleCS",
    "div.subsection > pre.codeExampleJS",
    "div.subsection > pre.codeExampleRaw",
)


class Dialect(str, Enum):
    """Code sample syntaxes understood by the heuristics."""

    PROTOTYPE = "prototype"
    STATICALLY_TYPED = "statically_typed"


@dataclass(frozen=True, slots=True)
class ExampleSignature:
    """Signature facts recovered from one code sample."""

    dialect: Dialect
    return_type: TypeName
    parameter_names: Tuple[str, ...]
    is_static: bool


def normalize_example_text(text: str) -> str:
    """Collapse whitespace, tighten punctuation and split ``[]`` from identifiers."""

    text = _BLANKS.sub(" ", text)
    text = _PUNCTUATION_SPACING.sub(r"\1", text)
    return _ARRAY_FIXUP.sub(r"\1 \2", text)


def _split_parameters(parameters: str) -> Tuple[str, ...]:
    if not parameters.strip():
        return ()
    return tuple(parameters.split(","))


def _match_prototype(name: str, text: str, namespace: str) -> Optional[ExampleSignature]:
    pattern = re.compile(
        r"(?:\W|^)(?P<static>static\s+)?function "
        + re.escape(name)
        + r"\((?P<parameters>[^)]*)\)(?::(?P<return_type>\w+\W*))?\{"
    )
    match = pattern.search(text)
    if match is None:
        return None
    names = tuple(
        part.split(":")[0].strip() for part in _split_parameters(match.group("parameters"))
    )
    return ExampleSignature(
        dialect=Dialect.PROTOTYPE,
        return_type=resolve_type(match.group("return_type") or "", namespace),
        parameter_names=names,
        is_static=match.group("static") is not None,
    )


def _match_statically_typed(name: str, text: str, namespace: str) -> Optional[ExampleSignature]:
    pattern = re.compile(
        r"(?:\W|^)(?P<static>static\s+)?(?P<return_type>\w+\W*) "
        + re.escape(name)
        + r"\((?P<parameters>[^)]*)\)"
    )
    match = pattern.search(text)
    if match is None:
        return None
    names = tuple(
        _TRAILING_IDENTIFIER.sub(r"\1", part.split("=")[0].strip())
        for part in _split_parameters(match.group("parameters"))
    )
    return ExampleSignature(
        dialect=Dialect.STATICALLY_TYPED,
        return_type=resolve_type(match.group("return_type"), namespace),
        parameter_names=names,
        is_static=match.group("static") is not None,
    )


_DIALECT_MATCHERS: Tuple[Callable[[str, str, str], Optional[ExampleSignature]], ...] = (
    _match_prototype,
    _match_statically_typed,
)


def parse_example(name: str, text: str, namespace: str = "") -> Optional[ExampleSignature]:
    """Return the signature of ``name`` declared in example ``text``, if any dialect matches.

    Args:
        name: Callback name to look for.
        text: Raw example text as rendered on the page.
        namespace: Namespace used to qualify bare return types.

    Returns:
        The first dialect match, or ``None`` when no dialect recognises the sample.
    """

    if not name:
        return None
    normalized = normalize_example_text(text)
    for matcher in _DIALECT_MATCHERS:
        result = matcher(name, normalized, namespace)
        if result is not None:
            return result
    return None


def select_example(details: DocNode) -> Optional[DocNode]:
    """Return the first usable code sample of ``details`` in selector priority order."""

    for selector in EXAMPLE_SELECTORS:
        example = details.select_one(selector)
        if example is None:
            continue
        if example.text.startswith(NO_EXAMPLE_MARKER):
            continue
        return example
    return None

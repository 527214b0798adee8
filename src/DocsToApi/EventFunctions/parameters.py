"""Positional reconciliation of callback parameters.

Three sources describe a callback's parameters and they disagree often enough
that none can be trusted alone:

1. the detail page heading, which always lists the types but only sometimes
   the names (``Foo.OnTriggerEnter(Collider)``);
2. the code sample, whose names :mod:`.examples` recovers;
3. the "Parameters" table, which names and describes each argument.

Parameters are matched by position, never by name. Each source is applied as
an overlay on the list built from the heading, in that fixed order, so a later
source wins wherever it has a non-empty value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .typenames import TypeName, resolve_type

__all__ = [
    "Parameter",
    "ParameterRow",
    "argument_text",
    "build_parameters",
    "default_parameter",
    "overlay_example_names",
    "overlay_parameter_table",
    "resolve_parameters",
]

# ``[Namespace.]Type.Name(args)`` or ``[Namespace.]Type.Name trailing``.
SIGNATURE_PATTERN = re.compile(r"^(?:[\w.]*\.)?(\w+)(?:\((.*)\)|(.*))$")


@dataclass(slots=True)
class Parameter:
    """One positional callback parameter."""

    name: str
    type: TypeName
    description: str = ""


@dataclass(frozen=True, slots=True)
class ParameterRow:
    """One row of a detail page's "Parameters" table."""

    name: Optional[str] = None
    description: Optional[str] = None


def argument_text(signature: str) -> str:
    """Strip the qualifying prefix and callback name from ``signature``.

    >>> argument_text("NS.Foo.Bar(int, string)")
    'int, string'
    """

    signature = signature.strip()
    match = SIGNATURE_PATTERN.match(signature)
    if match is None:
        return signature
    return (match.group(2) or "") + (match.group(3) or "")


def default_parameter(token: str, index: int, total: int, namespace: str) -> Parameter:
    """Build the heading-derived parameter at ``index``.

    A ``"Type name"`` token carries its own name; a type-only token is named
    ``arg`` (single parameter) or ``argN`` (1-based position).
    """

    token = token.strip()
    head, _, tail = token.rpartition(" ")
    if head and tail.isidentifier() and head.split()[-1] not in ("ref", "out"):
        return Parameter(name=tail, type=resolve_type(head, namespace))
    name = "arg" if total == 1 else f"arg{index + 1}"
    return Parameter(name=name, type=resolve_type(token, namespace))


def build_parameters(arguments: str, namespace: str = "") -> List[Parameter]:
    """Split a heading's argument text on commas into default parameters."""

    if not arguments.strip():
        return []
    tokens = [token.strip() for token in arguments.split(",")]
    total = len(tokens)
    return [default_parameter(token, i, total, namespace) for i, token in enumerate(tokens)]


def overlay_example_names(parameters: List[Parameter], names: Optional[Sequence[str]]) -> None:
    """Replace default names with example-derived ones, position by position."""

    if not names:
        return
    for parameter, name in zip(parameters, names):
        if name:
            parameter.name = name


def overlay_parameter_table(parameters: List[Parameter], rows: Optional[Sequence[ParameterRow]]) -> None:
    """Apply names and descriptions from the "Parameters" table, position by position."""

    if not rows:
        return
    for parameter, row in zip(parameters, rows):
        if row.name:
            parameter.name = row.name
        if row.description:
            parameter.description = row.description


def resolve_parameters(
    signature: str,
    *,
    namespace: str = "",
    example_names: Optional[Sequence[str]] = None,
    table_rows: Optional[Sequence[ParameterRow]] = None,
) -> List[Parameter]:
    """Return the reconciled parameter list for ``signature``.

    Precedence is heading defaults < example names < table names/descriptions.
    """

    parameters = build_parameters(argument_text(signature), namespace)
    overlay_example_names(parameters, example_names)
    overlay_parameter_table(parameters, table_rows)
    return parameters

"""Normalisation of type names found in signatures and code examples."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["TypeName", "VOID", "resolve_type"]

# Keywords of the statically-typed example dialect; kept verbatim.
KEYWORD_TYPES = frozenset(
    {
        "bool",
        "byte",
        "char",
        "decimal",
        "double",
        "float",
        "int",
        "long",
        "object",
        "sbyte",
        "short",
        "string",
        "uint",
        "ulong",
        "ushort",
        "void",
    }
)

# Prototype-dialect spellings of the same keywords.
PROTOTYPE_ALIASES = {
    "boolean": "bool",
    "Boolean": "bool",
    "String": "string",
    "Number": "float",
}

WELL_KNOWN_TYPES = {
    "IEnumerator": "System.Collections.IEnumerator",
}


@dataclass(frozen=True, slots=True)
class TypeName:
    """A resolved type reference."""

    name: str
    is_array: bool = False
    is_by_ref: bool = False

    def __str__(self) -> str:
        rendered = self.name + ("[]" if self.is_array else "")
        return f"ref {rendered}" if self.is_by_ref else rendered


VOID = TypeName("void")


def resolve_type(raw: str, namespace: str = "") -> TypeName:
    """Resolve ``raw`` into a :class:`TypeName`, qualifying bare names with ``namespace``.

    >>> str(resolve_type("Collision", "UnityEngine"))
    'UnityEngine.Collision'
    >>> str(resolve_type("int[]", "UnityEngine"))
    'int[]'
    """

    name = raw.strip()
    is_by_ref = False
    for prefix in ("ref ", "out "):
        if name.startswith(prefix):
            name = name[len(prefix):].strip()
            is_by_ref = True
    if name.endswith("&"):
        name = name[:-1].strip()
        is_by_ref = True

    is_array = False
    if name.endswith("[]"):
        name = name[:-2].strip()
        is_array = True

    if not name:
        return TypeName("void", is_array, is_by_ref)

    name = PROTOTYPE_ALIASES.get(name, name)
    if name in WELL_KNOWN_TYPES:
        name = WELL_KNOWN_TYPES[name]
    elif name not in KEYWORD_TYPES and "." not in name and namespace:
        name = f"{namespace}.{name}"
    return TypeName(name, is_array, is_by_ref)

# === NAVMAP v1 ===
# {
#   "module": "DocsToApi.EventFunctions.model",
#   "purpose": "Longitudinal registry of engine types and their event functions.",
#   "sections": [
#     {
#       "id": "eventfunctionobservation",
#       "name": "EventFunctionObservation",
#       "anchor": "class-eventfunctionobservation",
#       "kind": "class"
#     },
#     {
#       "id": "shape",
#       "name": "Shape",
#       "anchor": "class-shape",
#       "kind": "class"
#     },
#     {
#       "id": "same-shape",
#       "name": "same_shape",
#       "anchor": "function-same-shape",
#       "kind": "function"
#     },
#     {
#       "id": "eventfunction",
#       "name": "EventFunction",
#       "anchor": "class-eventfunction",
#       "kind": "class"
#     },
#     {
#       "id": "apitype",
#       "name": "ApiType",
#       "anchor": "class-apitype",
#       "kind": "class"
#     },
#     {
#       "id": "apicatalog",
#       "name": "ApiCatalog",
#       "anchor": "class-apicatalog",
#       "kind": "class"
#     }
#   ]
# }
# === /NAVMAP ===

"""
Versioned model of engine types and their event functions.

Pages are scanned one release at a time, oldest first. Every observation of an
event function is merged into the :class:`EventFunction` owned by its type,
which keeps an ordered list of :class:`Shape` snapshots. Merging follows a two
transition state machine:

``EXTEND``
    the observation has the same signature as the newest shape, whose upper
    version bound moves to the observed version;
``BRANCH``
    the signature differs, so the newest shape stays closed at its last
    observed version and a new shape opens at the observed version.

Descriptions and documentation paths are not part of a signature. The
resulting shapes never overlap and appear in ascending version order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union

from packaging.version import InvalidVersion, Version

from .errors import VersionOrderError
from .logging import get_logger, log_event
from .parameters import Parameter
from .typenames import VOID, TypeName

__all__ = [
    "ApiCatalog",
    "ApiType",
    "DEFAULT_TYPE_KIND",
    "EventFunction",
    "EventFunctionObservation",
    "MergeResult",
    "Shape",
    "coerce_version",
    "same_shape",
    "signature_key",
]

LOGGER = get_logger(__name__, base_fields={"stage": "merge"})

DEFAULT_TYPE_KIND = "class"

VersionLike = Union[str, Version]


def coerce_version(value: VersionLike) -> Version:
    """Return ``value`` as a :class:`~packaging.version.Version`."""

    if isinstance(value, Version):
        return value
    try:
        return Version(str(value).strip())
    except InvalidVersion as exc:
        raise ValueError(f"Invalid documentation version: {value!r}") from exc


@dataclass(slots=True)
class EventFunctionObservation:
    """One event function as described by one detail page of one release."""

    name: str
    version: Version
    is_static: bool = False
    is_coroutine: bool = False
    return_type: TypeName = VOID
    parameters: List[Parameter] = field(default_factory=list)
    description: str = ""
    doc_path: str = ""


@dataclass(slots=True)
class Shape:
    """A signature snapshot valid over an inclusive version range."""

    min_version: Version
    max_version: Version
    is_static: bool
    is_coroutine: bool
    return_type: TypeName
    parameters: Tuple[Parameter, ...]
    description: str = ""
    doc_path: str = ""

    @classmethod
    def open(cls, observation: EventFunctionObservation, version: Version) -> "Shape":
        return cls(
            min_version=version,
            max_version=version,
            is_static=observation.is_static,
            is_coroutine=observation.is_coroutine,
            return_type=observation.return_type,
            parameters=tuple(
                Parameter(p.name, p.type, p.description) for p in observation.parameters
            ),
            description=observation.description,
            doc_path=observation.doc_path,
        )


SignatureKey = Tuple[bool, bool, TypeName, Tuple[Tuple[str, TypeName], ...]]


def signature_key(item: Union[Shape, EventFunctionObservation]) -> SignatureKey:
    """Return the fields that identify a shape; descriptions are excluded."""

    return (
        item.is_static,
        item.is_coroutine,
        item.return_type,
        tuple((p.name, p.type) for p in item.parameters),
    )


def same_shape(shape: Shape, observation: EventFunctionObservation) -> bool:
    """Return ``True`` when ``observation`` would not change ``shape``'s signature."""

    return signature_key(shape) == signature_key(observation)


class MergeResult(str, Enum):
    """Outcome of merging one observation into an event function."""

    OPEN = "open"
    EXTEND = "extend"
    BRANCH = "branch"
    CONFLICT = "conflict"


@dataclass(slots=True)
class EventFunction:
    """The version history of one event function name within one type."""

    name: str
    shapes: List[Shape] = field(default_factory=list)

    @property
    def latest(self) -> Optional[Shape]:
        return self.shapes[-1] if self.shapes else None

    def merge(self, observation: EventFunctionObservation, version: VersionLike) -> MergeResult:
        """Fold ``observation`` seen in ``version`` into the shape history."""

        version = coerce_version(version)
        latest = self.latest
        if latest is None:
            self.shapes.append(Shape.open(observation, version))
            return MergeResult.OPEN
        if version < latest.max_version:
            raise VersionOrderError(version, latest.max_version)

        if same_shape(latest, observation):
            if version > latest.max_version:
                latest.max_version = version
                latest.description = observation.description
                latest.doc_path = observation.doc_path
            return MergeResult.EXTEND

        if version == latest.max_version:
            # First observation of a release wins; ranges must not overlap.
            return MergeResult.CONFLICT

        self.shapes.append(Shape.open(observation, version))
        return MergeResult.BRANCH


@dataclass(slots=True)
class ApiType:
    """An engine type that declares at least one event function."""

    namespace: str
    name: str
    kind: str
    path: str
    min_version: Version
    max_version: Version
    _functions: Dict[str, EventFunction] = field(default_factory=dict, repr=False)

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name

    def get(self, name: str) -> Optional[EventFunction]:
        return self._functions.get(name)

    def __iter__(self) -> Iterator[EventFunction]:
        return iter(self._functions.values())

    def __len__(self) -> int:
        return len(self._functions)

    def merge_event_function(
        self, observation: Optional[EventFunctionObservation], version: Optional[VersionLike] = None
    ) -> Optional[MergeResult]:
        """Merge ``observation`` into the event function of the same name.

        ``None`` observations (rows the extractor had to skip) are ignored.
        ``version`` defaults to the version recorded on the observation.
        """

        if observation is None:
            return None
        version = coerce_version(version if version is not None else observation.version)
        function = self._functions.get(observation.name)
        if function is None:
            function = self._functions[observation.name] = EventFunction(observation.name)
        result = function.merge(observation, version)
        if version > self.max_version:
            self.max_version = version

        if result is MergeResult.BRANCH:
            log_event(
                LOGGER,
                "info",
                "Event function signature changed",
                type=self.qualified_name,
                function=observation.name,
                version=str(version),
                shapes=len(function.shapes),
            )
        elif result is MergeResult.CONFLICT:
            log_event(
                LOGGER,
                "warning",
                "Conflicting signature within one release ignored",
                type=self.qualified_name,
                function=observation.name,
                version=str(version),
                doc_path=observation.doc_path,
            )
        return result


class ApiCatalog:
    """Registry of every :class:`ApiType` seen during a version sweep."""

    def __init__(self) -> None:
        self._types: Dict[Tuple[str, str], ApiType] = {}
        self.min_version: Optional[Version] = None
        self.max_version: Optional[Version] = None

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[ApiType]:
        return iter(self.types)

    @property
    def types(self) -> List[ApiType]:
        """Types ordered by namespace and name."""

        return [self._types[key] for key in sorted(self._types)]

    def get_type(self, namespace: str, name: str) -> Optional[ApiType]:
        return self._types.get((namespace, name))

    def begin_version(self, version: VersionLike) -> Version:
        """Record that a sweep over ``version`` starts.

        Raises:
            VersionOrderError: if ``version`` precedes a version already merged.
        """

        version = coerce_version(version)
        if self.max_version is not None and version < self.max_version:
            raise VersionOrderError(version, self.max_version)
        if self.min_version is None:
            self.min_version = version
        self.max_version = version
        return version

    def add_type(
        self,
        namespace: str,
        name: str,
        kind: Optional[str],
        path: str,
        version: VersionLike,
    ) -> ApiType:
        """Return the type keyed by ``(namespace, name)``, creating it on first use.

        The kind and path of the earliest observation are kept. A missing kind
        falls back to ``"class"``.
        """

        version = coerce_version(version)
        key = (namespace, name)
        api_type = self._types.get(key)
        if api_type is None:
            api_type = ApiType(
                namespace=namespace,
                name=name,
                kind=kind or DEFAULT_TYPE_KIND,
                path=path,
                min_version=version,
                max_version=version,
            )
            self._types[key] = api_type
        elif version > api_type.max_version:
            api_type.max_version = version
        return api_type

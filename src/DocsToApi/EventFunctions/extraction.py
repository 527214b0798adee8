"""Extraction of event functions from rendered script reference pages.

A type page is relevant only when it carries a type heading, a recognised
"kind in namespace" line and a non-empty "Messages" subsection. Each message
row links to a detail page whose heading is the authoritative signature. Every
step returns ``None`` or skips the row when the expected markup is missing:
most pages are not type pages, and link rot between releases is common.

Extraction never touches the catalog, so pages can be processed independently
and merged afterwards in release order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from itertools import chain
from pathlib import Path, PurePosixPath
from typing import Iterable, Iterator, List, Optional

from packaging.version import Version

from .examples import parse_example, select_example
from .logging import get_logger
from .model import DEFAULT_TYPE_KIND, EventFunctionObservation
from .nodes import DocNode
from .parameters import ParameterRow, resolve_parameters
from .typenames import VOID

__all__ = [
    "MessageRow",
    "PageExtraction",
    "PageExtractor",
    "TypeHeader",
    "extract_type_header",
    "read_parameter_table",
]

LOGGER = get_logger(__name__, base_fields={"stage": "extract"})

# "class in NS" / "struct in NS"; the bare "Namespace: NS" form only appears in 5.0 pages.
NAMESPACE_PATTERN = re.compile(
    r"^((?P<kind>class|struct) in|Namespace:)\W*(?P<namespace>\w+(?:\.\w+)*)$"
)
COROUTINE_PATTERN = re.compile(r"(?:can be|as) a co-routine", re.IGNORECASE)

SECTION_SELECTOR = "div.content > div.section"
HEADER_SELECTOR = "div.mb20.clear"
TYPE_NAME_SELECTOR = "h1.heading.inherit"
NAMESPACE_LINE_SELECTOR = "p"
SIGNATURE_SELECTOR = "div.mb20.clear > h1.heading.inherit"
STATIC_MARKER_SELECTOR = "div.subsection > p > code.varname"
MESSAGE_LINK_SELECTOR = "td.lbl a"
MESSAGE_DESCRIPTION_SELECTOR = "td.desc"
PARAMETER_NAME_SELECTOR = "td.name.lbl"
PARAMETER_DESCRIPTION_SELECTOR = "td.desc"

MESSAGES_TITLE = "Messages"
PARAMETERS_TITLE = "Parameters"


@dataclass(frozen=True, slots=True)
class TypeHeader:
    """Identity of a type page."""

    namespace: str
    name: str
    kind: str
    path: str


@dataclass(frozen=True, slots=True)
class MessageRow:
    """A usable row of a type page's "Messages" table."""

    name: str
    href: str
    description: str
    detail_file: Path


@dataclass(slots=True)
class PageExtraction:
    """Everything one type page contributes to the catalog."""

    header: TypeHeader
    observations: List[EventFunctionObservation] = field(default_factory=list)


def _section(document: Optional[DocNode]) -> Optional[DocNode]:
    return document.select_one(SECTION_SELECTOR) if document is not None else None


def extract_type_header(section: DocNode, path: str) -> Optional[TypeHeader]:
    """Return the type identity declared by ``section``, or ``None`` for non-type pages."""

    header = section.select_one(HEADER_SELECTOR)
    if header is None:
        return None
    name = header.select_one(TYPE_NAME_SELECTOR)
    namespace_line = header.select_one(NAMESPACE_LINE_SELECTOR)
    if name is None or namespace_line is None or not name.text:
        return None

    match = NAMESPACE_PATTERN.match(namespace_line.text)
    if match is None or not match.group("namespace"):
        return None
    # TODO: interfaces and enums have no kind pattern yet and are recorded as classes.
    kind = match.group("kind") or DEFAULT_TYPE_KIND
    return TypeHeader(namespace=match.group("namespace"), name=name.text, kind=kind, path=path)


def read_parameter_table(details: DocNode) -> List[ParameterRow]:
    """Return the rows of the detail page's "Parameters" table in order."""

    rows: List[ParameterRow] = []
    for row in details.subsection(PARAMETERS_TITLE):
        name = row.select_one(PARAMETER_NAME_SELECTOR)
        description = row.select_one(PARAMETER_DESCRIPTION_SELECTOR)
        if name is None and description is None:
            # Header rows and spacer rows.
            continue
        rows.append(
            ParameterRow(
                name=name.text if name is not None else None,
                description=description.text if description is not None else None,
            )
        )
    return rows


class PageExtractor:
    """Turn script reference pages into :class:`PageExtraction` results.

    Args:
        reference_dir: Directory holding the script reference pages; every
            link is resolved against it explicitly.
        reference_path: The same directory relative to the documentation
            root, used for the paths recorded in the catalog.
    """

    def __init__(self, reference_dir: Path, reference_path: PurePosixPath | str) -> None:
        self.reference_dir = Path(reference_dir)
        self.reference_path = PurePosixPath(reference_path)

    def doc_path(self, relative: str) -> str:
        return (self.reference_path / relative).as_posix()

    def extract_page(self, page: Path, version: Version) -> Optional[PageExtraction]:
        """Extract the type and event functions described by ``page``, if any."""

        section = _section(DocNode.load(page))
        if section is None:
            return None
        header = extract_type_header(section, self.doc_path(page.name))
        if header is None:
            return None

        rows = section.subsection(MESSAGES_TITLE)
        first = next(rows, None)
        if first is None:
            return None

        extraction = PageExtraction(header)
        for message in self.iter_message_rows(chain([first], rows)):
            observation = self.extract_message(message, version, header.namespace)
            if observation is not None:
                extraction.observations.append(observation)
        return extraction

    def iter_message_rows(self, rows: Iterable[DocNode]) -> Iterator[MessageRow]:
        """Yield the message rows that link to an existing detail page."""

        for row in rows:
            link = row.select_one(MESSAGE_LINK_SELECTOR)
            description = row.select_one(MESSAGE_DESCRIPTION_SELECTOR)
            if link is None or description is None or not link.text:
                continue
            href = (link.get("href") or "").split("#", 1)[0].strip()
            if not href:
                continue
            detail_file = self.reference_dir / href
            if not detail_file.is_file():
                LOGGER.debug(
                    "Skipping message without detail page",
                    extra={"extra_fields": {"function": link.text, "href": href}},
                )
                continue
            yield MessageRow(
                name=link.text,
                href=href,
                description=description.text,
                detail_file=detail_file,
            )

    def extract_message(
        self, message: MessageRow, version: Version, namespace: str
    ) -> Optional[EventFunctionObservation]:
        """Load ``message``'s detail page and describe the event function it documents."""

        details = _section(DocNode.load(message.detail_file))
        if details is None:
            return None
        signature = details.select_one(SIGNATURE_SELECTOR)
        if signature is None:
            return None

        is_static = any(node.text == "static" for node in details.select(STATIC_MARKER_SELECTOR))
        is_coroutine = COROUTINE_PATTERN.search(details.text) is not None

        return_type = VOID
        example_names = None
        example = select_example(details)
        if example is not None:
            parsed = parse_example(message.name, example.raw_text, namespace)
            if parsed is not None:
                return_type = parsed.return_type
                example_names = parsed.parameter_names
                is_static = is_static or parsed.is_static

        parameters = resolve_parameters(
            signature.text,
            namespace=namespace,
            example_names=example_names,
            table_rows=read_parameter_table(details),
        )
        return EventFunctionObservation(
            name=message.name,
            version=version,
            is_static=is_static,
            is_coroutine=is_coroutine,
            return_type=return_type,
            parameters=parameters,
            description=message.description,
            doc_path=self.doc_path(message.href),
        )

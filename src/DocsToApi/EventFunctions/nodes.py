"""Thin navigable-node wrapper over BeautifulSoup for script reference pages.

The scraper only ever needs four things from a page: load it, select
descendants by CSS path, read collapsed text, and read attributes. Every
accessor returns ``None`` (or an empty sequence) instead of raising when the
element is absent, because documentation pages are routinely incomplete.
"""

from __future__ import annotations

import re
import warnings
from pathlib import Path
from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning
from bs4.element import Tag

from .logging import get_logger

__all__ = ["DocNode", "collapse_whitespace", "strip_xml_incompatible"]

LOGGER = get_logger(__name__)

HTML_PARSER = "lxml"

# C0 controls other than tab, LF and CR, lone surrogates and the two non-characters.
_XML_INCOMPATIBLE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def strip_xml_incompatible(text: str) -> str:
    """Remove characters that cannot appear in an XML document."""

    return _XML_INCOMPATIBLE.sub("", text)


def collapse_whitespace(text: str) -> str:
    """Return ``text`` without XML-incompatible characters and with whitespace runs folded."""

    return " ".join(strip_xml_incompatible(text).split())


class DocNode:
    """A node of a parsed documentation page."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    @classmethod
    def parse(cls, markup: str) -> "DocNode":
        """Parse ``markup`` into a document node."""

        with warnings.catch_warnings():
            warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)
            soup = BeautifulSoup(markup, HTML_PARSER)
        return cls(soup)

    @classmethod
    def load(cls, path: Path) -> Optional["DocNode"]:
        """Load and parse ``path``; return ``None`` when the file cannot be read."""

        try:
            markup = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            LOGGER.debug(
                "Unable to read documentation page",
                extra={"extra_fields": {"path": str(path), "error": str(exc)}},
            )
            return None
        return cls.parse(markup)

    @property
    def text(self) -> str:
        """Whitespace-collapsed text content."""

        return collapse_whitespace(self._tag.get_text())

    @property
    def raw_text(self) -> str:
        """Text content exactly as rendered, line breaks included."""

        return strip_xml_incompatible(self._tag.get_text())

    def get(self, attribute: str) -> Optional[str]:
        value = self._tag.get(attribute)
        if isinstance(value, list):
            return " ".join(value)
        return value

    def select_one(self, selector: str) -> Optional["DocNode"]:
        found = self._tag.select_one(selector)
        return DocNode(found) if found is not None else None

    def select(self, selector: str) -> List["DocNode"]:
        return [DocNode(found) for found in self._tag.select(selector)]

    def subsection(self, title: str) -> Iterator["DocNode"]:
        """Yield the table rows of every ``div.subsection`` headed ``title``.

        Rows are produced lazily so callers can stop early; a page without the
        subsection yields nothing.
        """

        for block in self._tag.select("div.subsection"):
            heading = block.find("h2")
            if heading is None or collapse_whitespace(heading.get_text()) != title:
                continue
            rows = block.select("table.list tr") or block.select("tr")
            for row in rows:
                yield DocNode(row)

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"DocNode(<{self._tag.name}>)"

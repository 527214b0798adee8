"""Builders for synthetic script reference pages.

The markup mirrors the rendered reference closely enough for the scraper's
selectors: a ``div.content > div.section`` body, a ``div.mb20.clear`` header,
and ``div.subsection`` blocks headed by ``h2`` titles.
"""

from __future__ import annotations

from html import escape
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

REFERENCE_PATH = Path("Documentation/en/ScriptReference")


def _page(body: str) -> str:
    return (
        "<!DOCTYPE html><html><head><title>Scripting API</title></head><body>"
        '<div class="header-wrapper">Navigation</div>'
        f'<div class="content"><div class="section">{body}</div></div>'
        "</body></html>"
    )


def type_page(
    name: str,
    namespace_line: Optional[str],
    messages: Sequence[Tuple[str, Optional[str], str]] = (),
) -> str:
    """Render a type page; ``messages`` holds ``(name, href, description)`` rows."""

    header = f'<div class="mb20 clear"><h1 class="heading inherit">{escape(name)}</h1>'
    if namespace_line is not None:
        header += f'<p class="cl mb0 left mr10">{escape(namespace_line)}</p>'
    header += "</div>"

    body = header + '<div class="subsection"><h2>Description</h2><p>A type.</p></div>'
    if messages:
        rows = []
        for message, href, description in messages:
            link = (
                f'<a href="{escape(href)}">{escape(message)}</a>'
                if href is not None
                else escape(message)
            )
            rows.append(
                f'<tr><td class="lbl">{link}</td><td class="desc">{escape(description)}</td></tr>'
            )
        body += (
            '<div class="subsection"><h2>Messages</h2>'
            f'<table class="list">{"".join(rows)}</table></div>'
        )
    return _page(body)


def detail_page(
    signature: str,
    *,
    static: bool = False,
    description: str = "Called by the engine.",
    examples: Optional[Dict[str, str]] = None,
    parameters: Optional[Sequence[Tuple[str, str]]] = None,
) -> str:
    """Render a message detail page.

    ``examples`` maps a dialect suffix (``CS``, ``JS`` or ``Raw``) to sample code.
    """

    body = f'<div class="mb20 clear"><h1 class="heading inherit">{escape(signature)}</h1></div>'
    if static:
        body += (
            '<div class="subsection"><p class="signature">'
            '<code class="varname">static</code> void Callback()</p></div>'
        )
    if parameters:
        rows = "".join(
            f'<tr><td class="name lbl">{escape(name)}</td><td class="desc">{escape(text)}</td></tr>'
            for name, text in parameters
        )
        body += f'<div class="subsection"><h2>Parameters</h2><table class="list">{rows}</table></div>'
    body += f'<div class="subsection"><h2>Description</h2><p>{escape(description)}</p></div>'
    for dialect, code in (examples or {}).items():
        body += f'<div class="subsection"><pre class="codeExample{dialect}">{escape(code)}</pre></div>'
    return _page(body)


class ReferenceTree:
    """A documentation root for one release, written under ``root``."""

    def __init__(self, root: Path, reference_path: Path = REFERENCE_PATH) -> None:
        self.root = root
        self.reference_dir = root / reference_path
        self.reference_dir.mkdir(parents=True, exist_ok=True)

    def write(self, filename: str, html: str) -> Path:
        path = self.reference_dir / filename
        path.write_text(html, encoding="utf-8")
        return path

    def add_type(
        self,
        name: str,
        namespace_line: Optional[str],
        messages: Sequence[Tuple[str, Optional[str], str]] = (),
        filename: Optional[str] = None,
    ) -> Path:
        return self.write(filename or f"{name}.html", type_page(name, namespace_line, messages))

    def add_detail(self, filename: str, signature: str, **kwargs) -> Path:
        return self.write(filename, detail_page(signature, **kwargs))

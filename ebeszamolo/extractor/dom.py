"""Helpers over parsed HTML snapshots.

Pages are captured once with ``page.content()`` and parsed with ``lxml.html``;
every extractor works on the resulting tree, so none of them needs a live
browser.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import lxml.html

if TYPE_CHECKING:
    from lxml.html import HtmlElement

__all__ = [
    "body_rows",
    "parse_html",
    "row_cells",
    "select_by_class",
    "visible_text",
]

# Elements whose boundaries start a new line in rendered text
_BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "caption", "dd", "div", "dl", "dt",
        "fieldset", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6",
        "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section", "table",
        "tbody", "tfoot", "thead", "tr", "ul",
    },
)
_CELL_TAGS = frozenset({"td", "th"})
_SKIP_TAGS = frozenset({"script", "style", "noscript", "template", "head"})


def parse_html(html: str) -> HtmlElement:
    """Parse a full page snapshot into an lxml tree."""
    return lxml.html.document_fromstring(html)


def _collect_text(element: HtmlElement, parts: list[str]) -> None:
    tag = element.tag if isinstance(element.tag, str) else ""

    if tag not in _SKIP_TAGS and tag:
        if tag == "br":
            parts.append("\n")
        elif tag in _BLOCK_TAGS:
            parts.append("\n")

        if element.text:
            parts.append(re.sub(r"\s+", " ", element.text))

        for child in element:
            _collect_text(child, parts)

        if tag in _BLOCK_TAGS:
            parts.append("\n")
        elif tag in _CELL_TAGS:
            parts.append("\t")

    # Tail text belongs to the parent even when the element itself is skipped
    if element.tail:
        parts.append(re.sub(r"\s+", " ", element.tail))


def visible_text(element: HtmlElement) -> str:
    """Approximate the browser's ``innerText`` for an element.

    Line breaks come from ``<br>`` and block elements, table cells are
    separated by tabs, and runs of source whitespace collapse to one space.
    Script and style content is dropped.
    """
    parts: list[str] = []
    _collect_text(element, parts)
    # Tail of the root element is outside it
    if element.tail:
        parts.pop()

    lines = []
    for raw_line in "".join(parts).split("\n"):
        line = re.sub(r" *\t *", "\t", raw_line).strip(" \t")
        if line.strip():
            lines.append(line)
    return "\n".join(lines)


def body_rows(table: HtmlElement, nested: bool = False) -> list[HtmlElement]:
    """Return the table's body rows in document order.

    ``<thead>`` rows are always excluded. Rows of nested tables are included
    only when ``nested`` is set.
    """
    rows = []
    for row in table.iter("tr"):
        if not nested and next(row.iterancestors("table"), None) is not table:
            continue
        if row.getparent() is not None and row.getparent().tag == "thead":
            continue
        rows.append(row)
    return rows


def row_cells(row: HtmlElement) -> list[HtmlElement]:
    """Return the ``<td>`` cells of a row (header ``<th>`` cells are not data)."""
    return [child for child in row if isinstance(child.tag, str) and child.tag == "td"]


def select_by_class(root: HtmlElement, selector: str) -> list[HtmlElement]:
    """Find descendants matching a simple ``tag.class`` selector.

    Only the ``tag.class`` form used in ``config.json`` is supported; ``tag``
    may be omitted (``.class``) to match any element.
    """
    tag, _, css_class = selector.partition(".")
    xpath = f".//{tag or '*'}[contains(concat(' ', normalize-space(@class), ' '), ' {css_class} ')]"
    return list(root.xpath(xpath))

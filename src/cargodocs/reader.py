"""Rendering of rustdoc HTML pages as Markdown for agents.

rustdoc pages carry a lot of chrome (sidebars, toolbars, source links) around
the item documentation. Only the main content is kept; headings become ``#``
headings and ``<pre>`` blocks become fenced code so that ``parse_headings``
can build a navigable heading map.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, NavigableString

_CHROME_SELECTORS = (
    "script",
    "style",
    "noscript",
    "nav",
    "button",
    "rustdoc-toolbar",
    "rustdoc-search",
    ".sidebar",
    ".out-of-band",
    "a.src",
    "a.anchor",
)
_BLOCK_TAGS = ["p", "div", "section", "dt", "dd", "tr", "summary", "details", "table"]
_HEADING_TAGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4}
_HEADING_RE = re.compile(r"^(#{1,4}) (.+)")
_FENCE = "```"


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def visible_text(html: str) -> str:
    """Return the text a reader would see, without scripts or styles."""
    soup = _soup(html)
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return soup.get_text(" ")


def html_to_markdown(html: str) -> str:
    """Convert a rustdoc page to Markdown-flavoured plain text."""
    soup = _soup(html)
    for selector in _CHROME_SELECTORS:
        for tag in soup.select(selector):
            tag.decompose()

    root = soup.select_one("#main-content") or soup.main or soup.body or soup

    for pre in root.find_all("pre"):
        code = pre.get_text().strip("\n")
        pre.replace_with(NavigableString(f"\n\n{_FENCE}rust\n{code}\n{_FENCE}\n\n"))

    for name, level in _HEADING_TAGS.items():
        for heading in root.find_all(name):
            text = " ".join(heading.get_text(" ").split())
            heading.replace_with(NavigableString(f"\n\n{'#' * level} {text}\n\n"))

    for item in root.find_all("li"):
        item.insert_before(NavigableString("\n- "))

    for block in root.find_all(_BLOCK_TAGS):
        block.insert_after(NavigableString("\n"))

    return _normalise(root.get_text())


def _normalise(text: str) -> str:
    """Collapse whitespace outside code fences and squeeze blank lines."""
    lines: list[str] = []
    in_code = False
    previous_blank = True

    for raw in text.splitlines():
        if raw.startswith(_FENCE):
            in_code = not in_code
            lines.append(raw)
            previous_blank = False
            continue
        if in_code:
            lines.append(raw.rstrip())
            continue

        line = " ".join(raw.split())
        if not line:
            if previous_blank:
                continue
            previous_blank = True
        else:
            previous_blank = False
        lines.append(line)

    return "\n".join(lines).strip()


def parse_headings(content: str) -> str:
    """Build a ``"<lineno>: <heading line>"`` map of H1–H4 headings.

    Lines inside fenced code blocks are ignored, so Rust attributes such as
    ``#[derive(Debug)]`` are never mistaken for headings.
    """
    headings: list[str] = []
    in_code = False

    for lineno, line in enumerate(content.splitlines(), start=1):
        if line.strip().startswith(_FENCE):
            in_code = not in_code
            continue
        if not in_code and _HEADING_RE.match(line):
            headings.append(f"{lineno}: {line}")

    return "\n".join(headings)

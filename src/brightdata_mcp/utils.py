"""Utility functions for HTML post-processing of fetched pages."""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup
from markdownify import markdownify

# Tags removed before text extraction when the caller gives none
DEFAULT_STRIP_TAGS = ("script", "style", "meta", "link", "noscript")


def _parse(html: str, strip_tags: list[str] | tuple[str, ...] | None = None) -> BeautifulSoup:
    soup = BeautifulSoup(html, "lxml")
    for tag in strip_tags or ():
        for element in soup.find_all(tag):
            element.decompose()
    return soup


def html_to_markdown(html: str, strip_tags: list[str] | None = None) -> str:
    """Convert HTML to ATX-style markdown.

    Args:
        html: The HTML content to convert
        strip_tags: HTML tags to drop before conversion (e.g., ['script', 'style'])

    Returns:
        Markdown formatted text
    """
    soup = _parse(html, strip_tags)
    return markdownify(str(soup), heading_style="ATX").strip()


def html_to_text(html: str, strip_tags: list[str] | None = None) -> str:
    """Extract plain text from HTML, one non-blank line per text node.

    Args:
        html: The HTML content to process
        strip_tags: HTML tags to drop (default: script, style, meta, link, noscript)

    Returns:
        Plain text content
    """
    soup = _parse(html, DEFAULT_STRIP_TAGS if strip_tags is None else strip_tags)
    text = soup.get_text(separator="\n", strip=True)
    return "\n".join(line.strip() for line in text.split("\n") if line.strip())


def extract_links(html: str, base_url: str | None = None) -> list[dict[str, str]]:
    """Extract every anchor with an href.

    Args:
        html: The HTML content to process
        base_url: Optional base URL for resolving relative links

    Returns:
        List of {"url", "text", "title"} dictionaries in document order
    """
    links = []
    for anchor in _parse(html).find_all("a", href=True):
        href = anchor["href"]
        if base_url:
            href = urljoin(base_url, href)
        links.append(
            {"url": href, "text": anchor.get_text(strip=True), "title": anchor.get("title", "")}
        )
    return links


def extract_metadata(html: str) -> dict[str, str]:
    """Extract the page title and named/property meta tags."""
    soup = _parse(html)
    metadata: dict[str, str] = {}

    if soup.title:
        metadata["title"] = soup.title.string or ""

    for meta in soup.find_all("meta"):
        name = meta.get("name") or meta.get("property")
        content = meta.get("content")
        if name and content:
            metadata[name] = content

    return metadata


def extract_headings(html: str, max_level: int = 3) -> list[dict[str, str | int]]:
    """Extract document headings in order.

    Args:
        html: The HTML content to process
        max_level: Deepest heading level to include (default: 3)

    Returns:
        List of {"level", "text"} dictionaries, empty headings skipped
    """
    tags = [f"h{level}" for level in range(1, max_level + 1)]
    headings: list[dict[str, str | int]] = []

    for element in _parse(html).find_all(tags):
        text = element.get_text(" ", strip=True)
        if text:
            headings.append({"level": int(element.name[1]), "text": text})

    return headings


def select_text(html: str, css_selector: str) -> list[str]:
    """Return the stripped text of every element matching a CSS selector.

    Raises:
        ValueError: If the CSS selector syntax is invalid
    """
    try:
        elements = _parse(html).select(css_selector)
    except Exception as e:
        raise ValueError(f"Invalid CSS selector '{css_selector}': {e}") from e

    texts = [element.get_text(" ", strip=True) for element in elements]
    return [text for text in texts if text]

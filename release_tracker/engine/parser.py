"""Feed and DOM parsing helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urljoin

import feedparser
from selectolax.parser import HTMLParser, Node

SECTION_HEADING_TAGS = ("h2", "h3", "h4")
SECTION_BODY_TAGS = {"p", "li"}
DESCRIPTION_SIBLING_TAGS = {"p", "div"}

_WHITESPACE = re.compile(r"\s+")


@dataclass(slots=True)
class RawEntry:
    """Unfiltered title/description pair as found in a source document."""

    title: str
    description: str
    url: str
    pub_date: str | None = None
    author: str | None = None


def collapse_whitespace(text: str | None) -> str:
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def strip_html(html: str | None) -> str:
    """Return the visible text of an HTML fragment on a single line."""

    if not html:
        return ""
    tree = HTMLParser(html)
    root = tree.body or tree.root
    if root is None:
        return collapse_whitespace(html)
    return collapse_whitespace(root.text(separator=" "))


def _node_text(node: Node) -> str:
    return collapse_whitespace(node.text(separator=" "))


def _is_element(node: Node | None) -> bool:
    return node is not None and not node.tag.startswith(("-", "_"))


def _next_element(node: Node) -> Node | None:
    sibling = node.next
    while sibling is not None and not _is_element(sibling):
        sibling = sibling.next
    return sibling


def _has_ancestor(node: Node, tag: str) -> bool:
    parent = node.parent
    while parent is not None:
        if parent.tag == tag:
            return True
        parent = parent.parent
    return False


def _is_section_body(node: Node) -> bool:
    # Nested list items and paragraphs are already part of their outer item's text.
    return node.tag in SECTION_BODY_TAGS and not _has_ancestor(node, "li")


class Parser:
    """Turn fetched documents into raw entries according to source layouts."""

    def parse_feed(self, payload: str) -> list[RawEntry]:
        parsed = feedparser.parse(payload)
        entries: list[RawEntry] = []
        for item in parsed.entries:
            title = collapse_whitespace(item.get("title"))
            if not title:
                continue
            body = item.get("summary") or item.get("description") or ""
            if not body and item.get("content"):
                body = item["content"][0].get("value", "")
            entries.append(
                RawEntry(
                    title=title,
                    description=strip_html(body),
                    url=item.get("link") or "",
                    pub_date=item.get("published") or item.get("updated"),
                    author=item.get("author"),
                )
            )
        return entries

    def parse_headings(self, html: str, base_url: str, heading_selector: str) -> list[RawEntry]:
        """Each heading is a title; its next ``p``/``div`` sibling is the description."""

        tree = HTMLParser(html)
        entries: list[RawEntry] = []
        for heading in tree.css(heading_selector):
            title = _node_text(heading)
            if not title:
                continue
            description = ""
            sibling = _next_element(heading)
            if sibling is not None and sibling.tag in DESCRIPTION_SIBLING_TAGS:
                description = _node_text(sibling)
            entries.append(
                RawEntry(
                    title=title,
                    description=description,
                    url=self._heading_url(heading, base_url, base_url),
                )
            )
        return entries

    def parse_links(self, html: str, base_url: str, link_selector: str) -> list[RawEntry]:
        """Each matching anchor (or the first anchor inside a match) is a title."""

        tree = HTMLParser(html)
        entries: list[RawEntry] = []
        seen: set[str] = set()
        for node in tree.css(link_selector):
            link = node if node.tag == "a" else node.css_first("a")
            if link is None:
                continue
            href = (link.attributes.get("href") or "").strip()
            if not href or href.startswith(("javascript:", "#")):
                continue
            full_url = urljoin(base_url, href)
            if full_url in seen:
                continue
            seen.add(full_url)
            entries.append(RawEntry(title=_node_text(link), description="", url=full_url))
        return entries

    def find_links(self, html: str, base_url: str, pattern: str) -> list[str]:
        """Return absolute hrefs matching ``pattern`` in first-seen order."""

        matcher = re.compile(pattern)
        tree = HTMLParser(html)
        links: list[str] = []
        seen: set[str] = set()
        for node in tree.css("a[href]"):
            href = (node.attributes.get("href") or "").strip()
            if not href or href.startswith(("javascript:", "#")):
                continue
            full_url = urljoin(base_url, href)
            if full_url in seen or not matcher.search(full_url):
                continue
            seen.add(full_url)
            links.append(full_url)
        return links

    def extract_sections(self, html: str, url: str) -> list[RawEntry]:
        """Split a document into one entry per homogeneous sub-heading.

        The first of h2/h3/h4 occurring at least twice is the sub-heading
        level. Paragraphs and list items that follow a sub-heading, up to the
        next one, form its description. Without such headings the whole
        document is returned as a single entry.
        """

        tree = HTMLParser(html)
        level = self._section_level(tree)
        if level is None:
            whole = self._whole_document(tree, url)
            return [whole] if whole is not None else []

        root = tree.body or tree.root
        entries: list[RawEntry] = []
        current: Node | None = None
        parts: list[str] = []
        for node in root.traverse(include_text=False):
            if node.tag == level:
                if current is not None:
                    entries.append(self._section_entry(current, parts, url))
                current, parts = node, []
            elif current is not None and _is_section_body(node):
                text = _node_text(node)
                if text:
                    parts.append(text)
        if current is not None:
            entries.append(self._section_entry(current, parts, url))
        return [entry for entry in entries if entry.title]

    def document_title(self, html: str) -> str:
        """First ``h1`` text, falling back to ``<title>``."""

        return self._title_of(HTMLParser(html))

    # ------------------------------------------------------------------
    @staticmethod
    def _section_level(tree: HTMLParser) -> str | None:
        for tag in SECTION_HEADING_TAGS:
            if len(tree.css(tag)) >= 2:
                return tag
        return None

    def _section_entry(self, heading: Node, parts: list[str], url: str) -> RawEntry:
        return RawEntry(
            title=_node_text(heading),
            description=" ".join(parts),
            url=self._heading_url(heading, url, url),
        )

    @staticmethod
    def _heading_url(heading: Node, base_url: str, fallback: str) -> str:
        link = heading.css_first("a[href]")
        if link is not None:
            href = (link.attributes.get("href") or "").strip()
            if href and not href.startswith(("javascript:", "#")):
                return urljoin(base_url, href)
        anchor = heading.attributes.get("id")
        if anchor:
            return f"{fallback.split('#', 1)[0]}#{anchor}"
        return fallback

    @staticmethod
    def _title_of(tree: HTMLParser) -> str:
        title_node = tree.css_first("h1") or tree.css_first("title")
        return _node_text(title_node) if title_node is not None else ""

    def _whole_document(self, tree: HTMLParser, url: str) -> RawEntry | None:
        title = self._title_of(tree)
        if not title:
            return None
        root = tree.body or tree.root
        paragraphs = [
            _node_text(node)
            for node in root.traverse(include_text=False)
            if _is_section_body(node)
        ]
        description = " ".join(text for text in paragraphs if text)
        return RawEntry(title=title, description=description, url=url)


__all__ = ["Parser", "RawEntry", "collapse_whitespace", "strip_html"]

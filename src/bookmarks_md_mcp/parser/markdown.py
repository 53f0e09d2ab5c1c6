"""Markdown parsing to extract heading and link events in document order."""

import re
from dataclasses import dataclass
from typing import Iterator, Union

from markdown_it import MarkdownIt
from markdown_it.token import Token


@dataclass(frozen=True)
class HeadingEvent:
    """A heading found in the document."""
    level: int
    text: str


@dataclass(frozen=True)
class LinkEvent:
    """A link found in the document."""
    href: str
    text: str


MarkdownEvent = Union[HeadingEvent, LinkEvent]

# Inline token types that contribute to plain text
_TEXT_TOKENS = {'text', 'code_inline'}
_BREAK_TOKENS = {'softbreak', 'hardbreak'}

# Front-matter lines: at least one "key: value", plus lists, comments, continuations
_YAML_KEY_LINE = re.compile(r"^[A-Za-z_][\w.-]*\s*:(?:\s|$)")
_YAML_OTHER_LINE = re.compile(r"^(?:\s*$|\s*#|\s+\S|-\s)")
_FRONT_MATTER_CLOSE = ("---", "...")


def create_parser() -> MarkdownIt:
    """Build a CommonMark parser with GFM tables, strikethrough and bare-URL links."""
    md = MarkdownIt("commonmark", {"linkify": True}).enable(["linkify", "table", "strikethrough"])
    # Scheme-prefixed URLs and emails only; bare words like setup.py stay text
    md.linkify.set({"fuzzy_link": False})
    return md


def strip_front_matter(content: str) -> str:
    """
    Strip a leading YAML front-matter block.

    Without this the last front-matter line followed by the closing
    ``---`` parses as a setext heading. The opening line must be exactly
    ``---`` and every line up to the closing ``---`` (or ``...``) must look
    like YAML with at least one ``key: value``; otherwise the leading
    ``---`` is a thematic break and the content is returned unchanged.
    """
    lines = content.split('\n')
    if lines[0].rstrip() != '---':
        return content

    for end in range(1, len(lines)):
        if lines[end].rstrip() in _FRONT_MATTER_CLOSE:
            break
    else:
        return content

    block = lines[1:end]
    if not any(_YAML_KEY_LINE.match(line) for line in block):
        return content
    if not all(_YAML_KEY_LINE.match(line) or _YAML_OTHER_LINE.match(line) for line in block):
        return content

    return '\n'.join(lines[end + 1:])


def _inline_text(tokens: list[Token]) -> str:
    """Join the plain text of a run of inline tokens."""
    parts: list[str] = []
    for token in tokens:
        if token.type in _TEXT_TOKENS:
            parts.append(token.content)
        elif token.type in _BREAK_TOKENS:
            parts.append(' ')
    return ''.join(parts).strip()


def _inline_links(children: list[Token]) -> Iterator[LinkEvent]:
    """Yield a LinkEvent for every link_open ... link_close run."""
    i = 0
    while i < len(children):
        token = children[i]
        if token.type != 'link_open':
            i += 1
            continue

        # Links cannot nest, so the first link_close ends this one
        end = i + 1
        while end < len(children) and children[end].type != 'link_close':
            end += 1

        href = token.attrGet('href')
        if href is not None:
            yield LinkEvent(href=str(href), text=_inline_text(children[i + 1:end]))
        i = end + 1


def _visible_children(children: list[Token]) -> list[Token]:
    """Drop image tokens; their alt text is not link or heading text."""
    return [t for t in children if t.type != 'image']


def iter_markdown_events(content: str) -> Iterator[MarkdownEvent]:
    """
    Parse markdown content into heading and link events.

    Events come out in document order. Every call parses from scratch, so
    the iterator can be recreated at will. All other markdown constructs
    are parsed and ignored. Malformed markdown never raises; the parser
    recovers and emits whatever structure it found.

    A link inside a heading is emitted right after its HeadingEvent, and
    its text is also part of the heading title.
    """
    tokens = create_parser().parse(strip_front_matter(content))

    for i, token in enumerate(tokens):
        if token.type == 'heading_open':
            inline = tokens[i + 1] if i + 1 < len(tokens) else None
            children = _visible_children(inline.children or []) if inline is not None else []
            yield HeadingEvent(level=int(token.tag[1:]), text=_inline_text(children))
            yield from _inline_links(children)

        elif token.type == 'inline' and not (i > 0 and tokens[i - 1].type == 'heading_open'):
            yield from _inline_links(_visible_children(token.children or []))

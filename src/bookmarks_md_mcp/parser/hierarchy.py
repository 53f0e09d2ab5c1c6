"""Build a hierarchical bookmark tree from a flat event stream."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Union

from .markdown import HeadingEvent, LinkEvent, MarkdownEvent


@dataclass
class Directory:
    """A grouping node created from a heading."""
    title: str
    level: int
    children: list["Node"] = field(default_factory=list)

    @property
    def kind(self) -> str:
        return "directory"


@dataclass
class Link:
    """A leaf node created from a markdown link."""
    title: str
    target: str

    @property
    def kind(self) -> str:
        return "link"


Node = Union[Directory, Link]


def build_bookmark_tree(events: Iterable[MarkdownEvent]) -> list[Node]:
    """
    Build a forest from heading and link events.

    Keeps a stack of open directories, outermost at the bottom. A heading
    closes every open directory at the same or a deeper level, so equal
    levels become siblings. Links attach to the innermost open directory,
    or to the forest when none is open.

    Returns the list of root nodes.
    """
    forest: list[Node] = []
    stack: list[Directory] = []

    for event in events:
        if isinstance(event, HeadingEvent):
            while stack and stack[-1].level >= event.level:
                stack.pop()

            directory = Directory(title=event.text, level=event.level)
            if stack:
                stack[-1].children.append(directory)
            else:
                forest.append(directory)
            stack.append(directory)

        elif isinstance(event, LinkEvent):
            link = Link(title=event.text, target=event.href)
            if stack:
                stack[-1].children.append(link)
            else:
                forest.append(link)

    return forest


def flatten_tree(nodes: list[Node], depth: int = 0) -> list[tuple[Node, int]]:
    """
    Flatten tree back to list with indent depth.

    Returns list of (node, indent_depth) tuples in pre-order.
    """
    result: list[tuple[Node, int]] = []
    for node in nodes:
        result.append((node, depth))
        if isinstance(node, Directory):
            result.extend(flatten_tree(node.children, depth + 1))
    return result


def iter_links(nodes: list[Node], path: tuple[str, ...] = ()) -> Iterator[tuple[Link, list[str]]]:
    """Yield every link with the titles of the directories enclosing it."""
    for node in nodes:
        if isinstance(node, Directory):
            yield from iter_links(node.children, path + (node.title,))
        else:
            yield node, list(path)


def count_links(nodes: list[Node]) -> int:
    return sum(1 for _ in iter_links(nodes))


def node_to_dict(node: Node) -> dict:
    """Convert a node and its subtree to plain JSON-ready dicts."""
    if isinstance(node, Directory):
        return {
            "kind": node.kind,
            "title": node.title,
            "level": node.level,
            "children": [node_to_dict(child) for child in node.children],
        }
    return {
        "kind": node.kind,
        "title": node.title,
        "target": node.target,
    }


def render_outline(nodes: list[Node]) -> str:
    """Render the forest as an indented markdown list."""
    lines: list[str] = []
    for node, depth in flatten_tree(nodes):
        indent = "  " * depth
        if isinstance(node, Directory):
            lines.append(f"{indent}- **{node.title}**")
        else:
            lines.append(f"{indent}- [{node.title}]({node.target})")
    return "\n".join(lines)

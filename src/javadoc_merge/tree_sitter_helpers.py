# --- Tree-sitter plumbing ----------------------------------------------------
import importlib
from typing import Iterator, Optional

from tree_sitter import Language, Node, Parser


def load_language(name: str) -> Language:
    """
    Loads a Tree-sitter grammar from its `tree_sitter_<name>` wheel,
    e.g. "java" or "html".
    """
    module_name = f"tree_sitter_{name}"
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise RuntimeError(
            f"Could not load the {name} grammar.\n"
            f"- Install it with `pip install {module_name.replace('_', '-')}`."
        ) from e
    return Language(module.language())


def make_parser(name: str) -> Parser:
    return Parser(load_language(name))


def node_text(source_bytes: bytes, node) -> str:
    """
    Converts a node's [start_byte:end_byte] into the corresponding string.
    Tree-sitter nodes only store byte offsets, so we slice the original source.
    """
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def node_point(node) -> tuple[int, int]:
    """Returns the (line, column) of a node's start in 0-based coordinates."""
    return (node.start_point[0], node.start_point[1])


# --- HTML element helpers ----------------------------------------------------

def _start_tag(element: Node) -> Optional[Node]:
    if element.children and element.children[0].type in ("start_tag", "self_closing_tag"):
        return element.children[0]
    return None


def tag_name(source_bytes: bytes, element: Node) -> str:
    """Lower-cased tag name of an `element` node, "" if it has none."""
    start = _start_tag(element)
    if start is None:
        return ""
    for child in start.children:
        if child.type == "tag_name":
            return node_text(source_bytes, child).lower()
    return ""


def attributes(source_bytes: bytes, element: Node) -> dict[str, str]:
    """Attribute values of an element's start tag, keyed by lower-cased name."""
    start = _start_tag(element)
    found: dict[str, str] = {}
    if start is None:
        return found
    for attribute in start.children:
        if attribute.type != "attribute":
            continue
        name, value = None, ""
        for part in attribute.children:
            if part.type == "attribute_name":
                name = node_text(source_bytes, part).lower()
            elif part.type == "attribute_value":
                value = node_text(source_bytes, part)
            elif part.type == "quoted_attribute_value":
                value = node_text(source_bytes, part)[1:-1]
        if name:
            found[name] = value
    return found


def css_classes(source_bytes: bytes, element: Node) -> list[str]:
    return attributes(source_bytes, element).get("class", "").split()


def child_elements(element: Node) -> list[Node]:
    return [child for child in element.children if child.type == "element"]


def inner_html(source_bytes: bytes, element: Node) -> str:
    """Markup between the start tag and the (possibly implicit) end tag."""
    start = _start_tag(element)
    begin = start.end_byte if start is not None else element.start_byte
    end = element.end_byte
    if element.children and element.children[-1].type == "end_tag":
        end = element.children[-1].start_byte
    return source_bytes[begin:end].decode("utf-8", errors="replace")


def iter_elements(node: Node, names: tuple[str, ...], source_bytes: bytes) -> Iterator[Node]:
    """Depth-first, document-order walk yielding elements whose tag is in `names`."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "element" and tag_name(source_bytes, current) in names:
            yield current
        stack.extend(reversed(current.children))

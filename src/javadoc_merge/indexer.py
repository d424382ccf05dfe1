import html
import logging
import posixpath
import re
from typing import Iterable, Optional
from urllib.parse import unquote

from tree_sitter import Node, Parser

from javadoc_merge.caches import PatternCache
from javadoc_merge.config import LabelVocabulary
from javadoc_merge.errors import SignatureError
from javadoc_merge.models.doc_models import DocComment, NamedTag
from javadoc_merge.signature import SignatureKey
from javadoc_merge.tree_sitter_helpers import (
    child_elements, css_classes, inner_html, iter_elements, make_parser, node_text, tag_name,
)

log = logging.getLogger(__name__)

# --- Markup patterns -----------------------------------------------------------

# group(1): URL, group(2): label
CODE_LINK = re.compile(r"<a\s+href=\"([^\"]+)\"[^>]*>\s*<code>((?:(?!</?code>).)+)</code>\s*</a>", re.I | re.S)
_ANCHOR = re.compile(r"<a\s[^>]*>.*?</a>", re.I | re.S)
_TAG = re.compile(r"<[^>]*>")
_LABEL_MARKUP = re.compile(r"</?(?:span|div)(?:\s[^>]*)?>", re.I)
_THROWS_CLAUSE = re.compile(r"\sthrows\s.*", re.S)
_NAMED_ENTRY = re.compile(r"^\s*<code>(.+?)</code>\s*-\s*(.*?)\s*$", re.S | re.I)
_JAVADOC8_MEMBER = re.compile(r"^([\w$]+)-(.*)-$")
_JAVA_LANG = re.compile(r"(?<![\w$.])java\.lang\.([A-Z])")

# Declaration blocks by tag and class: Javadoc 8 list items, later sections
BLOCK_CLASSES = {
    "li": {"blockList"},
    "section": {"class-description", "description", "detail"},
}
SIGNATURE_DIV_CLASSES = {"member-signature", "type-signature"}

# --- HTML normalization ----------------------------------------------------------

_TAG_NAME = re.compile(r"</?\w+")
_LINE_LEADING_SPACE = re.compile(r"(?m)^ ")
_BLOCKQUOTE = re.compile(r"\s*(</?blockquote>)\s*")
_PRE = re.compile(r"\s*(</?pre>)\s*")
_BLOCKQUOTE_PRE = re.compile(r"(<blockquote>)\n(<pre>)")
_PRE_BLOCKQUOTE = re.compile(r"(</pre>)\n(</blockquote>)")
_TABLE_ROW = re.compile(r"\s*(</?table|</?tr>)")
_TABLE_CELL = re.compile(r"\s*(<(th|td))")
_BLOCKQUOTE_TABLE = re.compile(r"\s*(<blockquote>)\n(<table)")
_TABLE_BLOCKQUOTE = re.compile(r"(</table>)\n(</blockquote>)")
_LIST = re.compile(r"\s*(</?(ol|ul|li)>)")
_PARAGRAPH = re.compile(r"\s*(<p>)\s*")
_TRAILING_PARAGRAPHS = re.compile(r"(\s*<p>)+$")
_LINE_BREAK = re.compile(r"<br\s*/>")


def format_html(comment: str) -> str:
    """
    Normalizes page markup for use inside a source comment: lower-case tag
    names, comment terminators and unicode escapes defused, and block
    markup laid out one construct per line.
    """
    has_tag = "<" in comment
    if has_tag:
        comment = _TAG_NAME.sub(lambda m: m.group().lower(), comment)

    comment = comment.replace("*/", "*&#47;")
    comment = comment.replace("\\u", "&#92;u")
    comment = _LINE_LEADING_SPACE.sub("", comment)

    if has_tag:
        comment = comment.replace("</p>", "")
        comment = _BLOCKQUOTE.sub(r"\n\1\n", comment)

        if "<pre>" in comment:
            comment = _PRE.sub(r"\n\1\n", comment)
            comment = _BLOCKQUOTE_PRE.sub(r"\1\2", comment)
            comment = _PRE_BLOCKQUOTE.sub(r"\1\2", comment)

        if "<table" in comment:
            comment = _TABLE_ROW.sub(r"\n\1", comment)
            comment = _TABLE_CELL.sub(r"\n  \1", comment)
            comment = _BLOCKQUOTE_TABLE.sub(r"\n\n\1\2", comment)
            comment = _TABLE_BLOCKQUOTE.sub(r"\1\2", comment)

        comment = _LIST.sub(r"\n\1", comment)

        if "<p>" in comment:
            comment = _PARAGRAPH.sub(r"\n\n\1", comment)
            comment = _TRAILING_PARAGRAPHS.sub("", comment)

        if "<br" in comment:
            comment = _LINE_BREAK.sub("<br>", comment)

    return comment.strip()


def plain_text(markup: str, tag_replacement: str = "") -> str:
    text = html.unescape(_TAG.sub(tag_replacement, markup))
    return text.replace("\xa0", " ").replace("\u200b", "")


# --- The index -------------------------------------------------------------------

class DocCommentIndex:
    """
    Localized comments of one class (inner-class pages included), keyed by
    SignatureKey. Built once, read-only afterwards.
    """

    def __init__(self, entries: Optional[dict[SignatureKey, DocComment]] = None):
        self._entries: dict[SignatureKey, DocComment] = dict(entries or {})

    @classmethod
    def build(cls, class_name: str, markup: Optional[str],
              inner_markups: Iterable[tuple[str, str]] = (),
              labels: Optional[LabelVocabulary] = None,
              patterns: Optional[PatternCache] = None,
              parser: Optional[Parser] = None) -> "DocCommentIndex":
        """
        `class_name` is fully qualified; `inner_markups` holds
        `(class path, markup)` pairs such as `("Map.Entry", ...)`.
        Missing markup simply contributes nothing.
        """
        index = cls()
        package, _, simple_name = class_name.rpartition(".")
        pages = [(simple_name, markup)] + list(inner_markups)
        if all(not page for _, page in pages):
            return index

        reader = PageReader(
            package,
            labels or LabelVocabulary(),
            patterns or PatternCache(),
            parser or make_parser("html"),
        )
        for class_path, page in pages:
            if not page:
                continue
            for comment in reader.read(class_path, page):
                # Duplicate signatures: the later entry wins
                index._entries[comment.signature] = comment
        log.debug("Indexed %d comments for %s", len(index._entries), class_name)
        return index

    def is_empty(self) -> bool:
        return not self._entries

    def get(self, key: SignatureKey) -> Optional[DocComment]:
        return self._entries.get(key)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key) -> bool:
        return key in self._entries

    def __iter__(self):
        return iter(self._entries.values())


class PageReader:
    """Extracts DocComments from the pages of one package."""

    def __init__(self, package: str, labels: LabelVocabulary, patterns: PatternCache, parser: Parser):
        self.package = package
        self.labels = labels
        self.patterns = patterns
        self.parser = parser
        # Set per page by read()
        self.class_path = ""
        self.owner = ""

    def read(self, class_path: str, markup: str) -> list[DocComment]:
        self.class_path = class_path
        self.owner = class_path.rsplit(".", 1)[-1]
        source_bytes = markup.encode("utf-8")
        tree = self.parser.parse(source_bytes)

        comments = []
        for block in iter_elements(tree.root_node, tuple(BLOCK_CLASSES), source_bytes):
            # list items inside description text are not declarations
            if not BLOCK_CLASSES[tag_name(source_bytes, block)].intersection(css_classes(source_bytes, block)):
                continue
            signature_node = self._signature_node(source_bytes, block)
            if signature_node is None:
                continue
            raw = _THROWS_CLAUSE.sub("", plain_text(inner_html(source_bytes, signature_node), " "), count=1)
            try:
                signature = SignatureKey.normalize(self.owner, raw)
            except SignatureError as e:
                log.warning("%s (page %s)", e, self.page_path)
                continue
            comments.append(self._read_block(source_bytes, block, signature))
        return comments

    @property
    def page_path(self) -> str:
        directory = self.package.replace(".", "/")
        return posixpath.join(directory, self.class_path + ".html") if directory else self.class_path + ".html"

    @staticmethod
    def _signature_node(source_bytes: bytes, block: Node) -> Optional[Node]:
        for child in child_elements(block):
            name = tag_name(source_bytes, child)
            if name == "pre":
                return child
            if name == "div" and SIGNATURE_DIV_CLASSES.intersection(css_classes(source_bytes, child)):
                return child
        return None

    def _read_block(self, source_bytes: bytes, block: Node, signature: SignatureKey) -> DocComment:
        comment = DocComment(signature)
        for child in child_elements(block):
            name = tag_name(source_bytes, child)
            if name == "div":
                markup = inner_html(source_bytes, child)
                marker = self.labels.deprecation_marker(plain_text(markup))
                if marker is not None:
                    if comment.deprecated is None:
                        comment.deprecated = format_html(self.rewrite_links(_strip_marker(markup, marker)))
                elif comment.body is None and "block" in css_classes(source_bytes, child):
                    comment.body = format_html(self.rewrite_links(markup.strip()))
            elif name == "dl":
                self._read_tags(source_bytes, child, comment)
        return comment

    def _read_tags(self, source_bytes: bytes, dl: Node, comment: DocComment):
        category = None
        for item in child_elements(dl):
            name = tag_name(source_bytes, item)
            if name == "dt":
                category = self.labels.category_of(plain_text(node_text(source_bytes, item)))
                continue
            if name != "dd" or category is None:
                continue

            markup = inner_html(source_bytes, item).strip()
            if category in ("params", "throws"):
                entry = _NAMED_ENTRY.match(markup)
                if entry is None:
                    continue
                tag = NamedTag(
                    plain_text(entry.group(1)).strip(),
                    format_html(self.rewrite_links(entry.group(2))),
                )
                (comment.params if category == "params" else comment.throws).append(tag)
            elif category == "returns":
                comment.returns.append(format_html(self.rewrite_links(markup)))
            elif category == "since":
                comment.sinces.append(plain_text(markup).strip())
            else:
                comment.sees.extend(self._see_entries(markup))

    def _see_entries(self, markup: str) -> list[str]:
        anchors = _ANCHOR.findall(markup)
        if not anchors:
            text = " ".join(plain_text(markup).split())
            return [text] if text else []
        entries = []
        for anchor in anchors:
            link = CODE_LINK.fullmatch(anchor)
            ref = self.resolve_reference(link.group(1)) if link else None
            entries.append(ref if ref is not None else anchor)
        return entries

    # -- links ------------------------------------------------------------------

    def rewrite_links(self, markup: str) -> str:
        """Turns page anchors around `<code>` labels into `{@link ...}` tags."""
        return CODE_LINK.sub(self._link_tag, markup)

    def _link_tag(self, match: re.Match) -> str:
        ref = self.resolve_reference(match.group(1).strip())
        if ref is None:
            return match.group(0)
        label = match.group(2).strip()
        if label and not ref.replace("#", ".").endswith(label):
            return f"{{@link {ref} {label}}}"
        return f"{{@link {ref}}}"

    def resolve_reference(self, url: str) -> Optional[str]:
        """
        Maps a page-relative URL to `package.Class#member`, omitting
        `java.lang`, the page's own package and the page's own class.
        Returns None for URLs outside the documentation tree.
        """
        if "://" in url or url.startswith(("mailto:", "javascript:")):
            return None
        path, _, fragment = url.partition("#")
        if path:
            resolved = posixpath.normpath(posixpath.join(posixpath.dirname(self.page_path), path))
            while resolved.startswith("../"):
                resolved = resolved[3:]
        else:
            resolved = self.page_path
        if not resolved.endswith(".html"):
            return None
        ref = unquote(resolved[:-len(".html")]).replace("/", ".")

        if fragment:
            ref += "#" + self._member_reference(unquote(fragment), ref)

        ref = _JAVA_LANG.sub(r"\1", ref)
        if self.package:
            own_package = self.patterns.get(r"(?<![\w$])" + re.escape(self.package) + r"\.([A-Z])")
            ref = own_package.sub(r"\1", ref)
        own_class = self.patterns.get(r"(?<![\w$.])" + re.escape(self.class_path) + "#")
        return own_class.sub("#", ref)

    @staticmethod
    def _member_reference(fragment: str, class_ref: str) -> str:
        javadoc8 = _JAVADOC8_MEMBER.match(fragment)
        if javadoc8 and "(" not in fragment:
            arguments = [a.replace(":A", "[]") for a in javadoc8.group(2).split("-")] if javadoc8.group(2) else []
            return f"{javadoc8.group(1)}({', '.join(arguments)})"
        if fragment.startswith("<init>"):
            fragment = class_ref.rsplit(".", 1)[-1] + fragment[len("<init>"):]
        return re.sub(r",(?=\S)", ", ", fragment)


def _strip_marker(markup: str, marker: str) -> str:
    text = _LABEL_MARKUP.sub("", markup).replace("&nbsp;", " ").strip()
    if text.startswith(marker):
        text = text[len(marker):]
    return text.strip()

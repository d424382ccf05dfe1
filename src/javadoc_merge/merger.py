# --- Per-file merge orchestration --------------------------------------------
import logging
from typing import Optional

from tree_sitter import Node, Parser, Tree

from javadoc_merge.caches import DirectoryListingCache, PatternCache
from javadoc_merge.config import MergeConfig
from javadoc_merge.errors import StructuralError
from javadoc_merge.indexer import DocCommentIndex
from javadoc_merge.models.ast_models import ClassInfo
from javadoc_merge.models.doc_models import MergeResult
from javadoc_merge.scanner import SourceScanner
from javadoc_merge.synthesizer import CommentSynthesizer
from javadoc_merge.tree_sitter_helpers import make_parser, node_point, node_text

log = logging.getLogger(__name__)

TYPE_DECLARATIONS = {
    "class_declaration": "class",
    "record_declaration": "class",
    "interface_declaration": "interface",
    "enum_declaration": "enum",
    "annotation_type_declaration": "@interface",
}


class MergeEngine:
    """
    Merges localized documentation into Java sources, one file per call.

    Owns its caches, parsers and synthesizer; use one engine per thread.
    `documents` is a documentation source with a
    `fragments(class_name, listings)` method (see inputs.doc_files).
    """

    def __init__(self, documents, config: Optional[MergeConfig] = None):
        self.documents = documents
        self.config = config or MergeConfig()
        self.patterns = PatternCache()
        self.listings = DirectoryListingCache()
        self.synthesizer = CommentSynthesizer(self.config.layout, self.config.wrap, self.patterns)
        self._java_parser: Optional[Parser] = None
        self._html_parser: Optional[Parser] = None

    @property
    def java_parser(self) -> Parser:
        if self._java_parser is None:
            self._java_parser = make_parser("java")
        return self._java_parser

    @property
    def html_parser(self) -> Parser:
        if self._html_parser is None:
            self._html_parser = make_parser("html")
        return self._html_parser

    def merge(self, source: str, expected_simple_name: str) -> str:
        return self.merge_with_report(source, expected_simple_name).text

    def merge_with_report(self, source: str, expected_simple_name: str) -> MergeResult:
        """
        Raises StructuralError when the source declares no top-level type
        named `expected_simple_name`.
        """
        declaration = self.locate_class(source, expected_simple_name)
        index = self.build_index(declaration)
        if index.is_empty():
            log.debug("No documentation for %s", declaration.fqcn)
            return MergeResult(source, declaration.fqcn, declaration.kind)

        self.synthesizer.warnings = []
        scanner = SourceScanner(source, declaration.fqcn, declaration.kind, self.synthesizer)
        for span, signature in scanner:
            scanner.set_localized_comment(signature, index.get(signature))
        text = scanner.finish()
        return MergeResult(
            text,
            declaration.fqcn,
            declaration.kind,
            documented=True,
            replaced=scanner.replaced,
            warnings=list(self.synthesizer.warnings),
        )

    def build_index(self, declaration: ClassInfo) -> DocCommentIndex:
        outer = None
        inner = []
        for fragment in self.documents.fragments(declaration.fqcn, self.listings):
            if fragment.class_path == declaration.simple_name:
                outer = fragment.markup
            else:
                inner.append((fragment.class_path, fragment.markup))
        return DocCommentIndex.build(
            declaration.fqcn,
            outer,
            inner,
            labels=self.config.labels,
            patterns=self.patterns,
            parser=self.html_parser if outer or inner else None,
        )

    # -- AST helpers ----------------------------------------------------------

    def locate_class(self, source: str, expected_simple_name: str) -> ClassInfo:
        """Finds the top-level type declaration named `expected_simple_name`."""
        source_bytes = source.encode("utf-8")
        tree: Tree = self.java_parser.parse(source_bytes)
        root: Node = tree.root_node
        package = self._find_package(source_bytes, root)

        for node in self._top_level_types(root):
            name_node = node.child_by_field_name("name")
            if name_node is None or node_text(source_bytes, name_node) != expected_simple_name:
                continue
            line, col = node_point(node)
            fqcn = f"{package}.{expected_simple_name}" if package else expected_simple_name
            return ClassInfo(expected_simple_name, fqcn, TYPE_DECLARATIONS[node.type], line, col)

        raise StructuralError(f"No top-level type named {expected_simple_name!r} found")

    def _find_package(self, source_bytes: bytes, root: Node) -> Optional[str]:
        """Grabs the package name from a 'package_declaration' node if present."""
        for child in root.children:
            if child.type == "package_declaration":
                for part in child.children:
                    if part.type in ("scoped_identifier", "identifier"):
                        return node_text(source_bytes, part)
        return None

    def _top_level_types(self, root: Node) -> list[Node]:
        """
        Type declarations outside any class body. Walks into ERROR nodes, so
        a syntax error elsewhere in the file does not hide the class.
        """
        found = []
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type in TYPE_DECLARATIONS:
                found.append(node)
                continue
            if node.type.endswith("_body") or node.type in ("block_comment", "line_comment"):
                continue
            stack.extend(reversed(node.children))
        return found

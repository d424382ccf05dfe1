# --- Source scanning ---------------------------------------------------------
"""
Walks the doc comments of one Java source file in order and resolves the
signature of the declaration each one documents.

Class nesting is tracked with a stack of ClassScope entries. Type
declarations without a doc comment of their own get a placeholder comment
inserted before scanning starts, so every inner class is visited and pushed
on the stack; placeholders are dropped again from the output.
"""
import logging
import re
from dataclasses import dataclass
from typing import Iterator, Optional

from javadoc_merge.errors import SignatureError
from javadoc_merge.lexer import LexState, Segment, mask_source, matching_brace_end
from javadoc_merge.models.doc_models import ClassScope, DocComment, SourceCommentSpan
from javadoc_merge.signature import SignatureKey

log = logging.getLogger(__name__)

MARKER_COMMENT = "/** javadoc-merge placeholder */\n"
# For a declaration that shares its line with preceding code
INLINE_MARKER_COMMENT = "\n/** javadoc-merge inline placeholder */\n"

_BANNER = re.compile(r"\s*/\*+/\s*")
_TYPE_KEYWORD = re.compile(r"(?<![\w$.@])(?:@interface|class|interface|enum)(?=\s)")
_ANNOTATIONS = re.compile(r"(?:\s*@(?!interface\b)[\w$.]+\s*(?:\((?:[^()]|\([^()]*\))*\))?)*\s*")
_SIGNATURE_END = re.compile(r"\bthrows\b|[{=;}]|,(?=\s*/\*)")
_COMMENT_REMAINS = re.compile(r"/\*.*?\*/|//[^\n]*", re.S)
_ANNOTATION_DEFAULT = re.compile(r"\s+default\b.*", re.S)
_OWNER_PACKAGE = re.compile(r".+\.")


@dataclass(frozen=True)
class _Candidate:
    span_start: int  # start of the line holding `/**`
    comment_end: int  # just past `*/`
    span_end: int  # past the newline that directly follows `*/`, if any
    code_before: bool  # code seen since the previous candidate


def _is_doc_comment(text: str, segment: Segment) -> bool:
    if segment.state is not LexState.BLOCK_COMMENT:
        return False
    if not text.startswith("/**", segment.start):
        return False
    line_start = text.rfind("\n", 0, segment.start) + 1
    return text[line_start:segment.start].strip(" ") == ""


def _line_start(text: str, offset: int) -> int:
    return text.rfind("\n", 0, offset) + 1


def insert_markers(text: str) -> str:
    """
    Puts MARKER_COMMENT at the start of the line after the code that
    precedes each type declaration lacking a doc comment. A declaration on
    the same line as that code gets INLINE_MARKER_COMMENT right before its
    modifiers instead.
    """
    masked, segments = mask_source(text)
    comment_starts = {s.end: s.start for s in segments if s.state is LexState.BLOCK_COMMENT}
    documented_ends = {
        s.end for s in segments
        if _is_doc_comment(text, s) and not _BANNER.fullmatch(s.text(text))
    }

    markers = {}
    for keyword in _TYPE_KEYWORD.finditer(masked):
        found = _marker_position(text, masked, keyword.start(), comment_starts, documented_ends)
        if found is not None:
            position, marker = found
            markers[position] = marker

    pieces = []
    copied = 0
    for position in sorted(markers):
        pieces.append(text[copied:position])
        pieces.append(markers[position])
        copied = position
    pieces.append(text[copied:])
    return "".join(pieces)


def _marker_position(text: str, masked: str, keyword_start: int, comment_starts: dict[int, int],
                     documented_ends: set[int]) -> Optional[tuple[int, str]]:
    """Walks back from a declaration keyword; None when no marker is needed."""
    depth = 0
    index = keyword_start - 1
    while index >= 0:
        ch = masked[index]
        if ch == "/" and index + 1 in comment_starts and masked[index - 1] == "*":
            if index + 1 in documented_ends:
                return None
            index = comment_starts[index + 1] - 1
            continue
        if ch == ")":
            depth += 1
        elif ch == "(":
            depth = max(depth - 1, 0)
        elif ch in ";{}" and depth == 0:
            newline = text.find("\n", index + 1, keyword_start)
            if newline >= 0:
                return newline + 1, MARKER_COMMENT
            # right before the modifiers, past any comment in between
            start = index + 1
            comment_end = masked.rfind("*/", start, keyword_start)
            if comment_end >= 0:
                start = comment_end + 2
            gap = text[start:keyword_start]
            return start + len(gap) - len(gap.lstrip()), INLINE_MARKER_COMMENT
        index -= 1
    return 0, MARKER_COMMENT


class SourceScanner:
    """
    Iterates `(SourceCommentSpan, SignatureKey)` pairs of one source text and
    assembles the output as comments are replaced. Single pass; build a new
    scanner to start over.
    """

    def __init__(self, source: str, class_name: str, class_kind: str = "class",
                 synthesizer=None):
        if synthesizer is None:
            from javadoc_merge.synthesizer import CommentSynthesizer
            synthesizer = CommentSynthesizer()
        self.synthesizer = synthesizer
        self.class_kind = class_kind
        self.replaced = 0

        self._text = insert_markers(source)
        self._masked, self._segments = mask_source(self._text)
        self._scopes = [ClassScope(_OWNER_PACKAGE.sub("", class_name, count=1), len(self._text))]
        self._pending = self._candidates()
        self._lookahead: Optional[_Candidate] = next(self._pending, None)
        self._current: Optional[SourceCommentSpan] = None

        self._output: list[str] = []
        self._copied = 0
        self._result: Optional[str] = None

    # -- iteration ------------------------------------------------------------

    def __iter__(self) -> Iterator[tuple[SourceCommentSpan, SignatureKey]]:
        return self

    def __next__(self) -> tuple[SourceCommentSpan, SignatureKey]:
        self._current = None
        while self._lookahead is not None:
            candidate = self._lookahead
            self._lookahead = next(self._pending, None)
            comment = self._text[candidate.span_start:candidate.span_end]

            if _BANNER.fullmatch(comment):
                continue

            if MARKER_COMMENT in comment or INLINE_MARKER_COMMENT[1:] in comment:
                self._resolve(candidate)  # keeps the class stack in step
                start = candidate.span_start
                if INLINE_MARKER_COMMENT[1:] in comment:
                    start -= 1  # the line break inserted with it
                self._splice(start, candidate.span_end, "")
                continue

            # A run of adjacent comments documents one declaration: the last wins
            if self._lookahead is not None and not self._lookahead.code_before:
                continue

            signature = self._resolve(candidate)
            if signature is None:
                continue
            self._current = SourceCommentSpan(comment, candidate.span_start, candidate.span_end, signature)
            return self._current, signature
        raise StopIteration

    def _candidates(self) -> Iterator[_Candidate]:
        code_before = False
        for segment in self._segments:
            if _is_doc_comment(self._text, segment):
                span_end = segment.end
                if self._text.startswith("\n", span_end):
                    span_end += 1
                yield _Candidate(_line_start(self._text, segment.start), segment.end, span_end, code_before)
                code_before = False
            elif not segment.is_comment and segment.text(self._text).strip():
                code_before = True

    # -- signatures -----------------------------------------------------------

    @property
    def current_scope(self) -> ClassScope:
        return self._scopes[-1]

    def _resolve(self, candidate: _Candidate) -> Optional[SignatureKey]:
        while len(self._scopes) > 1 and candidate.span_end > self._scopes[-1].end:
            self._scopes.pop()

        start = _ANNOTATIONS.match(self._masked, candidate.comment_end).end()
        raw = self._read_signature(start)
        if raw is None:
            log.warning("No signature after the doc comment at offset %d in %s:\n%s",
                        candidate.comment_end, self._scopes[0].name,
                        self._text[candidate.comment_end:candidate.comment_end + 200])
            return None
        try:
            signature = SignatureKey.normalize(self.current_scope.name, raw)
        except SignatureError as e:
            log.warning("%s (in %s)", e, self.current_scope.name)
            return None

        if signature.declares_inner_class:
            end = matching_brace_end(self._masked, start)
            if end is None:
                log.warning("End of inner class %s#%s not found", self._scopes[0].name, signature.owner)
                end = candidate.span_end
            self._scopes.append(ClassScope(signature.owner, end))
        return signature

    def _read_signature(self, start: int) -> Optional[str]:
        terminator = _SIGNATURE_END.search(self._masked, start)
        if terminator is None or terminator.start() == start:
            return None
        raw = _COMMENT_REMAINS.sub(" ", self._masked[start:terminator.start()])
        if self.class_kind == "@interface":
            raw = _ANNOTATION_DEFAULT.sub("", raw.replace("()", ""))
        return raw if raw.strip() else None

    # -- output ---------------------------------------------------------------

    def set_localized_comment(self, signature: SignatureKey, doc_comment: Optional[DocComment]):
        """
        Replaces the current comment with one synthesized from `doc_comment`.
        Nothing happens without a doc comment or when synthesis yields nothing.
        """
        span = self._current
        if doc_comment is None or span is None:
            return
        if signature != span.signature:
            raise ValueError(f"{signature} is not the current comment ({span.signature})")
        replacement = self.synthesizer.synthesize(span, doc_comment)
        self._current = None
        if replacement and replacement != span.text:
            self._splice(span.start, span.end, replacement)
            self.replaced += 1

    def _splice(self, start: int, end: int, replacement: str):
        self._output.append(self._text[self._copied:start])
        self._output.append(replacement)
        self._copied = end

    def finish(self) -> str:
        """Consumes the remaining comments and returns the assembled source."""
        if self._result is None:
            for _ in self:
                pass
            self._output.append(self._text[self._copied:])
            self._result = "".join(self._output)
        return self._result

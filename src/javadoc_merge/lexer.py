# --- Java lexing without a grammar -------------------------------------------
"""
A small finite-state tokenizer that only knows where comments and literals
begin and end. Everything else is opaque code.

`mask_source` is the structural primitive the scanner builds on: it returns
a copy of the text of equal length in which the inside of every comment and
literal is blanked (newlines survive), so braces, semicolons or keywords
found in the masked text are always real code.
"""
import enum
import re
from dataclasses import dataclass
from typing import Iterator, Optional

_CODE_STOP = re.compile(r"/[*/]|[\"']")


class LexState(enum.Enum):
    NORMAL = "normal"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    STRING_LITERAL = "string_literal"
    CHAR_LITERAL = "char_literal"
    TEXT_BLOCK = "text_block"


@dataclass(frozen=True)
class Segment:
    """A run of text lexed in one state; `end` is exclusive."""
    state: LexState
    start: int
    end: int

    def text(self, source: str) -> str:
        return source[self.start:self.end]

    @property
    def is_comment(self) -> bool:
        return self.state in (LexState.LINE_COMMENT, LexState.BLOCK_COMMENT)


class JavaLexer:
    """Cursor over Java text that splits it into state segments."""

    def __init__(self, text: str, start: int = 0, end: Optional[int] = None):
        self.text = text
        self.pos = start
        self.end = len(text) if end is None else end

    def peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < self.end else ""

    def advance(self, count: int = 1):
        self.pos = min(self.pos + count, self.end)

    def segments(self) -> Iterator[Segment]:
        while self.pos < self.end:
            start = self.pos
            state = self._enter_state()
            if state is LexState.NORMAL:
                self._skip_code()
            elif state is LexState.BLOCK_COMMENT:
                self._skip_until("*/", consume=True)
            elif state is LexState.LINE_COMMENT:
                self._skip_until("\n", consume=False)
            elif state is LexState.TEXT_BLOCK:
                self.advance(3)
                self._skip_quoted('"""')
            elif state is LexState.STRING_LITERAL:
                self.advance()
                self._skip_quoted('"')
            else:
                self.advance()
                self._skip_quoted("'")
            yield Segment(state, start, self.pos)

    def _enter_state(self) -> LexState:
        ch, nxt = self.peek(), self.peek(1)
        if ch == "/" and nxt == "*":
            return LexState.BLOCK_COMMENT
        if ch == "/" and nxt == "/":
            return LexState.LINE_COMMENT
        if ch == '"':
            if self.text.startswith('"""', self.pos):
                return LexState.TEXT_BLOCK
            return LexState.STRING_LITERAL
        if ch == "'":
            return LexState.CHAR_LITERAL
        return LexState.NORMAL

    def _skip_code(self):
        match = _CODE_STOP.search(self.text, self.pos, self.end)
        self.pos = match.start() if match else self.end

    def _skip_until(self, terminator: str, consume: bool):
        # The opening delimiter is never part of the terminator search
        index = self.text.find(terminator, self.pos + 2, self.end)
        if index < 0:
            self.pos = self.end
        else:
            self.pos = index + len(terminator) if consume else index

    def _skip_quoted(self, quote: str):
        """Moves past the closing quote; a backslash always escapes the next character."""
        while self.pos < self.end:
            ch = self.peek()
            if ch == "\\":
                self.advance(2)
            elif self.text.startswith(quote, self.pos):
                self.advance(len(quote))
                return
            elif ch == "\n" and len(quote) == 1:
                return  # unterminated literal, resume on the next line
            else:
                self.advance()


def tokenize(text: str, start: int = 0, end: Optional[int] = None) -> list[Segment]:
    return list(JavaLexer(text, start, end).segments())


def mask_source(text: str) -> tuple[str, list[Segment]]:
    """
    Returns `(masked, segments)`. Comments keep their `/*`, `*/` or `//`
    delimiters and literals keep their quotes; their insides become spaces.
    """
    segments = tokenize(text)
    pieces = []
    for segment in segments:
        chunk = segment.text(text)
        if segment.state is LexState.NORMAL:
            pieces.append(chunk)
            continue
        if segment.state is LexState.BLOCK_COMMENT:
            head = "/*"
            tail = "*/" if chunk.endswith("*/") and len(chunk) >= 4 else ""
        elif segment.state is LexState.LINE_COMMENT:
            head, tail = "//", ""
        elif segment.state is LexState.TEXT_BLOCK:
            head = '"""'
            tail = '"""' if chunk.endswith('"""') and len(chunk) >= 6 else ""
        else:
            head = chunk[0]
            tail = chunk[-1] if len(chunk) > 1 and chunk[-1] == head else ""
        inner = chunk[len(head):len(chunk) - len(tail)]
        pieces.append(head + _blank(inner) + tail)
    return "".join(pieces), segments


def _blank(text: str) -> str:
    return "".join("\n" if ch == "\n" else " " for ch in text)


def matching_brace_end(masked: str, start: int) -> Optional[int]:
    """
    Finds the first `{` at or after `start` in masked text and returns the
    offset just past its matching `}`; None when the braces never balance.
    """
    depth = 0
    opened = False
    for index in range(start, len(masked)):
        ch = masked[index]
        if ch == "{":
            depth += 1
            opened = True
        elif ch == "}":
            depth -= 1
            if opened and depth == 0:
                return index + 1
    return None

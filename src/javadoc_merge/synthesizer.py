# --- Comment synthesis -------------------------------------------------------
"""
Renders a localized DocComment as a replacement for an original source
comment, keeping the original's physical line count so that line numbers
in stack traces and diffs stay valid.

The layout is produced once, then shrunk or expanded step by step. The
step order is part of the observable output; reordering it changes which
comments come out identical to earlier runs.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from javadoc_merge.config import LayoutSettings, WrapSettings
from javadoc_merge.models.doc_models import DocComment, LayoutWarning, NamedTag, SourceCommentSpan
from javadoc_merge.text_wrap import adjust_width

log = logging.getLogger(__name__)

LINE_PREFIX = " * "

_EXCEPTION_TAG = re.compile(r"\s@exception\s")
_UNDECORATE = re.compile(r"(?m)^ *\* *")
_PRE_SOURCE_PREFIX = re.compile(r"(?m)^\s*\*( |)")
_PRE_BLOCK = re.compile(r"(<pre>\n)(.+?)(\n</pre>)", re.S)
_TAGS_ONLY = re.compile(r"\s*/\*\*[\s*]*@.*", re.S)
_NO_DESCRIPTION = re.compile(r"\s*/\*\*\s*\*\s*@.*", re.S)
_BLANK_FIRST_LINE = re.compile(r"\s*/\*\*\s*\n.*", re.S)
_THROWS_ENTRY = re.compile(r"(\S+)\s+(.*)", re.S)
_LINE_START = re.compile(r"^(?=[\s\S])", re.M)
_STAR_ONLY_LINE = re.compile(r"(?m)^( *\*) +$")
_SPACE_ONLY_LINE = re.compile(r"(?m)^ +$")

_PARAGRAPHS = re.compile(r"<p>\n\n(<p>)")
_CELL_BREAK = re.compile(r"\s+(<(t[hd]|/tr))")
_ITEM_BREAK = re.compile(r"\s+(<(li|/[uo]l))")
_EMPTY_LINE = re.compile(r"(?m)^[^\S\n]*\n")
_BLOCK_OPENER = re.compile(r"([^\n])(\n(<blockquote>)?<pre>|\n<(blockquote|ol|ul)>)")
_BLOCK_CLOSER = re.compile(r"(</pre>(</blockquote>)?\n|</(blockquote|ol|ul)>\n)([^\n])")


def comment_height(text: str) -> int:
    """Physical line count; a last line without newline still counts."""
    height = text.count("\n")
    if text and not text.endswith("\n"):
        height += 1
    return height


def _first_word(text: str) -> str:
    words = text.split(None, 1)
    return words[0] if words else ""


@dataclass
class _Draft:
    """Working copy of one comment's content; shrinking mutates it."""
    source: str
    body: Optional[str] = None
    deprecated: Optional[str] = None
    sees: list[str] = field(default_factory=list)
    sinces: list[str] = field(default_factory=list)
    params: list[NamedTag] = field(default_factory=list)
    returns: list[str] = field(default_factory=list)
    throws: list[str] = field(default_factory=list)
    # copied through from the source comment
    authors: list[str] = field(default_factory=list)
    versions: list[str] = field(default_factory=list)
    serials: list[str] = field(default_factory=list)
    serial_fields: list[str] = field(default_factory=list)
    serial_datas: list[str] = field(default_factory=list)
    specs: list[str] = field(default_factory=list)

    def wrapped_tag_values(self, tag: str) -> list[str]:
        """Values of `tag` in the source comment; a value may span lines."""
        if tag not in self.source:
            return []
        undecorated = _UNDECORATE.sub("", self.source)
        pattern = re.compile(re.escape(tag) + r" *(.*?)([^{]@\w+|/\s*$)", re.S)
        values = []
        start = 0
        while True:
            match = pattern.search(undecorated, start)
            if match is None:
                return values
            values.append(match.group(1))
            start = match.end(1)

    def tag_values(self, tag: str) -> list[str]:
        """Values of a single-line `tag` in the source comment."""
        if tag not in self.source:
            return []
        pattern = re.compile(r" +" + re.escape(tag) + r"\b *(.*)\n")
        return [m.group(1) for m in pattern.finditer(self.source)]

    def count_tag(self, tag: str) -> int:
        return len(re.findall(r"\s" + re.escape(tag) + r"\s", self.source))


class _Layout:
    """One rendering of a draft plus the knobs the resize steps turn."""

    def __init__(self, synthesizer: "CommentSynthesizer", draft: _Draft, target: int,
                 width: Optional[int]):
        self.synthesizer = synthesizer
        self.draft = draft
        self.target = target
        self.initial_width = width
        self.width = width
        self.first_line = False
        self.comment = ""
        self.build()

    def build(self):
        self.comment = self.synthesizer.format_comment(self.draft, self.width, self.target)

    def rebuild(self):
        self.width = self.initial_width
        self.build()

    @property
    def height(self) -> int:
        height = self.comment.count("\n")
        return height - 1 if self.first_line else height

    @property
    def fits(self) -> bool:
        return self.height <= self.target

    def render(self) -> str:
        if not self.comment:
            return ""
        lines = _LINE_START.sub(LINE_PREFIX, self.comment)
        if self.first_line:
            header = "/**"
            lines = lines[2:] if lines.startswith(" *") else lines
        else:
            header = "/**\n"
        return header + lines + " */\n"


class CommentSynthesizer:
    """
    Builds replacement comment text. Comments that cannot be fitted are kept
    as they were and reported in `warnings`.
    """

    def __init__(self, layout: Optional[LayoutSettings] = None, wrap: Optional[WrapSettings] = None,
                 patterns=None):
        self.layout = layout or LayoutSettings()
        self.wrap = wrap or WrapSettings()
        self.patterns = patterns
        self.warnings: list[LayoutWarning] = []

    def synthesize(self, span: SourceCommentSpan, doc: DocComment) -> str:
        """
        Returns the replacement for `span`, the original text when the
        localized comment cannot be fitted, or "" when there is nothing to
        render (the caller keeps the original then).
        """
        draft = self._prepare(span.text, doc)
        indent = span.indent
        original_height = comment_height(span.text)
        target = original_height
        if original_height > self.layout.decoration_lines:
            target = original_height - self.layout.decoration_lines

        if draft.body:
            draft.body = self._replace_pre_body(draft.source, draft.body)

        if original_height <= 2:
            return self._one_line_comment(span.text, indent, draft, original_height)

        width = None
        if self.layout.initial_width is not None:
            width = self.layout.initial_width - len(indent) - len(LINE_PREFIX)
        layout = _Layout(self, draft, target, width)
        decorated = layout.render()
        if not decorated:
            return ""
        if layout.height != target:
            decorated = self._resize(layout)
            if decorated is None:
                warning = LayoutWarning(span.signature, span.text, layout.render())
                self.warnings.append(warning)
                log.warning(warning.describe())
                return span.text
            if not decorated:
                return ""

        decorated = _LINE_START.sub(indent, decorated)
        decorated = _STAR_ONLY_LINE.sub(r"\1", decorated)
        decorated = _SPACE_ONLY_LINE.sub("", decorated)
        if not span.text.endswith("\n"):
            decorated = decorated[:-1]
        return decorated

    # -- preparation ----------------------------------------------------------

    def _prepare(self, source_text: str, doc: DocComment) -> _Draft:
        draft = _Draft(
            source=_EXCEPTION_TAG.sub(" @throws ", source_text),
            body=doc.body,
            deprecated=doc.deprecated,
            sees=list(doc.sees),
            sinces=list(doc.sinces),
            params=list(doc.params),
            returns=list(doc.returns),
            throws=[str(tag) for tag in doc.throws],
        )
        draft.authors = draft.wrapped_tag_values("@author")

        # `@throws X {@inheritDoc}` in the source wins over the page text
        for value in draft.wrapped_tag_values("@throws"):
            match = _THROWS_ENTRY.match(value)
            if match is None or "@inheritDoc" not in match.group(2):
                continue
            exception = match.group(1).rsplit(".", 1)[-1]
            draft.throws = [
                f"{exception} {{@inheritDoc}}" if _first_word(entry).rsplit(".", 1)[-1] == exception else entry
                for entry in draft.throws
            ]

        draft.versions = draft.tag_values("@version")
        draft.serials = draft.tag_values("@serial")
        draft.serial_fields = draft.tag_values("@serialField")
        draft.serial_datas = draft.tag_values("@serialData")
        draft.specs = draft.tag_values("@spec")

        # Pages mark every member of a deprecated class, the source does not
        if "@deprecated" not in draft.source:
            draft.deprecated = None

        if _TAGS_ONLY.fullmatch(draft.source):
            draft.body = None
            draft.params = self._omit_tags(draft, draft.params, "@param", lambda tag: tag.name)
            draft.returns = self._omit_tag(draft, draft.returns, "@return")
            draft.throws = self._omit_tags(draft, draft.throws, "@throws", _first_word)
            draft.sees = self._omit_tags(draft, draft.sees, "@see", _first_word)
        return draft

    @staticmethod
    def _omit_tag(draft: _Draft, entries: list, tag: str) -> list:
        if entries and not draft.wrapped_tag_values(tag):
            return []
        return entries

    @staticmethod
    def _omit_tags(draft: _Draft, entries: list, tag: str, name_of) -> list:
        """Keeps only entries whose name the source comment documents."""
        if not entries:
            return entries
        source_values = draft.wrapped_tag_values(tag)
        if not source_values:
            return []
        if len(entries) <= len(source_values):
            return entries
        names = {_first_word(value) for value in source_values}
        return [entry for entry in entries if name_of(entry) in names]

    @staticmethod
    def _replace_pre_body(source: str, body: str) -> str:
        """Page <pre> blocks often lost their line breaks; use the source's."""
        if "<pre>" not in body:
            return body
        source_blocks = [m.group(2) for m in _PRE_BLOCK.finditer(_PRE_SOURCE_PREFIX.sub("", source))]
        if not source_blocks or len(_PRE_BLOCK.findall(body)) != len(source_blocks):
            return body
        blocks = iter(source_blocks)
        return _PRE_BLOCK.sub(lambda m: m.group(1) + next(blocks) + m.group(3), body)

    @staticmethod
    def _one_line_comment(source: str, indent: str, draft: _Draft, height: int) -> str:
        if draft.body:
            text = draft.body.replace("\n", "")
        elif draft.sinces:
            text = "@since " + draft.sinces[0].replace("\n", "")
        else:
            return ""
        out = indent + "/** " + text
        if height == 2:
            out += "\n" + indent
        out += " */"
        if source.endswith("\n"):
            out += "\n"
        return out

    # -- rendering ------------------------------------------------------------

    def _adjust(self, value: str, width: Optional[int]) -> str:
        return adjust_width(value, width, self.wrap, self.patterns)

    def format_comment(self, draft: _Draft, width: Optional[int], target: int) -> str:
        """Undecorated comment lines, each terminated by a newline."""
        parts = []
        if draft.body:
            if target == 1:
                return draft.body.replace("\n", "") + "\n"
            parts.append(self._adjust(draft.body, width) + "\n")

        if draft.deprecated:
            parts.append(self._adjust("@deprecated " + draft.deprecated, width) + "\n")

        self._append_tags("@author  ", draft.authors, parts, width)
        self._append_tags("@version ", draft.versions, parts, width)
        self._append_params(draft.params, parts, width)
        self._append_tags("@return  ", draft.returns, parts, width)
        self._append_tags("@throws  ", draft.throws, parts, width)
        self._append_tags("@serialField ", draft.serial_fields, parts, width)
        self._append_tags("@serialData ", draft.serial_datas, parts, width)
        self._append_tags("@see     ", draft.sees, parts, width)
        self._append_tags("@since   ", draft.sinces, parts, width)
        self._append_tags("@serial  ", draft.serials, parts, width)
        self._append_tags("@spec    ", draft.specs, parts, width)

        text = "".join(parts)
        if text.endswith("\n\n"):
            text = text[:-1]
        return text

    def _append_params(self, params: list[NamedTag], parts: list[str], width: Optional[int]):
        if not params:
            return
        name_width = self.layout.param_name_min
        for param in params:
            if name_width < len(param.name) < self.layout.param_name_cap:
                name_width = len(param.name)

        tag = "@param   "
        continuation = " " * (len(tag) + name_width + 1)
        for param in params:
            line = f"{param.name}{' ' * (name_width - len(param.name))} {param.description}".rstrip()
            lines = [t for t in self._adjust(line, _narrow(width, len(tag))).split("\n") if t]
            parts.append(tag + (lines[0] if lines else "") + "\n")
            for rest in lines[1:]:
                parts.append(continuation + rest + "\n")

    def _append_tags(self, tag: str, values: list[str], parts: list[str], width: Optional[int]):
        continuation = " " * len(tag)
        for value in values:
            lines = [t for t in self._adjust(value, _narrow(width, len(tag))).split("\n") if t]
            parts.append(tag + (lines[0] if lines else "") + "\n")
            for rest in lines[1:]:
                parts.append(continuation + rest + "\n")

    # -- resizing -------------------------------------------------------------

    def _resize(self, layout: _Layout) -> Optional[str]:
        """Fits `layout` to its target height; None when it cannot be done."""
        draft = layout.draft
        if layout.height > layout.target:
            self._shrink(layout)

            if draft.body and not layout.fits and "\n" in draft.body:
                draft.body = _join_lines_outside_pre(draft.body)
                layout.rebuild()
                if not layout.fits:
                    self._shrink(layout)

            if draft.body and not layout.fits:
                cut = self._first_sentence_end(draft.body)
                if cut is not None:
                    draft.body = draft.body[:cut]
                    layout.rebuild()
                    if not layout.fits:
                        self._shrink(layout)

            if not layout.fits:
                return None

        if layout.height < layout.target:
            self._expand(layout)

        if not layout.comment:
            # every localized tag was cleared, nothing left to render
            return ""
        decorated = layout.render()
        if layout.height < layout.target:
            decorated = "\n" * (layout.target - layout.height) + decorated
        return decorated

    def _first_sentence_end(self, body: str) -> Optional[int]:
        ends = [body.find(t) + len(t) for t in self.layout.sentence_terminators if t in body]
        return min(ends) if ends else None

    def _shrink(self, layout: _Layout):
        draft = layout.draft
        if _NO_DESCRIPTION.fullmatch(draft.source):
            draft.body = None
            layout.build()
            if layout.fits:
                return

        cleared = [
            self._clear_missing(draft, "@see", draft.sees),
            self._clear_missing(draft, "@throws", draft.throws),
            self._clear_missing(draft, "@param", draft.params),
            self._clear_missing(draft, "@return", draft.returns),
        ]
        if any(cleared):
            layout.build()
            if layout.fits:
                return

        if self._squeeze_markup(layout, stepwise=True):
            return

        if not _BLANK_FIRST_LINE.fullmatch(draft.source):
            layout.first_line = True
            if layout.fits:
                return

        if layout.width is None:
            return
        while not layout.fits and layout.width < self.layout.max_width:
            layout.build()
            if layout.fits or self._squeeze_markup(layout, stepwise=False):
                return
            if layout.width < self.layout.step_threshold:
                layout.width += self.layout.width_step
            else:
                layout.width += self.layout.wide_width_step

    @staticmethod
    def _clear_missing(draft: _Draft, tag: str, values: list) -> bool:
        if values and draft.count_tag(tag) == 0:
            values.clear()
            return True
        return False

    def _squeeze_markup(self, layout: _Layout, stepwise: bool) -> bool:
        """
        Merges paragraph breaks, joins table and list markup onto the
        previous line and drops blank lines, until the layout fits.
        """
        for pattern, replacement in ((_PARAGRAPHS, r"\1"), (_CELL_BREAK, r"\1"),
                                     (_ITEM_BREAK, r"\1"), (_EMPTY_LINE, "")):
            if stepwise:
                self._replace_while(layout, pattern, replacement, lambda: not layout.fits)
            else:
                layout.comment = pattern.sub(replacement, layout.comment)
            if layout.fits:
                return True
        return False

    @staticmethod
    def _replace_while(layout: _Layout, pattern: re.Pattern, replacement: str, condition):
        """Replaces the first match, one at a time, while `condition()` holds."""
        while condition():
            comment, count = pattern.subn(replacement, layout.comment, count=1)
            if count == 0:
                return
            layout.comment = comment

    def _expand(self, layout: _Layout):
        if "<" not in layout.comment:
            return
        for pattern, replacement in ((_BLOCK_OPENER, r"\1\n\2"), (_BLOCK_CLOSER, r"\1\n\4")):
            self._replace_while(layout, pattern, replacement, lambda: layout.height < layout.target)


def _narrow(width: Optional[int], by: int) -> Optional[int]:
    return None if width is None else width - by


def _join_lines_outside_pre(body: str) -> str:
    """Removes newlines outside <pre> blocks; <pre> blocks get their own lines."""
    result = ""
    in_pre = False
    for ch in body:
        result += ch
        if result.endswith("<pre>"):
            in_pre = True
            result = result[:-5] + "\n<pre>"
        elif result.endswith("</pre>"):
            in_pre = False
            result += "\n"
        if ch == "\n" and not in_pre:
            result = result[:-1]
    return result

# --- Width-constrained wrapping ----------------------------------------------
"""
Reflows comment text to a display width where East-Asian wide characters
weigh 2 and everything else 1. Lines are broken preferably after
punctuation or particles, at spaces, or next to a wide character; ASCII
words are never split. `<pre>` regions pass through untouched.
"""
import re
import unicodedata
from typing import Optional

from javadoc_merge.config import WrapSettings

_TABLE_SUMMARY = re.compile(r"(?i)\s(summary=)")

DEFAULT_WRAP = WrapSettings()


def char_weight(ch: str) -> int:
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def text_weight(text: str) -> int:
    return sum(char_weight(ch) for ch in text)


def split_lines(value: str) -> list[str]:
    """Splits on `\\n`; a trailing newline does not produce an empty last line."""
    lines = value.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def adjust_width(value: str, width: Optional[int], settings: WrapSettings = DEFAULT_WRAP,
                 patterns=None) -> str:
    """
    Wraps multi-line `value` to `width` and returns it with a trailing
    newline. `width=None` means unbounded.
    """
    if width is None or text_weight(value) < width:
        return value + "\n"

    compile_ = patterns.get if patterns is not None else re.compile
    long_word = compile_(r"\s?([\x21-\x7e]{%d,})" % max(width - settings.long_word_margin, 1))

    result = []
    in_pre = False
    # Only <pre> and </pre> at the start or end of a line are recognized
    for line in split_lines(value):
        if line == "":
            result.append("\n")
            continue

        if line.startswith("</pre>"):
            in_pre = False
        elif line.startswith("<pre>"):
            in_pre = True
        if in_pre:
            result.append(line + "\n")
            if line.endswith("</pre>"):
                in_pre = False
            continue
        if line.endswith("<pre>"):
            in_pre = True

        if text_weight(line) < width:
            result.append(line + "\n")
            continue

        if "<table" in line:
            result.append(_TABLE_SUMMARY.sub(r"\n\1", line, count=1) + "\n")
            continue

        for token in long_word.sub(r"\n\1", line).split("\n"):
            if token:
                result.append(wrap_line(token, width, settings))
    return "".join(result)


def wrap_line(line: str, width: int, settings: WrapSettings = DEFAULT_WRAP) -> str:
    """Inserts line breaks into a single line; the result ends with a newline."""
    if not line:
        return "\n"
    min_width = width - settings.min_margin
    max_width = width + settings.max_margin
    skip_width = width + settings.skip_margin
    breakers = settings.punctuation + settings.particles
    last = len(line) - 1

    out = []
    buf = ""
    buf_weight = 0
    for pos in range(last):
        if buf_weight == 0:
            rest = line[pos:last]
            if text_weight(rest) <= skip_width:
                buf += rest
                break

        ch = line[pos]
        weight = char_weight(ch)
        buf_weight += weight
        broke = False

        if buf_weight > min_width:
            if ch == " ":
                broke = True
                buf += "\n"
            elif ch in breakers:
                nxt = line[pos + 1]
                if nxt not in settings.punctuation and nxt not in " .":
                    broke = True
                    buf += ch + "\n"
            elif buf_weight > width:
                if ch == "<" or weight > 1:
                    broke = True
                    buf += "\n" + ch
                elif buf_weight > max_width:
                    buf, buf_weight = _break_backwards(buf, buf_weight)

        if broke:
            out.append(buf)
            buf = ""
            buf_weight = 0
        else:
            buf += ch
    buf += line[last]

    out.append(buf)
    out.append("\n")
    return "".join(out)


def _break_backwards(buf: str, buf_weight: int) -> tuple[str, int]:
    """Breaks at the last space or after the last wide character of `buf`."""
    for index in range(len(buf) - 1, 0, -1):
        ch = buf[index]
        if ch == " ":
            buf = buf[:index] + "\n" + buf[index + 1:]
            return buf, text_weight(buf[index + 1:])
        if char_weight(ch) > 1:
            buf = buf[:index + 1] + "\n" + buf[index + 1:]
            return buf, text_weight(buf[index + 2:])
    return buf, buf_weight

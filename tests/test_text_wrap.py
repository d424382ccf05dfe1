from javadoc_merge.caches import PatternCache
from javadoc_merge.text_wrap import adjust_width, char_weight, split_lines, text_weight, wrap_line


def test_weights():
    assert char_weight("a") == 1
    assert char_weight("あ") == 2
    assert char_weight("Ａ") == 2
    assert text_weight("aあ") == 3


def test_split_lines():
    assert split_lines("a\nb\n") == ["a", "b"]
    assert split_lines("a\n\nb") == ["a", "", "b"]
    assert split_lines("") == []


def test_short_and_unbounded_values_pass_through():
    assert adjust_width("short", 80) == "short\n"
    assert adjust_width("x" * 500, None) == "x" * 500 + "\n"


def test_wrap_at_spaces():
    line = "the quick brown fox jumps over the lazy dog"
    assert wrap_line(line, 20) == "the quick brown\nfox jumps over\nthe lazy dog\n"


def test_wrap_wide_characters():
    wrapped = wrap_line("あ" * 30, 20)
    lines = wrapped.rstrip("\n").split("\n")
    assert "".join(lines) == "あ" * 30
    assert [len(line) for line in lines] == [10, 11, 9]


def test_long_ascii_word_gets_its_own_line():
    value = "see http://example.com/a/very/long/path/that/never/ends here"
    assert adjust_width(value, 30, patterns=PatternCache()) == (
        "see\nhttp://example.com/a/very/long/path/that/never/ends\nhere\n"
    )


def test_pre_blocks_are_not_wrapped():
    value = "<pre>\n" + "x" * 100 + "\n</pre>"
    assert adjust_width(value, 20) == value + "\n"


def test_table_summary_moves_to_next_line():
    assert adjust_width('<table border="1" summary="x">', 10) == '<table border="1"\nsummary="x">\n'

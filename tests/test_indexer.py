import pytest

pytest.importorskip("tree_sitter_html")

from javadoc_merge.caches import PatternCache  # noqa: E402
from javadoc_merge.config import LabelVocabulary  # noqa: E402
from javadoc_merge.indexer import DocCommentIndex, PageReader, format_html, plain_text  # noqa: E402
from javadoc_merge.models.doc_models import NamedTag  # noqa: E402
from javadoc_merge.signature import SignatureKey  # noqa: E402

JAVA17_PAGE = """<!DOCTYPE HTML>
<html lang="ja">
<body>
<section class="method-details" id="method-detail">
<h2>メソッドの詳細</h2>
<ul class="member-list">
<li>
<section class="detail" id="put(K,V)">
<h3>put</h3>
<div class="member-signature"><span class="modifiers">public</span>&nbsp;<span class="return-type"><a href="HashMap.html" title="HashMap内の型パラメータ">V</a></span>&nbsp;<span class="element-name">put</span><wbr><span class="parameters">(<a href="HashMap.html" title="HashMap内の型パラメータ">K</a>&nbsp;key,
 <a href="HashMap.html" title="HashMap内の型パラメータ">V</a>&nbsp;value)</span></div>
<div class="block">指定された値と指定されたキーをこのマップで関連付けます。</div>
<dl class="notes">
<dt>パラメータ:</dt>
<dd><code>key</code> - キー</dd>
<dd><code>value</code> - 値</dd>
<dt>戻り値:</dt>
<dd>以前の値</dd>
</dl>
</section>
</li>
</ul>
</section>
</body>
</html>
"""


@pytest.fixture
def index(sample_page):
    return DocCommentIndex.build("com.example.Sample", sample_page)


@pytest.fixture
def reader():
    reader = PageReader("com.example", LabelVocabulary(), PatternCache(), None)
    reader.class_path = reader.owner = "Sample"
    return reader


def key(member, arguments=""):
    return SignatureKey("Sample", member, arguments)


def test_every_declaration_is_indexed(index):
    assert len(index) == 5
    for k in (key("Sample"), key("MAX"), key("get", "(int,String)"), key("old", "()"), key("size", "()")):
        assert k in index


def test_class_comment(index):
    comment = index.get(key("Sample"))
    assert comment.body == "サンプルのクラスです。{@link Helper}を参照。"
    assert comment.sinces == ["1.2"]
    assert comment.sees == ["java.util.List", "#size()"]
    assert comment.deprecated is None


def test_field_comment(index):
    assert index.get(key("MAX")).body == "最大値です。"


def test_method_tags(index):
    comment = index.get(key("get", "(int,String)"))
    assert comment.body == "要素を取得します。"
    assert comment.params == [NamedTag("index", "インデックス"), NamedTag("name", "名前")]
    assert comment.returns == ["要素"]
    assert comment.throws == [NamedTag("IOException", "入出力エラーの場合")]


def test_deprecated_method(index):
    comment = index.get(key("old", "()"))
    assert comment.deprecated == "{@link #get(int, String)}を使用してください"
    assert comment.body == "古いメソッドです。"


def test_missing_pages_give_an_empty_index():
    index = DocCommentIndex.build("com.example.Sample", None)
    assert index.is_empty()
    assert index.get(key("Sample")) is None


def test_java17_layout():
    index = DocCommentIndex.build("java.util.HashMap", JAVA17_PAGE)
    comment = index.get(SignatureKey("HashMap", "put", "(K,V)"))
    assert comment is not None
    assert comment.body == "指定された値と指定されたキーをこのマップで関連付けます。"
    assert comment.params == [NamedTag("key", "キー"), NamedTag("value", "値")]
    assert comment.returns == ["以前の値"]


def _detail(signature, body):
    return (
        f'<section class="detail">\n<div class="member-signature">{signature}</div>\n'
        f'<div class="block">{body}</div>\n</section>\n'
    )


def test_duplicate_signature_last_entry_wins():
    page = (
        "<html>\n<body>\n"
        + _detail("public&nbsp;void&nbsp;run()", "古い説明。")
        + _detail("public void run()", "新しい説明。")
        + "</body>\n</html>\n"
    )
    index = DocCommentIndex.build("com.example.Task", page)
    assert len(index) == 1
    assert index.get(SignatureKey("Task", "run", "()")).body == "新しい説明。"


def test_list_items_in_descriptions_are_not_declarations(sample_page):
    page = sample_page.replace(
        '<div class="block">サイズを返します。</div>',
        '<div class="block">サイズを返します。<ul><li><pre>size()</pre></li></ul></div>',
    )
    index = DocCommentIndex.build("com.example.Sample", page)
    assert len(index) == 5
    assert index.get(key("size", "()")).body.startswith("サイズを返します。")


def test_inner_class_pages(outer_pages):
    index = DocCommentIndex.build(
        "com.example.Outer",
        outer_pages["com.example.Outer"],
        [("Outer.Inner", outer_pages["com.example.Outer.Inner"])],
    )
    assert index.get(SignatureKey("Inner", "Inner")).body == "内部クラスです。"
    assert index.get(SignatureKey("Inner", "run", "()")).body == "実行します。"
    assert index.get(SignatureKey("Outer", "stop", "()")).body == "停止します。"


# --- links ---------------------------------------------------------------------

@pytest.mark.parametrize(
    "url, expected",
    [
        ("../../java/lang/String.html", "String"),
        ("../../java/util/Map.Entry.html#getKey--", "java.util.Map.Entry#getKey()"),
        ("Sample.html#add-java.lang.Object:A-int-", "#add(Object[], int)"),
        ("Helper.html", "Helper"),
        ("../../java/util/List.html#add(E)", "java.util.List#add(E)"),
        ("Sample.html#%3Cinit%3E(int)", "#Sample(int)"),
        ("#size()", "#size()"),
        ("https://docs.oracle.com/index.html", None),
        ("../../overview-summary.css", None),
    ],
)
def test_resolve_reference(reader, url, expected):
    assert reader.resolve_reference(url) == expected


def test_rewrite_links(reader):
    markup = ('<a href="../../java/lang/String.html" title="java.lang内のクラス"><code>String</code></a>と'
              '<a href="Helper.html#run--"><code>実行</code></a>')
    assert reader.rewrite_links(markup) == "{@link String}と{@link Helper#run() 実行}"


def test_external_links_are_left_alone(reader):
    markup = '<a href="https://example.com/x.html"><code>x</code></a>'
    assert reader.rewrite_links(markup) == markup


# --- markup normalization -----------------------------------------------------

def test_format_html_paragraphs():
    assert format_html("Line <P>Para</P>") == "Line\n\n<p>Para"


def test_format_html_pre():
    assert format_html("Ex:<pre>\ncode\n</pre>done") == "Ex:\n<pre>\ncode\n</pre>\ndone"


def test_format_html_lists():
    assert format_html("Items:<UL><LI>one</LI><LI>two</LI></UL>") == (
        "Items:\n<ul>\n<li>one\n</li>\n<li>two\n</li>\n</ul>"
    )


def test_format_html_defuses_comment_terminators():
    assert format_html("a */ b \\u0041") == "a *&#47; b &#92;u0041"


def test_format_html_line_breaks():
    assert format_html("a<br/>b") == "a<br>b"


def test_plain_text():
    assert plain_text("<code>a</code>&nbsp;&lt;b&gt;\u200b") == "a <b>"

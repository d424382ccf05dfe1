import pytest

pytest.importorskip("tree_sitter_java")
pytest.importorskip("tree_sitter_html")

from javadoc_merge.errors import StructuralError  # noqa: E402
from javadoc_merge.inputs.doc_files import DocumentationPages  # noqa: E402
from javadoc_merge.merger import MergeEngine  # noqa: E402


@pytest.fixture
def engine(sample_page):
    return MergeEngine(DocumentationPages({"com.example.Sample": sample_page}))


def test_merge(engine, sample_source, sample_merged):
    assert engine.merge(sample_source, "Sample") == sample_merged


def test_merge_report(engine, sample_source):
    result = engine.merge_with_report(sample_source, "Sample")
    assert result.documented
    assert result.class_name == "com.example.Sample"
    assert result.class_kind == "class"
    assert result.replaced == 4
    assert result.warnings == []


def test_line_count_is_kept(engine, sample_source):
    assert engine.merge(sample_source, "Sample").count("\n") == sample_source.count("\n")


def test_undocumented_declaration_gets_no_comment(engine, sample_source):
    # the page documents size(), the source does not
    assert "サイズを返します" not in engine.merge(sample_source, "Sample")


def test_merge_is_deterministic(engine, sample_source):
    assert engine.merge(sample_source, "Sample") == engine.merge(sample_source, "Sample")


def test_no_documentation_leaves_source_unchanged(sample_source):
    engine = MergeEngine(DocumentationPages({}))
    result = engine.merge_with_report(sample_source, "Sample")
    assert result.text == sample_source
    assert not result.documented
    assert result.class_name == "com.example.Sample"


def test_inner_classes(outer_pages, outer_source, outer_merged):
    engine = MergeEngine(DocumentationPages(outer_pages))
    result = engine.merge_with_report(outer_source, "Outer")
    assert result.text == outer_merged
    assert result.replaced == 3


def test_missing_class_is_a_structural_error(engine, sample_source):
    with pytest.raises(StructuralError):
        engine.merge(sample_source, "Other")


@pytest.mark.parametrize(
    "source, kind",
    [
        ("package p;\npublic interface Shape {\n}\n", "interface"),
        ("package p;\npublic enum Shape { A, B }\n", "enum"),
        ("package p;\npublic @interface Shape {\n}\n", "@interface"),
        ("package p;\npublic record Shape(int x) {\n}\n", "class"),
    ],
)
def test_locate_class_kinds(engine, source, kind):
    info = engine.locate_class(source, "Shape")
    assert info.kind == kind
    assert info.fqcn == "p.Shape"
    assert info.package == "p"


def test_default_package(engine):
    info = engine.locate_class("class Foo {\n    class Bar {}\n}\n", "Foo")
    assert info.fqcn == "Foo"
    assert info.package is None
    with pytest.raises(StructuralError):
        engine.locate_class("class Foo {\n    class Bar {}\n}\n", "Bar")

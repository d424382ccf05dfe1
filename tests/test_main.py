import json

import pytest

from javadoc_merge.main import main, parse_args

pytest.importorskip("tree_sitter_java")
pytest.importorskip("tree_sitter_html")


def test_parse_args():
    args = parse_args(["src", "docs", "out", "-j", "2", "--wrap-width", "80"])
    assert (args.source_dir, args.doc_dir, args.output_dir) == ("src", "docs", "out")
    assert args.jobs == 2
    assert args.wrap_width == 80
    assert args.report is None


def test_main_writes_merged_tree_and_report(tmp_path, sample_source, sample_page, sample_merged, capsys):
    src = tmp_path / "src" / "com" / "example"
    docs = tmp_path / "docs" / "com" / "example"
    src.mkdir(parents=True)
    docs.mkdir(parents=True)
    (src / "Sample.java").write_text(sample_source, encoding="utf-8")
    (docs / "Sample.html").write_text(sample_page, encoding="utf-8")
    (tmp_path / "docs" / "allclasses-index.html").write_text("<html></html>\n", encoding="utf-8")
    report = tmp_path / "report.json"

    status = main([str(tmp_path / "src"), str(tmp_path / "docs"), str(tmp_path / "out"),
                   "--report", str(report)])

    assert status == 0
    assert (tmp_path / "out" / "com" / "example" / "Sample.java").read_text(encoding="utf-8") == sample_merged
    assert "com.example.Sample (class)  4 comment(s) replaced" in capsys.readouterr().out
    files = json.loads(report.read_text(encoding="utf-8"))["files"]
    assert files[0]["path"] == "com/example/Sample.java"
    assert files[0]["replaced"] == 4


def test_main_refuses_bad_directories(tmp_path, sample_source, caplog):
    src = tmp_path / "src"
    src.mkdir()
    (src / "A.java").write_text(sample_source, encoding="utf-8")

    status = main([str(src), str(tmp_path / "no-such-docs"), str(src)])

    assert status == 1
    assert "Not an API documentation root" in caplog.text
    assert (src / "A.java").read_text(encoding="utf-8") == sample_source


def test_main_refuses_output_over_source(tmp_path, sample_source, caplog):
    src = tmp_path / "src"
    docs = tmp_path / "docs"
    src.mkdir()
    docs.mkdir()
    (docs / "allclasses-frame.html").write_text("<html></html>\n", encoding="utf-8")
    (src / "A.java").write_text(sample_source, encoding="utf-8")

    assert main([str(src), str(docs), str(src)]) == 1
    assert "Output directory is the source directory" in caplog.text
    assert (src / "A.java").read_text(encoding="utf-8") == sample_source

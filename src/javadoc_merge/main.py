#!/usr/bin/env python3
"""
Javadoc Merge (Python)
----------------------
Copies a Java source tree and replaces its doc comments with the localized
text of a translated API documentation tree, keeping every comment's line
count so the merged sources line up with the originals.

USAGE EXAMPLES
--------------
# Merge the Japanese JDK documentation into the JDK sources:
javadoc-merge jdk/src docs/ja/api out/src

# Parallel, with a wrap width and a JSON report:
javadoc-merge jdk/src docs/ja/api out/src --jobs 4 --wrap-width 80 --report merge.json

DEPENDENCIES
------------
    pip install tree-sitter tree-sitter-java tree-sitter-html
"""

import argparse
import logging
import sys

from javadoc_merge.config import LayoutSettings, MergeConfig
from javadoc_merge.errors import MergeError
from javadoc_merge.inputs.directory_scanning import merge_directory
from javadoc_merge.outputs.output import print_summary, to_json

log = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="javadoc-merge",
        description="Merge localized Javadoc HTML back into Java source comments.",
    )
    parser.add_argument("source_dir", help="Java source tree to read")
    parser.add_argument("doc_dir", help="localized API documentation root (the directory holding java/, javax/, ...)")
    parser.add_argument("output_dir", help="where merged sources are written")
    parser.add_argument("--source-encoding", help="encoding of the Java sources (default utf-8)")
    parser.add_argument("--doc-encoding", help="encoding of the documentation pages (default utf-8)")
    parser.add_argument("--output-encoding", help="encoding of the merged sources (default utf-8)")
    parser.add_argument("-j", "--jobs", type=int, help="files merged in parallel")
    parser.add_argument("--wrap-width", type=int, help="wrap localized text at this width")
    parser.add_argument("--report", help="write a JSON report to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = MergeConfig.from_env(
        source_encoding=args.source_encoding,
        doc_encoding=args.doc_encoding,
        output_encoding=args.output_encoding,
        jobs=args.jobs,
        layout=LayoutSettings(initial_width=args.wrap_width) if args.wrap_width else None,
    )
    try:
        results = merge_directory(args.source_dir, args.doc_dir, args.output_dir, config)
    except MergeError as e:
        log.error("%s", e)
        return 1

    # Print a concise human-readable summary
    print_summary(results)

    if args.report:
        with open(args.report, "w", encoding="utf-8") as f:
            f.write(to_json(results))
    return 0


if __name__ == "__main__":
    sys.exit(main())

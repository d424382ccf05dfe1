# --- Directory scanning convenience -----------------------------------------
import logging
import os
import shutil
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

from javadoc_merge.config import MergeConfig
from javadoc_merge.errors import MergeError, StructuralError
from javadoc_merge.inputs.doc_files import DocumentationDirectory
from javadoc_merge.merger import MergeEngine
from javadoc_merge.models.doc_models import MergeResult

log = logging.getLogger(__name__)

PACKAGE_INFO = "package-info.java"


def read_text(path: str, encoding: str = "utf-8") -> str:
    with open(path, "r", encoding=encoding, errors="replace", newline="") as f:
        return f.read()


def normalize_source(text: str) -> str:
    """LF line endings and tabs expanded to 8 columns, as the merge expects."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return text.expandtabs(8)


def iter_source_files(root_dir: str):
    """Yields paths relative to `root_dir`, in a stable order."""
    for dirpath, dirnames, filenames in os.walk(root_dir):
        dirnames.sort()
        for fn in sorted(filenames):
            yield os.path.relpath(os.path.join(dirpath, fn), root_dir)


class DirectoryMerger:
    """
    Merges every .java file under `source_dir` into `output_dir`. Other
    files are copied as they are. With `config.jobs > 1` files are merged
    on a thread pool, each worker thread holding its own MergeEngine.
    """

    def __init__(self, source_dir: str, doc_dir: str, output_dir: str,
                 config: Optional[MergeConfig] = None,
                 engine_factory: Optional[Callable[[], MergeEngine]] = None):
        self.source_dir = source_dir
        self.output_dir = output_dir
        self.config = config or MergeConfig()
        self.documents = DocumentationDirectory(doc_dir, self.config.doc_encoding)
        self.engine_factory = engine_factory or (lambda: MergeEngine(self.documents, self.config))
        self._local = threading.local()

    def engine(self) -> MergeEngine:
        engine = getattr(self._local, "engine", None)
        if engine is None:
            engine = self._local.engine = self.engine_factory()
        return engine

    def validate(self):
        """Raises MergeError when the directories cannot be merged as given."""
        if not self.documents.is_api_root():
            raise MergeError(f"Not an API documentation root (no allclasses page): {self.documents.root}")
        if not os.path.isdir(self.source_dir):
            raise MergeError(f"Source directory not found: {self.source_dir}")
        if next(iter_source_files(self.source_dir), None) is None:
            raise MergeError(f"Source directory is empty: {self.source_dir}")
        if os.path.realpath(self.output_dir) == os.path.realpath(self.source_dir):
            raise MergeError(f"Output directory is the source directory: {self.output_dir}")

    def run(self) -> list[MergeResult]:
        self.validate()
        paths = list(iter_source_files(self.source_dir))
        if self.config.jobs > 1:
            with ThreadPoolExecutor(max_workers=self.config.jobs) as pool:
                futures = [pool.submit(self.process, path) for path in paths]
                try:
                    results = [future.result() for future in futures]
                except BaseException:
                    # files not started yet are dropped
                    for future in futures:
                        future.cancel()
                    raise
        else:
            results = [self.process(path) for path in paths]
        return [result for result in results if result is not None]

    def process(self, relative_path: str) -> Optional[MergeResult]:
        """Merges or copies one file; returns a result for .java files."""
        source_path = os.path.join(self.source_dir, relative_path)
        output_path = os.path.join(self.output_dir, relative_path)
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

        filename = os.path.basename(relative_path)
        if not filename.endswith(".java"):
            shutil.copyfile(source_path, output_path)
            return None

        source = normalize_source(read_text(source_path, self.config.source_encoding))
        if filename == PACKAGE_INFO:
            result = MergeResult(source)
        else:
            try:
                result = self.engine().merge_with_report(source, filename[:-len(".java")])
            except StructuralError as e:
                log.warning("Failed to merge %s: %s", source_path, e)
                result = MergeResult(source)
        result.path = relative_path

        with open(output_path, "w", encoding=self.config.output_encoding, errors="replace", newline="") as f:
            f.write(result.text)
        return result


def merge_directory(source_dir: str, doc_dir: str, output_dir: str,
                    config: Optional[MergeConfig] = None) -> list[MergeResult]:
    return DirectoryMerger(source_dir, doc_dir, output_dir, config).run()

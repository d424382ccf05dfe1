# --- Documentation pages -----------------------------------------------------
import logging
import os
import re
from typing import Optional

from javadoc_merge.caches import DirectoryListingCache
from javadoc_merge.models.ast_models import DocFragment

log = logging.getLogger(__name__)

WAVE_DASH = "〜"
FULLWIDTH_TILDE = "～"

# Class index page at the API root; the name changed across JDK releases
API_ROOT_PAGES = ("allclasses-frame.html", "allclasses.html", "allclasses-index.html")


def normalize_markup(markup: str) -> str:
    """Line endings to LF, tabs to spaces, WAVE DASH to FULLWIDTH TILDE."""
    markup = markup.replace("\r\n", "\n").replace("\r", "\n")
    markup = markup.expandtabs(8)
    return markup.replace(WAVE_DASH, FULLWIDTH_TILDE)


def split_class_name(class_name: str) -> tuple[str, str]:
    package, _, simple_name = class_name.rpartition(".")
    return package, simple_name


class DocumentationDirectory:
    """
    An API documentation tree on disk: `<root>/java/util/Map.html` for the
    class and `<root>/java/util/Map.Entry.html` for each inner class.
    """

    def __init__(self, root: str, encoding: str = "utf-8"):
        self.root = root
        self.encoding = encoding

    def is_api_root(self) -> bool:
        return any(os.path.isfile(os.path.join(self.root, name)) for name in API_ROOT_PAGES)

    def page_path(self, class_name: str) -> str:
        return os.path.join(self.root, *class_name.split(".")) + ".html"

    def fragments(self, class_name: str,
                  listings: Optional[DirectoryListingCache] = None) -> list[DocFragment]:
        """The class page followed by its inner-class pages, sorted by name."""
        listings = listings or DirectoryListingCache()
        package, simple_name = split_class_name(class_name)
        path = self.page_path(class_name)
        directory = os.path.dirname(path)

        found = []
        if os.path.isfile(path):
            markup = self._read(path)
            if markup is not None:
                found.append(DocFragment(package, simple_name, markup))

        inner_page = re.compile(re.escape(simple_name) + r"\..+\.html")
        for entry in listings.list(directory):
            if inner_page.fullmatch(entry):
                markup = self._read(os.path.join(directory, entry))
                if markup is not None:
                    found.append(DocFragment(package, entry[:-len(".html")], markup))
        return found

    def _read(self, path: str) -> Optional[str]:
        try:
            with open(path, "r", encoding=self.encoding) as f:
                return normalize_markup(f.read())
        except (OSError, UnicodeDecodeError) as e:
            log.warning("Could not read documentation page %s: %s", path, e)
            return None


class DocumentationPages:
    """In-memory documentation keyed by page class name, e.g. "java.util.Map.Entry"."""

    def __init__(self, pages: Optional[dict[str, str]] = None):
        self.pages = dict(pages or {})

    def fragments(self, class_name: str, listings=None) -> list[DocFragment]:
        package, simple_name = split_class_name(class_name)
        found = []
        if class_name in self.pages:
            found.append(DocFragment(package, simple_name, normalize_markup(self.pages[class_name])))
        prefix = class_name + "."
        for name in sorted(self.pages):
            if name.startswith(prefix):
                found.append(DocFragment(package, name[len(package) + 1:] if package else name,
                                         normalize_markup(self.pages[name])))
        return found

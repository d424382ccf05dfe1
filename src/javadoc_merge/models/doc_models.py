# --- Data models for the merge -----------------------------------------------
from dataclasses import dataclass, field
from typing import Optional

from javadoc_merge.signature import SignatureKey


@dataclass(frozen=True)
class NamedTag:
    """A `@param` or `@throws` entry: the documented name plus its text."""
    name: str  # e.g. "index", "IOException"
    description: str  # already link-rewritten and HTML-normalized

    def __str__(self) -> str:
        return f"{self.name} {self.description}"


@dataclass
class DocComment:
    """Localized comment content of one declaration, taken from the API pages."""
    signature: SignatureKey
    body: Optional[str] = None
    deprecated: Optional[str] = None
    sees: list[str] = field(default_factory=list)
    sinces: list[str] = field(default_factory=list)
    params: list[NamedTag] = field(default_factory=list)
    returns: list[str] = field(default_factory=list)  # at most one is meaningful
    throws: list[NamedTag] = field(default_factory=list)


@dataclass(frozen=True)
class SourceCommentSpan:
    """A doc comment exactly as written in the source, decoration included."""
    text: str  # leading indentation, /** ... */ and the trailing newline if any
    start: int  # offsets into the scanned text
    end: int
    signature: Optional[SignatureKey] = None

    @property
    def indent(self) -> str:
        return self.text[:len(self.text) - len(self.text.lstrip(" "))]


@dataclass(frozen=True)
class ClassScope:
    """A class body the scanner is inside of."""
    name: str  # short class name, e.g. "Entry"
    end: int  # offset just past the closing brace of the body


@dataclass(frozen=True)
class LayoutWarning:
    """A localized comment that could not be fitted into the original height."""
    signature: Optional[SignatureKey]
    source_comment: str
    rejected_comment: str

    def describe(self) -> str:
        return (
            f"{self.signature}: line count could not be matched, original kept.\n"
            "-------------------------------------------------\n"
            f"Original comment:\n{self.source_comment}\n"
            f"Localized comment:\n{self.rejected_comment}"
            "-------------------------------------------------"
        )


@dataclass
class MergeResult:
    """Outcome of merging one source file."""
    text: str
    class_name: Optional[str] = None  # fully-qualified, e.g. "java.util.ArrayList"
    class_kind: Optional[str] = None  # class | interface | @interface | enum
    documented: bool = False  # False when no documentation page was found
    replaced: int = 0  # number of comments replaced by localized ones
    warnings: list[LayoutWarning] = field(default_factory=list)
    path: Optional[str] = None  # source path relative to the tree root, when merging a directory

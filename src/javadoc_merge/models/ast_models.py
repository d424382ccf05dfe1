# --- Data models for parsed Java sources -------------------------------------
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ClassInfo:
    """The top-level type declaration a source file is merged for."""
    simple_name: str  # e.g., "ArrayList"
    fqcn: str  # fully-qualified class name, e.g., "java.util.ArrayList"
    kind: str  # class | interface | @interface | enum
    line: int
    col: int

    @property
    def package(self) -> Optional[str]:
        package, _, _ = self.fqcn.rpartition(".")
        return package or None


@dataclass(frozen=True)
class DocFragment:
    """One documentation page: the outer class page or an inner-class page."""
    package: str  # "" for the default package
    class_path: str  # "Map" or "Map.Entry"
    markup: str

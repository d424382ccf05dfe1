# --- Merge errors ------------------------------------------------------------


class MergeError(Exception):
    """Base class for everything the merge core raises on purpose."""


class StructuralError(MergeError):
    """
    The enclosing class name or kind could not be determined from a source.
    Fatal for that one file; the caller decides whether to pass it through.
    """


class SignatureError(MergeError):
    """A declaration signature did not reduce to `name` or `name(types)`."""

    def __init__(self, raw_signature: str):
        super().__init__(f"Cannot normalize signature: {raw_signature!r}")
        self.raw_signature = raw_signature

# --- Declaration signatures --------------------------------------------------
"""
Canonical declaration keys shared by the source scanner and the API page
index. Both sides reduce whatever they saw to `Owner#member(type,type)` and
the two are joined on that string alone.

    >>> str(SignatureKey.normalize("java.util.Map", "V put(K key, List<V> value)"))
    'Map#put(K,List)'
"""
import re
from dataclasses import dataclass
from typing import Optional

from javadoc_merge.errors import SignatureError

_NEWLINES = re.compile(r"[\r\n\t]")
_ANNOTATION = re.compile(r"@(?!interface\b)[\w$.]+(?:\s*\((?:[^()]|\([^()]*\))*\))?")
_VARARGS = re.compile(r"\s*\.\.\.")
_TYPE_ARGUMENTS = re.compile(r"<[^<>]*>")
_CLASS_EXTENSION = re.compile(r"\s(?:extends|implements)\s.*")
_DELIMITERS = re.compile(r"([(),])")
_SPACES = re.compile(r" +")
_PACKAGE_PREFIX = re.compile(r" (?:\w+?\.)+")
_PARAMETER_NAME = re.compile(r" \w+?( ,| \)|\[\] (?:,|\)))")
_TYPE_DECLARATION = re.compile(r".*? (?:class|interface|@interface|enum) (\w+) .*")
_MEMBER = re.compile(r".* (\w+?(?: \(.*?\))?)(?:\[\])? ")
_OWNER_PACKAGE = re.compile(r".+\.")


@dataclass(frozen=True, eq=False)
class SignatureKey:
    """
    Join key between a source declaration and its API page entry.
    Equality and hashing only look at the canonical string.
    """
    owner: str  # short class name the declaration belongs to
    member: str  # method, field, constructor or class name
    arguments: str = ""  # "(int,String[])", or "" without a parameter list
    declares_inner_class: bool = False

    @classmethod
    def normalize(cls, owner_class_name: str, raw_signature: str) -> "SignatureKey":
        """
        Reduces raw declaration text, e.g. `public final <T> T[] toArray(T[] a)`,
        to its key. `owner_class_name` may be short or fully qualified; a type
        declaration of a different class becomes owned by that class.
        """
        sig = _NEWLINES.sub(" ", raw_signature)
        sig = _ANNOTATION.sub(" ", sig)
        sig = _VARARGS.sub("[]", sig)

        # Type arguments nest, strip innermost first until none are left
        while "<" in sig:
            stripped = _TYPE_ARGUMENTS.sub(" ", sig)
            if stripped == sig:
                break
            sig = stripped

        sig = _CLASS_EXTENSION.sub(" ", sig, count=1)
        sig = " " + sig + " "
        sig = _DELIMITERS.sub(r" \1 ", sig)
        sig = _SPACES.sub(" ", sig)
        sig = _PACKAGE_PREFIX.sub(" ", sig)

        if "(" in sig:
            sig = sig.replace(" final ", " ")
            sig = sig.replace(" []", "[]")
            # `String str[]` and `String[] str` both end up as `String[]`
            sig = _PARAMETER_NAME.sub(r"\1", sig)

        owner = _OWNER_PACKAGE.sub("", owner_class_name, count=1)
        declares_inner_class = False
        declaration = _TYPE_DECLARATION.fullmatch(sig)
        if declaration and declaration.group(1) != owner:
            declares_inner_class = True
            owner = declaration.group(1)

        member = _MEMBER.fullmatch(sig)
        if member is None:
            raise SignatureError(raw_signature)
        compact = member.group(1).replace(" ", "")
        name, paren, rest = compact.partition("(")
        return cls(owner, name, paren + rest, declares_inner_class)

    @property
    def parameter_types(self) -> Optional[tuple[str, ...]]:
        """Ordered parameter type tokens, or None for fields and classes."""
        if not self.arguments:
            return None
        inner = self.arguments[1:-1]
        return tuple(inner.split(",")) if inner else ()

    def __str__(self) -> str:
        return f"{self.owner}#{self.member}{self.arguments}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, SignatureKey):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))

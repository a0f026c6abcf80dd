"""
internal building blocks shared by arguments, commands and the processor.

- StorageGuard: freeze-after-build mixin for specs and commands.
- mirror(): read-only property over a private backing field.
- tokenize(): split the first whitespace-delimited token off a line.
- sanitize_aliases() / sanitize_descr(): validation of names and descriptions.

none of these names are re-exported by the package.
"""
import re
from collections.abc import Iterable, Mapping, Sequence, Set
from contextlib import contextmanager
from types import MappingProxyType

from .faults import EmptyDescriptionError, MalformedAliasError
from .utils import rename

ALIAS = re.compile(r"[a-z0-9]+", re.ASCII)
"""lowercase ascii alphanumeric, the only shape an alias or argument name may take."""

_TOKEN = re.compile(r"\s*(\S*)")


class StorageGuard:
    """
    internal mixin that locks an instance once it has been built.

    build phase
    - this class provides a context-managed __new__ so specs can write their
      backing fields while the block runs:
        with super().__new__(cls) as self:
            self._field = value
        # after the 'with' block, every attribute is read-only.

    rules
    - writes and deletions outside the build phase raise AttributeError.
    - memoized values may still be stored through object.__setattr__ by the
      owning class itself.
    """
    __slots__ = ("__building", "__weakref__", "__dict__")

    @contextmanager
    def __new__(cls):
        self = super().__new__(cls)
        object.__setattr__(self, "_StorageGuard__building", True)
        try:
            yield self
        finally:
            object.__setattr__(self, "_StorageGuard__building", False)

    def __setattr__(self, name, value, /):
        if not self.__building:
            raise AttributeError(f"{type(self).__typename__} is read-only")
        object.__setattr__(self, name, value)

    def __delattr__(self, name, /):
        if not self.__building:
            raise AttributeError(f"{type(self).__typename__} is read-only")
        object.__delattr__(self, name)


def mirror(name, /):
    """
    define a read-only property that mirrors the backing attribute "_{name}".

    containers come back as immutable views:
      • Sequence (non-str) → tuple
      • Mapping           → MappingProxyType
      • Set               → frozenset
      • other types       → returned as-is
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        value = getattr(self, "_" + name)
        if isinstance(value, Sequence) and not isinstance(value, str):
            return tuple(value)
        if isinstance(value, Mapping):
            return MappingProxyType(value)
        if isinstance(value, Set):
            return frozenset(value)
        return value

    return property(getter)


def tokenize(line, /):
    """
    split a line into its first whitespace-delimited token and the rest.

    leading whitespace is skipped; the remainder starts right after the token
    (delimiter included). an exhausted line yields an empty token.

        >>> tokenize("  tu cw the bird")
        ('tu', ' cw the bird')
    """
    match = _TOKEN.match(line)
    return match[1], line[match.end():]


def sanitize_aliases(typename, aliases, /):
    """
    validate an alias collection and return it as a tuple (declaration order kept).

    every alias must be a non-empty lowercase ascii alphanumeric string and
    appear once; a bare string is rejected to avoid splitting it into letters.
    """
    if isinstance(aliases, str) or not isinstance(aliases, Iterable):
        raise MalformedAliasError(
            f"{typename} aliases must be an iterable of strings, got {aliases!r}",
            hint="wrap a single alias in a list or tuple",
        )
    aliases = tuple(aliases)
    if not aliases:
        raise MalformedAliasError(f"{typename} requires at least one alias")
    for alias in aliases:
        if not isinstance(alias, str) or not ALIAS.fullmatch(alias):
            raise MalformedAliasError(
                f"{typename} alias {alias!r} is malformed",
                hint="aliases are non-empty lowercase ascii letters and digits",
            )
    if len(set(aliases)) != len(aliases):
        raise MalformedAliasError(f"{typename} aliases {'|'.join(aliases)!r} contain duplicates")
    return aliases


def sanitize_descr(typename, descr, /):
    """
    validate a description and return it trimmed.
    """
    if not isinstance(descr, str):
        raise EmptyDescriptionError(f"{typename} description must be a string, got {descr!r}")
    if not (descr := descr.strip()):
        raise EmptyDescriptionError(f"{typename} description cannot be empty")
    return descr


__all__ = ()

"""
Small helpers used by arguments, commands and the processor.

- Unset: the "nothing was passed" marker. Argument defaults need it because
  "" is a legal default and None is a legal parsed value.
- coalesce(value, fallback): swap Unset for a fallback, leave everything else.
- rename(function, name) / @rename(name): give generated functions (kind
  converters, decorator wrappers) a readable name in reprs and tracebacks.
"""
import builtins
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker; calling it always returns the same object.

    The marker is falsey and prints as "Unset". It also takes part in
    isinstance unions, so `isinstance(default, str | Unset)` accepts both.
    """
    __instance = None

    def __new__(cls):
        if cls.__instance is None:
            cls.__instance = super().__new__(cls)
        return cls.__instance

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType can not be subclassed")

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"


Unset = UnsetType()


def coalesce(value, fallback=None, /):
    """
    Return fallback when value is Unset, value otherwise (None, 0 and "" included).
    """
    if value is Unset:
        return fallback
    return value


def rename(target, name=Unset, /):
    """
    Set __name__ and __qualname__ of a function.

    rename(function, "name") updates the function in place and returns it;
    rename("name") returns a decorator doing the same.
    """
    if name is Unset:
        if not isinstance(target, str):
            raise TypeError(f"rename() expects a name, got {target!r}")

        def decorator(function):
            return rename(function, target)

        decorator.__name__ = decorator.__qualname__ = "rename"
        return decorator

    if not builtins.callable(target):
        raise TypeError(f"rename() can not rename {target!r}: not callable")
    if not isinstance(name, str):
        raise TypeError(f"rename() expects a string name, got {name!r}")
    try:
        target.__name__ = target.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError(f"rename() can not rename {target!r}") from None
    return target


__all__ = (
    "Unset",
    "UnsetType",
    "coalesce",
    "rename",
)

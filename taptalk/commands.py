"""
Taptalk commands: binding a callback to its aliases, description and arguments.

Example
    from taptalk import Argument, CHARACTER, command

    @command(("countchars", "cc"), "count the number of a given character in a word", arguments=(
        Argument(0, "word", "a word to process"),
        Argument(1, "char", "a character to count", CHARACTER, optional=True, default="a"),
    ))
    def countchars(args):
        return args.word.count(args.char)

    countchars.__invoke__("abracadabra")  # -> "5"

Binding rules (checked once, when the command is built)
- callback: any callable taking the parse result (a Namespace).
- aliases: defaults to (callback.__name__,); each lowercase ascii alphanumeric.
- descr: defaults to the first paragraph of the callback's docstring; non-empty.
- arguments: Argument specs with unique positions and names, never shared with
  another command; at most one special (optional or multisegmented) argument,
  which must hold the highest position.

Invocation
- __invoke__(line) parses the arguments in position order, builds a fresh
  Namespace and calls the callback with it. The first parse fault propagates
  as a CommandException and the callback is not called. A fault raised by the
  callback itself is logged and reported as "Internal error!".
"""
import inspect
import logging
import operator
import weakref
from collections.abc import Iterable, Mapping

from .arguments import Argument, ArgumentType
from .articles import render_article
from .faults import (
    ArgumentCollisionError,
    BoundArgumentError,
    DelegatedCommandError,
    MalformedArgumentError,
    MalformedCommandError,
    SpecialArgumentError,
    TooManyArgumentsError,
)
from .internals import StorageGuard, sanitize_aliases, sanitize_descr
from .utils import Unset, coalesce, rename

logger = logging.getLogger(__name__)

_bindings = weakref.WeakKeyDictionary()
"""argument -> names of the command it is bound to."""


class CommandType(ArgumentType):
    """
    Metaclass of commands: same introspection plumbing as argument specs
    (__typename__, mirrored read-only properties, __repr__/__rich_repr__).
    """


class Namespace(Mapping):
    """
    Read-only parse result handed to a command callback.

    - mapping access returns the ArgumentState: args["char"].omitted
    - attribute access returns the converted value: args.char

    A new namespace is built for every invocation. Argument names that are
    also Mapping methods (keys, values, items, get) are only reachable through
    mapping access.
    """
    __slots__ = ("_states",)

    def __init__(self, states=(), /):
        object.__setattr__(self, "_states", dict(states))

    def __getitem__(self, name, /):
        return self._states[name]

    def __iter__(self):
        return iter(self._states)

    def __len__(self):
        return len(self._states)

    def __getattr__(self, name, /):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._states[name].value
        except KeyError:
            raise AttributeError(f"namespace has no argument {name!r}") from None

    def __setattr__(self, name, value, /):
        raise AttributeError("namespace is read-only")

    def __delattr__(self, name, /):
        raise AttributeError("namespace is read-only")

    def __repr__(self):
        return f"namespace({', '.join(f'{name}={state.value!r}' for name, state in self._states.items())})"


def _process_callback(cls, metadata):
    if not callable(metadata["callback"]):
        raise MalformedCommandError(f"{cls.__typename__} callback must be callable, got {metadata['callback']!r}")


def _process_strings(cls, metadata):
    """
    Resolve and validate aliases and description.

    Defaults come from the callback: its __name__ for the aliases and the
    first paragraph of its docstring for the description.
    """
    callback = metadata["callback"]
    aliases = coalesce(metadata["aliases"], (getattr(callback, "__name__", ""),))
    metadata["aliases"] = sanitize_aliases(cls.__typename__, aliases)

    label = f"{cls.__typename__} {'|'.join(metadata['aliases'])!r}"
    if (descr := metadata["descr"]) is Unset:
        descr = " ".join((inspect.getdoc(callback) or "").split("\n\n", 1)[0].split())
    metadata["descr"] = sanitize_descr(label, descr)


def _process_arguments(cls, metadata):
    """
    Validate the argument layout and order it by position.

    Mutates
    - metadata["arguments"] into a tuple sorted by ascending position.

    Errors
    - MalformedArgumentError: an element is not an Argument.
    - BoundArgumentError: an argument already belongs to another command.
    - ArgumentCollisionError: repeated argument, position or name.
    - SpecialArgumentError: more than one special argument, or one that is not last.
    """
    label = f"{cls.__typename__} {'|'.join(metadata['aliases'])!r}"
    if isinstance(arguments := metadata["arguments"], Argument | str) or not isinstance(arguments, Iterable):
        raise MalformedCommandError(f"{label} arguments must be an iterable of arguments")

    seen = set()
    positions = {}
    names = {}
    for argument in arguments:
        if not isinstance(argument, Argument):
            raise MalformedArgumentError(f"{label} argument {argument!r} is not an argument spec")
        if (owner := _bindings.get(argument)) is not None:
            raise BoundArgumentError(
                f"{label} argument {argument.name!r} is already bound to command {owner!r}",
                hint="build a new argument for every command",
            )
        if argument in seen:
            raise ArgumentCollisionError(f"{label} argument {argument.name!r} is listed twice")
        seen.add(argument)
        if (other := positions.setdefault(argument.position, argument)) is not argument:
            raise ArgumentCollisionError(
                f"{label} arguments {other.name!r} and {argument.name!r} share position {argument.position}"
            )
        if names.setdefault(argument.name, argument) is not argument:
            raise ArgumentCollisionError(f"{label} has more than one argument named {argument.name!r}")

    ordered = metadata["arguments"] = tuple(sorted(seen, key=operator.attrgetter("position")))

    specials = [argument for argument in ordered if argument.special]
    if len(specials) > 1:
        raise SpecialArgumentError(
            f"{label} has more than one special argument: {', '.join(repr(a.name) for a in specials)}",
            hint="only one argument may be optional or multisegmented",
        )
    if specials and specials[0] is not ordered[-1]:
        raise SpecialArgumentError(f"{label} special argument {specials[0].name!r} must hold the highest position")


class Command(StorageGuard, metaclass=CommandType):
    """
    A callback bound to its aliases, description and argument specs.

    Properties
    - callback, aliases, descr, arguments: read-only mirrors of the bound data
      (arguments sorted by position).
    - names: aliases joined with "|", as shown in help and messages.
    - special: the special argument, or None.
    - help: the help article, built on first access and memoized.
    """

    __introspectable__ = (
        "callback",
        "aliases",
        "descr",
        "arguments",
    )
    __displayable__ = (
        "aliases",
        "descr",
        "arguments",
    )

    def __new__(cls, callback, /, aliases=Unset, descr=Unset, arguments=()):
        metadata = {
            "callback": callback,
            "aliases": aliases,
            "descr": descr,
            "arguments": arguments,
        }
        _process_callback(cls, metadata)
        _process_strings(cls, metadata)
        _process_arguments(cls, metadata)

        with super().__new__(cls) as self:
            for name, object in metadata.items():
                setattr(self, "_" + name, object)
            self._article = Unset

        # Bind only once every check passed, so a rejected command leaves its arguments reusable.
        for argument in self._arguments:
            _bindings[argument] = self.names
        logger.debug("bound command %r with %d argument(s)", self.names, len(self._arguments))
        return self

    @property
    def names(self):
        return "|".join(self._aliases)

    @property
    def special(self):
        if self._arguments and self._arguments[-1].special:
            return self._arguments[-1]
        return None

    @property
    def help(self):
        if self._article is Unset:
            # memo
            object.__setattr__(self, "_article", render_article(self))
        return self._article

    def parse(self, line="", /):
        """
        Parse the argument part of a line into a Namespace.

        Raises
        - MissingArgumentError, UnparsableArgumentError, InvalidArgumentError
          from the first failing argument.
        - TooManyArgumentsError when non-whitespace text is left over.
        """
        states = {}
        for argument in self._arguments:
            states[argument.name], line = argument.__parse__(line)
        if line.strip():
            raise TooManyArgumentsError("Too many arguments!", command=self, remainder=line)
        return Namespace(states)

    def __invoke__(self, line="", /):
        """
        Parse a line, call the callback with the result and return its text.

        Returns
        - "" when the callback returns None, str(result) otherwise.

        Raises
        - any fault of parse() (the callback is not called).
        - DelegatedCommandError("Internal error!") when the callback raises.
        """
        namespace = self.parse(line)
        try:
            result = self._callback(namespace)
        except Exception as exception:
            logger.exception("command %r raised while handling %r", self.names, namespace)
            raise DelegatedCommandError("Internal error!", command=self) from exception
        logger.debug("command %r handled %r", self.names, namespace)
        return "" if result is None else str(result)


def command(source=Unset, /, *args, **kwargs):
    """
    Build a Command directly or return a decorator that will.

    Forms
    - command(func, aliases, descr, arguments=...) -> Command
    - @command / @command(aliases, descr, arguments=...) -> Command

    Parameters
    - source: Unset | Callable
      When Unset, a decorator is returned. Otherwise a Command is created.
    - *args, **kwargs: forwarded to Command.__new__.
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        return Command(source, *args, **kwargs)

    if source is not Unset and not callable(source):
        # @command(("name", "alias"), "descr"): the first argument holds the aliases
        return command(Unset, source, *args, **kwargs)
    return wrapper(source) if source is not Unset else wrapper


__all__ = (
    "Command",
    "Namespace",
    "command",
)

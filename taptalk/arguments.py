"""
Taptalk argument specifications and the per-argument parsing pipeline.

Scope
- ArgumentKind: one parametrized recipe for turning a token into a typed value
  (converter + parse-error detail + optional validation predicate).
- Built-in kinds: integers, floats, decimals, integer arrays, strings,
  characters, date/time and three boolean synonym families.
- Argument: a positional argument of a command (position, name, description,
  kind, optional/multisegmented flags, default).
- ArgumentState: the outcome of parsing one argument for one invocation.

Pipeline (Argument.__parse__)
1. skip leading whitespace;
2. nothing left: optional arguments are omitted (their default, if any, is
   converted and validated like user input), required ones are missing;
3. otherwise take the whole rest (multisegmented) or the next token;
4. convert, then validate.

Conventions
- Specs are immutable once built; parsing never mutates them, so a single
  Argument can serve concurrent invocations.
- Messages returned to users follow the form
  'Error parsing argument "<name>". <detail>'.
"""
import decimal
import functools
import operator
import re
from datetime import datetime
from enum import Enum
from typing import Any, NamedTuple

from .faults import (
    MalformedArgumentError,
    MissingArgumentError,
    UnparsableArgumentError,
    InvalidArgumentError,
)
from .internals import ALIAS, StorageGuard, mirror, sanitize_descr, tokenize
from .utils import Unset, coalesce, rename

PARSING = 'Error parsing argument "{name}". {detail}'
"""default template of a conversion failure."""

ELEMENT = 'Error parsing element #{index} of "{name}" argument. {detail}'
"""template of a conversion failure inside a sequence (1-based index)."""

VALIDATING = 'Error validating argument "{name}". Invalid value.'
"""default template of a validation failure."""

_CONVERSION_ERRORS = (ValueError, TypeError, ArithmeticError, LookupError)


class _ElementError(ValueError):
    def __init__(self, index):
        super().__init__(index)
        self.index = index


class ArgumentType(type):
    """
    Metaclass that turns specs into introspectable, read-only descriptors.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and help output.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - argument(position=0, name='word', ...)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class ArgumentKind(StorageGuard, metaclass=ArgumentType):
    """
    Parametrized conversion and validation recipe for argument values.

    Every built-in kind is an instance of this class; new kinds are made by
    instantiating it or by deriving from an existing kind:

        EVEN = INTEGER.derive(
            label="even integer",
            validator=lambda value: value % 2 == 0,
            invalid='Error validating argument "{name}". Even value expected.',
        )

    Fields
    - label: short human name of the kind ("integer", "yes-no", ...).
    - converter: Callable[[str], T]; raises ValueError/TypeError/ArithmeticError/
      LookupError on bad input.
    - detail: sentence appended to the parse-error template.
    - validator: Unset | Callable[[T], bool]; a False result is a validation fault.
    - invalid: validation message template ({name} is the argument name).
    - error: parse-error template ({name}, {index}, {detail}).
    - multisegmented: arguments of this kind must be declared multisegmented.
    """

    __introspectable__ = (
        "label",
        "converter",
        "detail",
        "validator",
        "invalid",
        "error",
        "multisegmented",
    )
    __displayable__ = ("label", "multisegmented")

    def __new__(
            cls,
            label,
            converter,
            detail,
            /,
            validator=Unset,
            invalid=VALIDATING,
            *,
            error=PARSING,
            multisegmented=False,
    ):
        if not isinstance(label, str) or not (label := label.strip()):
            raise MalformedArgumentError(f"{cls.__typename__} label must be a non-empty string")
        if not callable(converter):
            raise MalformedArgumentError(f"{cls.__typename__} {label!r} converter must be callable")
        if validator is not Unset and not callable(validator):
            raise MalformedArgumentError(f"{cls.__typename__} {label!r} validator must be callable")
        for field, template in (("detail", detail), ("invalid", invalid), ("error", error)):
            if not isinstance(template, str):
                raise MalformedArgumentError(f"{cls.__typename__} {label!r} {field} must be a string")

        with super().__new__(cls) as self:
            self._label = label
            self._converter = converter
            self._detail = detail
            self._validator = validator
            self._invalid = invalid
            self._error = error
            self._multisegmented = bool(multisegmented)
        return self

    def derive(self, /, **overrides):
        """
        Return a new kind sharing this kind's fields except the overridden ones.
        """
        metadata = {name: getattr(self, name) for name in type(self).__introspectable__} | overrides
        return type(self)(metadata.pop("label"), metadata.pop("converter"), metadata.pop("detail"), **metadata)

    def __convert__(self, argument, token, /):
        """
        Convert then validate a token on behalf of an argument.

        Raises
        - UnparsableArgumentError when the converter rejects the token.
        - InvalidArgumentError when the validator rejects the value.
        """
        try:
            value = self._converter(token)
        except _CONVERSION_ERRORS as exception:
            raise UnparsableArgumentError(
                self._error.format(name=argument.name, index=getattr(exception, "index", 0), detail=self._detail),
                argument=argument,
                token=token,
            ) from exception
        if self._validator is not Unset and not self._validator(value):
            raise InvalidArgumentError(self._invalid.format(name=argument.name), argument=argument, token=token)
        return value


class Synonyms(Enum):
    """
    accepted spellings of boolean values, as (truthy, falsy) pairs.
    """
    TRUE_FALSE = (("true", "t"), ("false", "f"))
    YES_NO = (("yes", "y"), ("no", "n"))
    ALLOWED_FORBIDDEN = (("allowed", "a"), ("forbidden", "f"))

    @property
    def truthy(self):
        return self.value[0]

    @property
    def falsy(self):
        return self.value[1]


def boolean(synonyms, /):
    """
    Build a case-insensitive boolean kind accepting the given synonym family.
    """
    if not isinstance(synonyms, Synonyms):
        raise TypeError("boolean() argument must be a Synonyms member")
    label = synonyms.name.lower().replace("_", "-")

    @rename(label)
    def converter(token):
        if (token := token.lower()) in synonyms.truthy:
            return True
        if token in synonyms.falsy:
            return False
        raise ValueError(f"{token!r} is not a {label} value")

    return ArgumentKind(
        label,
        converter,
        f"Permissible values are: {', '.join(synonyms.truthy)}; or: {', '.join(synonyms.falsy)}.",
    )


def sequence(kind, /, label=Unset):
    """
    Build a kind that splits its token on whitespace and converts every element
    with the given kind's converter.

    The resulting kind is always multisegmented; an empty token is the empty list.
    Failures name the first offending element (1-based).
    """
    if not isinstance(kind, ArgumentKind):
        raise TypeError("sequence() argument must be an argument kind")

    @rename(f"{kind.label}-sequence")
    def converter(token):
        values = []
        for index, element in enumerate(token.split(), 1):
            try:
                values.append(kind.converter(element))
            except _CONVERSION_ERRORS:
                raise _ElementError(index) from None
        return values

    return ArgumentKind(
        coalesce(label, f"{kind.label} array"),
        converter,
        kind.detail,
        error=ELEMENT,
        multisegmented=True,
    )


_INTEGER = re.compile(r"[+-]?[0-9]+", re.ASCII)


def _integer(token):
    if not _INTEGER.fullmatch(token):
        raise ValueError(f"{token!r} is not an integer")
    return int(token)


def _character(token):
    if len(token) != 1:
        raise ValueError(f"{token!r} is not a single character")
    return token


def _identity(token):
    return token


INTEGER = ArgumentKind("integer", _integer, "Integer value expected.")
NON_NEGATIVE_INTEGER = INTEGER.derive(
    label="non-negative integer",
    validator=lambda value: value >= 0,
    invalid='Error validating argument "{name}". Non-negative value expected.',
)
FLOAT = ArgumentKind("float", float, "Numeric value expected.")
DECIMAL = ArgumentKind("decimal", decimal.Decimal, "Numeric value expected.")
INTEGER_ARRAY = sequence(INTEGER)
STRING = ArgumentKind("string", _identity, "String value expected.")
CHARACTER = ArgumentKind("character", _character, "Character expected.")
DATETIME = ArgumentKind("datetime", datetime.fromisoformat, "Wrong datetime format.")
BOOLEAN = boolean(Synonyms.TRUE_FALSE)
YES_NO = boolean(Synonyms.YES_NO)
ALLOWED_FORBIDDEN = boolean(Synonyms.ALLOWED_FORBIDDEN)


class ArgumentState(NamedTuple):
    """
    Parsed state of one argument for one invocation.

    - value: converted value; None when the argument was omitted without a default.
    - omitted: True when the user supplied nothing for an optional argument.
    - argument: the spec that produced this state.
    """
    value: Any
    omitted: bool
    argument: "Argument"


class Argument(StorageGuard, metaclass=ArgumentType):
    """
    Positional argument of a command.

    Arguments are declared explicitly and handed to a command at binding time:

        Command(count, ("countchars", "cc"), "count characters", arguments=(
            Argument(0, "word", "a word to process"),
            Argument(1, "char", "a character to count", CHARACTER, optional=True, default="a"),
        ))

    Rules
    - position: int >= 0, unique inside the command; parse order follows it.
    - name: lowercase ascii alphanumeric, shown in help and used as the
      namespace key.
    - descr: non-empty description shown in help.
    - type: the ArgumentKind converting the token (STRING by default).
    - optional / multisegmented: the "special" flags; a command may hold a
      single special argument and it must come last.
    - default: string run through the kind like user input when an optional
      argument is omitted. A default the kind rejects is not a configuration
      fault: it surfaces as the ordinary parse fault every time it is used.
    """

    __introspectable__ = (
        "position",
        "name",
        "descr",
        "type",
        "optional",
        "multisegmented",
        "default",
    )

    def __new__(
            cls,
            position,
            name,
            descr,
            /,
            type=STRING,
            *,
            optional=False,
            multisegmented=False,
            default=Unset,
    ):
        if not isinstance(position, int) or isinstance(position, bool) or position < 0:
            raise MalformedArgumentError(f"{cls.__typename__} position must be a non-negative integer, got {position!r}")
        if not isinstance(name, str) or not ALIAS.fullmatch(name):
            raise MalformedArgumentError(
                f"{cls.__typename__} name {name!r} is malformed",
                hint="argument names are non-empty lowercase ascii letters and digits",
            )
        descr = sanitize_descr(f"{cls.__typename__} {name!r}", descr)
        if not isinstance(type, ArgumentKind):
            raise MalformedArgumentError(f"{cls.__typename__} {name!r} type must be an argument kind, got {type!r}")
        if type.multisegmented and not multisegmented:
            raise MalformedArgumentError(
                f"{cls.__typename__} {name!r} of type {type.label!r} must be multisegmented",
            )
        if not isinstance(default, str | Unset):
            raise MalformedArgumentError(f"{cls.__typename__} {name!r} default must be a string")
        if default is not Unset and not optional:
            raise MalformedArgumentError(f"{cls.__typename__} {name!r} cannot have a default unless optional")

        with super().__new__(cls) as self:
            self._position = position
            self._name = name
            self._descr = descr
            self._type = type
            self._optional = bool(optional)
            self._multisegmented = bool(multisegmented)
            self._default = default
        return self

    @property
    def special(self):
        """True for optional or multisegmented arguments."""
        return self._optional or self._multisegmented

    def __parse__(self, line, /):
        """
        Consume this argument from the front of a line.

        Returns
        - (ArgumentState, remainder)

        Raises
        - MissingArgumentError, UnparsableArgumentError, InvalidArgumentError.
        """
        if not (line := line.lstrip()):
            if not self._optional:
                raise MissingArgumentError(f'Argument "{self._name}" is missing!', argument=self)
            if self._default is Unset:
                return ArgumentState(None, True, self), ""
            return ArgumentState(self._type.__convert__(self, self._default), True, self), ""

        if self._multisegmented:
            token, remainder = line, ""
        else:
            token, remainder = tokenize(line)
        return ArgumentState(self._type.__convert__(self, token), False, self), remainder


__all__ = (
    "ArgumentKind",
    "Argument",
    "ArgumentState",
    "Synonyms",
    "boolean",
    "sequence",
    "INTEGER",
    "NON_NEGATIVE_INTEGER",
    "FLOAT",
    "DECIMAL",
    "INTEGER_ARRAY",
    "STRING",
    "CHARACTER",
    "DATETIME",
    "BOOLEAN",
    "YES_NO",
    "ALLOWED_FORBIDDEN",
)

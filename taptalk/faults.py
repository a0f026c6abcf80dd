"""
Taptalk faults (user input faults, configuration faults) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault. Codes are
  grouped by domain to keep copy consistent and make logs/searches predictable.
- CommandException: base type for faults caused by a line of user input. They
  carry the exact message the user gets back and never escape process_line().
- ConfigurationError: base type for faults caused by a bad command tree. They
  are raised while the tree is being built and are never caught by the engine.
- render_fault(): rich layout (header, message, hint) shared by both families.

UX goals
- Messages shown to the user are short, plain sentences ("Command not found!").
- Rendering adds a header with the program name, the code and a title, plus an
  optional hint, styled through __styles__ in __main__.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • EMPTY_LINE, UNKNOWN_COMMAND, INCOMPLETE_COMMAND
    - arguments (1111x)
      • MISSING_ARGUMENT, UNPARSABLE_ARGUMENT, INVALID_ARGUMENT, TOO_MANY_ARGUMENTS
    - delegated errors (11131)
      • DELEGATED_ERROR
    - tree configuration (2110x)
      • MALFORMED_ALIAS, EMPTY_DESCRIPTION, ALIAS_COLLISION, INVALID_PATH
    - argument configuration (2111x)
      • MALFORMED_ARGUMENT, ARGUMENT_COLLISION, SPECIAL_ARGUMENT, BOUND_ARGUMENT
    - command configuration (2112x)
      • MALFORMED_COMMAND

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- routing errors (11xxx) ---
    EMPTY_LINE                  = 11101
    UNKNOWN_COMMAND             = 11102
    INCOMPLETE_COMMAND          = 11103

    # --- argument errors (11xxx) ---
    MISSING_ARGUMENT            = 11111
    UNPARSABLE_ARGUMENT         = 11112
    INVALID_ARGUMENT            = 11113
    TOO_MANY_ARGUMENTS          = 11114

    # --- delegated errors (11xxx) ---
    DELEGATED_ERROR             = 11131

    # --- tree configuration errors (21xxx) ---
    MALFORMED_ALIAS             = 21101
    EMPTY_DESCRIPTION           = 21102
    ALIAS_COLLISION             = 21103
    INVALID_PATH                = 21104

    # --- argument configuration errors (21xxx) ---
    MALFORMED_ARGUMENT          = 21111
    ARGUMENT_COLLISION          = 21112
    SPECIAL_ARGUMENT            = 21113
    BOUND_ARGUMENT              = 21114

    # --- command configuration errors (21xxx) ---
    MALFORMED_COMMAND           = 21121

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def render_fault(fault, /, *, colorful=True, fancy=False, width=None):
    """
    build a rich renderable for a fault.

    layout
    - header: "[ <prog> — <code> | <Title> ]"
    - message: the fault message
    - hint: " → <hint>" when the fault carries one

    fancy wraps message and hint in a panel titled by the header. colors come
    from the defaults below merged with __styles__ in __main__.
    """
    main = __import__("__main__")

    styles = defaultdict(str, {
        # header parts
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #00E5FF",  # neon cyan fault code
        "error-title": "bold #FF4DA6",  # friendly pinky title

        # body
        "error-message": "#C8C8D0",  # soft light gray message
        "hint-arrow": "#9CE19C dim",  # gentle green arrow
        "hint": "italic #9CE19C",  # gentle green hint text
    } | getattr(main, "__styles__", {}))

    def text(fragment, style):
        if not fragment:
            return Text("")
        return Text(str(fragment), styles[style] if colorful else "")

    header = Text.assemble(
        "[ ",
        text(getattr(main, "__prog__", "taptalk"), "prog-name"),
        " — ",
        text(fault.code.normalize(), "code"),
        " | ",
        text(fault.title.title(), "error-title"),
        " ]"
    )
    message = text(fault.message, "error-message")
    parts = [message]
    if hint := fault.options.get("hint"):
        parts.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fancy:
        return Panel(Group(*parts), title=header, title_align="left", width=width)
    return Group(header, *parts)


class _Fault:
    """
    shared state of both fault families: message, options, code and title.

    options are free-form context (argument, command, token, hint, ...) kept
    in a read-only mapping. code and title come from the class unless passed
    explicitly as options.
    """
    code = Unset
    title = Unset

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(message)
        self.message = message
        if "code" in options:
            self.code = FaultCode(options.pop("code"))
        if "title" in options:
            self.title = str(options.pop("title"))
        self.options = MappingProxyType(options)

    def __rich__(self):
        return render_fault(self, colorful=self.options.get("colorful", True), fancy=self.options.get("fancy", False))


class CommandException(_Fault, Exception):
    """
    a fault caused by user input; the message is the text returned to the user.
    """
    code = FaultCode.DELEGATED_ERROR
    title = "command error"


class EmptyLineError(CommandException):
    code = FaultCode.EMPTY_LINE
    title = "empty line"

class UnknownCommandError(CommandException):
    code = FaultCode.UNKNOWN_COMMAND
    title = "unknown command"

class IncompleteCommandError(CommandException):
    code = FaultCode.INCOMPLETE_COMMAND
    title = "incomplete command"

class MissingArgumentError(CommandException):
    code = FaultCode.MISSING_ARGUMENT
    title = "missing argument"

class UnparsableArgumentError(CommandException):
    code = FaultCode.UNPARSABLE_ARGUMENT
    title = "unparsable argument"

class InvalidArgumentError(CommandException):
    code = FaultCode.INVALID_ARGUMENT
    title = "invalid argument"

class TooManyArgumentsError(CommandException):
    code = FaultCode.TOO_MANY_ARGUMENTS
    title = "too many arguments"

class DelegatedCommandError(CommandException):
    code = FaultCode.DELEGATED_ERROR
    title = "internal error"


class ConfigurationError(_Fault, ValueError):
    """
    a fault in the command tree itself (aliases, descriptions, arguments, paths).

    raised eagerly while commands are bound and groups are attached, so a broken
    tree never reaches the user.
    """
    code = FaultCode.MALFORMED_COMMAND
    title = "configuration error"


class MalformedAliasError(ConfigurationError):
    code = FaultCode.MALFORMED_ALIAS
    title = "malformed alias"

class EmptyDescriptionError(ConfigurationError):
    code = FaultCode.EMPTY_DESCRIPTION
    title = "empty description"

class AliasCollisionError(ConfigurationError):
    code = FaultCode.ALIAS_COLLISION
    title = "alias collision"

class InvalidPathError(ConfigurationError):
    code = FaultCode.INVALID_PATH
    title = "invalid path"

class MalformedArgumentError(ConfigurationError):
    code = FaultCode.MALFORMED_ARGUMENT
    title = "malformed argument"

class ArgumentCollisionError(ConfigurationError):
    code = FaultCode.ARGUMENT_COLLISION
    title = "argument collision"

class SpecialArgumentError(ConfigurationError):
    code = FaultCode.SPECIAL_ARGUMENT
    title = "special argument"

class BoundArgumentError(ConfigurationError):
    code = FaultCode.BOUND_ARGUMENT
    title = "bound argument"

class MalformedCommandError(ConfigurationError):
    code = FaultCode.MALFORMED_COMMAND
    title = "malformed command"


__all__ = (
    "FaultCode",
    "render_fault",
    "CommandException",
    "EmptyLineError",
    "UnknownCommandError",
    "IncompleteCommandError",
    "MissingArgumentError",
    "UnparsableArgumentError",
    "InvalidArgumentError",
    "TooManyArgumentsError",
    "DelegatedCommandError",
    "ConfigurationError",
    "MalformedAliasError",
    "EmptyDescriptionError",
    "AliasCollisionError",
    "InvalidPathError",
    "MalformedArgumentError",
    "ArgumentCollisionError",
    "SpecialArgumentError",
    "BoundArgumentError",
    "MalformedCommandError",
)

"""
Demonstration command set.

build() returns a ready Processor laid out as:

    Test command set
    ├──<textutils|tu: some useful text utils>
    │  ├──<metrics|metr|mt: calculate various string metrics>
    │  ├──...
    ├──<fr: frequently used commands>
    ├──<calc: do some calculus>
    ├──"showdatetime|sdt" - show current date and time
    └──"help|h" - show help

Commands are rebuilt on every call because argument specs can only be bound once.
"""
from datetime import datetime
from enum import Enum

from .arguments import CHARACTER, INTEGER, INTEGER_ARRAY, STRING, Argument, ArgumentKind
from .commands import command
from .processor import Processor


class DisplayFormat(Enum):
    DATE = "date"
    TIME = "time"
    FULL = "full"


_FORMATS = {
    "d": DisplayFormat.DATE,
    "date": DisplayFormat.DATE,
    "t": DisplayFormat.TIME,
    "time": DisplayFormat.TIME,
    "f": DisplayFormat.FULL,
    "full": DisplayFormat.FULL,
}

DISPLAY_FORMAT = ArgumentKind(
    "display format",
    lambda token: _FORMATS[token.lower()],
    "Only date/time/full or d/t/f values are expected.",
)

DIVISOR = INTEGER.derive(
    label="divisor",
    validator=lambda value: value != 0,
    invalid='Error validating argument "{name}". Divisor can not be zero!',
)

SAMPLE = "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor incididunt ut ..."


def build(descr="Test command set", /, *, clock=datetime.now):
    """
    Build the demonstration processor.

    clock supplies the current time to "showdatetime".
    """
    processor = Processor(descr)

    @command(("help", "h"), "show help", arguments=(
        Argument(0, "path", "path to a command or a command group", STRING,
                 optional=True, multisegmented=True, default=""),
    ))
    def help(args):
        found, article = processor.get_help(args.path)
        if not found:
            return 'Nothing found. Please type "help" or "h" with no arguments.'
        if args["path"].omitted:
            article += (
                '\nIn order to get help on a particular command please type '
                '"help pathToCommand commandName" or "h pathToCommand commandName".'
            )
        return article

    @command(("displaysampletext", "dst"), "display sample text")
    def displaysampletext(args):
        return SAMPLE

    @command(("countchars", "cc"), "count characters in a word", arguments=(
        Argument(0, "word", "word to count characters in"),
    ))
    def countchars(args):
        return len(args.word)

    @command(("countwords", "cw"), "count words", arguments=(
        Argument(0, "text", "text to count words in", multisegmented=True),
    ))
    def countwords(args):
        return len(args.text.split())

    @command(("removechar", "rc"), "remove character in a word", arguments=(
        Argument(0, "word", "word to remove character from"),
        Argument(1, "char", "character to be removed", CHARACTER, optional=True),
    ))
    def removechar(args):
        if args["char"].omitted:
            return args.word
        return args.word.replace(args.char, "")

    # "one" is not an integer: omitting "times" fails the same way a bad token does.
    @command(("repw",), "repeat word X number of times", arguments=(
        Argument(0, "word", "word to repeat"),
        Argument(1, "times", "number of times to repeat", INTEGER, optional=True, default="one"),
    ))
    def repw(args):
        return (args.word + " ") * args.times

    @command(("repp",), "repeat phrase X number of times", arguments=(
        Argument(0, "times", "number of times to repeat", INTEGER),
        Argument(1, "phrase", "phrase to repeat", multisegmented=True),
    ))
    def repp(args):
        return (args.phrase + " ") * args.times

    @command(("divide", "div"), "divide two integer values", arguments=(
        Argument(0, "dvd", "dividend", INTEGER),
        Argument(1, "dvs", "divisor", DIVISOR),
    ))
    def divide(args):
        return f"{args.dvd / args.dvs:g}"

    @command(("add",), "add arbitrary number of values", arguments=(
        Argument(0, "values", "array of values, split by spaces", INTEGER_ARRAY,
                 optional=True, multisegmented=True, default=""),
    ))
    def add(args):
        # "values" is also a Mapping method, so go through the state
        return sum(args["values"].value)

    @command(("showdatetime", "sdt"), "show current date and time", arguments=(
        Argument(0, "format", "date time format: date/time/full or d/t/f", DISPLAY_FORMAT,
                 optional=True, default="full"),
    ))
    def showdatetime(args):
        now = clock()
        match args.format:
            case DisplayFormat.DATE:
                return now.strftime("%x")
            case DisplayFormat.TIME:
                return now.strftime("%X")
            case _:
                return now.strftime("%c")

    processor.add_group("", ("textutils", "tu"), "some useful text utils")
    processor.add_group("tu", ("metrics", "metr", "mt"), "calculate various string metrics")
    processor.add_group("", ("fr",), "frequently used commands")

    # Groups can be referred to by any combination of their aliases.
    (processor
     .add_command("tu", displaysampletext)
     .add_command("textutils", removechar)
     .add_command("tu mt", countchars)
     .add_command("textutils mt", countwords)
     .add_command("tu", countwords)
     .add_command("textutils", repw)
     .add_command("tu", repp)
     .add_command("fr", displaysampletext)
     .add_command("fr", countchars)
     .add_command("", showdatetime)
     .add_command("", help))

    processor.add_group(processor.root, ("calc",), "do some calculus").add_command(add).add_command(divide)
    return processor


__all__ = (
    "build",
    "DisplayFormat",
    "DISPLAY_FORMAT",
    "DIVISOR",
)

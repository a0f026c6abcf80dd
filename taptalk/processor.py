"""
Taptalk processor: the command tree, path search and line dispatch.

Storage
- Every group and every command lives in one list owned by the processor
  (its arena); a handle is an index into that list. Groups map aliases to
  handles, so a node reachable through several aliases, or a command attached
  in several places, is still a single entry.
- The root group has handle 0, no aliases, and is reached by the empty path.

Configuration
    processor = Processor("Test command set")
    tu = processor.add_group("", ("textutils", "tu"), "text utilities")
    tu.add_command(countwords).add_command(removechar)
    processor.add_group("tu", ("metrics", "mt"), "text metrics").add_command(countwords)

Dispatch
    processor.process_line("tu cw the bird is the word")  # -> "5"
    processor.process_line("tu")  # -> 'Please specify a command within a "textutils|tu" group!'

The tree is meant to be fully built before the first line is dispatched;
dispatching never mutates it.
"""
import logging
from typing import NamedTuple

from .articles import render_tree
from .commands import Command
from .faults import (
    AliasCollisionError,
    CommandException,
    EmptyLineError,
    IncompleteCommandError,
    InvalidPathError,
    MalformedCommandError,
    UnknownCommandError,
)
from .internals import sanitize_aliases, sanitize_descr, tokenize

logger = logging.getLogger(__name__)

ROOT = 0


class Group:
    """
    A node of the command tree.

    - handle: index of the group in its processor.
    - aliases: tuple of aliases; empty for the root.
    - descr: description shown in the tree.
    - groups / commands: alias -> handle of the children.
    """
    __slots__ = ("handle", "aliases", "descr", "groups", "commands")

    def __init__(self, handle, aliases, descr):
        self.handle = handle
        self.aliases = aliases
        self.descr = descr
        self.groups = {}
        self.commands = {}

    @property
    def names(self):
        return "|".join(self.aliases)

    def __contains__(self, alias):
        return alias in self.groups or alias in self.commands

    def __repr__(self):
        return f"group(handle={self.handle!r}, aliases={self.aliases!r}, descr={self.descr!r})"


class GroupFound(NamedTuple):
    group: Group


class CommandFound(NamedTuple):
    command: Command
    remainder: str


class NothingFound(NamedTuple):
    pass


class GroupHandle(NamedTuple):
    """
    A reference to a group of a processor, usable as a registration path.

    add_group() returns the handle of the new group; add_command() returns
    this same handle so commands can be chained.
    """
    processor: "Processor"
    handle: int

    @property
    def group(self):
        return self.processor.resolve(self.handle)

    def add_group(self, aliases, descr, /):
        return self.processor.add_group(self, aliases, descr)

    def add_command(self, command, /):
        self.processor.add_command(self, command)
        return self


class Processor:
    """
    Entry point of the engine: owns the tree, registers groups and commands,
    and turns lines into responses.
    """

    def __init__(self, descr, /):
        self._nodes = [Group(ROOT, (), sanitize_descr("processor", descr))]
        self._interned = {}

    @property
    def descr(self):
        return self._nodes[ROOT].descr

    @property
    def root(self):
        return GroupHandle(self, ROOT)

    def resolve(self, handle, /):
        """Return the group or command stored under a handle."""
        return self._nodes[handle]

    def _locate(self, path, /):
        """
        Resolve a registration path (string or GroupHandle) to a group.
        """
        if isinstance(path, GroupHandle):
            if path.processor is not self:
                raise InvalidPathError(f"group handle {path.handle} belongs to another processor")
            if not isinstance(path.handle, int) or not 0 <= path.handle < len(self._nodes):
                raise InvalidPathError(f"group handle {path.handle!r} does not exist")
            if not isinstance(node := self._nodes[path.handle], Group):
                raise InvalidPathError(f"handle {path.handle} points to command {node.names!r}, not to a group")
            return node
        if not isinstance(path, str):
            raise InvalidPathError(f"path must be a string or a group handle, got {path!r}")

        match self.search(path):
            case GroupFound(group):
                return group
            case CommandFound(command, _):
                raise InvalidPathError(f"path {path!r} points to command {command.names!r}, not to a group")
            case _:
                raise InvalidPathError(f"path {path!r} is invalid", hint="paths are made of group aliases only")

    @staticmethod
    def _claim(group, aliases, typename, /):
        """
        Check that none of the aliases is taken by a child of the group.
        """
        where = f'group "{group.names}"' if group.aliases else "the root group"
        for alias in aliases:
            if alias in group:
                raise AliasCollisionError(
                    f'can not add {typename} {"|".join(aliases)!r}: '
                    f'child element named "{alias}" already exists in {where}',
                )

    def add_group(self, path, aliases, descr, /):
        """
        Create a group below the group at path.

        Returns
        - GroupHandle of the new group.

        Raises
        - InvalidPathError, MalformedAliasError, EmptyDescriptionError,
          AliasCollisionError. Nothing is modified when a check fails.
        """
        parent = self._locate(path)
        aliases = sanitize_aliases("group", aliases)
        descr = sanitize_descr(f"group {'|'.join(aliases)!r}", descr)
        self._claim(parent, aliases, "group")

        group = Group(len(self._nodes), aliases, descr)
        self._nodes.append(group)
        for alias in aliases:
            parent.groups[alias] = group.handle
        logger.debug("registered group %r (handle %d) under handle %d", group.names, group.handle, parent.handle)
        return GroupHandle(self, group.handle)

    def add_command(self, path, command, /):
        """
        Attach a command below the group at path.

        A plain callable is bound first with Command(callable). The same Command
        may be attached at several paths; it keeps a single handle.

        Returns
        - this processor, for chaining.
        """
        parent = self._locate(path)
        if not isinstance(command, Command):
            if not callable(command):
                raise MalformedCommandError(f"command must be a Command or a callable, got {command!r}")
            command = Command(command)
        self._claim(parent, command.aliases, "command")

        if (handle := self._interned.get(command)) is None:
            handle = self._interned[command] = len(self._nodes)
            self._nodes.append(command)
        for alias in command.aliases:
            parent.commands[alias] = handle
        logger.debug("registered command %r (handle %d) under handle %d", command.names, handle, parent.handle)
        return self

    def search(self, line, /):
        """
        Walk the tree along the leading tokens of a line.

        Tokens are lower-cased before lookup; groups are matched before
        commands.

        Returns
        - CommandFound(command, remainder) on the first token naming a command;
          remainder is the untouched rest of the line.
        - GroupFound(group) when the line runs out inside a group.
        - NothingFound() when a token names no child.
        """
        group = self._nodes[ROOT]
        remainder = line or ""
        while True:
            token, rest = tokenize(remainder)
            if not token:
                return GroupFound(group)
            token = token.lower()
            if (handle := group.groups.get(token)) is not None:
                group, remainder = self._nodes[handle], rest
            elif (handle := group.commands.get(token)) is not None:
                return CommandFound(self._nodes[handle], rest)
            else:
                return NothingFound()

    def dispatch(self, line, /):
        """
        Run a line and return the command response.

        Raises
        - EmptyLineError, IncompleteCommandError, UnknownCommandError, or any
          CommandException raised by the matched command.
        """
        if not line or line.isspace():
            raise EmptyLineError("Please enter a command!")

        match self.search(line):
            case CommandFound(command, remainder):
                logger.debug("dispatching %r to command %r", line, command.names)
                return command.__invoke__(remainder)
            case GroupFound(group):
                raise IncompleteCommandError(f'Please specify a command within a "{group.names}" group!', group=group)
            case _:
                raise UnknownCommandError("Command not found!", line=line)

    def process_line(self, line, /):
        """
        Run a line and return the text to show the user, faults included.
        """
        try:
            return self.dispatch(line)
        except CommandException as fault:
            logger.debug("line %r rejected: %s", line, fault.message)
            return fault.message

    def get_help(self, path="", /):
        """
        Look up help for a path.

        Returns
        - (True, tree) for a group, the tree lines joined with newlines.
        - (True, article) for a command followed by nothing but whitespace.
        - (False, None) otherwise.
        """
        match self.search(path):
            case GroupFound(group):
                return True, "\n".join(render_tree(group, self.resolve))
            case CommandFound(command, remainder) if not remainder.strip():
                return True, command.help
            case _:
                return False, None

    def tree(self, path="", /):
        """
        Return the tree lines of the group at path.

        Raises
        - LookupError when path does not denote a group.
        """
        match self.search(path):
            case GroupFound(group):
                return tuple(render_tree(group, self.resolve))
            case _:
                raise LookupError(f"path {path!r} does not denote a group")


__all__ = (
    "Processor",
    "Group",
    "GroupHandle",
    "GroupFound",
    "CommandFound",
    "NothingFound",
    "ROOT",
)

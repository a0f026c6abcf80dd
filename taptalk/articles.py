"""
Help articles: the per-command article and the pseudographic group tree.

Both renderers return plain text (lines joined with "\\n" by the caller or
here) so they can be sent as-is to any transport, a chat message included.

Command article
    Command: countchars|cc
    Description: count the number of a given character in a word
    Usage: countchars|cc word [char]
       Arguments:
          word: a word to process
          char: a character to count (optional, default: "a")

Group tree
    Test command set
    ├──<textutils|tu: text utilities>
    │  ├──<metrics|metr|mt: text metrics>
    │  │  └──"countwords|cw" - count words in a text
    │  └──"removechar|rc" - remove a character from a word
    └──"help|h" - show help
"""
from .utils import Unset

INDENT = "   "

BRANCH = "├──"
LAST = "└──"
PIPE = "│  "
BLANK = "   "


def render_article(command, /):
    """
    Render the help article of a bound command.
    """
    usage = [command.names]
    usage.extend(f"[{argument.name}]" if argument.optional else argument.name for argument in command.arguments)

    lines = [
        f"Command: {command.names}",
        f"Description: {command.descr}",
        f"Usage: {' '.join(usage)}",
    ]
    if command.arguments:
        lines.append(f"{INDENT}Arguments:")
        for argument in command.arguments:
            line = f"{INDENT * 2}{argument.name}: {argument.descr}"
            if argument.optional and argument.default is Unset:
                line += " (optional)"
            elif argument.optional:
                line += f' (optional, default: "{argument.default}")'
            lines.append(line)
    return "\n".join(lines)


def render_tree(group, resolve, /):
    """
    Render a group and everything below it as a list of lines.

    Parameters
    - group: the group to render; its own line is its description when it
      has no aliases (the root), "<aliases: description>" otherwise.
    - resolve: Callable[[int], Group | Command] turning child handles into nodes.

    Child groups come before commands, both in registration order. A node
    reachable through several aliases is listed once.
    """
    lines = [group.descr if not group.aliases else f"<{group.names}: {group.descr}>"]

    groups = list(dict.fromkeys(group.groups.values()))
    commands = list(dict.fromkeys(group.commands.values()))

    for index, handle in enumerate(groups, 1):
        last = index == len(groups) and not commands
        for number, line in enumerate(render_tree(resolve(handle), resolve)):
            if number == 0:
                lines.append((LAST if last else BRANCH) + line)
            else:
                lines.append((BLANK if last else PIPE) + line)

    for index, handle in enumerate(commands, 1):
        command = resolve(handle)
        lines.append(f'{LAST if index == len(commands) else BRANCH}"{command.names}" - {command.descr}')

    return lines


__all__ = (
    "render_article",
    "render_tree",
)

"""
Interactive console over a Processor.

The shell prints a welcome line, then reads lines until end of input and
prints the response to each one. Responses are printed as plain text;
faults are styled (a single colored line, or a full panel in fancy mode).

    Shell(build()).run()

Styles can be overridden by the host through __styles__ in __main__, the
same mapping fault rendering reads:
- "response": command output
- "fault": one-line fault messages
- "welcome": the welcome line
"""
import logging
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .faults import CommandException, render_fault
from .utils import Unset, coalesce

logger = logging.getLogger(__name__)


class Shell:
    """
    Read-dispatch-print loop.

    Parameters
    - processor: the Processor answering lines.
    - console: rich Console used for input and output (a new one by default).
    - prompt: text shown before each input line.
    - welcome: first line printed; defaults to the processor description
      followed by a pointer to the "help" command.
    - colorful: style output; off for plain terminals and logs.
    - fancy: render faults as panels with code, title and hint.
    """

    def __init__(self, processor, /, *, console=Unset, prompt="> ", welcome=Unset, colorful=True, fancy=False):
        self.processor = processor
        self.console = coalesce(console, Console(highlight=False))
        self.prompt = prompt
        self.welcome = coalesce(welcome, f'{processor.descr}, type "help", to show command list!')
        self.colorful = colorful
        self.fancy = fancy

    @property
    def styles(self):
        return defaultdict(str, {
            "response": "#E6E6F0",
            "fault": "#FF4DA6",
            "welcome": "bold #00E5FF",
        } | getattr(__import__("__main__"), "__styles__", {}))

    def _style(self, name):
        return self.styles[name] if self.colorful else ""

    def _read(self):
        while True:
            try:
                yield self.console.input(self.prompt)
            except (EOFError, KeyboardInterrupt):
                return

    def respond(self, line, /):
        """
        Dispatch one line and print the response or the fault.
        """
        try:
            response = self.processor.dispatch(line)
        except CommandException as fault:
            logger.debug("fault %s on %r", fault.code.name, line)
            if self.fancy:
                self.console.print(render_fault(fault, colorful=self.colorful, fancy=True))
            else:
                self.console.print(Text(fault.message, self._style("fault")))
            return
        self.console.print(Text(response, self._style("response")))

    def run(self, lines=Unset, /):
        """
        Run the loop over the given lines, or over console input until EOF.

        Returns
        - 0, the exit status of a finished session.
        """
        self.console.print(Text(self.welcome, self._style("welcome")))
        for line in self._read() if lines is Unset else lines:
            self.respond(line)
        return 0


__all__ = (
    "Shell",
)

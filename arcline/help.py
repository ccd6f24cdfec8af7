"""
Default help flag.

HelpFlag answers to --help/-h. It renders the help text as soon as it is matched
(at parse time) and then stops the pass with exit code 0, so nothing else on the
command line runs.

Layout
    --------------------------------------------------------------------------------
    Usage:

        prog [options]

    --------------------------------------------------------------------------------
    Flags:

        -h, --help              :: Displays this help text.

        -o, --output <FILE>     :: Write results to FILE.

    --------------------------------------------------------------------------------

Palette keys
- divider, section-label, usage, key, metavar, separator, description

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When the parser is not colorful, styling is suppressed.
"""
from collections import defaultdict

from rich.console import Console, Group
from rich.text import Text

from .definitions import Flag
from .faults import DefinitionExit
from .utils import *

console = Console()

TAB_SIZE = 4
DIVIDER_WIDTH = 80


class HelpFlag(Flag):
    """
    Flag printing the usage and every definition registered on `parser`.

    Parameters
    - parser: Parser (positional-only)
      Non-owning handle, read through parser.list_definitions() at render time.
    - usage: Unset | str
      Usage line printed in its own section when given.
    """

    def __init__(self, parser, /, usage=Unset):
        super().__init__("help", "h", "Displays this help text.")
        if not hasattr(parser, "list_definitions"):
            raise TypeError("HelpFlag() first argument must be a parser")
        usage = coalesce(usage, "")
        if not isinstance(usage, str):
            raise TypeError("HelpFlag() usage must be a string")
        self._parser = parser
        self._usage = usage

    @property
    def usage(self):
        return self._usage or None

    def parse(self, index, arguments, /):
        console.print(self.render())
        raise DefinitionExit(0)

    def execute(self):
        # the pass already ended at parse time
        pass

    def render(self):
        """
        Build the help text as a rich renderable.
        """
        styles = defaultdict(str, {
            "divider": "#6B6F7A",  # slate rule
            "section-label": "bold #FFFFFF",  # white headers
            "usage": "bold #36C5F0",  # sky-blue usage line
            "key": "bold #22C55E",  # green keys
            "metavar": "bold #FFD600",  # amber values
            "separator": "#6B6F7A dim",
            "description": "#9CA3AF",  # muted gray
        } | getattr(__import__("__main__"), "__styles__", {}))

        colorful = getattr(self._parser, "colorful", True)

        def styler(style):
            return styles[style] if colorful else ""

        tab = " " * TAB_SIZE
        divider = Text("-" * DIVIDER_WIDTH, styler("divider"))
        renders = [divider]

        if self._usage:
            renders.append(Text("Usage:\n", styler("section-label")))
            renders.append(Text.assemble(tab, (self._usage, styler("usage")), "\n"))
            renders.append(divider)

        definitions = self._parser.list_definitions()
        if definitions:
            renders.append(Text("Flags:\n", styler("section-label")))

            keys = []
            for definition in definitions:
                key = Text(tab)
                if definition.short_key:
                    key.append(definition.short_key, styler("key"))
                    key.append(", ")
                key.append(definition.long_key, styler("key"))
                for metavar in definition.metavars:
                    key.append(" <%s>" % metavar, styler("metavar"))
                keys.append(key)

            # descriptions start on the next tab stop after the longest key
            longest = max(len(key) for key in keys)
            indent = longest + (TAB_SIZE - (longest + 1) % TAB_SIZE)

            for key, definition in zip(keys, definitions):
                line = key.copy()
                if definition.description:
                    line.append(" " * (indent - len(key)))
                    line.append(":: ", styler("separator"))
                    line.append(definition.description, styler("description"))
                renders.append(line)
                renders.append(Text(""))
            renders.append(divider)

        return Group(*renders)


__all__ = (
    "HelpFlag",
)

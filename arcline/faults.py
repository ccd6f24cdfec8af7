"""
Arcline faults (errors, notices and exits) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain to keep copy consistent and make logs/searches predictable.
- ParserException: base type for programmer errors raised while wiring a parser
  (bad definitions, duplicate keys, registration at the wrong time). Always raised.
- ParserNotice: base type for user-facing diagnostics produced while matching an
  argument vector (unrecognised tokens, nothing to do, missing values). Always printed,
  never raised: those outcomes travel back to the caller as exit codes.
- DefinitionExit: control-flow signal raised by definition hooks to stop the pass
  with a given exit code.
- trigger(): central entry point to surface any fault.
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: notices about tokens include their ordinal position.
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - wiring errors (21xxx)
      • INVALID_DEFINITION, DUPLICATE_KEY, INVALID_STATE
    - matching notices (22xxx)
      • UNRECOGNISED_ARGUMENT, NO_ARGUMENTS, MISSING_VALUE

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- wiring errors (21xxx) ---
    INVALID_DEFINITION    = 21101
    DUPLICATE_KEY         = 21102
    INVALID_STATE         = 21111

    # --- matching notices (22xxx) ---
    UNRECOGNISED_ARGUMENT = 22101
    NO_ARGUMENTS          = 22102
    MISSING_VALUE         = 22111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    main = __import__("__main__")

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    options = fault.options
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = text(getattr(main, "__prog__", options.get("prog") or "arcline"), styler("prog-name"))

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(options["code"].normalize(), styler("code")),
        " | ",
        text(options["title"].title(), styler("title")),
        " ]"
    )
    renders = [text(fault.message, styler("message"))]
    if options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(options["hint"], styler("hint"))))
    if docs := options.get("docs") or getdoc(options["code"]):
        renders.append(Text.assemble(text(" ⓘ ", styler("docs-mark")), text(docs, styler("docs"))))

    if fancy:
        return Panel(Group(*renders), title=header, title_align="left")

    return Group(header, *renders)


class ParserException(Exception):
    """
    base type for errors raised while a parser is being wired up.

    the message is positional; every other piece of context (code, title, hint,
    prog, colorful, fancy) travels as a read-only options mapping. subclasses
    provide defaults for code and title through __options__.
    """
    __options__ = MappingProxyType({"code": FaultCode.INVALID_DEFINITION, "title": "invalid definition"})

    __palette__ = {
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #00E5FF",  # neon cyan fault code
        "title": "bold #FF4DA6",  # friendly pinky title
        "message": "#C8C8D0",  # soft light gray message
        "hint-arrow": "#9CE19C dim",  # gentle green arrow
        "hint": "italic #9CE19C",  # gentle green hint text
        "docs-mark": "#00E5FF dim",
        "docs": "#8A8A96",  # dim gray documentation line
    }

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(type(self).__options__ | options)

    def __rich__(self):
        return _render(self, self.__palette__)

    def __trigger__(self):
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DefinitionError(ParserException, ValueError):
    __options__ = MappingProxyType({"code": FaultCode.INVALID_DEFINITION, "title": "invalid definition"})


class DuplicateKeyError(ParserException, ValueError):
    __options__ = MappingProxyType({"code": FaultCode.DUPLICATE_KEY, "title": "duplicate key"})


class StateError(ParserException, RuntimeError):
    __options__ = MappingProxyType({"code": FaultCode.INVALID_STATE, "title": "invalid state"})


class ParserNotice:
    """
    base type for diagnostics surfaced while matching an argument vector.

    notices are rendered on the stderr console when triggered and never raised;
    the outcome they describe reaches the caller as an exit code.
    """
    __options__ = MappingProxyType({"code": FaultCode.UNRECOGNISED_ARGUMENT, "title": "unrecognised argument"})

    __palette__ = {
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #FFB400",  # amber fault code
        "title": "bold #FFC2E0",  # softer pinky title
        "message": "#D6D6DE",  # slightly lighter gray body
        "hint-arrow": "#B8EFAF dim",  # softer green arrow
        "hint": "italic #B8EFAF",  # softer green hint text
        "docs-mark": "#FFB400 dim",
        "docs": "#8A8A96",
    }

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(type(self).__options__ | options)

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self.message)

    def __rich__(self):
        return _render(self, self.__palette__)

    def __trigger__(self):
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnrecognisedArgumentNotice(ParserNotice):
    __options__ = MappingProxyType({"code": FaultCode.UNRECOGNISED_ARGUMENT, "title": "unrecognised argument"})


class NoArgumentsNotice(ParserNotice):
    __options__ = MappingProxyType({"code": FaultCode.NO_ARGUMENTS, "title": "no arguments"})


class MissingValueNotice(ParserNotice):
    __options__ = MappingProxyType({"code": FaultCode.MISSING_VALUE, "title": "missing value"})


class DefinitionExit(Exception):
    """
    stop the current pass and make the parser return `code`.

    raised from Definition.parse() when value consumption fails (or when a
    definition wants the program to end right away, like help), and from
    Definition.execute() when the definition's own behavior fails.

    an optional notice is surfaced by the parser with its own runtime options
    (prog, colorful, fancy) before it returns the code.
    """

    def __init__(self, code=0, /, notice=Unset):
        if not isinstance(code, int) or isinstance(code, bool):
            raise TypeError("DefinitionExit() first argument must be an integer")
        if notice is not Unset and not isinstance(notice, ParserNotice):
            raise TypeError("DefinitionExit() notice must be a parser notice")
        super().__init__(code)
        self.code = code
        self.notice = notice

    def __repr__(self):
        return "DefinitionExit(%d)" % self.code


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - exceptions are raised; notices are printed on the stderr console.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParserException",
    "DefinitionError",
    "DuplicateKeyError",
    "StateError",
    "ParserNotice",
    "UnrecognisedArgumentNotice",
    "NoArgumentsNotice",
    "MissingValueNotice",
    "DefinitionExit",
    "trigger",
    "getdoc",
)

"""
Arcline parser: match an argument vector against registered definitions, then execute.

Phases of Parser.execute()
- setup
  • freeze registration (executing=True) and reset every definition's per-pass state.
- matching (left to right, index starts at 1; index 0 is the program name)
  • the first registered definition whose long or short key equals the token matches.
  • its parse() hook consumes trailing values; the span is 1 + consumed.
  • the match is queued (repeats allowed) in match order, not registration order.
  • an unrecognised token surfaces a notice and returns error_exit_code.
  • a DefinitionExit from parse() returns its code; nothing queued executes.
- execution (strictly after matching, in queue order)
  • an empty queue surfaces a “no arguments” notice and returns 0.
  • a DefinitionExit from execute() returns its code; later matches never run and
    earlier side effects stand.
  • otherwise returns 0.
- teardown
  • the queue is cleared and registration is unfrozen, whatever the outcome.

Errors vs. exit codes
- Wiring mistakes (bad types, duplicate keys, registration or re-entry during a pass)
  raise. Everything a user can trigger from the command line is an exit code.
"""
import os
import sys

from .definitions import Definition
from .faults import (
    DefinitionExit,
    DuplicateKeyError,
    NoArgumentsNotice,
    StateError,
    UnrecognisedArgumentNotice,
    trigger,
)
from .utils import *


class Parser:
    """
    Owner of an ordered set of definitions and driver of the match/execute protocol.

    Parameters
    - error_exit_code: int (positional-only, default 1)
      Exit code returned when a token matches no definition.
    - prog: Unset | str
      Program name shown in diagnostics; defaults to the basename of arguments[0].
    - colorful: bool
      Style diagnostics and help with the palette (overridable via __styles__ in __main__).
    - fancy: bool
      Render diagnostics inside a panel.

    Notes
    - Registration order is match priority.
    - A parser is not re-entrant: a definition's hooks may neither register new
      definitions nor run the same parser again.
    """

    def __init__(self, error_exit_code=1, /, *, prog=Unset, colorful=True, fancy=False):
        if not isinstance(error_exit_code, int) or isinstance(error_exit_code, bool):
            raise TypeError("Parser() error_exit_code must be an integer")
        if prog is not Unset and (not isinstance(prog, str) or not prog.strip()):
            raise TypeError("Parser() prog must be a non-empty string")

        self._error_exit_code = error_exit_code
        self._prog = prog
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)

        self._definitions = []
        self._queue = []
        self._executing = False

    @property
    def error_exit_code(self):
        return self._error_exit_code

    @property
    def prog(self):
        return coalesce(self._prog)

    @property
    def colorful(self):
        return self._colorful

    @property
    def fancy(self):
        return self._fancy

    @property
    def executing(self):
        return self._executing

    @property
    def definitions(self):
        return self.list_definitions()

    def list_definitions(self):
        """
        Return the registered definitions, in registration order, as a read-only tuple.
        """
        return tuple(self._definitions)

    def add_definition(self, definition, /):
        """
        Register `definition`; the parser becomes its sole owner.

        Raises
        - TypeError: when `definition` is not a Definition.
        - StateError: when called while the parser is executing.
        - DuplicateKeyError: when one of its keys is already registered.
        """
        if not isinstance(definition, Definition):
            raise TypeError("add_definition() argument must be a definition")
        if self._executing:
            trigger(StateError(
                "command line definition %r cannot be added to the parser during execution" % definition.long_key,
                hint="register every definition before calling execute()",
                **self._options(),
            ))
        for registered in self._definitions:
            for key in definition.keys:
                if key in registered.keys:
                    trigger(DuplicateKeyError(
                        "key %r of %r is already registered by %r" % (key, definition.long_key, registered.long_key),
                        hint="give each definition its own long and short keys",
                        **self._options(),
                    ))
        self._definitions.append(definition)

    def execute(self, arguments=Unset, count=Unset, /):
        """
        Match `arguments` against the registered definitions and execute the matches.

        Parameters
        - arguments: Unset | Sequence[str]
          The argument vector, program name first. Defaults to sys.argv.
        - count: Unset | int
          How many leading entries of `arguments` to consider. Defaults to all of them.

        Returns
        - int: the process exit code.

        Raises
        - TypeError: when arguments are not strings or count is not an integer.
        - ValueError: when count is negative or larger than the argument vector.
        - StateError: when called from within one of this parser's hooks.
        """
        if self._executing:
            trigger(StateError(
                "parser cannot be executed again while it is executing",
                hint="do not call execute() from a definition's parse() or execute()",
                **self._options(),
            ))

        arguments = coalesce(arguments, sys.argv)
        if isinstance(arguments, str):
            raise TypeError("execute() arguments must be a sequence of strings, not a string")
        arguments = list(arguments)
        if not all(isinstance(argument, str) for argument in arguments):
            raise TypeError("execute() arguments must be strings")
        count = coalesce(count, len(arguments))
        if not isinstance(count, int) or isinstance(count, bool):
            raise TypeError("execute() count must be an integer")
        if not 0 <= count <= len(arguments):
            raise ValueError("execute() count must be between 0 and %d, got %d" % (len(arguments), count))

        self._executing = True
        try:
            return self._run(arguments[:count])
        finally:
            self._queue.clear()
            self._executing = False

    def _options(self, arguments=()):
        if self._prog is not Unset:
            prog = self._prog
        elif arguments:
            prog = os.path.basename(arguments[0])
        else:
            prog = Unset
        return {"prog": coalesce(prog), "colorful": self._colorful, "fancy": self._fancy}

    def _match(self, token):
        for definition in self._definitions:
            if token == definition.long_key or token == definition.short_key:
                return definition
        return None

    def _surface(self, halt, options):
        if halt.notice is not Unset:
            trigger(halt.notice, **options)
        return halt.code

    def _run(self, arguments):
        options = self._options(arguments)

        for definition in self._definitions:
            definition.reset()

        index = 1
        while index < len(arguments):
            token = arguments[index]
            definition = self._match(token)
            if definition is None:
                trigger(UnrecognisedArgumentNotice(
                    "unrecognised command line argument %r at %s position" % (token, ordinal(index)),
                    hint="use '--help' or '-h' for program help",
                    **options,
                ))
                return self._error_exit_code

            try:
                increment = definition.parse(index + 1, arguments)
            except DefinitionExit as halt:
                return self._surface(halt, options)
            if isinstance(increment, bool) or not isinstance(increment, int):
                raise TypeError("%s.parse() must return an integer, got %r" % (type(definition).__name__, increment))
            if increment < 0:
                raise ValueError("%s.parse() must return a non-negative integer, got %d" % (type(definition).__name__, increment))

            self._queue.append(definition)
            index += 1 + increment

        if not self._queue:
            trigger(NoArgumentsNotice(
                "no command line arguments supplied",
                hint="use '--help' or '-h' for program help",
                **options,
            ))
            return 0

        for definition in self._queue:
            try:
                definition.execute()
            except DefinitionExit as halt:
                return self._surface(halt, options)

        return 0


def invoke(parser, arguments=Unset, /):
    """
    Run `parser` over `arguments` (sys.argv when Unset) and exit the process with its code.

    Raises
    - TypeError: when `parser` is not a Parser.
    - SystemExit: always, carrying the exit code.
    """
    if not isinstance(parser, Parser):
        raise TypeError("invoke() first argument must be a parser")
    raise SystemExit(parser.execute(arguments))


__all__ = (
    "Parser",
    "invoke",
)

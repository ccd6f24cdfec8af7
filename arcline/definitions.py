r"""
Arcline definitions: the matchable units a Parser owns.

Overview
- Definition: abstract base. Owns a long key ("--name"), an optional short key ("-n"),
  a description and the metavars shown by help. Subclasses implement execute() and may
  override parse() to consume the tokens that follow their key.
- Flag: concrete definition bound to a callback, called with no arguments.
- Option: flag that consumes one value per metavar and forwards them to its callback.

- Decorators
  • @flag(...): build a Flag bound to the decorated function.
  • @option(...): build an Option bound to the decorated function.

Hook contract
- parse(index, arguments) runs as soon as the key matched the token at index - 1.
  It returns how many trailing tokens it consumed. Raising DefinitionExit(code)
  aborts the whole pass and makes the parser return `code`.
- execute() runs after the matching pass, once per match, in match order.
  Raising DefinitionExit(code) stops the pass; later matches never execute.

Key normalization
- Long keys are stored with a "--" prefix (added unless already present); an empty
  long key is rejected with DefinitionError.
- Short keys are stored with a "-" prefix; an empty short key means “no short form”.

Quick example:
    >>> from arcline.definitions import flag, option
    >>> @flag("verbose", "v", "Print more output.")
    ... def verbose(): ...
    ...
    >>> @option("output", "o", "Write to FILE.", metavars=("FILE",))
    ... def output(file): ...
    ...
"""
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Iterable

from .faults import DefinitionError, DefinitionExit, MissingValueNotice, trigger
from .utils import *


def _sanitize_metavars(metavars, /):
    if isinstance(metavars, str) or not isinstance(metavars, Iterable):
        raise TypeError("metavars must be an iterable of strings")
    metavars = tuple(metavars)
    for metavar in metavars:
        if not isinstance(metavar, str):
            raise TypeError("metavars must be an iterable of strings")
        if not metavar.strip():
            trigger(DefinitionError("metavars must be non-empty strings", hint="name every value, e.g. 'FILE'"))
    return metavars


class Definition(ABC):
    """
    A command line argument: how it is recognised, how it consumes its values,
    and what happens once the whole argument vector has been matched.

    Parameters
    - long_key: str (positional-only)
      Non-empty; stored with a "--" prefix.
    - short_key: Unset | str (positional-only)
      Empty or Unset means no short form; otherwise stored with a "-" prefix.
    - description: Unset | str (positional-only)
      Free text shown by help; empty or Unset means no description.
    - metavars: Iterable[str] (keyword-only)
      Names of the values following the key, shown by help as <NAME>.

    Raises
    - TypeError: when a key, the description or a metavar is not a string.
    - DefinitionError: when the long key is empty.

    Notes
    - A definition is identified by its (long_key, short_key) pair. Once registered,
      the parser is its only owner; callers should not keep using it elsewhere.
    """

    def __init__(self, long_key, short_key=Unset, description=Unset, /, *, metavars=()):
        if not isinstance(long_key, str):
            raise TypeError("%s() long key must be a string" % type(self).__name__)
        if not long_key:
            trigger(DefinitionError(
                "%s cannot be constructed with an empty long key" % type(self).__name__.lower(),
                hint="pass a name such as 'verbose' (stored as '--verbose')",
            ))

        short_key = coalesce(short_key, "")
        if not isinstance(short_key, str):
            raise TypeError("%s() short key must be a string" % type(self).__name__)

        description = coalesce(description, "")
        if not isinstance(description, str):
            raise TypeError("%s() description must be a string" % type(self).__name__)

        self._long_key = prefixed(long_key, "--")
        self._short_key = prefixed(short_key, "-") or None
        self._description = description or None
        self._metavars = _sanitize_metavars(metavars)

    @property
    def long_key(self):
        return self._long_key

    @property
    def short_key(self):
        return self._short_key

    @property
    def description(self):
        return self._description

    @property
    def metavars(self):
        return self._metavars

    @property
    def keys(self):
        """
        Every token this definition answers to: the long key, then the short key if any.
        """
        if self._short_key is None:
            return (self._long_key,)
        return self._long_key, self._short_key

    def parse(self, index, arguments, /):
        """
        Consume the values that follow this definition's key.

        Parameters
        - index: position of the token right after the matched key.
        - arguments: the bounded argument vector (program name included).

        Returns
        - The number of tokens consumed after the key. No extra parsing by default.
        """
        return 0

    @abstractmethod
    def execute(self):
        """
        Run this definition's behavior; raise DefinitionExit(code) on failure.
        """

    def reset(self):
        """
        Discard per-pass state. Called by the parser before every matching pass.
        """

    def __rich_repr__(self):
        yield "long_key", self._long_key
        yield "short_key", self._short_key, None
        yield "description", self._description, None
        yield "metavars", self._metavars, ()

    def __repr__(self):
        return "%s(%s)" % (
            type(self).__name__.lower(),
            ", ".join("%s=%r" % (name, value) for name, value, *_ in self.__rich_repr__())
        )


class Flag(Definition):
    """
    Presence-only definition that calls `callback()` when executed.

    A callback returning a non-zero integer fails with that exit code; any other
    return value counts as success. An Unset callback does nothing.
    """

    def __init__(self, long_key, short_key=Unset, description=Unset, /, callback=Unset, *, metavars=()):
        super().__init__(long_key, short_key, description, metavars=metavars)
        if callback is not Unset and not callable(callback):
            raise TypeError("%s() callback must be callable" % type(self).__name__)
        self._callback = callback

    @property
    def callback(self):
        return coalesce(self._callback)

    def execute(self):
        self._dispatch()

    def _dispatch(self, *values):
        if self._callback is Unset:
            return
        result = self._callback(*values)
        # bool is an int subclass; True/False are not exit codes
        if isinstance(result, int) and not isinstance(result, bool) and result:
            raise DefinitionExit(result)

    def __call__(self, *args, **kwargs):
        if self._callback is Unset:
            return
        return self._callback(*args, **kwargs)


class Option(Flag):
    """
    Value-bearing definition: consumes one token per metavar after its key.

    Values are captured at parse time and handed to the callback, as positional
    arguments, when the match is executed. Repeating the option on the command
    line queues each occurrence with its own values.

    When fewer tokens remain than metavars, parsing fails with `missing_exit_code`
    (default 1) and a MissingValueNotice.
    """

    def __init__(
            self,
            long_key,
            short_key=Unset,
            description=Unset,
            /,
            callback=Unset,
            *,
            metavars=("VALUE",),
            missing_exit_code=1,
    ):
        super().__init__(long_key, short_key, description, callback, metavars=metavars)
        if not self._metavars:
            trigger(DefinitionError(
                "option %r must take at least one value" % self._long_key,
                hint="use a flag for presence-only arguments",
            ))
        if not isinstance(missing_exit_code, int) or isinstance(missing_exit_code, bool):
            raise TypeError("Option() missing_exit_code must be an integer")
        self._missing_exit_code = missing_exit_code
        self._pending = deque()

    @property
    def missing_exit_code(self):
        return self._missing_exit_code

    def parse(self, index, arguments, /):
        needed = len(self._metavars)
        values = tuple(arguments[index:index + needed])
        if len(values) < needed:
            missing = " ".join("<%s>" % metavar for metavar in self._metavars[len(values):])
            raise DefinitionExit(self._missing_exit_code, MissingValueNotice(
                "%s expects %d value%s but %d %s given" % (
                    self._long_key,
                    needed,
                    "s" * (needed != 1),
                    len(values),
                    "was" if len(values) == 1 else "were",
                ),
                hint="supply %s after %s" % (missing, self._long_key),
            ))
        self._pending.append(values)
        return needed

    def execute(self):
        self._dispatch(*self._pending.popleft())

    def reset(self):
        self._pending.clear()


def flag(long_key, short_key=Unset, description=Unset, /, *, metavars=()):
    """
    Build a Flag bound to the decorated function.

        @flag("verbose", "v", "Print more output.")
        def verbose(): ...
    """
    @rename("flag")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@flag() must be applied to a callable")
        return Flag(long_key, short_key, description, callback, metavars=metavars)

    return wrapper


def option(long_key, short_key=Unset, description=Unset, /, *, metavars=("VALUE",), missing_exit_code=1):
    """
    Build an Option bound to the decorated function; the callback receives one
    argument per metavar.
    """
    @rename("option")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@option() must be applied to a callable")
        return Option(
            long_key,
            short_key,
            description,
            callback,
            metavars=metavars,
            missing_exit_code=missing_exit_code,
        )

    return wrapper


__all__ = (
    # Classes
    "Definition",
    "Flag",
    "Option",

    # Decorators
    "flag",
    "option",
)

"""
atcommander faults (errors) and rendering.

Scope
- ConfigurationError: setup-time misuse of the API (duplicate or illegal command and
  option names). Nothing in the engine catches it.
- FaultCode: canonical, stable numeric identifiers for user-facing parse/run faults.
- CommandException and its subclasses: recoverable faults caused by user input or by a
  failing command. They carry the exact contract message plus rendering options and
  know how to render themselves with rich.
- trigger(): central entry point to surface a fault (raise it, or render it and exit in
  shell mode).

Message layering
- Every level that a fault crosses adds exactly one prefix to its message:
  option level "opt1: illegal OptionBool value: =X", command level
  "@cmd1: opt1: illegal OptionBool value: =X". The class and the options are kept, so
  callers can still catch the precise fault type after wrapping (see prefixed()).

Integration
- The commander raises these faults from parse()/run(); invoke() hands them to
  trigger(), which either re-raises (library use) or prints them on stderr and exits
  with status 1 (shell use).
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class ConfigurationError(ValueError):
    """
    raised when the host program registers an illegal or duplicate name.

    this is a programmer error, not a user error: it is never caught by the engine
    and never rendered as a fault.
    """


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping
    - routing (1110x): UNKNOWN_COMMAND
    - tokens (1111x): EXPECTED_COMMAND, UNKNOWN_OPTION, DUPLICATE_INVOCATION
    - values (1112x): ILLEGAL_VALUE
    - delegated (1113x): DELEGATED_ERROR
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND             = 11101

    # --- token errors (11xxx) ---
    EXPECTED_COMMAND            = 11111
    UNKNOWN_OPTION              = 11112
    DUPLICATE_INVOCATION        = 11115

    # --- value errors (11xxx) ---
    ILLEGAL_VALUE               = 11123

    # --- delegated errors (11xxx) ---
    DELEGATED_ERROR             = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base class of every recoverable parse/run fault.

    attributes
    - message: the exact, user-facing message (also what str() returns).
    - options: read-only mapping of rendering/context options (code, title, hint,
      tool, shell, fancy, colorful, and any extra payload such as input or token).
    """
    code = FaultCode.DELEGATED_ERROR
    title = "command fault"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

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

        tool = self.options.get("tool")
        prog = text(getattr(main, "__prog__", getattr(tool, "name", "atcommander")), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " - ",
            text(self.options.get("code", self.code).normalize(), styler("code")),
            " | ",
            text(self.options.get("title", self.title).title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options.get("hint", ""), styler("hint")))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")
        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})

    def prefixed(self, label, /):
        """
        return a copy of this fault whose message is prefixed by "<label>: ".

        used by every level that re-raises an inner fault, keeping the class and options.
        """
        if not isinstance(label, str):
            raise TypeError("prefixed() argument must be a string")
        return type(self)("%s: %s" % (label, self), **self.options)


class CommandSyntaxError(CommandException):
    code = FaultCode.EXPECTED_COMMAND
    title = "expected command name"


class UnknownCommandError(CommandException):
    code = FaultCode.UNKNOWN_COMMAND
    title = "unknown command"


class DuplicateInvocationError(CommandException):
    code = FaultCode.DUPLICATE_INVOCATION
    title = "duplicated command"


class UnknownOptionError(CommandException):
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"


class ValueSyntaxError(CommandException):
    code = FaultCode.ILLEGAL_VALUE
    title = "illegal option value"


class DelegatedCommandError(CommandException):
    code = FaultCode.DELEGATED_ERROR
    title = "command failed"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode the fault is rendered on stderr and the process exits with status 1;
      otherwise it is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "ConfigurationError",
    "FaultCode",
    "CommandException",
    "CommandSyntaxError",
    "UnknownCommandError",
    "DuplicateInvocationError",
    "UnknownOptionError",
    "ValueSyntaxError",
    "DelegatedCommandError",
    "trigger",
)

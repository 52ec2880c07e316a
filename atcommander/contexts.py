"""
atcommander command contexts: per-command option scope, parsing and help.

A Context is created by the commander for every registered command, and created
again at the start of every parse pass. It owns:
- the options declared by the command's init(context) (name -> Option),
- their descriptions (name -> str),
- the per-command help flag, raised by the `help` pseudo-option.

Token grammar (one command scope)
- stops, without consuming, at the first token starting with the command marker "@".
- "help"        → raise the help flag.
- "name"        → option.set("")
- "name+"       → option.set("+")
- "name-"       → option.set("-")
- "name=value"  → option.set("=value"); split happens on the first "=" only.

Faults
- UnknownOptionError("unknown option: <name>") for undeclared names.
- Faults raised by Option.set are re-raised with the "<name>: " prefix.
- Declaring a duplicate or reserved option name raises ConfigurationError.

Help listing (exact layout, tab separated)
    <commander name>
    <copyright>

    @<command>: <description>
    options:
      help\tShow this help and exit
      <name><metavar>\t<description>[ (default <value>)]
"""
import difflib
import logging
from collections import defaultdict

from rich.segment import Segments

from .faults import CommandException, ConfigurationError, UnknownOptionError, ValueSyntaxError
from .options import Option
from .utils import *

logger = logging.getLogger(__name__)

MARKER = "@"
HELP = "help"

# Canonical renderings treated as uninteresting defaults in help listings.
SILENT_DEFAULTS = frozenset(("", "false", "0", "0.0", '""'))


def styler(colorful, palette, /):
    """
    Build the style resolver used by help renderers.

    The palette is merged with __main__.__styles__ (host overrides). When colorful is
    False every style resolves to "", so only plain text is produced.
    """
    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))

    def resolve(style):
        return styles[style] if colorful else ""

    return resolve


class Context:
    """
    Option scope and parser of a single command.

    Read-only properties
    - commander: the owning Commander (non-owning back-reference).
    - command: the Command implementation.
    - help_requested: True when the `help` pseudo-option was seen in the current pass.
    - options / descrs: copies of the declared name -> Option / description maps.
    """

    def __init__(self, commander, command, /):
        self._commander = commander
        self._command = command
        self._help = False
        self._options = {}
        self._descrs = {}

    commander = mirror("commander")
    command = mirror("command")
    help_requested = mirror("help")
    options = mirror("options")
    descrs = mirror("descrs")

    @property
    def logger(self):
        """
        The commander's logger, for command implementations.
        """
        return self._commander.logger

    @property
    def console(self):
        """
        The commander's output console, for command implementations.
        """
        return self._commander.console

    def declare(self, name, option, descr="", /):
        """
        Declare an option under `name` with a help description.

        Raises
        - TypeError when name/descr are not strings or option is not an Option.
        - ConfigurationError when the name is already declared or is `help`.
        """
        if not isinstance(name, str):
            raise TypeError("option name must be a string")
        if not isinstance(option, Option):
            raise TypeError("option must be an instance of Option")
        if not isinstance(descr, str):
            raise TypeError("option 'descr' must be a string")
        if name in self._options:
            raise ConfigurationError("option name %s is already used" % name)
        if name == HELP:
            raise ConfigurationError("illegal option name: %s" % name)
        self._options[name] = option
        self._descrs[name] = descr

    def option(self, name, /):
        """
        Return the Option declared under `name`, or None.
        """
        return self._options.get(name)

    def parse(self, tokens, /):
        """
        Consume the option tokens of this command and return how many were consumed.

        Parsing stops at the first command-marker token (not consumed) or at the end
        of the input. The first fault aborts the pass.
        """
        index = 0
        for token in tokens:
            if token.startswith(MARKER):
                break
            if token == HELP:
                self._help = True
                index += 1
                continue

            name, separator, literal = token.partition("=")
            if separator:
                value = "=" + literal
            elif name.endswith(("+", "-")):
                name, value = name[:-1], name[-1]
            else:
                value = ""

            try:
                option = self._options[name]
            except KeyError:
                suggestions = difflib.get_close_matches(name, self._options.keys(), 5)
                try:
                    hint = "did you mean %r? you can also use 'help' to see all options" % suggestions[0]
                except IndexError:
                    hint = "use 'help' to see all available options"
                raise UnknownOptionError(
                    "unknown option: %s" % name,
                    hint=hint,
                    input=name,
                    suggestions=suggestions,
                ) from None

            try:
                option.set(value)
            except CommandException as exception:
                raise exception.prefixed(name) from exception
            except ConfigurationError:
                raise
            except ValueError as exception:
                # custom Option kinds may signal bad literals with a plain ValueError
                raise ValueSyntaxError("%s: %s" % (name, exception), token=value) from exception
            logger.debug("option %s set to %s", name, option)
            index += 1
        return index

    def helptext(self, name, /):
        """
        Build this command's help listing as rich Text.

        `name` is the command name the context is registered under.
        """
        style = styler(self._commander.colorful, {
            "command-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "description-section": "italic #A3A3A3",  # Neutral gray
            "group-label": "bold #FFFFFF",  # Pure white headers
            "option-name": "bold #00E6FF",  # CYAN for options
            "metavar": "bold #FFD600",  # AMBER for value syntax
            "argument-description": "#9CA3AF",  # Muted gray
            "default": "dim",
        })

        text = self._commander.heading()
        text.append(MARKER + name, style("command-name")).append(": ")
        text.append(self._command.describe(), style("description-section")).append("\n")
        text.append("options:", style("group-label")).append("\n")
        text.append("  ").append(HELP, style("option-name")).append("\t")
        text.append("Show this help and exit", style("argument-description")).append("\n")

        for option in sorted(self._options):
            value = self._options[option]
            text.append("  ").append(option, style("option-name")).append(value.metavar, style("metavar"))
            text.append("\t").append(self._descrs[option], style("argument-description"))
            if (default := str(value)) not in SILENT_DEFAULTS:
                text.append(" (default %s)" % default, style("default"))
            text.append("\n")
        return text

    def help(self, name, /):
        """
        Print this command's help listing on the commander console.
        """
        console = self._commander.console
        text = self.helptext(name)
        text.rstrip()
        console.print(Segments(text.render(console, end="\n")), crop=False)

    def __str__(self):
        return "[%s]" % " ".join("%s:%s" % (name, self._options[name]) for name in sorted(self._options))

    def __repr__(self):
        return "%s(%r, %s)" % (type(self).__name__, self._command, self)

    def __rich_repr__(self):
        yield "command", self._command
        yield "help", self._help
        yield "options", self._options


__all__ = (
    "Context",
    "MARKER",
    "HELP",
)

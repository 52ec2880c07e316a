"""
atcommander commander: command registry, dispatcher and runner.

What this module provides
- Commander: registers named commands, parses a flat "@command option ..." token
  stream into per-command option values plus an ordered execution queue, and replays
  that queue.
- invoke(commander, prompt): convenience runner (tokenize, parse, run, surface faults).

Token stream
    @cmd1 opt1 opt2- name=value @help @cmd2 help
- every token outside a command scope must start with the marker "@".
- "@help" asks for the full listing; any other "@name" selects a registered command.
- the tokens up to the next "@" token belong to that command (see contexts.Context).

Parse pass
- reset(): every context is rebuilt around the same command object and the command's
  init(context) runs again, so option values and help flags never leak between passes;
  the queue and the top-level help flag are cleared.
- faults abort the pass immediately; command-level faults gain the "@<name>: " prefix.

Run
1. "@help" seen → print the full listing, nothing runs.
2. otherwise the first queued command with `help` → print its listing, nothing runs.
3. otherwise run queued commands in order; the first failure is re-raised as
   "@<name>: <message>" and the remaining commands are abandoned.

Quick start
    from atcommander import Commander, OptionBool, invoke

    app = Commander("demo", shell=True)

    def declare(context):
        context.declare("loud", OptionBool(False), "shout")

    @app.command("hello", descr="say hello", initializer=declare)
    def hello(context):
        context.logger.warning("HELLO" if context.option("loud").value else "hello")

    if __name__ == "__main__":
        invoke(app)
"""
import difflib
import logging
import shlex
import sys
from collections.abc import Iterable

from rich.console import Console
from rich.logging import RichHandler
from rich.segment import Segments
from rich.text import Text

from .commands import Command, command
from .contexts import Context, MARKER, HELP, styler
from .faults import *
from .utils import *

logger = logging.getLogger(__name__)

DEFAULT_NAME = "An atcommander application"
DEFAULT_COPYRIGHT = "Copyright (c) the atcommander authors."


def _console_logger(name, console, level, /):
    """
    Build the logger handed to command implementations.

    The logger is not registered in the logging manager: each commander owns one
    handler bound to its own console, even when two commanders share a name.
    """
    log = logging.Logger("atcommander." + slugify(name), level)
    log.addHandler(RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        markup=False,
    ))
    return log


class Commander:
    """
    Registry of named commands plus the parse/run state of the current pass.

    Settings
    - name, copyright: shown at the top of every help listing. Missing or empty values
      fall back to DEFAULT_NAME / DEFAULT_COPYRIGHT.
    - console: rich Console receiving help listings (default: stdout).
    - logger: logging.Logger handed to commands through their context. When not given,
      one is built with a RichHandler on `console` at `level` (default WARNING).
    - shell: when True, invoke() renders faults on stderr and exits with status 1
      instead of raising them.
    - fancy: render faults inside a panel.
    - colorful: style help listings and faults (the plain text never changes).

    Read-only properties
    - name, copyright, console, logger, shell, fancy, colorful
    - contexts: copy of the name -> Context mapping
    - queue: tuple of the command names queued by the last parse pass
    - help_requested: True when "@help" was seen in the last parse pass
    """

    def __init__(
            self,
            name=Unset,
            copyright=Unset,
            /,
            *,
            console=Unset,
            logger=Unset,
            level=Unset,
            shell=False,
            fancy=False,
            colorful=False
    ):
        if not isinstance(name, str | Unset):
            raise TypeError("commander 'name' must be a string")
        if not isinstance(copyright, str | Unset):
            raise TypeError("commander 'copyright' must be a string")
        if not isinstance(console, Console | Unset):
            raise TypeError("commander 'console' must be a rich console")
        if not isinstance(logger, logging.Logger | Unset):
            raise TypeError("commander 'logger' must be a logging.Logger")
        if not isinstance(level, int | str | Unset):
            raise TypeError("commander 'level' must be a logging level")

        self._name = coalesce(name) or DEFAULT_NAME
        self._copyright = coalesce(copyright) or DEFAULT_COPYRIGHT
        self._console = Console() if console is Unset else console
        if logger is Unset:
            logger = _console_logger(self._name, self._console, coalesce(level, logging.WARNING))
        self._logger = logger
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._contexts = {}
        self._help = False
        self._queue = []

    name = mirror("name")
    copyright = mirror("copyright")
    console = mirror("console")
    logger = mirror("logger")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    contexts = mirror("contexts")
    queue = mirror("queue")
    help_requested = mirror("help")

    def register(self, name, command, /):
        """
        Register `command` under `name` and return its freshly initialized Context.

        Raises
        - TypeError when name is not a string or command is not a Command.
        - ConfigurationError when the name is taken, empty, `help`, or ends with
          "+", "-" or "=".
        """
        if not isinstance(name, str):
            raise TypeError("command name must be a string")
        if not isinstance(command, Command):
            raise TypeError("command must be an instance of Command")
        if name in self._contexts:
            raise ConfigurationError("commander has already command %s" % name)
        if not name or name == HELP or name.endswith(("+", "-", "=")):
            raise ConfigurationError("illegal command name: %s" % name)

        context = Context(self, command)
        command.init(context)
        self._contexts[name] = context
        logger.debug("registered @%s with options %s", name, context)
        return context

    def command(self, name, /, descr=Unset, initializer=Unset):
        """
        Decorator: wrap a run(context) function into a command and register it.

        Returns the CallbackCommand, so the decorated name refers to the command.
        """
        @rename("command")
        def wrapper(source, /):
            self.register(name, cmd := command(source, descr, initializer))
            return cmd

        return wrapper

    def lookup(self, name, /):
        """
        Return the Context registered under `name`, or None.
        """
        return self._contexts.get(name)

    def reset(self):
        """
        Rebuild every context from its command and clear the queue and help flag.
        """
        for name, context in self._contexts.items():
            fresh = Context(self, context.command)
            context.command.init(fresh)
            self._contexts[name] = fresh
        self._help = False
        self._queue = []
        logger.debug("reset %d command contexts", len(self._contexts))

    def parse(self, tokens, /):
        """
        Parse a token stream and return the number of consumed tokens.

        The pass starts from a clean slate (see reset()). The first fault aborts it:
        CommandSyntaxError, UnknownCommandError, DuplicateInvocationError, or any
        command-level fault prefixed with "@<name>: ".
        """
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be an iterable of strings")

        self.reset()
        index = 0
        while index < len(tokens):
            token = tokens[index]
            if not token.startswith(MARKER):
                raise CommandSyntaxError(
                    "expected command name, but got: %s" % token,
                    hint="start with a command, for example '%s%s'" % (MARKER, HELP),
                    token=token,
                    index=index,
                )

            name = token[len(MARKER):]
            if name == HELP:
                self._help = True
                index += 1
                continue

            if (context := self._contexts.get(name)) is None:
                suggestions = difflib.get_close_matches(name, self._contexts.keys(), 5)
                try:
                    hint = "did you mean %r? you can also run '%s%s' to see all commands" % (
                        MARKER + suggestions[0], MARKER, HELP
                    )
                except IndexError:
                    hint = "run '%s%s' to see available commands" % (MARKER, HELP)
                raise UnknownCommandError(
                    "unknown command: %s%s" % (MARKER, name),
                    hint=hint,
                    input=name,
                    index=index,
                    suggestions=suggestions,
                )

            if name in self._queue:
                raise DuplicateInvocationError(
                    "cannot run %s%s multiple times" % (MARKER, name),
                    hint="merge the options of every %s%s occurrence into one" % (MARKER, name),
                    input=name,
                    index=index,
                )

            try:
                consumed = context.parse(tokens[index + 1:])
            except CommandException as exception:
                raise exception.prefixed(MARKER + name) from exception

            self._queue.append(name)
            logger.debug("queued @%s with options %s", name, context)
            index += consumed + 1
        return index

    def run(self):
        """
        Run the queue of the last parse pass (help requests take precedence).

        Raises
        - the fault of the first failing command, prefixed with "@<name>: ". Faults that
          are not CommandException become DelegatedCommandError.
        """
        if self._help:
            self.help()
            return

        for name in self._queue:
            if (context := self._contexts[name]).help_requested:
                context.help(name)
                return

        for name in self._queue:
            context = self._contexts[name]
            logger.debug("running @%s", name)
            try:
                context.command.run(context)
            except CommandException as exception:
                raise exception.prefixed(MARKER + name) from exception
            except Exception as exception:
                raise DelegatedCommandError(
                    "%s%s: %s" % (MARKER, name, exception),
                    hint="check additional logs for more details",
                    input=name,
                    exception=exception,
                ) from exception

    def heading(self):
        """
        Return the common help heading: name, copyright and a blank line.
        """
        style = styler(self._colorful, {
            "program-name": "bold #FF4D94",  # Magenta-pink brand pop
            "copyright-section": "#9CA3AF",  # Neutral gray
        })
        text = Text()
        text.append(self._name, style("program-name")).append("\n")
        text.append(self._copyright, style("copyright-section")).append("\n")
        text.append("\n")
        return text

    def helptext(self):
        """
        Build the full listing (every registered command) as rich Text.
        """
        style = styler(self._colorful, {
            "group-label": "bold #FFFFFF",  # Pure white headers
            "children": "bold #36C5F0",  # Sky-blue commands
            "children-description": "#9CA3AF",  # Muted gray
        })

        text = self.heading()
        text.append("commands:", style("group-label")).append("\n")
        text.append("  ").append(MARKER + HELP, style("children")).append("\t")
        text.append("Show this help and exit", style("children-description")).append("\n")
        for name in sorted(self._contexts):
            text.append("  ").append(MARKER + name, style("children")).append("\t")
            text.append(self._contexts[name].command.describe(), style("children-description")).append("\n")
        return text

    def help(self):
        """
        Print the full listing on the console.
        """
        text = self.helptext()
        text.rstrip()
        # Segments bypass line wrapping, so the tab separators reach the sink as-is.
        self._console.print(Segments(text.render(self._console, end="\n")), crop=False)

    def __invoke__(self, prompt=Unset):
        """
        Parse and run a token stream, surfacing faults through trigger().

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        try:
            self.parse(tokens)
            self.run()
        except CommandException as fault:
            trigger(fault, tool=self, shell=self._shell, fancy=self._fancy, colorful=self._colorful)

    def __repr__(self):
        return "%s(%r, commands=%r)" % (type(self).__name__, self._name, sorted(self._contexts))

    def __rich_repr__(self):
        yield "name", self._name
        yield "copyright", self._copyright
        yield "commands", sorted(self._contexts)
        yield "queue", tuple(self._queue)


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for commanders.

    Parameters
    - object: an instance providing __invoke__(prompt).
    - prompt: Unset (sys.argv[1:]), a shell-like string, or an iterable of strings.

    Raises
    - TypeError when `object` does not implement __invoke__.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        object.__invoke__(prompt)
        return

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "Commander",
    "invoke",
    "DEFAULT_NAME",
    "DEFAULT_COPYRIGHT",
)

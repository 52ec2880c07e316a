"""
atcommander command implementations.

What this module provides
- Command: the abstract capability set a registered command must offer.
  • describe() -> str: one-line description shown in help listings.
  • init(context): declare options on a fresh context. Called once at registration and
    again at the start of every parse pass, so it must only declare options.
  • run(context): do the work, reading option values back through the context.
    Failure is signalled by raising; the commander wraps the exception into a
    DelegatedCommandError prefixed with the command name.

- CallbackCommand / command(...): wrap a plain function run(context) into a Command,
  with an optional initializer registered through a decorator.

Quick start
    from atcommander import Commander, OptionBool, command

    @command(descr="say hello")
    def hello(context):
        if context.option("loud").value:
            context.logger.warning("HELLO")

    @hello.initializer
    def hello(context):
        context.declare("loud", OptionBool(False), "shout")

    app = Commander("demo")
    app.register("hello", hello)
"""
import inspect
from abc import ABC, abstractmethod

from .utils import *


class Command(ABC):
    """
    Abstract command: {describe, init, run}.
    """

    @abstractmethod
    def describe(self):
        """
        Return the one-line description shown in help listings.
        """

    @abstractmethod
    def init(self, context, /):
        """
        Declare the command options on a freshly created context.
        """

    @abstractmethod
    def run(self, context, /):
        """
        Execute the command; raise to signal failure.
        """


class CallbackCommand(Command):
    """
    Command backed by plain callables.

    - callback(context) is the run routine.
    - initializer(context), given here or later through @cmd.initializer, declares options.
    - descr defaults to the callback docstring (empty string when absent).
    """

    def __init__(self, callback, /, descr=Unset, initializer=Unset):
        if not callable(callback):
            raise TypeError("command callback must be callable")
        if not isinstance(descr, str | Unset):
            raise TypeError("command 'descr' must be a string")
        self._callback = callback
        self._initializer = Unset
        self._descr = coalesce(descr, inspect.getdoc(callback) or "").strip()
        if initializer is not Unset:
            self.initializer(initializer)

    callback = mirror("callback")
    descr = mirror("descr")

    def initializer(self, initializer, /):
        """
        Register the option-declaring function.

        Rules
        - Must be callable.
        - Can be set only once per command (cannot be overridden).

        Returns
        - The command itself, so the decorated name keeps pointing at the command.
        """
        if not callable(initializer):
            raise TypeError("command initializer must be callable")
        if self._initializer is not Unset:
            raise TypeError("command initializer cannot be overridden")
        self._initializer = initializer
        return self

    def describe(self):
        return self._descr

    def init(self, context, /):
        if self._initializer is not Unset:
            self._initializer(context)

    def run(self, context, /):
        self._callback(context)

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, getattr(self._callback, "__qualname__", self._callback))


def command(source=Unset, /, descr=Unset, initializer=Unset):
    """
    Create a CallbackCommand or return a decorator to build it later.

    Invocation modes
    - Direct:     cmd = command(func, descr="...", initializer=declare)
    - Decorator:  @command(descr="...") / @command

    Returns
    - CallbackCommand | Callable[[Callable], CallbackCommand]
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        return CallbackCommand(source, descr, initializer)

    return wrapper(source) if source is not Unset else wrapper


__all__ = (
    "Command",
    "CallbackCommand",
    "command",
)

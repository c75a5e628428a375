r"""
Keelson command layer: named, namespaced units of work.

What this module provides
- Command: a record (name, aliases, definition, description) plus the run
  protocol used by the dispatcher: bind → validate → interact → execute.
- command(name, ...): decorator turning a plain function into a Command whose
  callback receives the bound input.

Naming rules
- Names and aliases are colon-separated segments: ^[^:]+(:[^:]+)*$
  ("cache:clear", "db:migrate:status"). The namespace is everything before the
  last colon ("" for top-level commands).

Quick start
    from keelson import command, Registry, dispatch, ArgvInput, Mode

    @command("greet", description="say hello")
    def greet(input):
        print("hello", input.get_argument("who"))

    greet.add_argument("who", Mode.REQUIRED)

    registry = Registry()
    registry.register(greet)
    dispatch(registry, ArgvInput(["greet", "world"]))

Design notes
- Commands are never mutated by the registry or by resolution.
- Subclasses override execute() (and optionally interact()) instead of passing
  a callback.
"""
import re

from .definitions import Argument, Definition, Option
from .utils import *

_NAME = re.compile(r"[^:]+(:[^:]+)*")


def _sanitize_name(name, /):
    if not isinstance(name, str):
        raise TypeError("the command name must be a string")
    if not name:
        raise ValueError("the command name cannot be empty")
    if not _NAME.fullmatch(name):
        raise ValueError("command name %r is invalid" % name)
    return name


class Command:
    """
    Executable, namespaced command.

    Parameters
    - name: str
      Full name, including its namespace ("cache:clear").
    - aliases: Iterable[str]
      Alternate names, validated like the name itself.
    - definition: Definition | Unset
      Owned input definition; a new empty one when omitted.
    - description: str | None
      Short help text.
    - callback: Callable[[Input], int | None] | Unset
      Called by execute(); subclasses may override execute() instead.
    """

    name = mirror("name")
    aliases = mirror("aliases")
    description = mirror("description")

    def __init__(self, name, /, aliases=(), definition=Unset, description=None, callback=Unset):
        self._name = _sanitize_name(name)

        if isinstance(aliases, str):
            raise TypeError("Command() 'aliases' must be an iterable of strings, not a string")
        self._aliases = tuple(map(_sanitize_name, aliases))

        if definition is Unset:
            definition = Definition()
        elif not isinstance(definition, Definition):
            raise TypeError("Command() 'definition' must be a Definition")
        self._definition = definition

        if description is not None and not isinstance(description, str):
            raise TypeError("Command() 'description' must be a string")
        self._description = description

        if callback is not Unset and not callable(callback):
            raise TypeError("Command() 'callback' must be callable")
        self._callback = callback

    @property
    def namespace(self):
        namespace, _, _ = self._name.rpartition(":")
        return namespace

    @property
    def definition(self):
        return self._definition

    @property
    def names(self):
        """
        The primary name followed by every alias.
        """
        return (self._name, *self._aliases)

    def add_argument(self, *args, **kwargs):
        self._definition.add_argument(Argument(*args, **kwargs))
        return self

    def add_option(self, *args, **kwargs):
        self._definition.add_option(Option(*args, **kwargs))
        return self

    def run(self, input, /, base=Unset):
        """
        Bind, validate and execute this command against `input`.

        `base` holds application-wide slots (e.g., the `command` argument);
        its arguments come first in the bound definition.

        Returns the exit code (None from the callback means 0).
        """
        definition = self._definition if base is Unset else self._definition.merge(base)
        input.bind(definition)
        input.validate()

        if input.interactive:
            self.interact(input)

        status = self.execute(input)
        return 0 if status is None else int(status)

    def interact(self, input, /):
        """
        Hook run before execute() for interactive inputs; no-op by default.
        """

    def execute(self, input, /):
        if self._callback is Unset:
            raise NotImplementedError(
                "you must override execute() in a Command subclass or pass a callback"
            )
        return self._callback(input)

    def __rich_repr__(self):
        yield "name", self._name
        yield "aliases", self._aliases
        yield "description", self._description

    def __repr__(self):
        return "command(name=%r, aliases=%r, description=%r)" % (self._name, self._aliases, self._description)


def command(name, /, *args, **kwargs):
    """
    Decorator factory wrapping a function into a Command.

    Usage
        @command("cache:clear", aliases=["cc"])
        def clear(input):
            ...

    The decorated name is bound to the Command; the function becomes its
    callback. Extra arguments are forwarded to Command().
    """
    @rename("command")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@command() must be applied to a callable")
        return Command(name, *args, callback=callback, **kwargs)

    return wrapper


__all__ = (
    "Command",
    "command",
)

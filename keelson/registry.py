"""
Keelson command registry: the explicit catalogue of an application's commands.

Indexing
- every command is reachable by its primary name and by each alias.
- keys are unique across names and aliases; a clash raises DuplicateNameError
  and leaves the registry untouched.

Views
- all(namespace) and iteration yield primary commands only, in registration
  order; keys() yields every name and alias.
- namespaces() lists distinct non-empty namespaces of primary names.

There is no process-wide registry: applications create and pass their own.
"""
from .commands import Command
from .faults import *
from .utils import *


class Registry:
    """
    Name/alias → Command index.

    Examples
        >>> registry = Registry()
        >>> registry.register(Command("cache:clear", aliases=["cc"]))
        command(name='cache:clear', aliases=('cc',), description=None)
        >>> "cc" in registry, registry.namespaces()
        (True, ('cache',))
    """

    def __init__(self, commands=()):
        self._keys = {}
        self._commands = []
        self.extend(commands)

    def register(self, command, /):
        if not isinstance(command, Command):
            raise TypeError("register() argument must be a Command")

        seen = set()
        for key in command.names:
            if key in self._keys or key in seen:
                raise DuplicateNameError(
                    "a command named %r is already registered" % key,
                    title="duplicate command",
                    hint="rename the command or drop the clashing alias",
                    name=key,
                )
            seen.add(key)

        for key in command.names:
            self._keys[key] = command
        self._commands.append(command)
        return command

    def extend(self, commands, /):
        for command in commands:
            self.register(command)

    def has(self, name, /):
        return name in self._keys

    def get(self, name, /):
        try:
            return self._keys[name]
        except KeyError:
            raise CommandNotFoundError(
                "command %r is not defined" % name,
                title="command not found",
                name=name,
            ) from None

    def all(self, namespace=Unset):
        """
        Map primary names to commands, optionally for one exact namespace.
        """
        return {
            command.name: command
            for command in self._commands
            if namespace is Unset or command.namespace == namespace
        }

    def namespaces(self):
        namespaces = {}
        for command in self._commands:
            if command.namespace:
                namespaces.setdefault(command.namespace)
        return tuple(namespaces)

    def keys(self):
        return tuple(self._keys)

    def __contains__(self, name):
        return self.has(name)

    def __len__(self):
        return len(self._commands)

    def __iter__(self):
        return iter(tuple(self._commands))

    def __rich_repr__(self):
        yield "commands", tuple(self._commands)

    def __repr__(self):
        return "registry(%s)" % ", ".join(map(repr, self._keys))


__all__ = (
    "Registry",
)

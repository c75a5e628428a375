r"""
Keelson resolution engine: from a typed (possibly abbreviated) name to a Command.

Overview
- abbreviations(names)
  • Every prefix of every name maps to the names sharing it; a full name always
    maps to itself alone, so an exact name is never ambiguous.

- resolve_namespace / find_namespace
  • Namespaces are abbreviated segment by segment ("f:b" → "foo:bar"), each
    segment chosen among the namespaces that share the segments already found.

- resolve / find
  • exact name or alias first; otherwise the namespace part is resolved, then
    the name is abbreviated among primary names of that namespace and, failing
    that, among its aliases. Several candidates naming the same command still
    resolve to it.

- Resolution
  • explicit result: (value, fault). Truthy on success; unwrap() returns the
    value or raises the fault. find*/dispatch are the raising conveniences.

- dispatch
  • picks the command from the input's first positional token, runs it and
    hands any fault to faults.trigger (raise, or render and exit in shell mode).

Fault copy
- "command 'x' is not defined", "command 'a' is ambiguous (afoobar, afoobar1
  and 1 more)", "there are no commands defined in the 'x' namespace",
  "the namespace 'f' is ambiguous (foo, foo1)".

Quick example:
    >>> registry = Registry([Command("foo:bar"), Command("foo:bar1")])
    >>> find(registry, "f:bar").name
    'foo:bar'
    >>> resolve(registry, "foo:b").fault
    AmbiguousCommandError("command 'foo:b' is ambiguous (foo:bar, foo:bar1)")
"""
from collections import namedtuple

from .definitions import Argument, Definition, Mode
from .faults import *
from .registry import Registry
from .suggestions import suggest
from .utils import *


class Resolution(namedtuple("Resolution", ("value", "fault"), defaults=(None, None))):
    """
    Outcome of a lookup: exactly one of `value` and `fault` is set.
    """
    __slots__ = ()

    def __bool__(self):
        return self.fault is None

    def unwrap(self):
        if self.fault is not None:
            raise self.fault
        return self.value


def abbreviations(names, /):
    """
    Map every prefix of `names` to the list of names starting with it.

    Full names are entered last and always map to themselves alone.
    """
    names = list(dict.fromkeys(names))
    abbreviations = {}
    for name in names:
        for length in range(len(name) - 1, 0, -1):
            abbreviations.setdefault(name[:length], []).append(name)
    for name in names:
        abbreviations[name] = [name]
    return abbreviations


def _summary(names):
    """
    "a, b" or "a, b and N more".
    """
    if len(names) <= 2:
        return ", ".join(names)
    return "%s, %s and %d more" % (names[0], names[1], len(names) - 2)


def _namespace_of(name):
    namespace, _, _ = name.rpartition(":")
    return namespace


def resolve_namespace(registry, namespace, /):
    """
    Expand an abbreviated namespace ("f:b") into a registered one.

    Returns a Resolution holding the full namespace, or a fault:
    - NoCommandInNamespaceError when a segment matches nothing;
    - AmbiguousNamespaceError when a segment matches several namespaces.
    """
    if not isinstance(registry, Registry):
        raise TypeError("resolve_namespace() first argument must be a Registry")
    if not isinstance(namespace, str):
        raise TypeError("resolve_namespace() second argument must be a string")

    namespaces = registry.namespaces()
    found = []
    for index, part in enumerate(namespace.split(":")):
        segments = []
        for candidate in namespaces:
            parts = candidate.split(":")
            if len(parts) > index and parts[:index] == found:
                segments.append(parts[index])

        matches = abbreviations(segments).get(part, [])
        if not matches:
            suggestions = suggest(namespace, namespaces)
            return Resolution(fault=NoCommandInNamespaceError(
                "there are no commands defined in the %r namespace" % namespace,
                title="unknown namespace",
                hint=_hint(suggestions),
                name=namespace,
                suggestions=suggestions,
            ))
        if len(matches) > 1:
            candidates = [":".join([*found, match]) for match in matches]
            return Resolution(fault=AmbiguousNamespaceError(
                "the namespace %r is ambiguous (%s)" % (namespace, _summary(candidates)),
                title="ambiguous namespace",
                hint="type more characters to pick one of %s" % ", ".join(candidates),
                name=namespace,
                candidates=candidates,
                suggestions=candidates,
            ))
        found.append(matches[0])

    return Resolution(":".join(found))


def find_namespace(registry, namespace, /):
    return resolve_namespace(registry, namespace).unwrap()


def _hint(suggestions):
    if not suggestions:
        return None
    if len(suggestions) == 1:
        return "did you mean %r?" % suggestions[0]
    return "did you mean one of these? %s" % ", ".join(suggestions)


def resolve(registry, name, /):
    """
    Resolve a full or abbreviated command name.

    Returns a Resolution holding the Command, or a CommandNotFoundError family
    fault (AmbiguousCommandError, NoCommandInNamespaceError, ...).
    """
    if not isinstance(registry, Registry):
        raise TypeError("resolve() first argument must be a Registry")
    if not isinstance(name, str):
        raise TypeError("resolve() second argument must be a string")

    if registry.has(name):
        return Resolution(registry.get(name))

    namespace, separator, short = name.rpartition(":")
    if separator:
        resolution = resolve_namespace(registry, namespace)
        if not resolution:
            return resolution
        namespace = resolution.value
        search = namespace + ":" + short
    else:
        search = name

    commands = registry.all()
    names = [key for key in commands if _namespace_of(key) == namespace]
    matches = abbreviations(names).get(search, [])

    if not matches:
        aliases = [
            key for key in registry.keys()
            if key not in commands and _namespace_of(key) == namespace
        ]
        matches = abbreviations(aliases).get(search, [])

    targets = {id(registry.get(match)): registry.get(match) for match in matches}
    if len(targets) == 1:
        return Resolution(*targets.values())

    suggestions = suggest(name, registry.keys())
    if matches:
        return Resolution(fault=AmbiguousCommandError(
            "command %r is ambiguous (%s)" % (name, _summary(matches)),
            title="ambiguous command",
            hint="type more characters to pick one of %s" % ", ".join(matches),
            name=name,
            candidates=matches,
            suggestions=suggestions,
        ))

    return Resolution(fault=CommandNotFoundError(
        "command %r is not defined" % name,
        title="command not found",
        hint=_hint(suggestions),
        name=name,
        suggestions=suggestions,
    ))


def find(registry, name, /):
    return resolve(registry, name).unwrap()


def dispatch(registry, input, /, definition=Unset, *, shell=False, fancy=False, colorful=True):
    """
    Run the command named by the first positional token of `input`.

    Parameters
    - registry: Registry
    - input: Input (not yet bound)
    - definition: Definition | Unset
      Application-wide slots prepended to the command's own definition. The
      default holds a single required `command` argument, which receives the
      command name itself.
    - shell: bool
      When True faults are rendered on stderr and the process exits with the
      fault's exit code; otherwise they are raised.
    - fancy, colorful: rendering switches forwarded to the fault.

    Returns
    - int: the command's exit code.
    """
    if definition is Unset:
        definition = Definition([Argument("command", Mode.REQUIRED, "the command to execute")])

    try:
        name = input.first_argument()
        if name is None:
            raise MissingArgumentError(
                "no command given",
                title="missing command",
                hint="pass a command name as first argument",
                missing=("command",),
            )
        return find(registry, name).run(input, base=definition)
    except CommandException as fault:
        trigger(fault, shell=shell, fancy=fancy, colorful=colorful, docs=getdoc(fault.code) if isinstance(fault.code, FaultCode) else None)


__all__ = (
    "Resolution",
    "abbreviations",
    "resolve_namespace",
    "find_namespace",
    "resolve",
    "find",
    "dispatch",
)

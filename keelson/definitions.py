r"""
Keelson input definitions: the declared shape of acceptable input.

Overview
- Mode
  • NONE, REQUIRED, OPTIONAL: how a slot takes its value. Whether a slot
    accumulates several values is an independent `array` switch, never a bit
    mixed into the mode.

- Specs
  • Argument: positional slot with a name, a mode (REQUIRED or OPTIONAL), an
    optional default and an `array` switch for a trailing variadic slot.
  • Option: named slot addressed as --name, with an optional -x shortcut, a
    mode (NONE for presence-only switches) and the same `array` switch.

- Definition
  • Ordered arguments (lookup by name or position) plus options by name and a
    derived shortcut → name index. Enforces unique names/shortcuts and the
    positional ordering rules.

Introspection & representation
- SpecType metaclass provides stable __repr__/__rich_repr__ and exposes the
  fields declared in __introspectable__ via read-only properties.

Validation highlights
- Argument: non-empty name; NONE is not a positional mode; only OPTIONAL
  arguments carry a default; array defaults must be sequences.
- Option: leading dashes are stripped from name and shortcut; NONE options
  cannot be arrays nor carry a default (their default is False).
- Definition: duplicate names/shortcuts raise DuplicateNameError; a required
  argument after an optional one, or anything after an array argument, raises
  OrderingError.

Quick example:
    >>> from keelson.definitions import Argument, Option, Definition, Mode
    >>> definition = Definition([
    ...     Argument("source", Mode.REQUIRED),
    ...     Argument("targets", Mode.OPTIONAL, array=True),
    ...     Option("verbose", "v"),
    ...     Option("output", "o", Mode.REQUIRED),
    ... ])
    >>> definition.get_argument_required_count()
    1
"""
import functools
import math
import operator
from collections.abc import Sequence
from enum import Enum

from rich.text import Text

from .faults import *
from .utils import *


class Mode(Enum):
    """
    how a slot takes its value.

    - NONE: no value at all (options only); presence means True.
    - REQUIRED: a value must be supplied.
    - OPTIONAL: a value may be supplied; the default is used otherwise.
    """
    NONE = "none"
    REQUIRED = "required"
    OPTIONAL = "optional"


class SpecType(type):
    """
    Metaclass that turns specs into introspectable, read-only records.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and pretty printing.

    Conventions
    - __typename__ is the lowercased class name, used in messages and reprs.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": namespace.get("__typename__", name.lower()),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Example
            - option(name='verbose', shortcut='v', mode=<Mode.NONE: 'none'>, ...)
            """
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the fields shared by every spec.

    - name: required non-empty string after trimming.
    - mode: must be a Mode member.
    - description: Unset | None | str | Text; blank strings become None.
    - array: coerced to bool.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    metadata["name"] = name

    if not isinstance(metadata["mode"], Mode):
        raise TypeError(f"{cls.__typename__} 'mode' must be a Mode member")

    if not isinstance(description := metadata["description"], str | Text | Unset | None):
        raise TypeError(f"{cls.__typename__} 'description' must be a string")
    elif isinstance(description, str):
        description = description.strip() or None
    metadata["description"] = coalesce(description)

    metadata["array"] = bool(metadata["array"])


def _sanitize_default(cls, metadata, /):
    """
    Internal: materialize the default of an array slot.

    Array slots always hold a list; None/Unset becomes an empty one and any
    non-sequence (including strings) is refused.
    """
    default = coalesce(metadata["default"])
    if metadata["array"]:
        if default is None:
            default = []
        elif not isinstance(default, Sequence) or isinstance(default, str):
            raise TypeError(f"a default value for an array {cls.__typename__} must be a sequence")
        else:
            default = list(default)
    metadata["default"] = default


class Argument(metaclass=SpecType):
    """
    Positional slot specification.

    Arguments are matched by position, in declaration order. An array argument
    collects every remaining positional token, which is why it can only be the
    last one of a definition.

    Properties
    - name, mode, array, default, description (read-only).
    """

    __introspectable__ = (
        "name",
        "mode",
        "array",
        "default",
        "description",
    )

    def __new__(cls, name, mode=Mode.OPTIONAL, description=Unset, default=Unset, *, array=False):
        """
        Parameters
        - name: str
          Unique, non-empty name of the slot.
        - mode: Mode.REQUIRED | Mode.OPTIONAL
        - description: short help text (kept for renderers, never parsed).
        - default: only allowed for OPTIONAL arguments; must be a sequence when
          `array` is True (None becomes []).
        - array: accumulate every trailing positional token.
        """
        metadata = {
            "name": name,
            "mode": mode,
            "array": array,
            "default": default,
            "description": description,
        }
        _sanitize_metadata(cls, metadata)

        if metadata["mode"] is Mode.NONE:
            raise ValueError(f"{cls.__typename__} mode must be REQUIRED or OPTIONAL")
        if metadata["mode"] is Mode.REQUIRED and coalesce(default) is not None:
            raise ValueError(f"cannot set a default value except for an optional {cls.__typename__}")

        _sanitize_default(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    def is_required(self):
        return self._mode is Mode.REQUIRED

    def is_array(self):
        return self._array


class Option(metaclass=SpecType):
    """
    Named slot specification, addressed as --name or -shortcut.

    Modes
    - NONE: presence-only switch; bound to True when given, False otherwise.
    - REQUIRED: a value must follow (inline with '=' or as the next token).
    - OPTIONAL: a value may follow; the default is used when it does not.

    With `array=True` every occurrence appends its value to a list.

    Properties
    - name, shortcut, mode, array, default, description (read-only).
    """

    __introspectable__ = (
        "name",
        "shortcut",
        "mode",
        "array",
        "default",
        "description",
    )

    def __new__(cls, name, shortcut=Unset, mode=Mode.NONE, description=Unset, default=Unset, *, array=False):
        """
        Parameters
        - name: str
          Long name; a leading '--' is stripped ("--verbose" == "verbose").
        - shortcut: str | None
          Short alias; a leading '-' is stripped, blank means no shortcut.
          Multi-letter shortcuts are accepted.
        - mode: Mode.NONE | Mode.REQUIRED | Mode.OPTIONAL
        - description: short help text.
        - default: forbidden for NONE options (their default is False); must be
          a sequence for array options (None becomes []).
        - array: accumulate a value per occurrence.
        """
        if isinstance(name, str) and name.startswith("--"):
            name = name[2:]

        if not isinstance(shortcut, str | Unset | None):
            raise TypeError(f"{cls.__typename__} 'shortcut' must be a string")
        if isinstance(shortcut, str):
            shortcut = shortcut.strip().removeprefix("-") or None
            if shortcut and shortcut.startswith("-"):
                raise ValueError(f"{cls.__typename__} 'shortcut' must be a single-dash alias")

        metadata = {
            "name": name,
            "shortcut": coalesce(shortcut),
            "mode": mode,
            "array": array,
            "default": default,
            "description": description,
        }
        _sanitize_metadata(cls, metadata)

        if metadata["mode"] is Mode.NONE:
            if metadata["array"]:
                raise ValueError(f"an {cls.__typename__} cannot be an array if it does not accept a value")
            if coalesce(default) is not None:
                raise ValueError(f"cannot set a default value when using Mode.NONE for an {cls.__typename__}")
            metadata["default"] = False
        else:
            _sanitize_default(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    def accepts_value(self):
        return self._mode is not Mode.NONE

    def is_value_required(self):
        return self._mode is Mode.REQUIRED

    def is_value_optional(self):
        return self._mode is Mode.OPTIONAL

    def is_array(self):
        return self._array


class Definition:
    """
    Collection of Argument and Option specs describing one command's input.

    Invariants
    - argument names are unique; option names and shortcuts are unique.
    - at most one array argument, and it is the last argument.
    - no required argument follows an optional one.

    Lookups
    - arguments: by name or by 0-based position.
    - options: by name, or through the shortcut index.
    """

    def __init__(self, elements=()):
        self._arguments = {}
        self._options = {}
        self._shortcuts = {}
        self._required_count = 0
        self._has_optional = False
        self._has_array = False
        self.set_definition(elements)

    def set_definition(self, elements, /):
        """
        Replace every spec with the Arguments and Options of `elements`.
        """
        arguments = []
        options = []
        for element in elements:
            if isinstance(element, Argument):
                arguments.append(element)
            elif isinstance(element, Option):
                options.append(element)
            else:
                raise TypeError("definition elements must be Argument or Option instances")
        self.set_arguments(arguments)
        self.set_options(options)

    # Arguments

    def set_arguments(self, arguments=(), /):
        self._arguments = {}
        self._required_count = 0
        self._has_optional = False
        self._has_array = False
        self.add_arguments(arguments)

    def add_arguments(self, arguments, /):
        for argument in arguments:
            self.add_argument(argument)

    def add_argument(self, argument, /):
        if not isinstance(argument, Argument):
            raise TypeError("add_argument() argument must be an Argument")

        if argument.name in self._arguments:
            raise DuplicateNameError(
                "an argument with name %r already exists" % argument.name,
                title="duplicate argument",
                hint="give every argument of a definition its own name",
                name=argument.name,
            )

        if self._has_array:
            raise OrderingError(
                "cannot add argument %r after an array argument" % argument.name,
                title="argument after array",
                hint="an array argument collects every remaining token and must come last",
                name=argument.name,
            )

        if argument.is_required() and self._has_optional:
            raise OrderingError(
                "cannot add required argument %r after an optional one" % argument.name,
                title="required after optional",
                hint="declare required arguments before optional ones",
                name=argument.name,
            )

        if argument.is_array():
            self._has_array = True

        if argument.is_required():
            self._required_count += 1
        else:
            self._has_optional = True

        self._arguments[argument.name] = argument

    def get_argument(self, name, /):
        """
        Return an Argument by name or by 0-based position.

        Raises KeyError when no such argument exists.
        """
        if not self.has_argument(name):
            raise KeyError("the %r argument does not exist" % name)
        if isinstance(name, int):
            return list(self._arguments.values())[name]
        return self._arguments[name]

    def has_argument(self, name, /):
        if isinstance(name, bool):
            return False
        if isinstance(name, int):
            return 0 <= name < len(self._arguments)
        return name in self._arguments

    def get_arguments(self):
        return tuple(self._arguments.values())

    def get_argument_count(self):
        """
        Number of positional tokens this definition can hold (inf with an array).
        """
        return math.inf if self._has_array else len(self._arguments)

    def get_argument_required_count(self):
        return self._required_count

    def get_argument_defaults(self):
        return {argument.name: argument.default for argument in self._arguments.values()}

    # Options

    def set_options(self, options=(), /):
        self._options = {}
        self._shortcuts = {}
        self.add_options(options)

    def add_options(self, options, /):
        for option in options:
            self.add_option(option)

    def add_option(self, option, /):
        if not isinstance(option, Option):
            raise TypeError("add_option() argument must be an Option")

        if option.name in self._options:
            raise DuplicateNameError(
                "an option named %r already exists" % option.name,
                title="duplicate option",
                hint="give every option of a definition its own name",
                name=option.name,
            )

        if option.shortcut and option.shortcut in self._shortcuts:
            raise DuplicateNameError(
                "an option with shortcut %r already exists" % option.shortcut,
                title="duplicate shortcut",
                hint="pick another shortcut for option %r" % option.name,
                name=option.shortcut,
            )

        self._options[option.name] = option
        if option.shortcut:
            self._shortcuts[option.shortcut] = option.name

    def get_option(self, name, /):
        if not self.has_option(name):
            raise KeyError("the '--%s' option does not exist" % name)
        return self._options[name]

    def has_option(self, name, /):
        return name in self._options

    def get_options(self):
        return dict(self._options)

    def has_shortcut(self, shortcut, /):
        return shortcut in self._shortcuts

    def get_option_for_shortcut(self, shortcut, /):
        return self.get_option(self.shortcut_to_name(shortcut))

    def shortcut_to_name(self, shortcut, /):
        if shortcut not in self._shortcuts:
            raise KeyError("the '-%s' option does not exist" % shortcut)
        return self._shortcuts[shortcut]

    def get_option_defaults(self):
        return {option.name: option.default for option in self._options.values()}

    def merge(self, other, /):
        """
        Return a new definition holding `other`'s arguments first, then ours,
        and both option sets.

        Used to prepend application-wide slots (e.g., the command name) to a
        command's own definition without mutating either side.
        """
        if not isinstance(other, Definition):
            raise TypeError("merge() argument must be a Definition")
        return Definition([
            *other.get_arguments(),
            *self.get_arguments(),
            *other.get_options().values(),
            *self.get_options().values(),
        ])

    def __rich_repr__(self):
        yield "arguments", self.get_arguments()
        yield "options", tuple(self._options.values())

    def __repr__(self):
        return "definition(arguments=%r, options=%r)" % (self.get_arguments(), tuple(self._options.values()))


__all__ = (
    "Mode",
    "Argument",
    "Option",
    "Definition",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del SpecType

"""
Keelson input binders: turn a raw token source into bound values.

Overview
- Input: abstract base holding a Definition, the bound argument/option maps and
  the `interactive` switch. Subclasses only know how to produce tokens and how
  to walk them (`_parse`) plus a few pre-binding peeks used by the dispatcher.
- ArgvInput: argv-like token list (defaults to sys.argv[1:]).
- StringInput: shell-like string split with shlex, then parsed as argv.
- ArrayInput: mapping of "--name"/"-x"/argument-name keys to values.

Binding contract
- bind(definition) resets both maps and runs exactly one parse pass; when
  anything escapes, the maps are cleared first (no partially bound input).
- validate() checks that every required argument is bound.
- arguments/options expose defaults merged with bound values, as fresh dicts.

Token grammar (ArgvInput)
- "--" stops option parsing for the rest of the stream.
- "--name" / "--name=value": long option (split once on the first "=").
- "-x", "-xvalue", "-abc": shortcut, shortcut with inline value, shortcut set.
- "-" alone, "" and everything else: positional.
"""
import difflib
import shlex
import sys
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Iterable, Mapping

from .definitions import Definition
from .faults import *
from .utils import *


class Input(ABC):
    """
    Common state and accessors of every input source.

    Parameters
    - definition: Definition | Unset
      When given, the input is bound and validated right away.
    """

    def __init__(self, definition=Unset):
        self._definition = Definition()
        self._arguments = {}
        self._options = {}
        self._interactive = True

        if definition is not Unset:
            self.bind(definition)
            self.validate()

    @property
    def definition(self):
        return self._definition

    @property
    def interactive(self):
        return self._interactive

    @interactive.setter
    def interactive(self, value):
        self._interactive = bool(value)

    def bind(self, definition, /):
        """
        Bind the raw tokens against `definition`.

        Both maps are rebuilt from scratch. If parsing raises, they are emptied
        before the fault propagates so callers never observe half a binding.
        """
        if not isinstance(definition, Definition):
            raise TypeError("bind() argument must be a Definition")

        self._definition = definition
        self._arguments = {}
        self._options = {}
        try:
            self._parse()
        except BaseException:
            self._arguments = {}
            self._options = {}
            raise

    @abstractmethod
    def _parse(self):
        raise NotImplementedError

    def validate(self):
        """
        Raise MissingArgumentError when required arguments were not bound.
        """
        missing = [
            argument.name
            for argument in self._definition.get_arguments()
            if argument.is_required() and argument.name not in self._arguments
        ]
        if missing:
            raise MissingArgumentError(
                "not enough arguments (missing: %s)" % ", ".join(map(repr, missing)),
                title="missing arguments",
                hint="expected at least %d argument(s)" % self._definition.get_argument_required_count(),
                missing=tuple(missing),
            )

    @property
    def arguments(self):
        return self._definition.get_argument_defaults() | self._arguments

    @property
    def options(self):
        return self._definition.get_option_defaults() | self._options

    def _argument_name(self, name):
        if not self._definition.has_argument(name):
            raise KeyError("the %r argument does not exist" % name)
        return self._definition.get_argument(name).name

    def get_argument(self, name, /):
        name = self._argument_name(name)
        if name in self._arguments:
            return self._arguments[name]
        return self._definition.get_argument(name).default

    def set_argument(self, name, value, /):
        self._arguments[self._argument_name(name)] = value

    def has_argument(self, name, /):
        return self._definition.has_argument(name)

    def get_option(self, name, /):
        if not self._definition.has_option(name):
            raise KeyError("the '--%s' option does not exist" % name)
        if name in self._options:
            return self._options[name]
        return self._definition.get_option(name).default

    def set_option(self, name, value, /):
        if not self._definition.has_option(name):
            raise KeyError("the '--%s' option does not exist" % name)
        self._options[name] = value

    def has_option(self, name, /):
        return self._definition.has_option(name)

    @abstractmethod
    def first_argument(self):
        """
        Return the first positional token of the raw source, before binding.
        """

    @abstractmethod
    def has_parameter_option(self, values, /):
        """
        Return True when the raw source carries one of `values` ("--name"/"-x").
        """

    @abstractmethod
    def get_parameter_option(self, values, /, default=False):
        """
        Return the raw value following one of `values`, or `default`.
        """

    def _set_option_value(self, option, value):
        """
        Store a resolved option value (None meaning "no value was given").
        """
        if value is None:
            if option.is_value_required():
                raise MissingValueError(
                    "the '--%s' option requires a value" % option.name,
                    title="missing option value",
                    hint="pass it inline (--%s=<value>) or as the next token" % option.name,
                    name=option.name,
                )
            if option.is_array():
                self._options.setdefault(option.name, option.default)
                return
            value = option.default if option.is_value_optional() else True

        if option.is_array():
            self._options.setdefault(option.name, []).append(value)
        else:
            self._options[option.name] = value

    def _unknown_option(self, name, /, *, short=False):
        if short:
            return UnknownOptionError(
                "the '-%s' option does not exist" % name,
                title="unknown option",
                hint="check the available shortcuts of this command",
                name=name,
                suggestions=(),
            )
        suggestions = difflib.get_close_matches(name, self._definition.get_options().keys(), 5)
        try:
            hint = "did you mean '--%s'?" % suggestions[0]
        except IndexError:
            hint = "check the available options of this command"
        return UnknownOptionError(
            "the '--%s' option does not exist" % name,
            title="unknown option",
            hint=hint,
            name=name,
            suggestions=suggestions,
        )


def _normalize(values):
    if isinstance(values, str):
        return (values,)
    if not isinstance(values, Iterable):
        raise TypeError("parameter option values must be a string or an iterable of strings")
    return tuple(values)


class ArgvInput(Input):
    """
    Input read from an argv-like list of tokens.

    Tokens are taken as-is (no shell re-splitting); the default source is
    sys.argv[1:], so the program name is never parsed.
    """

    def __init__(self, argv=Unset, definition=Unset):
        if argv is Unset:
            argv = sys.argv[1:]
        elif isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError(f"{type(self).__name__}() argument must be an iterable of strings")
        tokens = list(argv)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError(f"{type(self).__name__}() argument must be an iterable of strings")
        self._tokens = tokens
        self._parsed = deque()
        super().__init__(definition)

    @property
    def tokens(self):
        return list(self._tokens)

    def _parse(self):
        options = True
        self._parsed = deque(self._tokens)
        while self._parsed:
            token = self._parsed.popleft()
            if options and token == "--":
                options = False
            elif options and token.startswith("--"):
                self._parse_long_option(token)
            elif options and token.startswith("-") and token != "-":
                self._parse_short_option(token)
            else:
                self._parse_argument(token)

    def _parse_short_option(self, token):
        name = token[1:]
        if len(name) > 1:
            definition = self._definition
            if definition.has_shortcut(name[0]) and definition.get_option_for_shortcut(name[0]).accepts_value():
                # -ovalue: the rest of the token is an inline value
                self._add_short_option(name[0], name[1:])
            elif definition.has_shortcut(name):
                self._add_short_option(name, None)
            else:
                self._parse_short_option_set(name)
        else:
            self._add_short_option(name, None)

    def _parse_short_option_set(self, name):
        for index, shortcut in enumerate(name):
            if not self._definition.has_shortcut(shortcut):
                raise self._unknown_option(shortcut, short=True)

            option = self._definition.get_option_for_shortcut(shortcut)
            if option.accepts_value():
                # the first value-taking shortcut ends the set
                self._add_long_option(option.name, name[index + 1:] or None)
                return
            self._add_long_option(option.name, None)

    def _parse_long_option(self, token):
        name = token[2:]
        if "=" in name:
            name, value = name.split("=", 1)
            self._add_long_option(name, value)
        else:
            self._add_long_option(name, None)

    def _parse_argument(self, token):
        definition = self._definition
        count = len(self._arguments)

        if definition.has_argument(count):
            argument = definition.get_argument(count)
            self._arguments[argument.name] = [token] if argument.is_array() else token
        elif definition.has_argument(count - 1) and definition.get_argument(count - 1).is_array():
            self._arguments[definition.get_argument(count - 1).name].append(token)
        else:
            raise TooManyArgumentsError(
                "too many arguments (unexpected %r at %s position)" % (token, ordinal(count + 1)),
                title="too many arguments",
                hint="this command accepts at most %d argument(s)" % definition.get_argument_count(),
                token=token,
            )

    def _add_short_option(self, shortcut, value):
        if not self._definition.has_shortcut(shortcut):
            raise self._unknown_option(shortcut, short=True)
        self._add_long_option(self._definition.shortcut_to_name(shortcut), value)

    def _add_long_option(self, name, value):
        if not self._definition.has_option(name):
            raise self._unknown_option(name)

        option = self._definition.get_option(name)
        if value is not None and not option.accepts_value():
            raise UnexpectedValueError(
                "the '--%s' option does not accept a value" % name,
                title="unexpected option value",
                hint="remove everything from '=' (for example: --%s)" % name,
                name=name,
                value=value,
            )

        if value is None and option.accepts_value() and self._parsed:
            if not self._parsed[0].startswith("-"):
                value = self._parsed.popleft()

        self._set_option_value(option, value)

    def first_argument(self):
        for token in self._tokens:
            if not token.startswith("-"):
                return token
        return None

    def has_parameter_option(self, values, /):
        values = _normalize(values)
        return any(token in values for token in self._tokens)

    def get_parameter_option(self, values, /, default=False):
        values = _normalize(values)
        tokens = deque(self._tokens)
        while tokens:
            token = tokens.popleft()
            for value in values:
                if token == value:
                    return tokens.popleft() if tokens else default
                if token.startswith(value + "="):
                    return token[len(value) + 1:]
        return default

    def __str__(self):
        return shlex.join(self._tokens)

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__.lower(), self._tokens)


class StringInput(ArgvInput):
    """
    Input read from a shell-like string (quotes and escapes follow shlex).
    """

    def __init__(self, string, definition=Unset):
        if not isinstance(string, str):
            raise TypeError("StringInput() argument must be a string")
        try:
            tokens = shlex.split(string)
        except ValueError as error:
            raise MalformedInputError(
                "cannot split %r (%s)" % (string, error),
                title="malformed input",
                hint="close every quote and do not end the input with a backslash",
                string=string,
            ) from error
        super().__init__(tokens, definition)


class ArrayInput(Input):
    """
    Input read from a mapping of parameters.

    Keys
    - "--name": long option; "-x": shortcut; anything else: argument name.

    Values
    - For options, None means "no value given" and follows the mode rules of
      argv parsing (True for switches, default or MissingValueError otherwise).
    """

    def __init__(self, parameters, definition=Unset):
        if not isinstance(parameters, Mapping):
            raise TypeError("ArrayInput() argument must be a mapping")
        self._parameters = dict(parameters)
        super().__init__(definition)

    @property
    def parameters(self):
        return dict(self._parameters)

    def _parse(self):
        for key, value in self._parameters.items():
            if not isinstance(key, str):
                raise TypeError("ArrayInput() parameter names must be strings")
            if key.startswith("--"):
                self._add_long_option(key[2:], value)
            elif key.startswith("-") and key != "-":
                self._add_short_option(key[1:], value)
            else:
                self._add_argument(key, value)

    def _add_short_option(self, shortcut, value):
        if not self._definition.has_shortcut(shortcut):
            raise self._unknown_option(shortcut, short=True)
        self._add_long_option(self._definition.shortcut_to_name(shortcut), value)

    def _add_long_option(self, name, value):
        if not self._definition.has_option(name):
            raise self._unknown_option(name)

        option = self._definition.get_option(name)
        if not option.accepts_value():
            if value is not None and not isinstance(value, bool):
                raise UnexpectedValueError(
                    "the '--%s' option does not accept a value" % name,
                    title="unexpected option value",
                    hint="pass None, True or False for a switch",
                    name=name,
                    value=value,
                )
            self._options[name] = True if value is None else value
            return

        if option.is_array() and isinstance(value, list | tuple):
            self._options[name] = list(value)
            return

        self._set_option_value(option, value)

    def _add_argument(self, name, value):
        if not self._definition.has_argument(name):
            raise UnknownArgumentError(
                "the %r argument does not exist" % name,
                title="unknown argument",
                hint="check the argument names of this command",
                name=name,
            )
        self._arguments[name] = value

    def first_argument(self):
        for key, value in self._parameters.items():
            if isinstance(key, str) and key.startswith("-"):
                continue
            return value
        return None

    def has_parameter_option(self, values, /):
        values = _normalize(values)
        return any(key in values for key in self._parameters)

    def get_parameter_option(self, values, /, default=False):
        values = _normalize(values)
        for key, value in self._parameters.items():
            if key in values:
                return value
        return default

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__.lower(), self._parameters)


__all__ = (
    "Input",
    "ArgvInput",
    "StringInput",
    "ArrayInput",
)

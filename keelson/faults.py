"""
Keelson faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing fault.
  Codes are grouped by domain (definition, routing, options, positionals) so
  logs and searches stay predictable, and each group maps to an exit code.
- CommandException: base type that carries a message plus a read-only options
  mapping (title, code, hint, suggestions, ...) and knows how to render itself.
- trigger(): central entry point to surface a fault (raise, or render and exit).
- getdoc(): optional description lookup for a code from the host application.

Structured data
- Faults never need string-parsing: resolution faults expose `suggestions` and
  `candidates`, option faults expose `name`, and everything else stays in
  `options` for renderers.

Integration
- The binder and the resolution engine raise faults directly.
- A dispatcher running in shell mode calls trigger(fault, shell=True, ...), which
  prints the fault with rich on stderr and exits with the fault's exit code.
"""
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by high-level domain)
    - definition (1010x): DUPLICATE_NAME, ORDERING
      • raised while an application is being assembled; generic failures.
    - routing (1110x): COMMAND_NOT_FOUND, AMBIGUOUS_COMMAND,
      NO_COMMAND_IN_NAMESPACE, AMBIGUOUS_NAMESPACE
    - options (1111x): MALFORMED_INPUT, UNKNOWN_OPTION, UNEXPECTED_VALUE, MISSING_VALUE
    - positionals (1112x): TOO_MANY_ARGUMENTS, MISSING_ARGUMENTS, UNKNOWN_ARGUMENT

    exit codes
    - definition faults map to 1 (generic failure), everything typed by a user
      maps to 2 (misuse).
    """
    # --- definition errors (10xxx) ---
    DUPLICATE_NAME              = 10101
    ORDERING                    = 10102

    # --- routing errors (1110x) ---
    COMMAND_NOT_FOUND           = 11101
    AMBIGUOUS_COMMAND           = 11102
    NO_COMMAND_IN_NAMESPACE     = 11103
    AMBIGUOUS_NAMESPACE         = 11104

    # --- option errors (1111x) ---
    MALFORMED_INPUT             = 11111
    UNKNOWN_OPTION              = 11112
    UNEXPECTED_VALUE            = 11113
    MISSING_VALUE               = 11117

    # --- positional errors (1112x) ---
    TOO_MANY_ARGUMENTS          = 11121
    MISSING_ARGUMENTS           = 11125
    UNKNOWN_ARGUMENT            = 11126

    @property
    def exitcode(self):
        """
        process exit code suggested for this fault (1 generic, 2 misuse).
        """
        return 1 if self < 11000 else 2

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
    base class of every fault raised by the engine.

    the message is the one-sentence, lowercased description; options carry the
    rest (title, code, hint, docs and fault-specific payload) as a read-only
    mapping. faults are immutable: __replace__ builds a copy with merged options.
    """
    code = None

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def exitcode(self):
        code = self.options.get("code", type(self).code)
        return code.exitcode if isinstance(code, FaultCode) else 1

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")

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

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

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

        prog = text(
            getattr(main, "__prog__", self.options.get("prog") or os.path.basename(sys.argv[0]) or "keelson"),
            styler("prog-name")
        )
        code = self.options.get("code", type(self).code)
        title = self.options.get("title", type(self).__name__)

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "-", styler("code")),
            " | ",
            text(str(title).title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))
        parts = [message]
        if self.hint:
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))
        if docs := self.options.get("docs"):
            parts.append(text(docs, styler("hint")))

        if fancy:
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(self.exitcode)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        fault = type(self)(self.message, **{**self.options, **overrides})
        fault.__cause__ = self.__cause__
        return fault


class DuplicateNameError(CommandException):
    code = FaultCode.DUPLICATE_NAME


class OrderingError(CommandException):
    code = FaultCode.ORDERING


class MalformedInputError(CommandException):
    code = FaultCode.MALFORMED_INPUT


class UnknownOptionError(CommandException):
    code = FaultCode.UNKNOWN_OPTION

    @property
    def suggestions(self):
        return tuple(self.options.get("suggestions", ()))


class UnexpectedValueError(CommandException):
    code = FaultCode.UNEXPECTED_VALUE


class MissingValueError(CommandException):
    code = FaultCode.MISSING_VALUE


class TooManyArgumentsError(CommandException):
    code = FaultCode.TOO_MANY_ARGUMENTS


class MissingArgumentError(CommandException):
    code = FaultCode.MISSING_ARGUMENTS


class UnknownArgumentError(CommandException):
    code = FaultCode.UNKNOWN_ARGUMENT


class CommandNotFoundError(CommandException):
    """
    a command name (or abbreviation) resolved to nothing usable.

    the ambiguity and namespace faults derive from this one, so callers that
    only care about “could not get a command” catch a single type.
    """
    code = FaultCode.COMMAND_NOT_FOUND

    @property
    def suggestions(self):
        """
        ranked “did you mean” names (closest first).
        """
        return tuple(self.options.get("suggestions", ()))

    @property
    def candidates(self):
        """
        names that matched the abbreviation (empty unless ambiguous).
        """
        return tuple(self.options.get("candidates", ()))


class AmbiguousCommandError(CommandNotFoundError):
    code = FaultCode.AMBIGUOUS_COMMAND


class NoCommandInNamespaceError(CommandNotFoundError):
    code = FaultCode.NO_COMMAND_IN_NAMESPACE


class AmbiguousNamespaceError(NoCommandInNamespaceError):
    code = FaultCode.AMBIGUOUS_NAMESPACE


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode the fault is rendered on the stderr console and the process
      exits with the fault's exit code; otherwise the fault is raised.

    typical options
    - shell, fancy, colorful, deferred, prog, and any context a renderer may show.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "DuplicateNameError",
    "OrderingError",
    "MalformedInputError",
    "UnknownOptionError",
    "UnexpectedValueError",
    "MissingValueError",
    "TooManyArgumentsError",
    "MissingArgumentError",
    "UnknownArgumentError",
    "CommandNotFoundError",
    "AmbiguousCommandError",
    "NoCommandInNamespaceError",
    "AmbiguousNamespaceError",
    "FaultCode",
    "trigger",
    "getdoc",
)

r"""
atcommander option values.

Overview
- Option: abstract, settable value cell owned by a command context.
  • set(token): apply a value-selector ("", "+", "-", or "=VALUE").
  • str(option): canonical rendering of the current value (help defaults, debugging).
  • metavar: short syntax hint shown next to the option name in help listings.
  • value: the current Python value (read-only; change it through set()).

- Variants
  • OptionBool:   "" and "+" set True, "-" sets False.           hint "[+-]"
  • OptionString: "" sets "", "=VALUE" sets VALUE verbatim.      hint "=VALUE"
  • OptionInt:    "=N" with N a decimal integer.                 hint "=INT"
  • OptionFloat:  "=X" with X a float literal.                   hint "=FLOAT"
  • OptionChoice: "=X" with X one of the declared choices.       hint "={a,b,c}"

Every variant rejects anything else with ValueSyntaxError("illegal <Variant> value: <token>").
New kinds are added by subclassing Option; contexts and the commander only rely on
set(), str() and metavar.

Canonical renderings
- OptionBool renders "true"/"false".
- OptionString and OptionChoice render a double-quoted, backslash-escaped form
  ("" for the empty string), OptionInt/OptionFloat their Python str().

Quick example:
    >>> flag = OptionBool(False)
    >>> flag.set("+"); flag.value
    True
    >>> name = OptionString("world")
    >>> name.set("=a b"); str(name)
    '"a b"'
"""
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable

from .faults import ValueSyntaxError
from .utils import *

# Escapes of the canonical quoted form; anything else non-printable uses \x, \u or \U.
_ESCAPES = {
    "\a": r"\a",
    "\b": r"\b",
    "\f": r"\f",
    "\n": r"\n",
    "\r": r"\r",
    "\t": r"\t",
    "\v": r"\v",
    "\\": r"\\",
    '"': r'\"',
}


def _quote(value, /):
    """
    Render a string as a double-quoted literal with backslash escapes.
    """
    fragments = []
    for char in value:
        if char in _ESCAPES:
            fragments.append(_ESCAPES[char])
        elif char.isprintable():
            fragments.append(char)
        elif (codepoint := ord(char)) < 0x80:
            fragments.append("\\x%02x" % codepoint)
        elif codepoint <= 0xFFFF:
            fragments.append("\\u%04x" % codepoint)
        else:
            fragments.append("\\U%08x" % codepoint)
    return '"%s"' % "".join(fragments)


class Option(ABC):
    """
    Settable value cell with a three-token micro-syntax.

    Subclasses implement set(), __str__() and metavar, and keep their current value
    in self._value (exposed read-only as .value).
    """

    value = mirror("value")

    @property
    @abstractmethod
    def metavar(self):
        """
        Short syntax hint displayed after the option name in help listings.
        """

    @abstractmethod
    def set(self, token, /):
        """
        Apply a value-selector token, or raise ValueSyntaxError naming the token.
        """

    @abstractmethod
    def __str__(self):
        """
        Canonical rendering of the current value.
        """

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, self)

    def __rich_repr__(self):
        yield "value", self.value
        yield "metavar", self.metavar

    def _check(self, token, /):
        # Tokens always come from the context splitter; anything else is API misuse.
        if not isinstance(token, str):
            raise TypeError("%s.set() argument must be a string" % type(self).__name__)

    def _illegal(self, token, /):
        return ValueSyntaxError(
            "illegal %s value: %s" % (type(self).__name__, token),
            hint="use the %s syntax shown by 'help'" % self.metavar,
            token=token,
        )


class OptionBool(Option):
    """
    Boolean toggle: "name" or "name+" switches on, "name-" switches off.
    """

    def __init__(self, value=False, /):
        if not isinstance(value, bool):
            raise TypeError("OptionBool value must be a boolean")
        self._value = value

    @property
    def metavar(self):
        return "[+-]"

    def set(self, token, /):
        self._check(token)
        match token:
            case "-":
                self._value = False
            case "" | "+":
                self._value = True
            case _:
                raise self._illegal(token)

    def __str__(self):
        return "true" if self._value else "false"


class OptionString(Option):
    """
    String value: "name" clears it, "name=VALUE" stores VALUE verbatim (no trimming).
    """

    def __init__(self, value="", /):
        if not isinstance(value, str):
            raise TypeError("OptionString value must be a string")
        self._value = value

    @property
    def metavar(self):
        return "=VALUE"

    def set(self, token, /):
        self._check(token)
        if token == "":
            self._value = ""
        elif token.startswith("="):
            self._value = token[len("="):]
        else:
            raise self._illegal(token)

    def __str__(self):
        return _quote(self._value)


class OptionInt(Option):
    """
    Integer value: only "name=N" is accepted, N being an optionally signed decimal.
    """

    def __init__(self, value=0, /):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("OptionInt value must be an integer")
        self._value = value

    @property
    def metavar(self):
        return "=INT"

    def set(self, token, /):
        self._check(token)
        if not re.fullmatch(r"=[+-]?[0-9]+", token):
            raise self._illegal(token)
        self._value = int(token[len("="):])

    def __str__(self):
        return str(self._value)


class OptionFloat(Option):
    """
    Float value: only "name=X" is accepted, X being anything float() understands
    without surrounding whitespace.
    """

    def __init__(self, value=0.0, /):
        if not isinstance(value, int | float) or isinstance(value, bool):
            raise TypeError("OptionFloat value must be a number")
        self._value = float(value)

    @property
    def metavar(self):
        return "=FLOAT"

    def set(self, token, /):
        self._check(token)
        literal = token[len("="):]
        if not token.startswith("=") or not literal or literal != literal.strip():
            raise self._illegal(token)
        try:
            self._value = float(literal)
        except ValueError:
            raise self._illegal(token) from None

    def __str__(self):
        return str(self._value)


class OptionChoice(Option):
    """
    Enumerated string value: "name=X" where X is one of the declared choices.

    The default is the first choice unless given explicitly.
    """

    def __init__(self, choices, value=Unset, /):
        if not isinstance(choices, Iterable) or isinstance(choices, str):
            raise TypeError("OptionChoice choices must be an iterable of strings")
        sanitized = []
        for choice in choices:
            if not isinstance(choice, str):
                raise TypeError("OptionChoice choices must be strings")
            elif not choice:
                raise ValueError("OptionChoice choices cannot be empty-strings")
            elif choice in sanitized:
                raise ValueError("OptionChoice choices cannot contain duplicates")
            sanitized.append(choice)
        if not sanitized:
            raise ValueError("OptionChoice must specify at least one choice")
        self._choices = tuple(sanitized)

        value = coalesce(value, self._choices[0])
        if value not in self._choices:
            raise ValueError("OptionChoice value must be one of its choices")
        self._value = value

    choices = mirror("choices")

    @property
    def metavar(self):
        return "={%s}" % ",".join(self._choices)

    def set(self, token, /):
        self._check(token)
        if not token.startswith("=") or token[len("="):] not in self._choices:
            raise self._illegal(token)
        self._value = token[len("="):]

    def __str__(self):
        return _quote(self._value)


__all__ = (
    "Option",
    "OptionBool",
    "OptionString",
    "OptionInt",
    "OptionFloat",
    "OptionChoice",
)

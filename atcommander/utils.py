"""
atcommander utilities shared by the options, contexts and commander layers.

Overview
- Unset: the "argument not given" sentinel. It is falsey, prints as "Unset" and joins
  PEP 604 unions, so `isinstance(value, str | Unset)` validates optional arguments.
- coalesce(value, default): swap Unset for a default, keeping None/0/"" untouched.
- @rename("name"): give a generated wrapper a stable __name__/__qualname__.
- mirror("attr"): read-only property over self._attr; containers come back as copies.
- slugify(text): lowercase, dash-separated identifier (logger names).

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> slugify("An atcommander application")
    'an-atcommander-application'
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel; UnsetType() always returns the same instance.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __or__(self, other, /):
        # str | Unset -> str | UnsetType, usable with isinstance()
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    __ror__ = __or__

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"


def coalesce(object, default=None, /):
    """
    Return `default` when `object` is Unset, `object` otherwise.
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator setting __name__ and __qualname__ of the decorated callable to `name`.
    """
    if not isinstance(name, str):
        raise TypeError("@rename() argument must be a string")

    def decorator(callable):
        if not builtins.callable(callable):
            raise TypeError("@rename() must be applied to a callable")
        try:
            callable.__name__ = callable.__qualname__ = name
        except (AttributeError, TypeError):
            raise TypeError("@rename() must be applied to an updatable callable") from None
        return callable

    decorator.__name__ = decorator.__qualname__ = "rename"
    return decorator


def _snapshot(object):
    match object:
        case str():
            return object
        case Mapping():
            return dict(object)
        case Set():
            return frozenset(object)
        case Sequence():
            return tuple(object)
        case _:
            return object


def mirror(name, /):
    """
    Build a read-only property returning a snapshot of `self._<name>`.

    Lists and tuples come back as tuples, mappings as new dicts (values are shared),
    sets as frozensets; anything else is returned as-is.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    attribute = "_" + name

    @rename(name)
    def getter(self):
        return _snapshot(getattr(self, attribute))

    return property(getter)


@functools.cache
def slugify(text, /):
    """
    Turn a display name into a lowercase, dash-separated identifier.

    Runs of anything that is not a letter or digit collapse into a single dash;
    leading/trailing dashes are dropped. An empty result becomes "app".
    """
    if not isinstance(text, str):
        raise TypeError("slugify() argument must be a string")
    return re.sub(r"[^0-9a-z]+", "-", text.lower()).strip("-") or "app"


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "slugify",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)

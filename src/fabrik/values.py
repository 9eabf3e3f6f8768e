"""Declared attribute values: plain, lazy, or sequence-driven."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias


@dataclass(frozen=True)
class Plain:
    """A value assigned as-is."""

    value: Any


@dataclass(frozen=True)
class Lazy:
    """A value computed when the attribute is assigned, once per build."""

    evaluate: Callable[[], Any]


@dataclass(frozen=True)
class Sequence:
    """A value computed from the per-attribute build counter."""

    apply: Callable[[int], Any]


Value: TypeAlias = Plain | Lazy | Sequence


def lazy(fn: Callable[[], Any]) -> Lazy:
    """Declare a value that is evaluated at build time."""
    return Lazy(fn)


def sequence(fn: Callable[[int], Any]) -> Sequence:
    """Declare a value derived from the attribute's sequence counter."""
    return Sequence(fn)


def as_value(obj: Any) -> Value:
    """Wrap a declared object into a Value, leaving Lazy and Sequence untouched."""
    if isinstance(obj, (Plain, Lazy, Sequence)):
        return obj
    return Plain(obj)


def evaluate(value: Value, counter: Callable[[], int]) -> Any:
    """Resolve a Value to a concrete object.

    ``counter`` is only called for a Sequence, so counters advance only for
    attributes that actually use one. A Sequence producing a Lazy is evaluated
    in turn.
    """
    match value:
        case Plain(value=obj):
            return obj
        case Lazy(evaluate=fn):
            return fn()
        case Sequence(apply=fn):
            result = fn(counter())
            if isinstance(result, Lazy):
                return result.evaluate()
            return result

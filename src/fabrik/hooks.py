"""Post-build hooks and their per-class composition."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

_AFTER_BUILD = "__fabrik_after_build__"

F = TypeVar("F", bound=Callable[..., Any])


def after_build(fn: F) -> F:
    """Mark a factory method to run on each built instance."""
    setattr(fn, _AFTER_BUILD, True)
    return fn


@dataclass(frozen=True)
class Hook:
    """A marked method name and whether it receives the built instance.

    The method is looked up on the factory at call time, so an override in a
    subclass runs in place of the marked original.
    """

    name: str
    takes_instance: bool

    def __call__(self, factory: Any, obj: Any) -> None:
        method = getattr(factory, self.name)
        logger.debug("Running hook %s", method.__qualname__)
        if self.takes_instance:
            method(obj)
        else:
            method()


def _make_hook(cls: type, name: str) -> Hook:
    fn = getattr(cls, name)
    params = list(inspect.signature(fn).parameters.values())[1:]
    if len(params) > 1:
        raise TypeError(f"Hook {fn.__qualname__} must accept at most one argument")
    return Hook(name=name, takes_instance=bool(params))


def compose_hooks(cls: type) -> tuple[Hook, ...]:
    """Collect the marked methods of every class in ``cls.__mro__``.

    Classes are visited from the most basic to ``cls`` itself, members in
    class-body order, so base hooks run before derived ones. Mixins that are
    not factories contribute their hooks too. A name marked in several
    classes runs once, at the position of its most basic declaration.
    """
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        for name, member in vars(klass).items():
            if name not in names and callable(member) and getattr(member, _AFTER_BUILD, False):
                names.append(name)
    return tuple(_make_hook(cls, name) for name in names)

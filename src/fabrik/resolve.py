"""Resolver — turn ${...} references in declared strings into lazy values."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from typing import Any

from .values import Lazy, Plain, Value

logger = logging.getLogger(__name__)

# $${ is an escaped literal; ${ref} is a reference
_REF_PATTERN = re.compile(r"(?P<escape>\$\$\{)|\$\{(?P<ref>[^{}]+)\}")

_MISSING = object()


def default_context() -> dict[str, Any]:
    """Names available to every reference: the environment and the working dir."""
    return {"env": os.environ, "CWD": os.getcwd}


def _step(current: Any, part: str) -> Any:
    """Follow one path segment by key, then by attribute."""
    if isinstance(current, Mapping):
        return current.get(part, _MISSING)
    return getattr(current, part, _MISSING)


class Resolver:
    """Resolve ${...} references against a context mapping.

    References are dotted paths walked through mapping keys and attributes.
    A callable at the end of the path is called; the context is read when
    a value is resolved, not when it is declared.
    """

    def __init__(self, context: Mapping[str, Any] | None = None) -> None:
        self._context = {**default_context(), **(context or {})}

    def lookup(self, ref: str) -> Any:
        """Resolve a single dotted reference such as ``env.HOME``."""
        current: Any = self._context
        for part in ref.strip().split("."):
            current = _step(current, part)
            if current is _MISSING:
                raise ValueError(f"undefined variable '{ref.strip()}'")
        return current() if callable(current) and not isinstance(current, type) else current

    def render(self, text: str) -> Any:
        """Expand every reference in ``text``.

        A string that is exactly one reference yields the referenced object
        unchanged; otherwise references are stringified in place. ``$${``
        produces a literal ``${``.
        """
        matches = list(_REF_PATTERN.finditer(text))
        if len(matches) == 1 and matches[0]["ref"] and matches[0].span() == (0, len(text)):
            return self.lookup(matches[0]["ref"])

        def _expand(m: re.Match[str]) -> str:
            return "${" if m["escape"] else str(self.lookup(m["ref"]))

        return _REF_PATTERN.sub(_expand, text)

    def value(self, obj: Any) -> Value:
        """Wrap a declared object, deferring strings that hold references."""
        if isinstance(obj, str) and "${" in obj:
            logger.debug("Deferring reference value '%s'", obj)
            return Lazy(lambda: self.render(obj))
        return Plain(obj)

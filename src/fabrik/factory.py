"""Factory base class with declared defaults, traits and the build pipeline."""

from __future__ import annotations

import logging
import random
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, ClassVar, Generic, TypeVar

from . import access
from .hooks import Hook, compose_hooks
from .sequences import SequenceStore, default_store
from .traits import Trait
from .values import Plain, Sequence, Value, as_value, evaluate

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Factory(ABC, Generic[T]):
    """Builds instances of a target type from declared defaults.

    Subclasses implement ``define`` using the ``declare_*`` methods; it runs
    once, when the factory is constructed. Later declarations (including the
    ones made by applied traits) overwrite earlier ones for the same name.
    """

    _after_build_hooks: ClassVar[tuple[Hook, ...]] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._after_build_hooks = compose_hooks(cls)

    def __init__(
        self,
        target_type: type[T],
        *,
        sequences: SequenceStore | None = None,
    ) -> None:
        self.target_type = target_type
        self.sequences = sequences if sequences is not None else default_store
        self._lock = threading.RLock()
        self._traits: dict[str, Trait] = {}
        self._properties: dict[str, Value] = {}
        self._fields: dict[str, Value] = {}

        self.define()

    @abstractmethod
    def define(self) -> None:
        """Populate the factory using the declaration methods."""

    # -- Declarations --

    def declare_trait(self, trait: Trait) -> None:
        """Register a trait, replacing any trait with the same name."""
        with self._lock:
            logger.debug("%s: trait '%s'", type(self).__name__, trait.name)
            self._traits[trait.name] = trait

    def declare_property(self, name: str, value: Any) -> None:
        """Declare a default assigned through a property, falling back to the field."""
        with self._lock:
            logger.debug("%s: property '%s'", type(self).__name__, name)
            self._properties[name] = as_value(value)

    def declare_field(self, name: str, value: Any) -> None:
        """Declare a default written directly to the instance field."""
        with self._lock:
            logger.debug("%s: field '%s'", type(self).__name__, name)
            self._fields[name] = as_value(value)

    def declare_sequence(self, name: str, seq: Sequence | Callable[[int], Any]) -> None:
        """Declare a property whose value is derived from its sequence counter."""
        if not isinstance(seq, Sequence):
            seq = Sequence(seq)
        self.declare_property(name, seq)

    def rand(self, limit: int) -> int:
        """Return a random integer in ``[0, limit)``."""
        return random.randrange(limit)

    # -- Introspection --

    @property
    def traits(self) -> dict[str, Trait]:
        """Return a snapshot of the declared traits."""
        with self._lock:
            return dict(self._traits)

    @property
    def properties(self) -> dict[str, Value]:
        """Return a snapshot of the current property defaults."""
        with self._lock:
            return dict(self._properties)

    @property
    def fields(self) -> dict[str, Value]:
        """Return a snapshot of the current field defaults."""
        with self._lock:
            return dict(self._fields)

    # -- Building --

    def build(self, *args: Any) -> T:
        """Build an instance.

        ``args`` is either a flat list of (name, value) override pairs or, when
        its length is odd and its first element names a declared trait, that
        trait name followed by the pairs. A lone argument that is not a trait
        name is dropped as an unpaired name.
        """
        with self._lock:
            trait, pairs = self._select_trait(args)
            if trait is not None:
                trait.apply()
            properties = _merge_overrides(self._properties, pairs)
            fields = dict(self._fields)

        obj = access.create_instance(self.target_type)

        for name, value in properties.items():
            resolved = self._resolve(name, value)
            if not access.try_set_property(obj, name, resolved):
                access.set_field(obj, name, resolved)

        for name, value in fields.items():
            access.set_field(obj, name, self._resolve(name, value))

        for hook in self._after_build_hooks:
            hook(self, obj)

        return obj

    def build_many(self, count: int, *args: Any) -> list[T]:
        """Build ``count`` instances with the same arguments."""
        if count < 0:
            raise ValueError(f"count must not be negative: {count}")
        return [self.build(*args) for _ in range(count)]

    def _select_trait(self, args: tuple[Any, ...]) -> tuple[Trait | None, tuple[Any, ...]]:
        if len(args) % 2 == 1 and isinstance(args[0], str) and args[0] in self._traits:
            logger.debug("%s: selected trait '%s'", type(self).__name__, args[0])
            return self._traits[args[0]], args[1:]
        return None, args

    def _resolve(self, name: str, value: Value) -> Any:
        return evaluate(value, lambda: self.sequences.next_value(type(self), name))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(target_type={self.target_type.__name__}, "
            f"properties={len(self._properties)}, fields={len(self._fields)}, "
            f"traits={len(self._traits)})"
        )


def _merge_overrides(defaults: dict[str, Value], pairs: tuple[Any, ...]) -> dict[str, Value]:
    """Overlay (name, value) pairs onto the defaults; a trailing name is dropped."""
    merged = dict(defaults)
    for i in range(0, len(pairs) - 1, 2):
        merged[pairs[i]] = Plain(pairs[i + 1])
    if len(pairs) % 2 == 1:
        logger.debug("Dropping unpaired override name '%s'", pairs[-1])
    return merged

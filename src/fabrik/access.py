"""Instance creation and attribute assignment on build targets."""

from __future__ import annotations

import inspect
import logging
import types
from typing import Any, TypeVar

from pydantic import BaseModel

from .errors import AssignmentError, InstantiationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def create_instance(target_type: type[T]) -> T:
    """Create a blank instance of the target type.

    Pydantic models are constructed without validation; any other type must
    accept a call with no arguments.
    """
    try:
        if issubclass(target_type, BaseModel):
            return target_type.model_construct()
        return target_type()
    except Exception as exc:
        raise InstantiationError(target_type, str(exc)) from exc


def _annotation_names(klass: type) -> set[str]:
    """Names annotated on one class; unresolvable annotations do not fail the lookup."""
    try:
        return set(inspect.get_annotations(klass))
    except NameError:
        # dataclasses record their field names independently of the annotations
        return set(klass.__dict__.get("__dataclass_fields__", {}))


def _declared_fields(cls: type) -> set[str]:
    names: set[str] = set()
    for klass in cls.__mro__:
        names.update(_annotation_names(klass))
        slots = klass.__dict__.get("__slots__", ())
        names.update([slots] if isinstance(slots, str) else slots)
    if issubclass(cls, BaseModel):
        names.update(cls.model_fields)
    return names


def try_set_property(instance: Any, name: str, value: Any) -> bool:
    """Assign through a settable property; return False if there is none."""
    attr = getattr(type(instance), name, None)
    if not isinstance(attr, property) or attr.fset is None:
        return False
    try:
        setattr(instance, name, value)
    except Exception as exc:
        raise AssignmentError(type(instance), name, str(exc)) from exc
    logger.debug("Set property %s.%s", type(instance).__name__, name)
    return True


def set_field(instance: Any, name: str, value: Any) -> None:
    """Write a field directly to the instance storage.

    The field must already exist on the instance or be declared by its class.
    """
    cls = type(instance)
    storage = getattr(instance, "__dict__", None)
    if (storage is None or name not in storage) and name not in _declared_fields(cls):
        raise AssignmentError(cls, name, "no such field")

    try:
        if storage is None or isinstance(getattr(cls, name, None), types.MemberDescriptorType):
            object.__setattr__(instance, name, value)
        else:
            storage[name] = value
    except Exception as exc:
        raise AssignmentError(cls, name, str(exc)) from exc
    logger.debug("Set field %s.%s", cls.__name__, name)

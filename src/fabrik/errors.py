"""Build failures raised by the factory pipeline."""

from __future__ import annotations


class FactoryError(Exception):
    """Base class for all factory build failures."""


class InstantiationError(FactoryError):
    """A blank instance of the target type could not be created."""

    def __init__(self, target_type: type, reason: str) -> None:
        super().__init__(f"Cannot instantiate {target_type.__name__}: {reason}")
        self.target_type = target_type


class AssignmentError(FactoryError):
    """An attribute could not be assigned on a built instance."""

    def __init__(self, target_type: type, name: str, reason: str) -> None:
        super().__init__(f"Cannot assign '{name}' on {target_type.__name__}: {reason}")
        self.target_type = target_type
        self.name = name

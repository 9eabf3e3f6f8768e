"""Trait model — a named set of default overrides for a factory."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Trait(BaseModel):
    """A named action that re-declares defaults on its owning factory.

    Applying a trait mutates the factory's defaults; the effect persists for
    every later build of that factory.
    """

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    name: str
    action: Callable[[], None]

    def apply(self) -> None:
        """Run the trait's declarations."""
        logger.debug("Applying trait '%s'", self.name)
        self.action()

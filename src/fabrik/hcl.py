"""HCL loading engine — declare factories in .hcl files."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import hcl2
import jinja2

from .factory import Factory
from .resolve import Resolver
from .sequences import SequenceStore
from .traits import Trait
from .values import Sequence

logger = logging.getLogger(__name__)

_FACTORY_KEYS = {"target", "properties", "fields", "sequence", "trait"}
_TRAIT_KEYS = {"properties", "fields", "sequence"}


_TEMPLATES = jinja2.Environment(
    undefined=jinja2.StrictUndefined,
    keep_trailing_newline=True,
    autoescape=False,
)


def load(
    file: str | Path,
    *,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Render a factory file through Jinja2 and parse the result as HCL.

    Template and syntax errors are raised as ValueError naming the file.
    """
    path = Path(file)
    try:
        text = _TEMPLATES.from_string(path.read_text()).render(context or {})
    except jinja2.TemplateError as exc:
        raise ValueError(f"{path}: template error: {exc}") from exc
    try:
        return hcl2.loads(text)
    except Exception as exc:
        raise ValueError(f"{path}: invalid HCL: {exc}") from exc


def _class_name(name: str) -> str:
    """Class name for a declared factory, e.g. ``user-account`` -> ``UserAccountFactory``."""
    parts = [p for p in name.replace("-", "_").split("_") if p]
    return "".join(p[:1].upper() + p[1:] for p in parts) + "Factory"


def _format_sequence(fmt: str) -> Sequence:
    return Sequence(lambda n: fmt.format(n=n))


class HclFactory(Factory[Any]):
    """A factory whose declarations come from a parsed ``factory`` block.

    HCL blocks of the form::

        factory "user" {
          target = "User"
          properties = { name = "John" }
          fields = { secret = "x" }
          sequence "email" { format = "user{n}@example.com" }
          trait "admin" { properties = { role = "admin" } }
        }
    """

    def __init__(
        self,
        name: str,
        target_type: type,
        data: dict[str, Any],
        *,
        resolver: Resolver | None = None,
        sequences: SequenceStore | None = None,
    ) -> None:
        self.name = name
        self._data = data
        self._resolver = resolver or Resolver()
        super().__init__(target_type, sequences=sequences)

    def define(self) -> None:
        for key in self._data:
            if key not in _FACTORY_KEYS:
                logger.warning("Factory '%s': ignoring unknown key '%s'", self.name, key)

        self._declare_block(self._data)

        for trait_block in self._data.get("trait", []):
            for trait_name, trait_data in trait_block.items():
                for key in trait_data:
                    if key not in _TRAIT_KEYS:
                        logger.warning(
                            "Trait '%s.%s': ignoring unknown key '%s'", self.name, trait_name, key
                        )
                self.declare_trait(
                    Trait(name=trait_name, action=lambda d=trait_data: self._declare_block(d))
                )

    def _declare_block(self, data: dict[str, Any]) -> None:
        """Declare properties, fields and sequences from a factory or trait block."""
        for name, value in data.get("properties", {}).items():
            self.declare_property(name, self._resolver.value(value))
        for name, value in data.get("fields", {}).items():
            self.declare_field(name, self._resolver.value(value))
        for seq_block in data.get("sequence", []):
            for name, attrs in seq_block.items():
                if "format" not in attrs:
                    raise ValueError(f"Sequence '{self.name}.{name}' is missing 'format'")
                self.declare_sequence(name, _format_sequence(attrs["format"]))

    def __repr__(self) -> str:
        return f"HclFactory(name={self.name!r}, target_type={self.target_type.__name__})"


_factory_types: dict[str, type[HclFactory]] = {}
_factory_types_lock = threading.Lock()


def _factory_type(name: str) -> type[HclFactory]:
    """Return the factory type for a declared name, creating it on first use.

    Factories loaded under the same name share a type, and so share sequence
    counters within a store.
    """
    with _factory_types_lock:
        if name not in _factory_types:
            _factory_types[name] = type(_class_name(name), (HclFactory,), {})
        return _factory_types[name]


def load_factories(
    data: dict[str, Any],
    targets: Mapping[str, type],
    *,
    context: Mapping[str, Any] | None = None,
    sequences: SequenceStore | None = None,
) -> dict[str, HclFactory]:
    """Create one factory per ``factory`` block in parsed HCL data.

    ``targets`` maps target names to the types to build; a block's target
    defaults to its own name.
    """
    resolver = Resolver(context)
    factories: dict[str, HclFactory] = {}
    for block in data.get("factory", []):
        for name, body in block.items():
            if name in factories:
                raise ValueError(f"Duplicate factory: '{name}'")
            target_name = body.get("target", name)
            if target_name not in targets:
                raise ValueError(f"Factory '{name}' references unknown target: '{target_name}'")
            logger.debug("Found factory '%s' -> %s", name, target_name)
            factories[name] = _factory_type(name)(
                name,
                targets[target_name],
                body,
                resolver=resolver,
                sequences=sequences,
            )
    return factories


def scan(
    path: str | Path,
    targets: Mapping[str, type],
    *,
    recurse: bool = True,
    context: dict[str, Any] | None = None,
    sequences: SequenceStore | None = None,
) -> dict[str, HclFactory]:
    """Load every .hcl file under a directory into factories."""
    root = Path(path)
    if not root.is_dir():
        logger.debug("Scan path '%s' is not a directory", root)
        return {}

    files = sorted(root.rglob("*.hcl") if recurse else root.glob("*.hcl"))
    merged: dict[str, list[Any]] = {"factory": []}
    for file in files:
        logger.debug("Loading %s", file)
        merged["factory"].extend(load(file, context=context).get("factory", []))

    return load_factories(merged, targets, context=context, sequences=sequences)

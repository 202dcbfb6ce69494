"""Read-only access to loosely-typed operator values (Helm-style nested maps)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional, Union

import yaml

from preflight.errors import ValuesFileError

logger = logging.getLogger(__name__)


class ValuesTree(Mapping[str, Any]):
    """
    Immutable view over a nested values mapping.

    Accessors never raise: a missing key or a value of the wrong shape is
    reported as `None`, which callers treat as "not configured".
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        self._data: Mapping[str, Any] = data if isinstance(data, Mapping) else {}

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ValuesTree({dict(self._data)!r})"

    def get_mapping(self, key: str) -> Optional["ValuesTree"]:
        value = self._data.get(key)
        if isinstance(value, Mapping):
            return ValuesTree(value)
        return None

    def get_string(self, key: str) -> Optional[str]:
        value = self._data.get(key)
        if isinstance(value, str):
            return value
        return None

    def get_path(self, *keys: str) -> Any:
        """Walk nested mappings; returns None as soon as a level is missing or not a map."""
        node: Any = self._data
        for key in keys:
            if not isinstance(node, Mapping):
                return None
            node = node.get(key)
        return node


ValuesLike = Union[ValuesTree, Mapping[str, Any], None]


def as_values_tree(values: ValuesLike) -> ValuesTree:
    if isinstance(values, ValuesTree):
        return values
    return ValuesTree(values if isinstance(values, Mapping) else None)


def extract_values(document: Any) -> ValuesTree:
    """
    Pick the values mapping out of a parsed YAML document.

    An IstioOperator resource carries its values under `spec.values`; anything
    else is taken to be a plain values file.
    """
    if not isinstance(document, Mapping):
        return ValuesTree()
    if document.get("kind") == "IstioOperator":
        spec = document.get("spec")
        values = spec.get("values") if isinstance(spec, Mapping) else None
        return ValuesTree(values if isinstance(values, Mapping) else None)
    return ValuesTree(document)


def load_values_file(path: Union[str, Path]) -> ValuesTree:
    p = Path(path)
    try:
        raw = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ValuesFileError(f"Failed to read values file {p}: {e}") from e
    except UnicodeDecodeError as e:
        raise ValuesFileError(f"Failed to decode values file {p} as UTF-8: {e}") from e
    try:
        document = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ValuesFileError(f"Failed to parse values file {p}: {e}") from e
    values = extract_values(document)
    logger.debug("Loaded values from %s (%d top-level keys)", p, len(values))
    return values

"""Context merging and descriptor-shaping helpers."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any

from automator.util.errors import MissingParameterError


def merge_context(
    default: Mapping[str, Any] | None, override: Mapping[str, Any] | None
) -> dict[str, Any]:
    """Shallow merge; keys from ``override`` win."""
    merged: dict[str, Any] = dict(default or {})
    if override:
        merged.update(override)
    return merged


def child_context(context: Mapping[str, Any], name: str, result: Any) -> dict[str, Any]:
    """Deep copy ``context`` and record ``result`` under the task name."""
    sub_context = copy.deepcopy(dict(context))
    sub_context[name] = result
    return sub_context


def extract_attributes(config: Mapping[str, Any], attrs: Iterable[str]) -> dict[str, Any]:
    """
    Return a new mapping holding only the keys of ``config`` listed in ``attrs``.

    Keys that are absent from ``config`` or bound to ``None`` are skipped.
    """
    extracted: dict[str, Any] = {}
    for attr in attrs:
        value = config.get(attr)
        if value is not None:
            extracted[attr] = value
    return extracted


def ensure_parameters(config: Mapping[str, Any], *keys: str) -> Mapping[str, Any]:
    """
    Return ``config`` unchanged when every key in ``keys`` is set.

    Raises :class:`MissingParameterError` naming the first key, in argument
    order, that is absent or ``None``.
    """
    for key in keys:
        if config.get(key) is None:
            raise MissingParameterError(key, config)
    return config

from __future__ import annotations

import pytest

from automator.core.registry import HandlerRegistry
from automator.facade import Automator


def _first(descriptor: object, context: object) -> str:
    return "first"


def _second(descriptor: object, context: object) -> str:
    return "second"


def test_registry_starts_empty_and_reports_absence() -> None:
    registry = HandlerRegistry()
    assert len(registry) == 0
    assert registry.lookup("collab") is None
    assert "collab" not in registry


def test_registry_last_registration_wins() -> None:
    registry = HandlerRegistry()
    registry.register("collab", _first)
    registry.register("collab", _second)

    assert registry.lookup("collab") is _second
    assert registry.names() == ["collab"]


def test_registry_exposes_no_removal() -> None:
    registry = HandlerRegistry()
    registry.register("collab", _first)

    assert not hasattr(registry, "clear")
    assert not hasattr(registry, "unregister")
    assert len(registry) == 1


def test_registry_names_are_sorted() -> None:
    registry = HandlerRegistry()
    registry.register("storage", _first)
    registry.register("collab", _first)
    registry.register("nav", _first)

    assert registry.names() == ["collab", "nav", "storage"]
    assert set(registry) == {"collab", "nav", "storage"}


def test_registry_rejects_blank_name_and_non_callable() -> None:
    registry = HandlerRegistry()
    with pytest.raises(ValueError):
        registry.register("", _first)
    with pytest.raises(TypeError):
        registry.register("collab", "not callable")  # type: ignore[arg-type]


def test_automator_handler_decorator_registers_and_returns_function() -> None:
    automator = Automator()

    @automator.handler("collab")
    def create(descriptor: object, context: object) -> str:
        return "created"

    assert automator.handlers.lookup("collab") is create


def test_automators_do_not_share_registries() -> None:
    first = Automator()
    second = Automator()
    first.register_handler("collab", _first)

    assert "collab" in first.handlers
    assert "collab" not in second.handlers

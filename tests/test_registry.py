"""Unit tests for the handler registry and the built-in catalogue."""

from __future__ import annotations

import pytest

from Blockduino.transpile.ast import Statement
from Blockduino.transpile.blocks import default_registry
from Blockduino.transpile.registry import HandlerRegistry, merge


def _noop(node, session):
    return Statement("")


def test_duplicate_registration_is_rejected() -> None:
    registry = HandlerRegistry()
    registry.add("thing", _noop)
    with pytest.raises(ValueError, match="thing"):
        registry.add("thing", _noop)


def test_replace_overrides_existing_handler() -> None:
    registry = HandlerRegistry()
    registry.add("thing", _noop)

    @registry.register("thing", replace=True)
    def other(node, session):
        return None

    assert registry.get("thing") is other


def test_register_needs_a_kind() -> None:
    with pytest.raises(ValueError):
        HandlerRegistry().register()


def test_alias_shares_the_handler() -> None:
    registry = HandlerRegistry()
    registry.add("thing", _noop)
    registry.alias("thing_m6", "thing")
    assert registry.get("thing_m6") is _noop
    assert registry.kinds() == ["thing", "thing_m6"]


def test_merge_rejects_conflicting_families() -> None:
    first = HandlerRegistry({"thing": _noop})
    second = HandlerRegistry({"thing": _noop})
    with pytest.raises(ValueError):
        merge([first, second])


def test_default_registry_is_a_fresh_copy() -> None:
    registry = default_registry()
    registry.add("custom_block_kind", _noop)
    assert "custom_block_kind" not in default_registry()


def test_default_registry_covers_every_family() -> None:
    registry = default_registry()
    for kind in (
        "event_when_wobot_started",
        "event_when_wobot_loop",
        "control_repeat",
        "controls_ifelse",
        "operator_add",
        "math_number",
        "math_decimal_0_100",
        "logic_compare",
        "data_setvariableto",
        "procedures_definition",
        "procedures_callreturn",
        "lists_getIndex",
        "text",
        "motion_step_motor",
        "looks_custom_led_matrix",
        "sensing_gray_value",
        "sensing_analog_input_m6",
    ):
        assert kind in registry, kind

"""Unit tests for identifier allocation."""

from __future__ import annotations

import pytest

from Blockduino.transpile.names import (
    DEVELOPER_VARIABLE,
    PARAMETER,
    PROCEDURE,
    VARIABLE,
    NameManager,
    safe_name,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("speed", "speed"),
        ("my var", "my_var"),
        ("a-b", "a_b"),
        ("2fast", "my_2fast"),
        ("", "unnamed"),
        (None, "unnamed"),
        ("音乐", "_E9_9F_B3_E4_B9_90"),
    ],
)
def test_safe_name(raw, expected) -> None:
    assert safe_name(raw) == expected


def test_assign_is_idempotent_per_category_and_name() -> None:
    names = NameManager()
    first = names.assign(VARIABLE, "count")
    assert names.assign(VARIABLE, "count") == first == "count"
    # Same raw name in another category competes for the identifier.
    assert names.assign(PROCEDURE, "count") == "count2"


def test_reserved_words_are_avoided() -> None:
    names = NameManager()
    assert names.assign(VARIABLE, "int") == "int2"
    assert names.assign(VARIABLE, "loop") == "loop2"
    assert names.assign(DEVELOPER_VARIABLE, "setup") == "setup2"


def test_extra_reserved_words() -> None:
    names = NameManager(["speed"])
    assert names.assign(VARIABLE, "speed") == "speed2"
    names.add_reserved_words(["angle"])
    assert names.is_taken("angle")


def test_names_that_sanitize_alike_stay_distinct() -> None:
    names = NameManager()
    assert names.assign(VARIABLE, "a b") == "a_b"
    assert names.assign(VARIABLE, "a_b") == "a_b2"
    assert names.assign(VARIABLE, "a-b") == "a_b3"


def test_keys_are_case_sensitive() -> None:
    names = NameManager()
    assert names.assign(VARIABLE, "Foo") == "Foo"
    assert names.assign(VARIABLE, "foo") == "foo"


def test_variable_ids_resolve_to_display_names() -> None:
    names = NameManager()
    names.set_variable_map({"k1": "speed"})
    assert names.assign(VARIABLE, "k1") == "speed"
    # Parameters are not looked up in the variable map.
    assert names.assign(PARAMETER, "k1") == "k1"


def test_fresh_temporaries_never_repeat() -> None:
    names = NameManager()
    names.assign(VARIABLE, "i")
    assert names.fresh_temporary("i") == "i2"
    assert names.fresh_temporary("i") == "i3"
    assert names.is_taken("i3")


def test_reset_forgets_everything() -> None:
    names = NameManager()
    names.set_variable_map({"k1": "speed"})
    names.assign(VARIABLE, "k1")
    names.reset()
    assert not names.is_taken("speed")
    assert names.assign(VARIABLE, "k1") == "k1"

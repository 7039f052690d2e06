"""Unit tests covering assembly of WhalesBot C from block workspaces."""

from __future__ import annotations

import logging

import pytest

from Blockduino.transpile.ast import Node, Statement, UnsupportedBlockError
from Blockduino.transpile.blocks import default_registry
from Blockduino.transpile.emitter import (
    DEVICE_PROFILES,
    GenerationSession,
    GeneratorOptions,
    SessionState,
    device_profile,
    emit,
    generate,
    normalize_whitespace,
    scrub_naked_value,
)
from Blockduino.transpile.order import Order


def wait(value, **extra) -> Node:
    duration = Node("math_number", fields={"NUM": value}, output=True)
    return Node("control_wait", inputs={"DURATION": duration}, **extra)


def setup_body(code: str) -> str:
    return code.split("void _setup(){\n", 1)[1].split("\n}", 1)[0]


def loop_body(code: str) -> str:
    return code.split("void _loop(){\n", 1)[1].split("\n}", 1)[0]


def test_emit_empty_workspace(src, workspace) -> None:
    code = emit(workspace())
    assert code == src(
        """
        #include "whalesbot.h"

        void setup() {
          board_init();
        }

        void _setup(){

        }

        void _loop(){

        }
        """
    ) + "\n"


def test_emit_start_stack_goes_to_setup(src, workspace, started) -> None:
    code = emit(workspace(started(wait(1), wait(0.5))))
    assert code == src(
        """
        #include "whalesbot.h"

        void setup() {
          board_init();
        }

        void _setup(){
          delay_sec(1);
          delay_sec(0.5);
        }

        void _loop(){

        }
        """
    ) + "\n"


def test_used_variables_are_declared(workspace, started) -> None:
    assign = Node(
        "variables_set",
        fields={"VAR": "k1"},
        inputs={"VALUE": Node("math_number", fields={"NUM": 5}, output=True)},
    )
    code = emit(workspace(started(assign), variables=[("k1", "speed"), ("k2", "unused")]))

    assert "float speed = 0.0;" in code
    assert "unused" not in code
    assert code.index("float speed") < code.index("void _setup()")
    assert setup_body(code) == "  speed = 5;"


def test_developer_variables_are_declared_first(workspace) -> None:
    code = emit(workspace(developer=["a", "b"]))
    assert "float a = 0.0, b = 0.0;" in code


def test_loop_events_are_collected_in_order(workspace, stack, started) -> None:
    first = stack(Node("event_when_wobot_loop"), wait(1))
    second = stack(Node("event_when_wobot_loop"), wait(2))
    code = emit(workspace(first, started(wait(3)), second))

    assert loop_body(code) == "  delay_sec(1);\n  delay_sec(2);"
    assert setup_body(code) == "  delay_sec(3);"


def test_m6_profile_uses_user_main_and_drops_loop(src, workspace, stack, started, caplog) -> None:
    looping = stack(Node("event_when_wobot_loop"), wait(1))
    waiting = Node(
        "control_wait_m6",
        inputs={"DURATION": Node("math_number", fields={"NUM": 2}, output=True)},
    )
    with caplog.at_level(logging.WARNING, logger="Blockduino.transpile.emitter"):
        code = emit(workspace(looping, started(waiting)), "WOBOT_M6")

    assert code == src(
        """
        #include "whalesbot.h"

        void user_main(){
          wait(2);
        }
        """
    ) + "\n"
    assert any("dropped" in record.getMessage() for record in caplog.records)


def test_comments_are_attached(workspace, started) -> None:
    node = wait(1, comment="pause here")
    node.inputs["DURATION"].comment = "one second"
    code = emit(workspace(started(node)))
    assert setup_body(code) == "  // pause here\n  // one second\n  delay_sec(1);"


def test_branch_comment_stays_inside_branch(workspace, started) -> None:
    condition = Node("logic_boolean", fields={"BOOL": "TRUE"}, output=True, comment="check")
    branch = Node(
        "control_if",
        inputs={"CONDITION": condition},
        statements={"SUBSTACK": wait(1, comment="inner")},
    )
    code = emit(workspace(started(branch)))

    assert setup_body(code) == (
        "  // check\n"
        "  if (true) {\n"
        "    // inner\n"
        "    delay_sec(1);\n"
        "  }"
    )
    assert code.count("inner") == 1
    assert code.count("check") == 1


def test_long_comments_are_wrapped(workspace, started) -> None:
    options = GeneratorOptions(comment_wrap=20)
    code = emit(workspace(started(wait(1, comment="alpha beta gamma delta"))), options=options)
    assert setup_body(code) == "  // alpha beta gamma\n  // delta\n  delay_sec(1);"


def test_disabled_nodes_are_skipped(workspace, started) -> None:
    code = emit(workspace(started(wait(1, disabled=True), wait(2))))
    assert setup_body(code) == "  delay_sec(2);"


def test_long_stack_does_not_exhaust_call_stack(workspace, started) -> None:
    nodes = [wait(1) for _ in range(2000)]
    nodes[500].disabled = True
    code = emit(workspace(started(*nodes)))

    lines = setup_body(code).splitlines()
    assert len(lines) == 1999
    assert set(lines) == {"  delay_sec(1);"}


def test_custom_indent(workspace, started) -> None:
    repeat = Node(
        "control_repeat",
        inputs={"TIMES": Node("math_number", fields={"NUM": 2}, output=True)},
        statements={"SUBSTACK": wait(1)},
    )
    code = emit(workspace(started(repeat)), options=GeneratorOptions(indent="    "))
    assert setup_body(code) == (
        "    for (int i = 0; i < 2; i++) {\n"
        "        delay_sec(1);\n"
        "    }"
    )


def test_unsupported_kind_produces_structured_failure(workspace, started) -> None:
    result = generate(workspace(started(Node("mystery", fields={"X": 1}))))

    assert not result.ok
    assert result.code is None
    assert result.error.kind == "mystery"
    assert result.error.fields == {"X": 1}
    assert result.error.reason == "No handler registered for node kind"
    assert "mystery" in result.error.describe()


def test_emit_raises_on_unsupported_input(workspace, started) -> None:
    with pytest.raises(UnsupportedBlockError) as excinfo:
        emit(workspace(started(Node("mystery"))))
    assert excinfo.value.failure.kind == "mystery"


def test_statement_in_value_socket_is_rejected(workspace, started) -> None:
    node = Node("control_wait", inputs={"DURATION": Node("sensing_reset_timer")})
    result = generate(workspace(started(node)))
    assert result.error.kind == "sensing_reset_timer"
    assert "value socket" in result.error.reason


def test_handler_with_wrong_return_type(workspace, started) -> None:
    registry = default_registry()
    registry.add("odd_block", lambda node, session: "oops")
    with pytest.raises(TypeError, match="odd_block"):
        generate(workspace(started(Node("odd_block"))), registry=registry)


def test_custom_handler_is_used(workspace, started) -> None:
    registry = default_registry()
    registry.add("beep_twice", lambda node, session: Statement("beep();\nbeep();\n"))
    code = emit(workspace(started(Node("beep_twice"))), registry=registry)
    assert setup_body(code) == "  beep();\n  beep();"


def test_session_state_machine(workspace, started) -> None:
    session = GenerationSession()
    assert session.state is SessionState.IDLE
    with pytest.raises(RuntimeError):
        session.run()
    with pytest.raises(RuntimeError):
        session.finish()

    session.begin(workspace(started(wait(1))))
    assert session.state is SessionState.GENERATING
    with pytest.raises(RuntimeError):
        session.begin(workspace())

    assert session.run() == "delay_sec(1);\n"
    code = session.finish()
    assert "delay_sec(1);" in code
    assert session.state is SessionState.IDLE


def test_session_returns_to_idle_after_failure(workspace, started) -> None:
    session = GenerationSession()
    session.begin(workspace(started(Node("mystery"))))
    with pytest.raises(UnsupportedBlockError):
        session.run()
    session.abort()
    assert session.state is SessionState.IDLE

    session.begin(workspace(started(wait(1))))
    session.run()
    assert "delay_sec(1);" in session.finish()


def test_passes_do_not_leak_state(workspace, started) -> None:
    session = GenerationSession()
    random_int = Node(
        "math_random_int",
        inputs={
            "FROM": Node("math_number", fields={"NUM": 1}, output=True),
            "TO": Node("math_number", fields={"NUM": 6}, output=True),
        },
        output=True,
    )
    assign = Node("variables_set", fields={"VAR": "k1"}, inputs={"VALUE": random_int})
    session.begin(workspace(started(assign), variables=[("k1", "roll")]))
    session.run()
    first = session.finish()

    session.begin(workspace(started(wait(1))))
    session.run()
    second = session.finish()

    assert "mathRandomInt" in first
    assert "mathRandomInt" not in second
    assert "roll" not in second


def test_get_adjusted_follows_index_option(workspace) -> None:
    node = Node(
        "index_reader",
        inputs={
            "LITERAL": Node("math_number", fields={"NUM": 3}, output=True),
            "DYNAMIC": Node("variables_get", fields={"VAR": "k1"}, output=True),
        },
    )
    session = GenerationSession()
    session.begin(workspace(variables=[("k1", "x")]))
    assert session.get_adjusted(node, "LITERAL") == "2"
    assert session.get_adjusted(node, "DYNAMIC") == "x - 1"
    assert session.get_adjusted(node, "EMPTY") == "0"
    session.abort()

    session.begin(workspace(variables=[("k1", "x")], one_based=False))
    assert session.get_adjusted(node, "LITERAL") == "3"
    assert session.get_adjusted(node, "DYNAMIC", 1, order=Order.FUNCTION_CALL) == "(x + 1)"
    session.abort()

    zero_based = GenerationSession(options=GeneratorOptions(one_based_index=False))
    zero_based.begin(workspace(variables=[("k1", "x")]))
    assert zero_based.get_adjusted(node, "LITERAL") == "3"


def test_device_profiles() -> None:
    assert set(DEVICE_PROFILES) == {"WOBOT", "WOBOT_M6"}
    assert device_profile("WOBOT").has_loop
    assert not device_profile("WOBOT_M6").has_loop
    with pytest.raises(ValueError, match="Unsupported device profile"):
        device_profile("ARDUINO")


def test_unknown_device_is_rejected_before_generation(workspace) -> None:
    with pytest.raises(ValueError):
        generate(workspace(), "ARDUINO")


def test_normalize_whitespace() -> None:
    assert normalize_whitespace("\n\n  \nint a;  \n\n  \n") == "int a;\n"


def test_scrub_naked_value() -> None:
    assert scrub_naked_value("x") == "x;\n"

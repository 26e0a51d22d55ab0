"""
Message constructor and console style tests.
"""

from __future__ import annotations

import io

from chanlog.formatters import COLORS, colorize, default_message_constructor, inspect_value, style


class TtyStream(io.StringIO):
    def isatty(self) -> bool:
        return True


class TestDefaultMessageConstructor:
    """Joining and inspecting values"""

    def test_joins_primitives_with_single_space(self) -> None:
        """Primitives are rendered with str() and joined by one space"""
        assert default_message_constructor("log", "a", 1, 2.5, True, None) == "a 1 2.5 True None"

    def test_no_values_gives_empty_string(self) -> None:
        assert default_message_constructor("log") == ""

    def test_channel_name_is_not_part_of_message(self) -> None:
        assert default_message_constructor("whatever", "a", "b") == "a b"

    def test_containers_are_inspected(self) -> None:
        """Mappings and sequences are expanded, insertion order kept"""
        message = default_message_constructor("log", "values:", {"b": 1, "a": [1, "x"]})
        assert message == "values: {'b': 1, 'a': [1, 'x']}"

    def test_deep_nesting_is_not_truncated(self) -> None:
        """No depth limit: the innermost value is still rendered"""
        value: list = ["bottom"]
        for _ in range(50):
            value = [value]
        assert "'bottom'" in inspect_value(value)
        assert "..." not in inspect_value(value)

    def test_long_containers_stay_on_one_line(self) -> None:
        value = list(range(500))
        assert "\n" not in inspect_value(value)
        assert inspect_value(value).endswith("499]")

    def test_objects_use_their_repr(self) -> None:
        class Thing:
            def __repr__(self) -> str:
                return "<Thing>"

        assert default_message_constructor("log", "got", Thing()) == "got <Thing>"


class TestStyle:
    """ANSI styles only on terminals"""

    def test_colorize_wraps_with_reset(self) -> None:
        assert colorize("x", "warn") == f"{COLORS['warn']}x{COLORS['reset']}"

    def test_plain_stream_is_not_colored(self) -> None:
        assert style("x", "error", io.StringIO()) == "x"

    def test_tty_stream_is_colored(self) -> None:
        assert style("x", "error", TtyStream()) == colorize("x", "error")

    def test_no_color_requested(self) -> None:
        assert style("x", None, TtyStream()) == "x"

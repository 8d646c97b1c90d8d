"""Tests for tool call parser."""

from codemate.agent.parser import ToolCallParser


def block(name: str, params: dict[str, str]) -> str:
    inner = "".join(f'<param name="{key}">{value}</param>' for key, value in params.items())
    return f"<tool><name>{name}</name><parameters>{inner}</parameters></tool>"


class TestToolCallParser:
    """Tests for ToolCallParser."""

    def test_parse_single_call(self):
        """Test parsing a well-formed call."""
        text = 'Use <tool><name>echo</name><parameters><param name="x">hi</param></parameters></tool> now'

        calls = ToolCallParser.parse(text)

        assert len(calls) == 1
        assert calls[0].name == "echo"
        assert calls[0].parameters == {"x": "hi"}
        assert calls[0].source_span == block("echo", {"x": "hi"})

    def test_parse_multiline_call(self):
        """Test the documented multi-line layout."""
        text = (
            "Let me look.\n"
            "<tool>\n"
            "<name>read_file</name>\n"
            "<parameters>\n"
            '<param name="file_path">src/app.py</param>\n'
            "</parameters>\n"
            "</tool>\n"
        )

        calls = ToolCallParser.parse(text)

        assert [call.name for call in calls] == ["read_file"]
        assert calls[0].parameters == {"file_path": "src/app.py"}
        assert calls[0].source_span in text

    def test_calls_keep_document_order(self):
        """Test calls are returned in the order they appear."""
        text = f"{block('a', {'n': '1'})} and {block('b', {})} then {block('c', {'n': '3'})}"

        calls = ToolCallParser.parse(text)

        assert [call.name for call in calls] == ["a", "b", "c"]
        assert calls[1].parameters == {}

    def test_no_calls(self):
        """Test plain text has no tool calls."""
        assert ToolCallParser.parse("Just an answer.") == []
        assert ToolCallParser.parse("") == []
        assert ToolCallParser.has_tool_calls("Just an answer.") is False

    def test_block_without_name_is_skipped(self):
        """Test a block with no <name> produces no call."""
        text = f"<tool><parameters></parameters></tool>{block('ok', {})}"

        calls = ToolCallParser.parse(text)

        assert [call.name for call in calls] == ["ok"]

    def test_block_without_parameters_is_skipped(self):
        """Test a block with no <parameters> produces no call."""
        text = "<tool><name>lonely</name></tool>"

        assert ToolCallParser.parse(text) == []

    def test_unterminated_block(self):
        """Test an unterminated block yields no call and stops scanning."""
        text = f"{block('first', {})} <tool><name>open</name><parameters></parameters>"

        calls = ToolCallParser.parse(text)

        assert [call.name for call in calls] == ["first"]

    def test_nested_opener_uses_nearest(self):
        """Test the first closing tag pairs with the nearest preceding opener."""
        inner = block("inner", {"k": "v"})
        text = f"<tool><name>outer</name>{inner}</tool>"

        calls = ToolCallParser.parse(text)

        assert len(calls) == 1
        assert calls[0].name == "inner"
        assert calls[0].source_span == inner

    def test_duplicate_keys_last_wins(self):
        """Test a repeated parameter keeps its last value."""
        text = (
            "<tool><name>t</name><parameters>"
            '<param name="k">one</param><param name="k">two</param>'
            "</parameters></tool>"
        )

        calls = ToolCallParser.parse(text)

        assert calls[0].parameters == {"k": "two"}

    def test_values_and_name_are_trimmed(self):
        """Test whitespace around the name and values is removed."""
        text = (
            "<tool><name>  spaced  </name><parameters>"
            '<param name="content">\n  body line\n</param>'
            "</parameters></tool>"
        )

        calls = ToolCallParser.parse(text)

        assert calls[0].name == "spaced"
        assert calls[0].parameters == {"content": "body line"}

    def test_values_keep_inner_markup(self):
        """Test values are raw text, not unescaped or parsed."""
        text = block("write", {"content": "if a &lt; b: <b>x</b>"})

        calls = ToolCallParser.parse(text)

        assert calls[0].parameters == {"content": "if a &lt; b: <b>x</b>"}

    def test_malformed_param_tags_skipped(self):
        """Test param tags without a proper name attribute are ignored."""
        text = (
            "<tool><name>t</name><parameters>"
            "<param>nameless</param>"
            "<param key=\"k\">wrong attr</param>"
            '<param name="good">yes</param>'
            "</parameters></tool>"
        )

        calls = ToolCallParser.parse(text)

        assert calls[0].parameters == {"good": "yes"}

    def test_tags_are_case_sensitive(self):
        """Test upper-case tags are not recognized."""
        text = "<TOOL><NAME>t</NAME><PARAMETERS></PARAMETERS></TOOL>"

        assert ToolCallParser.parse(text) == []

    def test_find_blocks_offsets(self):
        """Test block offsets point at the exact spans."""
        first = block("a", {})
        text = f"x {first} y"

        spans = ToolCallParser.find_blocks(text)

        assert spans == [(2, 2 + len(first))]

    def test_block_error_is_contained(self, monkeypatch):
        """Test an exception while parsing one block skips only that block."""
        original = ToolCallParser.parse_block

        def failing_parse_block(block_text):
            if "<name>bad</name>" in block_text:
                raise RuntimeError("unexpected markup")
            return original(block_text)

        monkeypatch.setattr(ToolCallParser, "parse_block", staticmethod(failing_parse_block))
        text = f"{block('a', {'n': '1'})} {block('bad', {})} {block('c', {})}"

        calls = ToolCallParser.parse(text)

        assert [call.name for call in calls] == ["a", "c"]
        assert calls[0].parameters == {"n": "1"}

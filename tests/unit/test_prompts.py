"""Tests for prompt composition and context serialization."""

import json

from codemate.agent.prompts import (
    DEFAULT_SYSTEM_PROMPT,
    build_prompt,
    build_system_instructions,
    serialize_catalog,
)
from codemate.context import ContextBundle, CurrentFile, ProjectInfo, RelatedFile, Selection

CATALOG = [
    {
        "name": "echo",
        "description": "Echo x",
        "parameters": {"x": {"type": "string", "description": "Text"}},
        "required": ["x"],
    }
]


class TestSystemInstructions:
    """Tests for build_system_instructions."""

    def test_default_prompt_without_tools(self):
        """Test the default prompt alone when no catalog is given."""
        assert build_system_instructions() == DEFAULT_SYSTEM_PROMPT
        assert build_system_instructions([]) == DEFAULT_SYSTEM_PROMPT

    def test_custom_prompt(self):
        """Test a configured prompt replaces the default."""
        assert build_system_instructions(system_prompt="Be brief.") == "Be brief."

    def test_catalog_included(self):
        """Test the protocol and catalog JSON are appended."""
        instructions = build_system_instructions(CATALOG)

        assert instructions.startswith(DEFAULT_SYSTEM_PROMPT)
        assert "<tool>" in instructions
        assert '<param name="PARAM_NAME">' in instructions
        assert serialize_catalog(CATALOG) in instructions

    def test_catalog_is_json_array(self):
        """Test the catalog serializes as a JSON array."""
        assert json.loads(serialize_catalog(CATALOG)) == CATALOG


class TestContextBundle:
    """Tests for ContextBundle serialization."""

    def test_empty_bundle(self):
        """Test an empty bundle renders nothing."""
        bundle = ContextBundle()

        assert bundle.is_empty()
        assert bundle.to_prompt() == ""
        assert build_prompt("hello", bundle) == "hello"

    def test_current_file_with_selection(self):
        """Test the current file and selection are rendered."""
        bundle = ContextBundle(
            current_file=CurrentFile(
                path="src/app.py",
                content="def main():\n    pass",
                language="python",
                selection=Selection(text="pass", start_line=2, start_column=5, end_line=2, end_column=9),
            )
        )

        text = bundle.to_prompt()

        assert text.startswith("Here is the current code context:")
        assert "Current file: src/app.py (python)\n```python\ndef main():\n    pass\n```" in text
        assert "Selected code (lines 2-2):\n```python\npass\n```" in text

    def test_related_files_and_project(self):
        """Test related files and project info are rendered."""
        bundle = ContextBundle(
            related_files=[RelatedFile(path="a.py", content="x = 1"), RelatedFile(path="b.py")],
            project_info=ProjectInfo(name="demo", manifest={"version": "1.0"}),
        )

        text = bundle.to_prompt()

        assert "Related files:\n- a.py\n```\nx = 1\n```\n- b.py" in text
        assert "Project: demo" in text
        assert '"version": "1.0"' in text

    def test_prompt_puts_context_before_text(self):
        """Test the user text follows the context."""
        bundle = ContextBundle(project_info=ProjectInfo(name="demo"))

        prompt = build_prompt("What is this?", bundle)

        assert prompt == "Here is the current code context:\n\nProject: demo\n\nWhat is this?"

    def test_prompt_without_context(self):
        """Test the user text is sent alone without a bundle."""
        assert build_prompt("hi") == "hi"

"""
Formatter tests

Tests the default Markdown rendering and custom formatter loading.
"""

import pytest
from pathlib import Path

from docgen.lib.formatter import customFormatter_run, formatter
from docgen.models import FormatterError, IRSymbol, IRTag


@pytest.fixture
def symbols():
    return [
        IRSymbol(
            path="src/markdown/embed.js",
            name="embed",
            kind="function",
            description="Inserts new contents within the token boundaries.",
            tags=[
                IRTag(tag="param", name="token", type="string", description="String to embed."),
                IRTag(tag="param", name="depth", type="number", optional=True),
                IRTag(tag="return", type="boolean", description="Whether the contents were embedded."),
                IRTag(tag="example", description="embed( 'API', ast, contents );"),
            ],
            line_start=17,
            line_end=47,
        ),
        IRSymbol(path="src/index.js", name="Alpha", description="Undocumented declaration.",
                 line_start=3, line_end=3),
    ]


class TestDefaultFormatter:
    """Test built-in rendering"""

    def test_heading_and_sections(self, tmp_path, symbols):
        text = formatter(tmp_path, tmp_path / "docs" / "api.md", symbols, "API")

        assert text.startswith("# API\n")
        assert "## embed" in text
        assert "*Parameters*" in text
        assert "-   *token* `string`: String to embed." in text
        assert "-   *depth* `number` (optional)" in text
        assert "*Returns*" in text
        assert "-   `boolean`: Whether the contents were embedded." in text
        assert "```js\nembed( 'API', ast, contents );\n```" in text
        assert text.endswith("\n") and not text.endswith("\n\n")

    def test_symbols_sorted_by_name(self, tmp_path, symbols):
        text = formatter(tmp_path, tmp_path / "api.md", symbols, "API")
        assert text.index("## Alpha") < text.index("## embed")

    def test_source_link_relative_to_document(self, tmp_path, symbols):
        text = formatter(tmp_path, tmp_path / "docs" / "api.md", symbols, None)
        assert "[src/markdown/embed.js#L17-L47](../src/markdown/embed.js#L17-L47)" in text
        assert "[src/index.js#L3](../src/index.js#L3)" in text

    def test_without_heading(self, tmp_path, symbols):
        text = formatter(tmp_path, tmp_path / "api.md", symbols, None)
        assert not text.startswith("# ")
        assert text.startswith("## Alpha")

    def test_nothing_to_document(self, tmp_path):
        text = formatter(tmp_path, tmp_path / "api.md", [], "API")
        assert text == "# API\n\nNothing to document.\n"


class TestCustomFormatter:
    """Test user formatter files"""

    def test_runs_format_function(self, tmp_path, symbols):
        custom = tmp_path / "fmt.py"
        custom.write_text(
            "def format(root_dir, doc_path, symbols, heading_title):\n"
            "    return heading_title + ':' + ','.join(s.name for s in symbols)\n"
        )
        text = customFormatter_run(custom, tmp_path, tmp_path / "api.md", symbols, "API")
        assert text == "API:embed,Alpha"

    def test_missing_file(self, tmp_path, symbols):
        with pytest.raises(FormatterError):
            customFormatter_run(tmp_path / "absent.py", tmp_path, tmp_path / "api.md", symbols, "API")

    def test_missing_format_function(self, tmp_path, symbols):
        custom = tmp_path / "fmt.py"
        custom.write_text("VALUE = 1\n")
        with pytest.raises(FormatterError) as excinfo:
            customFormatter_run(custom, tmp_path, tmp_path / "api.md", symbols, "API")
        assert "format()" in str(excinfo.value)

    def test_formatter_raising(self, tmp_path, symbols):
        custom = tmp_path / "fmt.py"
        custom.write_text("def format(*args):\n    raise RuntimeError('bad template')\n")
        with pytest.raises(FormatterError) as excinfo:
            customFormatter_run(custom, tmp_path, tmp_path / "api.md", symbols, "API")
        assert "bad template" in str(excinfo.value)
        assert isinstance(excinfo.value.cause, RuntimeError)

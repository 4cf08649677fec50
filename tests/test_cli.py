"""
End-to-end pipeline tests

Runs the CLI stages on a small ES module project written to a temporary
directory: entry file -> IR -> filtered IR -> Markdown document on disk.
"""

import json

import pytest
from pathlib import Path

from docgen.__main__ import (
    debug_dump,
    doc_generate,
    env_check,
    ir_filter,
    results_report,
    source_process,
)
from docgen.models import ProgramState, pipeline


STAGES = (env_check, source_process, ir_filter, doc_generate, debug_dump, results_report)


@pytest.fixture
def project(tmp_path):
    """inputdir holding src/index.js re-exporting two local modules"""
    inputdir = tmp_path / "in"
    (inputdir / "src" / "utils").mkdir(parents=True)
    (inputdir / "src" / "index.js").write_text(
        "export * from './math';\n"
        "export { slugify } from './utils';\n"
        "import React from 'react';\n"
    )
    (inputdir / "src" / "math.js").write_text(
        "/**\n"
        " * Adds two numbers.\n"
        " *\n"
        " * @param {number} a First operand.\n"
        " * @param {number} b Second operand.\n"
        " * @return {number} The sum.\n"
        " */\n"
        "export function add( a, b ) {\n"
        "\treturn a + b;\n"
        "}\n"
        "\n"
        "/** Internal helper. */\n"
        "export const _scale = 2;\n"
    )
    (inputdir / "src" / "utils" / "index.js").write_text(
        "/** Turns a title into a slug. */\n"
        "export function slugify( title ) {\n"
        "\treturn title.toLowerCase();\n"
        "}\n"
    )
    outputdir = tmp_path / "out"
    outputdir.mkdir()
    return inputdir, outputdir


def state_make(project, **options) -> ProgramState:
    inputdir, outputdir = project
    return ProgramState(inputdir=inputdir, outputdir=outputdir, inputFile="src/index.js", **options)


class TestGenerate:
    """Test writing a standalone document"""

    def test_full_pipeline(self, project):
        final = pipeline(state_make(project), *STAGES)

        document = project[1] / "index-api.md"
        assert final.docOutputFile == document
        text = document.read_text()
        assert text == final.docContents
        assert text.startswith("# API\n")
        assert "## add" in text
        assert "## slugify" in text
        assert "Adds two numbers." in text
        assert "Turns a title into a slug." in text
        assert "src/math.js#L8-L10" in text

    def test_symbols_from_every_module(self, project):
        state = pipeline(state_make(project), env_check, source_process)
        names = sorted(symbol.name for symbol in state.fileResult.ir)
        assert names == ["_scale", "add", "slugify"]
        paths = {symbol.name: symbol.path for symbol in state.fileResult.ir}
        assert paths["slugify"] == "src/utils/index.js"

    def test_ignore_filters_names(self, project):
        final = pipeline(state_make(project, ignore="^_"), *STAGES)
        assert [symbol.name for symbol in final.filteredIR if symbol.name.startswith("_")] == []
        assert "_scale" not in final.docContents

    def test_named_output(self, project):
        pipeline(state_make(project, output="docs/api.md"), *STAGES)
        text = (project[1] / "docs" / "api.md").read_text()
        assert "## add" in text

    def test_custom_formatter(self, project):
        (project[0] / "fmt.py").write_text(
            "def format(root_dir, doc_path, symbols, heading_title):\n"
            "    return 'custom ' + ' '.join(sorted(s.name for s in symbols)) + '\\n'\n"
        )
        final = pipeline(state_make(project, formatter="fmt.py"), *STAGES)
        assert final.docContents == "custom _scale add slugify\n"


class TestAppend:
    """Test merging into an existing document"""

    README = (
        "# My project\n"
        "\n"
        "## API\n"
        "\n"
        "<!-- START TOKEN(API) -->\n"
        "\n"
        "stale\n"
        "\n"
        "<!-- END TOKEN(API) -->\n"
    )

    def test_append_in_place(self, project):
        readme = project[1] / "README.md"
        readme.write_text(self.README)

        pipeline(state_make(project, output="README.md", append="API"), *STAGES)

        text = readme.read_text()
        assert "stale" not in text
        assert "### add" in text
        assert text.index("<!-- START TOKEN(API) -->") < text.index("### add") < text.index(
            "<!-- END TOKEN(API) -->"
        )

    def test_append_reads_from_inputdir(self, project):
        (project[0] / "README.md").write_text(self.README)

        pipeline(state_make(project, output="README.md", append="API"), *STAGES)

        assert (project[0] / "README.md").read_text() == self.README
        assert "### slugify" in (project[1] / "README.md").read_text()

    def test_missing_token_exits(self, project, capsys):
        readme = project[1] / "README.md"
        readme.write_text("# My project\n")

        with pytest.raises(SystemExit) as excinfo:
            pipeline(state_make(project, output="README.md", append="API"), *STAGES)

        assert excinfo.value.code == 1
        assert "Heading API not found" in capsys.readouterr().out
        assert readme.read_text() == "# My project\n"

    def test_missing_document_exits(self, project):
        with pytest.raises(SystemExit) as excinfo:
            pipeline(state_make(project, output="README.md", append="API"), *STAGES)
        assert excinfo.value.code == 1


class TestFailures:
    """Test diagnostics and exit statuses"""

    def test_missing_entry_file(self, project):
        inputdir, outputdir = project
        state = ProgramState(inputdir=inputdir, outputdir=outputdir, inputFile="src/absent.js")
        with pytest.raises(SystemExit) as excinfo:
            env_check(state)
        assert excinfo.value.code == 1

    def test_invalid_ignore_expression(self, project):
        with pytest.raises(SystemExit) as excinfo:
            env_check(state_make(project, ignore="("))
        assert excinfo.value.code == 1

    def test_unresolved_import(self, project, capsys):
        (project[0] / "src" / "index.js").write_text("export * from './missing';\n")

        with pytest.raises(SystemExit) as excinfo:
            pipeline(state_make(project), *STAGES)

        assert excinfo.value.code == 1
        out = capsys.readouterr().out
        assert "Relative path does not exists." in out
        assert "Relative: ./missing" in out
        assert f"Base: {(project[0] / 'src' / 'index.js').resolve()}" in out
        assert not (project[1] / "index-api.md").exists()

    def test_import_cycle(self, project, capsys):
        (project[0] / "src" / "index.js").write_text("export * from './math';\n")
        (project[0] / "src" / "math.js").write_text("export * from './index';\n")

        with pytest.raises(SystemExit) as excinfo:
            pipeline(state_make(project), *STAGES)

        assert excinfo.value.code == 1
        assert "Import cycle detected" in capsys.readouterr().out

    def test_no_exports(self, project, capsys):
        (project[0] / "src" / "index.js").write_text("import React from 'react';\nconst a = 1;\n")

        with pytest.raises(SystemExit) as excinfo:
            pipeline(state_make(project), *STAGES)

        assert excinfo.value.code == 0
        assert "contained no ES6 module exports" in capsys.readouterr().out


class TestDebugDump:
    """Test intermediate JSON files"""

    def test_writes_dumps(self, project):
        final = pipeline(state_make(project, debug=True), *STAGES)

        outputdir = project[1]
        assert set(final.debugFiles) == {"ir", "tokens", "ast"}
        ir = json.loads((outputdir / "index-ir.json").read_text())
        assert {entry["name"] for entry in ir} == {"_scale", "add", "slugify"}
        ast = json.loads((outputdir / "index-ast.json").read_text())
        assert [statement["type"] for statement in ast] == ["export-all", "export-named", "import"]
        assert (outputdir / "index-exports.json").is_file()

    def test_no_dumps_by_default(self, project):
        final = pipeline(state_make(project), *STAGES)
        assert final.debugFiles == {}
        assert not (project[1] / "index-ir.json").exists()


class TestPaths:
    """Test path handling of the input directory"""

    def test_symlinked_inputdir(self, project, tmp_path):
        inputdir, outputdir = project
        link = tmp_path / "link"
        link.symlink_to(inputdir, target_is_directory=True)
        state = ProgramState(inputdir=link, outputdir=outputdir, inputFile="src/index.js")

        final = pipeline(state, *STAGES)

        assert final.inputdir == inputdir.resolve()
        paths = {symbol.name: symbol.path for symbol in final.fileResult.ir}
        assert paths["add"] == "src/math.js"
        assert "[src/math.js#L8-L10](" in final.docContents

#!/usr/bin/env python3
"""
docgen - API documentation generator for ES modules

Walks the local import graph of an entry file, extracts the documentation
of every exported symbol and writes it as a Markdown document, or merges it
into an existing document between START/END TOKEN markers.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Usage:
    docgen inputdir/ outputdir/ --inputFile src/index.js

    The API document is written to outputdir/ as <entry>-api.md unless
    --output names another file.

Examples:
    # Generate a standalone API document
    docgen . docs/ --inputFile src/index.js --output api.md

    # Refresh the "API" section of an existing README
    docgen . . --inputFile src/index.js --output README.md --append API

    # Drop private symbols and keep the intermediate dumps
    docgen . out/ --inputFile src/index.js --ignore "^_" --debug -vv
"""

import json
import re
import sys
from dataclasses import asdict
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter
from typing import NoReturn, Optional

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import (
    processFile,
    formatter,
    customFormatter_run,
    document_append,
    __version__,
    LOG,
    state_connectToLogger,
)
from .models import DocgenError, ProgramState, pipeline


DISPLAY_TITLE = r"""
     _
  __| | ___   ___ __ _  ___ _ __
 / _` |/ _ \ / __/ _` |/ _ \ '_ \
| (_| | (_) | (_| (_| |  __/ | | |
 \__,_|\___/ \___\__, |\___|_| |_|
                 |___/
  API documentation generator
"""

parser = ArgumentParser(
    description="docgen - API documentation generator for ES modules",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Entry point of the module graph (relative to inputdir)"
)

parser.add_argument(
    "--output",
    default=None,
    type=str,
    help="Output file that will contain the API documentation (relative to outputdir). "
    "Defaults to <entry>-api.md",
)

parser.add_argument(
    "--formatter",
    default=None,
    type=str,
    help="A custom Python file whose format() renders the documentation (relative to inputdir)",
)

parser.add_argument(
    "--ignore",
    default=None,
    type=str,
    help="A regular expression used to ignore symbols whose name match it",
)

parser.add_argument(
    "--append",
    default=None,
    type=str,
    help="Markdown section title to append documentation to",
)

parser.add_argument(
    "--debug",
    action="store_true",
    default=False,
    help="Run in debug mode, which outputs some intermediate files useful for debugging",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def fatal_exit(error: Exception) -> NoReturn:
    """Print the diagnostic of a failed run and terminate with status 1"""
    print(f"\n{error}\n")
    sys.exit(1)


def inputStem_get(state: ProgramState) -> str:
    """Entry filename without extension, used to name generated files"""
    return Path(state.inputFile).stem


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Returns:
        ProgramState with added fields:
            - inputdir: Replaced by its resolved path (symlinks followed)
            - inputSourceFile: Resolved path to the entry point
            - docOutputFile: Resolved path of the document to write
            - envOK: True if environment is valid

    Exits:
        1 if the entry point is missing or --ignore is not a valid regex
    """
    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    state.inputdir = Path(state.inputdir).resolve()
    input_file = (state.inputdir / state.inputFile).resolve()
    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}")
        state.envOK = False
        sys.exit(1)
    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    if state.ignore:
        try:
            re.compile(state.ignore)
        except re.error as e:
            print(f"Error: Invalid --ignore expression {state.ignore!r}: {e}")
            state.envOK = False
            sys.exit(1)

    output = state.output or f"{inputStem_get(state)}-api.md"
    state.docOutputFile = state.outputdir / output
    state.docOutputFile.parent.mkdir(parents=True, exist_ok=True)
    LOG(f"Output document: {state.docOutputFile}", level=2)

    state.envOK = True
    return state


def source_process(inputstate: ProgramState) -> ProgramState:
    """
    Extract the IR of the entry point and everything it re-exports locally.

    Returns:
        ProgramState with added field:
            - fileResult: FileResult of the entry point

    Exits:
        1 on unresolved imports, unreadable files, import cycles or
        extraction failures
    """
    state = inputstate.copy()

    LOG(f"Processing {state.inputFile}...", level=1)
    try:
        state.fileResult = processFile(state.inputdir, state.inputSourceFile)
    except DocgenError as e:
        fatal_exit(e)
    LOG(f"Extracted {len(state.fileResult.ir)} exported symbols", level=2)
    return state


def ir_filter(inputstate: ProgramState) -> ProgramState:
    """
    Drop symbols matching --ignore.

    Returns:
        ProgramState with added field:
            - filteredIR: Symbols to document

    Exits:
        0 if the entry point exports nothing
    """
    state = inputstate.copy()

    if not state.fileResult.ir:
        print("\nFile was processed, but contained no ES6 module exports:")
        print(f"{state.inputSourceFile}\n")
        sys.exit(0)

    if state.ignore:
        pattern = re.compile(state.ignore)
        state.filteredIR = [symbol for symbol in state.fileResult.ir if not pattern.search(symbol.name)]
        LOG(f"Ignored {len(state.fileResult.ir) - len(state.filteredIR)} symbols", level=2)
    else:
        state.filteredIR = list(state.fileResult.ir)
    return state


def contents_render(state: ProgramState, heading_title: Optional[str]) -> str:
    """Render filteredIR with the custom formatter if one was given"""
    if state.formatter:
        return customFormatter_run(
            state.inputdir / state.formatter,
            state.inputdir,
            state.docOutputFile,
            state.filteredIR,
            heading_title,
        )
    return formatter(state.inputdir, state.docOutputFile, state.filteredIR, heading_title)


def doc_generate(inputstate: ProgramState) -> ProgramState:
    """
    Write the API document, or merge it into an existing one with --append.

    In append mode the existing document is read from outputdir/<output>,
    or from inputdir/<output> if the former does not exist yet.

    Returns:
        ProgramState with added field:
            - docContents: Text written to docOutputFile

    Exits:
        1 if the formatter fails, the document to append to is missing or
        lacks the START/END TOKEN markers
    """
    state = inputstate.copy()

    try:
        if state.append:
            LOG(f"Appending to section {state.append}...", level=1)
            existing = state.docOutputFile
            if not existing.is_file() and state.output:
                existing = state.inputdir / state.output
            if not existing.is_file():
                print(f"Error: Document to append to not found: {state.docOutputFile}")
                sys.exit(1)
            generated = contents_render(state, None)
            state.docContents = document_append(existing, state.append, generated, state.docOutputFile)
        else:
            LOG("Writing API document...", level=1)
            state.docContents = contents_render(state, appsettings.default_heading)
            state.docOutputFile.write_text(state.docContents, encoding="utf-8")
    except DocgenError as e:
        fatal_exit(e)
    return state


def debug_dump(inputstate: ProgramState) -> ProgramState:
    """
    Write the IR, the module statement tokens and the AST as JSON (--debug).

    Returns:
        ProgramState with added field:
            - debugFiles: {"ir"|"tokens"|"ast": path written}
    """
    state = inputstate.copy()
    if not state.debug:
        return state

    stem = inputStem_get(state)
    dumps = {
        "ir": (f"{stem}-ir.json", [asdict(symbol) for symbol in state.fileResult.ir]),
        "tokens": (f"{stem}-exports.json", state.fileResult.tokens),
        "ast": (f"{stem}-ast.json", state.fileResult.ast),
    }
    state.debugFiles = {}
    for key, (filename, data) in dumps.items():
        path = state.outputdir / filename
        path.write_text(json.dumps(data, indent=appsettings.debug_indent), encoding="utf-8")
        state.debugFiles[key] = path
        LOG(f"Wrote {path}", level=2)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display a summary of the run.

    Returns:
        ProgramState unchanged (terminal pipeline stage)
    """
    state: ProgramState = inputstate.copy()
    if state.docContents is None:
        print("Error: No documentation was generated")
        sys.exit(1)

    LOG("\n✓ Documentation generated!", level=1)
    LOG(f"  Output:  {state.docOutputFile}", level=1)
    LOG(f"  Symbols: {len(state.filteredIR)}", level=1)
    for path in state.debugFiles.values():
        LOG(f"  Debug:   {path}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="docgen - API documentation generator",
    category="Documentation",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - generate API documentation for an ES module graph.

    Orchestrates the full pipeline:
        1. env_check: Validate paths and options
        2. source_process: Recursively extract the IR
        3. ir_filter: Apply --ignore
        4. doc_generate: Format, then write or merge the document
        5. debug_dump: Write intermediate files (--debug)
        6. results_report: Display results to user

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, source_process, ir_filter, doc_generate, debug_dump, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature

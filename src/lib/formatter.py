"""
Markdown formatter for the exported-symbol IR

Renders one section per symbol:

    ## embed

    [src/markdown/embed.js#L17-L47](../src/markdown/embed.js#L17-L47)

    Inserts new contents within the token boundaries.

    *Parameters*

    -   *token* `string`: String to embed in the start/end tokens.

    *Returns*

    -   `boolean`: Whether the contents were embedded or not.

A user supplied formatter (a Python file defining ``format``) can replace
this one; it receives the same arguments.
"""

import importlib.util
import os
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..models.errors import FormatterError
from ..models.ir import IRSymbol, IRTag
from .log import LOG


Formatter = Callable[[Path, Path, List[IRSymbol], Optional[str]], str]


def sourceLink_make(root_dir: Path, doc_path: Path, symbol: IRSymbol) -> str:
    """Markdown link from the document to the symbol's declaration lines"""
    target = os.path.relpath(Path(root_dir) / symbol.path, Path(doc_path).parent)
    target = Path(target).as_posix()
    lines = f"L{symbol.line_start}"
    if symbol.line_end and symbol.line_end != symbol.line_start:
        lines += f"-L{symbol.line_end}"
    label = Path(symbol.path).as_posix()
    return f"[{label}#{lines}]({target}#{lines})"


def tagsSection_render(title: str, tags: List[IRTag]) -> List[str]:
    """Bulleted list section for @param/@return/@throws tags"""
    if not tags:
        return []
    lines = [f"*{title}*", ""]
    for tag in tags:
        parts = []
        if tag.name:
            parts.append(f"*{tag.name}*")
        if tag.type:
            parts.append(f"`{tag.type}`")
        head = " ".join(parts)
        if tag.optional:
            head += " (optional)"
        if head and tag.description:
            lines.append(f"-   {head}: {tag.description}")
        else:
            lines.append(f"-   {head or tag.description}")
    lines.append("")
    return lines


def symbol_render(root_dir: Path, doc_path: Path, symbol: IRSymbol) -> List[str]:
    """Markdown lines of one symbol section"""
    lines = [f"## {symbol.name}", ""]
    if symbol.line_start:
        lines += [sourceLink_make(root_dir, doc_path, symbol), ""]

    deprecated = [tag for tag in symbol.tags if tag.tag == "deprecated"]
    for tag in deprecated:
        note = f" {tag.description}" if tag.description else ""
        lines += [f"> **Deprecated**{note}", ""]

    if symbol.description:
        lines += [symbol.description, ""]

    examples = [tag for tag in symbol.tags if tag.tag == "example"]
    if examples:
        lines += ["*Usage*", ""]
        for tag in examples:
            lines += ["```js", tag.description, "```", ""]

    lines += tagsSection_render("Parameters", [tag for tag in symbol.tags if tag.tag == "param"])
    lines += tagsSection_render("Returns", [tag for tag in symbol.tags if tag.tag == "return"])
    lines += tagsSection_render("Throws", [tag for tag in symbol.tags if tag.tag == "throws"])
    return lines


def formatter(
    root_dir: Union[str, Path],
    doc_path: Union[str, Path],
    symbols: List[IRSymbol],
    heading_title: Optional[str],
) -> str:
    """
    Render the IR as a Markdown document.

    Args:
        root_dir: Directory the IR paths are relative to
        doc_path: Path of the document being written (links are relative to it)
        symbols: Exported symbols to document
        heading_title: Title of a top-level heading, or None for no heading

    Returns:
        Markdown text
    """
    root_dir = Path(root_dir)
    doc_path = Path(doc_path)
    lines: List[str] = []
    if heading_title:
        lines += [f"# {heading_title}", ""]

    if not symbols:
        lines += ["Nothing to document.", ""]

    for symbol in sorted(symbols, key=lambda s: s.name.lower()):
        lines += symbol_render(root_dir, doc_path, symbol)

    return "\n".join(lines).rstrip("\n") + "\n"


def customFormatter_load(formatter_file: Union[str, Path]) -> Formatter:
    """
    Load the ``format`` function of a user formatter file.

    Raises:
        FormatterError: the file cannot be imported or defines no format()
    """
    formatter_file = Path(formatter_file)
    try:
        spec = importlib.util.spec_from_file_location("docgen_custom_formatter", formatter_file)
        if spec is None or spec.loader is None:
            raise ImportError(f"cannot import {formatter_file}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
    except Exception as e:
        raise FormatterError(formatter_file, e) from e

    custom = getattr(module, "format", None)
    if not callable(custom):
        raise FormatterError(formatter_file, AttributeError("no format() function defined"))
    return custom


def customFormatter_run(
    formatter_file: Union[str, Path],
    root_dir: Union[str, Path],
    doc_path: Union[str, Path],
    symbols: List[IRSymbol],
    heading_title: Optional[str],
) -> str:
    """
    Render the IR with a user supplied formatter.

    Raises:
        FormatterError: loading failed, the formatter raised, or it did not
            return a string
    """
    custom = customFormatter_load(formatter_file)
    LOG(f"Using custom formatter {formatter_file}", level=2)
    try:
        text = custom(Path(root_dir), Path(doc_path), symbols, heading_title)
    except Exception as e:
        raise FormatterError(formatter_file, e) from e
    if not isinstance(text, str):
        raise FormatterError(formatter_file, TypeError(f"format() returned {type(text).__name__}, not str"))
    return text

"""
Intermediate representation models

Type-safe structures exchanged between the extraction engine, the
recursive processor and the formatter.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class IRTag:
    """
    One doc comment tag attached to an exported symbol

    Attributes:
        tag: Tag name without the leading "@" (e.g., "param", "return")
        name: Parameter name for @param tags, empty otherwise
        type: Type expression found between braces, empty if absent
        description: Free text following name/type
        optional: Parameter was written as [name] or [name=default]

    Example:
        "@param {string} token The token name." becomes
        IRTag(tag="param", name="token", type="string", description="The token name.")
    """
    tag: str
    name: str = ""
    type: str = ""
    description: str = ""
    optional: bool = False


@dataclass
class IRSymbol:
    """
    Documentation of one exported symbol

    Attributes:
        path: Source file the symbol is declared in, relative to the root dir
        name: Exported name ("default" for anonymous default exports)
        kind: Declaration kind ("function", "class", "variable", ...)
        description: Doc comment body, or the undocumented placeholder
        tags: Parsed doc comment tags in source order
        line_start: First line of the declaration (1-based)
        line_end: Last line of the declaration (1-based)
        is_default: Symbol is the module's default export
    """
    path: str
    name: str
    kind: str = "unknown"
    description: str = ""
    tags: List[IRTag] = field(default_factory=list)
    line_start: int = 0
    line_end: int = 0
    is_default: bool = False

    def renamed(self, name: str, is_default: bool = False) -> "IRSymbol":
        """Copy of this symbol exported under another name"""
        return replace(self, name=name, tags=list(self.tags), is_default=is_default)


@dataclass
class EngineResult:
    """
    What the extraction engine returns for one file

    ``ir`` may be None for files without exports; callers treat that
    as an empty IR, never as an error.
    """
    ir: Optional[List[IRSymbol]]
    tokens: List[Dict[str, Any]]
    ast: List[Dict[str, Any]]


@dataclass
class FileResult:
    """
    Output of processing one file

    Attributes:
        path: Absolute path of the processed file
        ir: Exported symbols, always a list
        tokens: Lexer tokens of the file's module statements
        ast: Module statement records of the file
    """
    path: Path
    ir: List[IRSymbol]
    tokens: List[Dict[str, Any]]
    ast: List[Dict[str, Any]]

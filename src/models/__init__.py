"""
Models package for docgen

Contains data structures and type definitions for the documentation pipeline.
"""

from .state import ProgramState, pipeline
from .ir import IRTag, IRSymbol, EngineResult, FileResult
from .document import (
    NodeKind,
    HeadingNode,
    MarkupNode,
    BlockNode,
    SubtreeNode,
    DocumentNode,
    DocumentAST,
)
from .errors import (
    ErrorKind,
    DocgenError,
    UnresolvedImportError,
    FileReadError,
    ExtractionError,
    ImportCycleError,
    TokenNotFoundError,
    FormatterError,
)

__all__ = [
    "ProgramState",
    "pipeline",
    "IRTag",
    "IRSymbol",
    "EngineResult",
    "FileResult",
    "NodeKind",
    "HeadingNode",
    "MarkupNode",
    "BlockNode",
    "SubtreeNode",
    "DocumentNode",
    "DocumentAST",
    "ErrorKind",
    "DocgenError",
    "UnresolvedImportError",
    "FileReadError",
    "ExtractionError",
    "ImportCycleError",
    "TokenNotFoundError",
    "FormatterError",
]

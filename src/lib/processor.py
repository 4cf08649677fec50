"""
Recursive processing of a local import graph

Starting from an entry file, the processor hands each file to the
extraction engine together with an import callback. Whenever the engine
needs the exports of a dependency, the callback resolves the specifier
against the file currently being processed (the top of the processing
stack), processes that file recursively and returns its IR.

Traversal is depth-first in the order the engine asks for imports. By
default a dependency referenced N times is processed N times; enable
``memoize`` (or DOCGEN_MEMOIZE_IMPORTS) to process each file once per run.

Example:
    >>> processor = FileProcessor(Path("/project"))
    >>> result = processor.file_process(Path("/project/src/index.js"))
    >>> [symbol.name for symbol in result.ir]
    ['embed', 'resolve']
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Union

from ..config import appsettings
from ..models.errors import DocgenError, ExtractionError, FileReadError, ImportCycleError
from ..models.ir import EngineResult, FileResult, IRSymbol
from .engine import extract
from .log import LOG
from .resolver import path_resolve, specifier_isLocal


ImportResolver = Callable[[str], List[IRSymbol]]
Engine = Callable[[str, str, ImportResolver], EngineResult]


class ProcessingStack:
    """
    Files currently being processed, innermost last

    The top of the stack is the base for resolving relative specifiers.
    Entries are only added through file_enter(), which releases them on
    every exit path and refuses a path that is already in flight.
    """

    def __init__(self) -> None:
        self.paths: List[Path] = []

    def __contains__(self, path: object) -> bool:
        return path in self.paths

    def __len__(self) -> int:
        return len(self.paths)

    def top_get(self) -> Path:
        """Innermost file being processed"""
        if not self.paths:
            raise IndexError("processing stack is empty")
        return self.paths[-1]

    @contextmanager
    def file_enter(self, path: Path) -> Iterator[Path]:
        """
        Mark a file as in flight for the duration of the block.

        Raises:
            ImportCycleError: path is already being processed
        """
        if path in self.paths:
            raise ImportCycleError(path, self.paths)
        self.paths.append(path)
        try:
            yield path
        finally:
            self.paths.pop()


class FileProcessor:
    """
    Drives the extraction engine over a local import graph

    Attributes:
        root_dir: Directory IR paths are reported relative to
        engine: Extraction engine, (relativePath, source, resolveImport) -> EngineResult
        memoize: Reuse the FileResult of an already processed file
        stack: Files in flight
        cache: FileResults by absolute path (memoize only)
    """

    def __init__(
        self,
        root_dir: Union[str, Path],
        engine: Optional[Engine] = None,
        memoize: Optional[bool] = None,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.engine: Engine = engine or extract
        self.memoize = appsettings.memoize_imports if memoize is None else memoize
        self.stack = ProcessingStack()
        self.cache: Dict[Path, FileResult] = {}
        self.files_read = 0

    def file_process(self, absolute_path: Union[str, Path]) -> FileResult:
        """
        Extract the IR of one file, following its local imports.

        Args:
            absolute_path: File to process

        Returns:
            FileResult with the file's IR (empty list if it exports nothing),
            tokens and AST

        Raises:
            FileReadError: the file cannot be read
            ImportCycleError: the file imports itself, directly or not
            ExtractionError: the engine failed
            UnresolvedImportError: a local import has no backing file
        """
        path = Path(os.path.normpath(str(absolute_path)))

        if self.memoize and path in self.cache:
            LOG(f"Reusing {path}", level=2)
            return self.cache[path]

        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(path, e) from e
        self.files_read += 1

        with self.stack.file_enter(path):
            relative_path = os.path.relpath(path, self.root_dir)
            LOG(f"{'  ' * (len(self.stack) - 1)}Processing {relative_path}", level=2)
            try:
                result = self.engine(relative_path, source, self.import_resolve)
            except DocgenError:
                raise
            except Exception as e:
                raise ExtractionError(path, e) from e

        file_result = FileResult(
            path=path,
            ir=result.ir or [],
            tokens=result.tokens,
            ast=result.ast,
        )
        if self.memoize:
            self.cache[path] = file_result
        return file_result

    def import_resolve(self, specifier: str) -> List[IRSymbol]:
        """
        Import callback handed to the engine.

        Package specifiers contribute nothing. Local ones are resolved
        against the file on top of the stack, so a chain of re-exports
        resolves each hop relative to its own location.
        """
        if not specifier_isLocal(specifier):
            return []
        absolute_path = path_resolve(self.stack.top_get(), specifier)
        return self.file_process(absolute_path).ir


def processFile(
    root_dir: Union[str, Path],
    absolute_path: Union[str, Path],
    engine: Optional[Engine] = None,
    memoize: Optional[bool] = None,
) -> FileResult:
    """
    Process an entry file and everything it re-exports locally.

    Convenience wrapper creating a fresh FileProcessor, and therefore a
    fresh processing stack, for every run.
    """
    return FileProcessor(root_dir, engine=engine, memoize=memoize).file_process(absolute_path)

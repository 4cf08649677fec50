"""
Error taxonomy for docgen

Every failure raised by the resolver, the processor, the formatter and the
document merge is a DocgenError tagged with an ErrorKind. Library code only
raises; the CLI is the single place that turns an error into an exit status.
"""

from enum import Enum
from pathlib import Path
from typing import List, Union


class ErrorKind(Enum):
    """Kinds of failure that can abort a docgen run"""
    UNRESOLVED_IMPORT = "unresolved-import"
    FILE_READ = "file-read"
    EXTRACTION = "extraction"
    IMPORT_CYCLE = "import-cycle"
    TOKEN_NOT_FOUND = "token-not-found"
    FORMATTER = "formatter"


class DocgenError(Exception):
    """Base class of all docgen failures"""
    kind: ErrorKind


class UnresolvedImportError(DocgenError):
    """Raised when no file backs a local relative specifier"""
    kind = ErrorKind.UNRESOLVED_IMPORT

    def __init__(self, base_path: Union[str, Path], specifier: str):
        self.base_path = Path(base_path)
        self.specifier = specifier
        super().__init__(
            f"Relative path does not exists.\n"
            f"Base: {self.base_path}\n"
            f"Relative: {specifier}"
        )


class FileReadError(DocgenError):
    """Raised when a source file cannot be read"""
    kind = ErrorKind.FILE_READ

    def __init__(self, path: Union[str, Path], cause: Exception):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Cannot read {self.path}: {cause}")


class ExtractionError(DocgenError):
    """Raised when the extraction engine fails on a file"""
    kind = ErrorKind.EXTRACTION

    def __init__(self, path: Union[str, Path], cause: Exception):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Extraction failed for {self.path}: {cause}")


class ImportCycleError(DocgenError):
    """Raised when a file is reached again while it is still being processed"""
    kind = ErrorKind.IMPORT_CYCLE

    def __init__(self, path: Union[str, Path], stack: List[Path]):
        self.path = Path(path)
        self.stack = list(stack)
        chain = " -> ".join(str(p) for p in [*self.stack, self.path])
        super().__init__(f"Import cycle detected: {chain}")


class TokenNotFoundError(DocgenError):
    """Raised when a document has no well-formed marker pair for a token"""
    kind = ErrorKind.TOKEN_NOT_FOUND

    def __init__(self, token: str, document: Union[str, Path, None] = None):
        self.token = token
        self.document = document
        where = f" in {document}" if document is not None else ""
        super().__init__(f"Heading {token} not found{where}.")


class FormatterError(DocgenError):
    """Raised when a custom formatter cannot be loaded or fails"""
    kind = ErrorKind.FORMATTER

    def __init__(self, path: Union[str, Path], cause: Exception):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Custom formatter {self.path} failed: {cause}")

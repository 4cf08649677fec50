"""
docgen - API documentation generator for ES modules

Extracts exported-symbol documentation from a local module graph and
writes it as Markdown, or merges it into an existing document.
"""

__version__ = "1.0.0"

from .resolver import path_resolve, specifier_isLocal
from .processor import FileProcessor, ProcessingStack, processFile
from .engine import extract
from .formatter import formatter, customFormatter_run
from .markdown import document_parse, document_serialize
from .embed import embed
from .append import document_append, appendTransform_make
from .log import LOG, state_connectToLogger

__all__ = [
    "path_resolve",
    "specifier_isLocal",
    "FileProcessor",
    "ProcessingStack",
    "processFile",
    "extract",
    "formatter",
    "customFormatter_run",
    "document_parse",
    "document_serialize",
    "embed",
    "document_append",
    "appendTransform_make",
    "LOG",
    "state_connectToLogger",
    "__version__",
]

"""
docgen - API documentation generator for ES modules

Extracts exported-symbol documentation from a local module graph and
writes it as Markdown, or merges it into an existing document.
"""

__version__ = "1.0.0"

from .lib import processFile, embed, document_append, formatter, LOG, state_connectToLogger

__all__ = ["processFile", "embed", "document_append", "formatter", "LOG", "state_connectToLogger", "__version__"]

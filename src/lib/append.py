"""
Append orchestration

Merges freshly generated Markdown into an existing document on disk:
parse both, embed the new content at the token named after the section
title, serialize and write. Nothing is written when the token is missing.
"""

from pathlib import Path
from typing import Callable, Optional, Union

from ..models.document import DocumentAST
from ..models.errors import TokenNotFoundError
from .embed import embed
from .log import LOG
from .markdown import document_parse, document_serialize


Transform = Callable[[DocumentAST], DocumentAST]


def appendTransform_make(heading: str, new_contents: DocumentAST) -> Transform:
    """
    Wrap embed() as a document transform step.

    Args:
        heading: Section title used as token name
        new_contents: Parsed generated content

    Returns:
        Function (target) -> target, raising TokenNotFoundError when the
        target has no marker pair for heading
    """
    def transform(target: DocumentAST) -> DocumentAST:
        if not embed(heading, target, new_contents):
            raise TokenNotFoundError(heading)
        return target

    return transform


def document_append(
    document_path: Union[str, Path],
    heading: str,
    generated_text: str,
    output_path: Optional[Union[str, Path]] = None,
) -> str:
    """
    Merge generated content into an existing document.

    Args:
        document_path: Document holding the START/END TOKEN(heading) markers
        heading: Section title used as token name
        generated_text: Markdown produced by the formatter
        output_path: Where to write the result, defaults to document_path

    Returns:
        The merged document text

    Raises:
        TokenNotFoundError: the document has no well-formed marker pair
    """
    document_path = Path(document_path)
    output_path = Path(output_path) if output_path is not None else document_path

    target = document_parse(document_path.read_text(encoding="utf-8"))
    contents = document_parse(generated_text)

    try:
        appendTransform_make(heading, contents)(target)
    except TokenNotFoundError as e:
        raise TokenNotFoundError(e.token, document_path) from None

    merged = document_serialize(target)
    output_path.write_text(merged, encoding="utf-8")
    LOG(f"Merged {heading} section into {output_path}", level=2)
    return merged

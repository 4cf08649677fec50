"""
Token-bounded document merge

Splices generated content into a document between a pair of marker
comments, re-levelling the generated headings so they nest under the
section the markers sit in:

    # API                                   # API
    <!-- START TOKEN(API) -->               <!-- START TOKEN(API) -->
    (old content)              ==>          ## Functions      (was "# Functions")
    <!-- END TOKEN(API) -->                 ...
                                            <!-- END TOKEN(API) -->

Everything strictly between the markers is replaced, so re-running the
merge replaces the previous output instead of accumulating it.
"""

from typing import Optional

from ..config import appsettings
from ..models.document import DocumentAST, NodeKind, SubtreeNode
from .log import LOG


# Deepest heading Markdown has; "#######" reads back as a paragraph
MAX_HEADING_DEPTH = 6


def marker_find(document: DocumentAST, marker: str) -> Optional[int]:
    """Index of the first top-level raw markup node whose value is marker"""
    for index, node in enumerate(document.children):
        if node.kind is NodeKind.MARKUP and node.value == marker:
            return index
    return None


def headingDepth_get(document: DocumentAST, index: int) -> int:
    """
    Depth of the last heading before position index.

    Returns:
        Heading depth, or 1 if no heading precedes index
    """
    for node in reversed(document.children[:index]):
        if node.kind is NodeKind.HEADING:
            return node.depth
    return 1


def embed(token: str, target: DocumentAST, new_content: DocumentAST) -> bool:
    """
    Inserts new contents within the token boundaries.

    Args:
        token: Name embedded in the START/END TOKEN markers
        target: Document to modify in place
        new_content: Content to insert; its top-level headings are re-levelled
            one below the enclosing section, at most to depth 6

    Returns:
        True if the content was embedded; False (and target untouched) if
        either marker is missing or the end marker does not follow the start
    """
    start = marker_find(target, appsettings.startMarker_make(token))
    if start is None:
        return False
    end = marker_find(target, appsettings.endMarker_make(token))
    if end is None:
        return False
    if end <= start:
        return False

    depth = min(headingDepth_get(target, start) + 1, MAX_HEADING_DEPTH)
    for node in new_content.children:
        if node.kind is NodeKind.HEADING:
            node.depth = depth

    target.children[start + 1:end] = [SubtreeNode(document=new_content)]
    LOG(f"Embedded {len(new_content.children)} nodes at TOKEN({token}), headings at depth {depth}", level=2)
    return True

"""
Document AST models

A Markdown document is a flat list of top-level nodes. Node types form a
closed set, each tagged with a NodeKind, so the merge code can dispatch on
``node.kind`` instead of probing fields:

    HEADING  - section heading with a numeric depth
    MARKUP   - raw markup block (HTML), used for token marker comments
    BLOCK    - any other block (paragraph, list, code, ...), kept opaque
    SUBTREE  - a whole DocumentAST embedded as a single child
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Union


class NodeKind(Enum):
    """Kinds of top-level document nodes"""
    HEADING = "heading"
    MARKUP = "markup"
    BLOCK = "block"
    SUBTREE = "subtree"


@dataclass
class HeadingNode:
    """
    Section heading

    Attributes:
        depth: Heading level (1 for "#", 2 for "##", ...)
        token: Parser token carrying the inline children of the title
    """
    kind: ClassVar[NodeKind] = NodeKind.HEADING
    depth: int
    token: Dict[str, Any] = field(default_factory=dict)


@dataclass
class MarkupNode:
    """
    Raw markup block

    Attributes:
        value: Literal markup text with surrounding whitespace removed
               (e.g., "<!-- START TOKEN(API) -->")
        token: Parser token the node was built from
    """
    kind: ClassVar[NodeKind] = NodeKind.MARKUP
    value: str
    token: Dict[str, Any] = field(default_factory=dict)


@dataclass
class BlockNode:
    """Any other block, carried through untouched"""
    kind: ClassVar[NodeKind] = NodeKind.BLOCK
    token: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SubtreeNode:
    """A complete document spliced in as one child"""
    kind: ClassVar[NodeKind] = NodeKind.SUBTREE
    document: "DocumentAST"


DocumentNode = Union[HeadingNode, MarkupNode, BlockNode, SubtreeNode]


@dataclass
class DocumentAST:
    """
    Parsed document

    Attributes:
        children: Ordered top-level nodes, link reference definitions
                  included where they were written
    """
    children: List[DocumentNode] = field(default_factory=list)

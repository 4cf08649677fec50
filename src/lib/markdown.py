"""
Markdown parsing and serialization

Bridges mistune's block token AST and the DocumentAST node variants:

    heading         -> HeadingNode(depth=attrs.level)
    block_html      -> MarkupNode(value=raw, stripped)
    ref_definition  -> BlockNode (a "[label]: url" line, kept in place)
    anything        -> BlockNode(token)

Serialization goes the other way, flattening SubtreeNodes in place and
writing heading depths back, then renders with mistune's MarkdownRenderer.
"""

import copy
import re
from typing import Any, Dict, Iterable, List, Optional

import mistune
from mistune.block_parser import BlockParser
from mistune.core import BlockState
from mistune.renderers.markdown import MarkdownRenderer

from ..models.document import (
    BlockNode,
    DocumentAST,
    DocumentNode,
    HeadingNode,
    MarkupNode,
    NodeKind,
)


class PositionalBlockParser(BlockParser):
    """
    BlockParser that leaves a ``ref_definition`` token where each link
    reference definition was written.

    mistune only records definitions in ``state.env``; without a token they
    would lose their position and be rendered at the end of the document.
    """

    def parse_ref_link(self, m: re.Match, state: BlockState) -> Optional[int]:
        last = state.last_token()
        continues_paragraph = last is not None and last["type"] == "paragraph"
        end_pos = super().parse_ref_link(m, state)
        if end_pos and not continues_paragraph:
            state.append_token({"type": "ref_definition", "raw": state.src[m.start():end_pos].strip()})
        return end_pos


class PositionalMarkdownRenderer(MarkdownRenderer):
    """MarkdownRenderer writing definitions in place instead of at the end"""

    def ref_definition(self, token: Dict[str, Any], state: BlockState) -> str:
        return token["raw"] + "\n\n"

    def render_referrences(self, state: BlockState) -> Iterable[str]:
        return []


def _markdown_make() -> mistune.Markdown:
    """Block-structure parser returning the token AST"""
    return mistune.Markdown(renderer=None, block=PositionalBlockParser())


def node_fromToken(token: Dict[str, Any]) -> DocumentNode:
    """Wrap one mistune block token in its node variant"""
    if token["type"] == "heading":
        return HeadingNode(depth=token["attrs"]["level"], token=token)
    if token["type"] == "block_html":
        return MarkupNode(value=token["raw"].strip(), token=token)
    return BlockNode(token=token)


def document_parse(text: str) -> DocumentAST:
    """
    Parse Markdown text into a DocumentAST.

    Args:
        text: Markdown source

    Returns:
        DocumentAST whose children are the top-level blocks
    """
    tokens, _ = _markdown_make().parse(text)
    return DocumentAST(children=[node_fromToken(token) for token in tokens])


def tokens_flatten(document: DocumentAST) -> List[Dict[str, Any]]:
    """mistune tokens of a document, subtrees inlined"""
    tokens: List[Dict[str, Any]] = []
    for node in document.children:
        if node.kind is NodeKind.SUBTREE:
            tokens.extend(tokens_flatten(node.document))
        elif node.kind is NodeKind.HEADING:
            token = copy.deepcopy(node.token) or {"type": "heading", "children": []}
            token.setdefault("attrs", {})["level"] = node.depth
            token["type"] = "heading"
            tokens.append(token)
        elif node.kind is NodeKind.MARKUP:
            tokens.append({"type": "block_html", "raw": node.value})
        else:
            tokens.append(node.token)
    return tokens


def document_serialize(document: DocumentAST) -> str:
    """
    Render a DocumentAST back to Markdown text.

    Returns:
        Markdown text ending with exactly one newline
    """
    text = PositionalMarkdownRenderer()(tokens_flatten(document), BlockState())
    return text.strip("\n") + "\n"

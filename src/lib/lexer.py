"""
Pygments-based token stream for ES module sources

Wraps Pygments' JavascriptLexer and keeps only the tokens the extraction
engine cares about: whitespace and ordinary comments are dropped, while
``/** ... */`` doc comments are kept so they can be attached to the
declaration that follows them.

Token types kept:
- Comment.Multiline: doc comments only
- Punctuation: braces, brackets, parens, commas, semicolons, "=>"
- String.Single / String.Double: import specifiers
- Keyword / Name / Operator / Number: everything else, compared by value
"""

from dataclasses import dataclass
from typing import Any, Dict, List

from pygments.lexers.javascript import JavascriptLexer
from pygments.token import Comment, Punctuation, String


OPENERS = {"(", "{", "["}
CLOSERS = {")", "}", "]"}


@dataclass
class SourceToken:
    """
    One significant token of a source file

    Attributes:
        ttype: Pygments token type
        value: Token text as written
        line: 1-based line the token starts on
    """
    ttype: Any
    value: str
    line: int

    def doc_is(self) -> bool:
        """Check if this is a /** ... */ doc comment"""
        return self.ttype in Comment and self.value.startswith("/**") and self.value != "/**/"

    def string_is(self) -> bool:
        """Check if this is a plain quoted string literal"""
        return self.ttype in String.Single or self.ttype in String.Double

    def punct_is(self, *values: str) -> bool:
        """Check if this is punctuation, optionally one of the given values"""
        if self.ttype not in Punctuation:
            return False
        return not values or self.value in values

    def string_value(self) -> str:
        """String literal contents without the quotes"""
        return self.value[1:-1]

    def lastLine_get(self) -> int:
        """Line the token ends on"""
        return self.line + self.value.count("\n")

    def asdict(self) -> Dict[str, Any]:
        """JSON friendly form used by the debug dumps"""
        return {"type": str(self.ttype), "value": self.value, "line": self.line}


def tokens_significant(source: str) -> List[SourceToken]:
    """
    Tokenize a JavaScript source into significant tokens.

    Args:
        source: File contents

    Returns:
        Tokens in source order, without whitespace and non-doc comments

    Example:
        >>> [t.value for t in tokens_significant("export const a = 1; // x")]
        ['export', 'const', 'a', '=', '1', ';']
    """
    lexer = JavascriptLexer(stripnl=False, ensurenl=False)
    tokens: List[SourceToken] = []
    line = 1
    last_index = 0
    for index, ttype, value in lexer.get_tokens_unprocessed(source):
        line += source.count("\n", last_index, index)
        last_index = index
        if not value.strip():
            continue
        token = SourceToken(ttype, value, line)
        if ttype in Comment and not token.doc_is():
            continue
        tokens.append(token)
    return tokens

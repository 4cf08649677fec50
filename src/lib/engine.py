"""
Default IR-extraction engine for ES modules

Implements the engine contract used by the processor:

    extract(relativePath, sourceText, resolveImport) -> EngineResult

The engine works on the Pygments token stream of a file and only looks at
top-level statements. It does two passes:

1. Splitting: cut the token stream into top-level statements and record
   local declarations (with the doc comment right above them), import
   bindings, and export statements.
2. Documenting: walk the export statements in source order and build the
   IR. Exports that come from another module (``export * from``,
   ``export { a } from``, or a local ``export { a }`` of an imported
   binding) ask ``resolveImport`` for that module's IR.

Supported export forms:
    export [async] function name() {}      export class Name {}
    export const|let|var name = ...        export default ...
    export { a, b as c }                   export { a } from './x'
    export * from './x'                    export * as ns from './x'
"""

import re
from dataclasses import asdict, dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from pygments.token import Operator

from ..config import appsettings
from ..models.ir import EngineResult, IRSymbol
from .jsdoc import docBlock_parse
from .lexer import CLOSERS, OPENERS, SourceToken, tokens_significant
from .log import LOG


IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")

DECLARATION_KEYWORDS = {"function", "class", "const", "let", "var"}

# Tokens after which a statement keyword continues the current statement
CONTINUATIONS = {
    "=", "(", "[", ",", ":", "?", "=>", ".", "...",
    "default", "export", "async", "return", "await", "yield",
    "extends", "new", "typeof", "void", "delete", "in", "of", "instanceof",
}

ImportResolver = Callable[[str], Optional[List[IRSymbol]]]


@dataclass
class ModuleStatement:
    """
    Record of one top-level module statement, as dumped in the debug AST

    Attributes:
        type: "import", "declaration", "export-declaration", "export-default",
              "export-named" or "export-all"
        line: Line the statement starts on
        kind: Declaration kind for declarations ("function", "class", ...)
        names: Binding pairs; [imported, local] for imports,
               [local, exported] for exports
        source: Module specifier for imports and re-exports
    """
    type: str
    line: int
    kind: Optional[str] = None
    names: List[List[str]] = field(default_factory=list)
    source: Optional[str] = None


def identifier_is(token: Optional[SourceToken]) -> bool:
    """Check if a token can be a binding name"""
    return (
        token is not None
        and not token.string_is()
        and not token.punct_is()
        and IDENTIFIER.match(token.value) is not None
    )


def arrow_at(tokens: List[SourceToken], index: int) -> bool:
    """Check for "=>" at tokens[index], lexed as one token or as "=" ">" """
    if index >= len(tokens):
        return False
    if tokens[index].value == "=>":
        return True
    return (
        tokens[index].value == "="
        and index + 1 < len(tokens)
        and tokens[index + 1].value.startswith(">")
    )


def bindingName_get(token: SourceToken) -> str:
    """Name of a specifier, allowing the quoted form (export { "a-b" as c })"""
    return token.string_value() if token.string_is() else token.value


def symbol_find(ir: List[IRSymbol], name: str) -> Optional[IRSymbol]:
    """Find an exported symbol by exported name; "default" finds the default export"""
    for symbol in ir:
        if name == "default" and symbol.is_default:
            return symbol
        if symbol.name == name and not symbol.is_default:
            return symbol
    return None


class ModuleScanner:
    """
    Extracts the exported-symbol IR of one module

    Attributes:
        relative_path: Path reported in the IR
        resolve_import: Callback returning the IR of another module
        tokens: Significant tokens of the module
        declarations: Local declarations by name, already documented
        imports: Import bindings, local name -> (specifier, imported name)
        statements: All top-level module statements, for the debug AST
        exports: Export statements with their own symbols (if declared inline)
        export_tokens: Tokens of import/export statements, for the debug dump
    """

    def __init__(self, relative_path: str, source: str, resolve_import: ImportResolver) -> None:
        self.relative_path = relative_path
        self.resolve_import = resolve_import
        self.tokens: List[SourceToken] = tokens_significant(source)
        self.declarations: Dict[str, IRSymbol] = {}
        self.imports: Dict[str, Tuple[str, str]] = {}
        self.statements: List[ModuleStatement] = []
        self.exports: List[Tuple[ModuleStatement, List[IRSymbol]]] = []
        self.export_tokens: List[SourceToken] = []

    def scan(self) -> EngineResult:
        """
        Run both passes over the module.

        Returns:
            EngineResult whose ir is None when the module exports nothing
        """
        for start, end in self.statements_split():
            self.statement_read(start, end)

        ir: List[IRSymbol] = []
        for statement, symbols in self.exports:
            ir.extend(self.export_document(statement, symbols))

        LOG(f"{self.relative_path}: {len(ir)} exported symbols", level=3)
        return EngineResult(
            ir=ir or None,
            tokens=[token.asdict() for token in self.export_tokens],
            ast=[asdict(statement) for statement in self.statements],
        )

    # Pass 1: statements

    def statements_split(self) -> List[Tuple[int, int]]:
        """Token index spans [start, end] of all top-level statements"""
        spans = []
        index = 0
        while index < len(self.tokens):
            if self.tokens[index].doc_is():
                index += 1
                continue
            end = self.statement_end(index)
            spans.append((index, end))
            index = end + 1
        return spans

    def statement_end(self, start: int) -> int:
        """Index of the last token of the statement beginning at start"""
        depth = 0
        index = start
        while index < len(self.tokens):
            token = self.tokens[index]
            if token.punct_is(*OPENERS):
                depth += 1
            elif token.punct_is(*CLOSERS):
                depth = max(depth - 1, 0)
            elif depth == 0:
                if token.punct_is(";"):
                    return index
                if index > start and self.boundary_is(index):
                    return index - 1
            index += 1
        return len(self.tokens) - 1

    def boundary_is(self, index: int) -> bool:
        """Check if the token at index starts a new top-level statement"""
        token = self.tokens[index]
        if token.doc_is():
            return True
        if not self.starter_is(index):
            return False
        previous = self.tokens[index - 1]
        return not (previous.ttype in Operator or previous.value in CONTINUATIONS)

    def starter_is(self, index: int) -> bool:
        """Check if the token at index is a statement keyword we care about"""
        token = self.tokens[index]
        following = self.tokens[index + 1] if index + 1 < len(self.tokens) else None
        if token.string_is() or token.punct_is():
            return False
        if token.value in DECLARATION_KEYWORDS or token.value == "export":
            return True
        if token.value == "import":
            return following is not None and not following.punct_is("(", ".")
        if token.value == "async":
            return following is not None and following.value == "function"
        return False

    def doc_before(self, index: int) -> Optional[SourceToken]:
        """Doc comment directly above the token at index, if any"""
        if index > 0 and self.tokens[index - 1].doc_is():
            return self.tokens[index - 1]
        return None

    def statement_read(self, start: int, end: int) -> None:
        """Record one top-level statement"""
        if not self.starter_is(start):
            return
        tokens = self.tokens[start:end + 1]
        doc = self.doc_before(start)
        keyword = tokens[0].value

        if keyword == "import":
            self.export_tokens.extend(tokens)
            self.import_read(tokens)
        elif keyword == "export":
            self.export_tokens.extend(tokens)
            self.export_read(tokens, doc)
        else:
            kind, names = self.declaration_parse(tokens, 0)
            self.statements.append(
                ModuleStatement(type="declaration", line=tokens[0].line, kind=kind,
                                names=[[name, name] for name in names])
            )
            for name in names:
                self.declarations[name] = self.symbol_make(name, kind, doc, tokens)

    def declaration_parse(self, tokens: List[SourceToken], offset: int) -> Tuple[str, List[str]]:
        """
        Kind and bound names of a declaration starting at tokens[offset].

        Example:
            "async function * gen() {}"    -> ("function", ["gen"])
            "const { a, b: c } = obj"      -> ("variable", ["a", "c"])
            "const f = () => 1"            -> ("function", ["f"])
        """
        index = offset
        if tokens[index].value == "async":
            index += 1
        keyword = tokens[index].value
        index += 1
        if keyword in ("function", "class"):
            if index < len(tokens) and tokens[index].value == "*":
                index += 1
            name = tokens[index] if index < len(tokens) else None
            if identifier_is(name) and name.value != "extends":
                return keyword, [name.value]
            return keyword, []

        names: List[str] = []
        if index < len(tokens) and identifier_is(tokens[index]):
            names.append(tokens[index].value)
        elif index < len(tokens) and tokens[index].punct_is("{", "["):
            depth = 0
            for position in range(index, len(tokens)):
                token = tokens[position]
                if token.punct_is(*OPENERS):
                    depth += 1
                elif token.punct_is(*CLOSERS):
                    depth -= 1
                    if depth == 0:
                        break
                following = tokens[position + 1] if position + 1 < len(tokens) else None
                if (depth == 1 and identifier_is(token) and following is not None
                        and (following.punct_is(",", "}", "]") or following.value == "=")):
                    names.append(token.value)
        return self.initializer_kind(tokens, index), names

    def initializer_kind(self, tokens: List[SourceToken], index: int) -> str:
        """"function" if the first declarator is initialised with a function, else "variable" """
        assign = next((i for i in range(index, len(tokens)) if tokens[i].value == "="), None)
        if assign is None or assign + 1 >= len(tokens):
            return "variable"
        init = tokens[assign + 1:]
        if init[0].value in ("function", "async"):
            return "function"
        if identifier_is(init[0]) and arrow_at(init, 1):
            return "function"
        if init[0].punct_is("("):
            depth = 0
            for position, token in enumerate(init):
                if token.punct_is(*OPENERS):
                    depth += 1
                elif token.punct_is(*CLOSERS):
                    depth -= 1
                    if depth == 0:
                        return "function" if arrow_at(init, position + 1) else "variable"
        return "variable"

    def specifiers_read(self, tokens: List[SourceToken], index: int) -> Tuple[List[Tuple[str, str]], int]:
        """
        Read a braced specifier list starting at the "{" at tokens[index].

        Returns:
            ([(name, alias), ...], index just past the closing brace)
        """
        pairs = []
        index += 1
        while index < len(tokens) and not tokens[index].punct_is("}"):
            token = tokens[index]
            if token.punct_is(","):
                index += 1
                continue
            name = bindingName_get(token)
            alias = name
            if index + 2 < len(tokens) and tokens[index + 1].value == "as":
                alias = bindingName_get(tokens[index + 2])
                index += 3
            else:
                index += 1
            pairs.append((name, alias))
        return pairs, index + 1

    def source_after(self, tokens: List[SourceToken], index: int) -> Optional[str]:
        """Specifier of a "from '...'" clause at tokens[index], if there is one"""
        if index + 1 < len(tokens) and tokens[index].value == "from" and tokens[index + 1].string_is():
            return tokens[index + 1].string_value()
        return None

    def import_read(self, tokens: List[SourceToken]) -> None:
        """Record the bindings of an import statement"""
        statement = ModuleStatement(type="import", line=tokens[0].line)
        self.statements.append(statement)

        if len(tokens) > 1 and tokens[1].string_is():
            statement.source = tokens[1].string_value()
            return
        from_index = next(
            (i for i, token in enumerate(tokens) if token.value == "from" and i + 1 < len(tokens)
             and tokens[i + 1].string_is()),
            None,
        )
        if from_index is None:
            return
        source = tokens[from_index + 1].string_value()
        statement.source = source

        clause = tokens[1:from_index]
        index = 0
        while index < len(clause):
            token = clause[index]
            if token.punct_is("{"):
                pairs, index = self.specifiers_read(clause, index)
                for imported, local in pairs:
                    statement.names.append([imported, local])
                    self.imports[local] = (source, imported)
                continue
            if token.value == "*" and index + 2 < len(clause) and clause[index + 1].value == "as":
                local = clause[index + 2].value
                statement.names.append(["*", local])
                self.imports[local] = (source, "*")
                index += 3
                continue
            if identifier_is(token) and token.value != "type":
                statement.names.append(["default", token.value])
                self.imports[token.value] = (source, "default")
            index += 1

    def export_read(self, tokens: List[SourceToken], doc: Optional[SourceToken]) -> None:
        """Record an export statement, documenting inline declarations right away"""
        line = tokens[0].line
        if len(tokens) < 2:
            return
        second = tokens[1]

        if second.value == "*":
            namespace = None
            index = 2
            if len(tokens) > 3 and tokens[2].value == "as":
                namespace = bindingName_get(tokens[3])
                index = 4
            statement = ModuleStatement(
                type="export-all", line=line, source=self.source_after(tokens, index),
                names=[["*", namespace]] if namespace else [],
            )
            symbols = []
            if namespace:
                symbols = [self.symbol_make(namespace, "namespace", doc, tokens)]
            self.statements.append(statement)
            self.exports.append((statement, symbols))
            return

        if second.punct_is("{"):
            pairs, index = self.specifiers_read(tokens, 1)
            statement = ModuleStatement(
                type="export-named", line=line, source=self.source_after(tokens, index),
                names=[[local, exported] for local, exported in pairs],
            )
            self.statements.append(statement)
            self.exports.append((statement, []))
            return

        if second.value == "default":
            statement = ModuleStatement(type="export-default", line=line)
            third = tokens[2] if len(tokens) > 2 else None
            if third is not None and third.value in ("function", "class", "async"):
                kind, names = self.declaration_parse(tokens, 2)
                name = names[0] if names else "default"
                symbol = self.symbol_make(name, kind, doc, tokens, is_default=True)
                if names:
                    self.declarations[name] = symbol
                statement.kind = kind
                statement.names = [[name, "default"]]
                symbols = [symbol]
            elif identifier_is(third) and (len(tokens) == 3 or (len(tokens) == 4 and tokens[3].punct_is(";"))):
                # export default localName;
                statement.names = [[third.value, "default"]]
                symbols = []
            else:
                statement.kind = "expression"
                statement.names = [["default", "default"]]
                symbols = [self.symbol_make("default", "expression", doc, tokens, is_default=True)]
            self.statements.append(statement)
            self.exports.append((statement, symbols))
            return

        if second.value in DECLARATION_KEYWORDS or second.value == "async":
            kind, names = self.declaration_parse(tokens, 1)
            statement = ModuleStatement(type="export-declaration", line=line, kind=kind,
                                        names=[[name, name] for name in names])
            symbols = []
            for name in names:
                symbol = self.symbol_make(name, kind, doc, tokens)
                self.declarations[name] = symbol
                symbols.append(symbol)
            self.statements.append(statement)
            self.exports.append((statement, symbols))

    def symbol_make(
        self,
        name: str,
        kind: str,
        doc: Optional[SourceToken],
        tokens: List[SourceToken],
        is_default: bool = False,
    ) -> IRSymbol:
        """Build the IR entry of a symbol declared in this module"""
        if doc is not None:
            description, tags = docBlock_parse(doc.value)
        else:
            description, tags = appsettings.undocumented_text, []
        return IRSymbol(
            path=self.relative_path,
            name=name,
            kind=kind,
            description=description,
            tags=tags,
            line_start=tokens[0].line,
            line_end=tokens[-1].lastLine_get(),
            is_default=is_default,
        )

    # Pass 2: documenting exports

    def dependency_ir(self, specifier: str) -> List[IRSymbol]:
        """IR of another module; an absent IR counts as no exports"""
        return self.resolve_import(specifier) or []

    def binding_lookup(self, local: str, line: int) -> IRSymbol:
        """Document a local binding, following it into its module if it was imported"""
        if local in self.declarations:
            return self.declarations[local]
        if local in self.imports:
            source, imported = self.imports[local]
            if imported != "*":
                found = symbol_find(self.dependency_ir(source), imported)
                if found is not None:
                    return found
            kind = "namespace" if imported == "*" else "unknown"
            return self.placeholder_make(local, kind, line)
        return self.placeholder_make(local, "unknown", line)

    def placeholder_make(self, name: str, kind: str, line: int) -> IRSymbol:
        """Undocumented entry for an export whose declaration is out of reach"""
        return IRSymbol(
            path=self.relative_path, name=name, kind=kind,
            description=appsettings.undocumented_text, line_start=line, line_end=line,
        )

    def export_document(self, statement: ModuleStatement, symbols: List[IRSymbol]) -> List[IRSymbol]:
        """IR entries contributed by one export statement"""
        if symbols:
            return symbols

        if statement.type == "export-all":
            if statement.source is None:
                return []
            return [symbol for symbol in self.dependency_ir(statement.source) if not symbol.is_default]

        if statement.type == "export-default":
            local = statement.names[0][0]
            return [self.binding_lookup(local, statement.line).renamed(local, is_default=True)]

        if statement.type == "export-named":
            result = []
            if statement.source is not None:
                ir = self.dependency_ir(statement.source)
                for imported, exported in statement.names:
                    found = symbol_find(ir, imported)
                    if found is None:
                        found = self.placeholder_make(exported, "unknown", statement.line)
                    result.append(found.renamed(exported, is_default=exported == "default"))
            else:
                for local, exported in statement.names:
                    symbol = self.binding_lookup(local, statement.line)
                    result.append(symbol.renamed(exported, is_default=exported == "default"))
            return result

        return []


def extract(relative_path: str, source: str, resolve_import: ImportResolver) -> EngineResult:
    """
    Extract the exported-symbol IR of an ES module.

    Args:
        relative_path: Path of the file relative to the root dir (reported in the IR)
        source: File contents
        resolve_import: Returns the IR of the module a specifier names

    Returns:
        EngineResult(ir, tokens, ast); ir is None if the module exports nothing
    """
    return ModuleScanner(relative_path, source, resolve_import).scan()

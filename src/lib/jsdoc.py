"""
Doc comment parsing

Turns a ``/** ... */`` block into a description and a list of IRTag.

    /**
     * Inserts new contents within the token boundaries.
     *
     * @param {string} token String to embed in the start/end tokens.
     * @return {boolean} Whether the contents were embedded or not.
     */

becomes description "Inserts new contents within the token boundaries."
and tags [param token {string}, return {boolean}].
"""

from typing import List, Tuple

from ..models.ir import IRTag

PARAM_TAGS = {"param", "arg", "argument"}
RETURN_TAGS = {"return", "returns"}
THROWS_TAGS = {"throws", "exception"}


def typeExpression_split(rest: str) -> Tuple[str, str]:
    """
    Split a leading {type} expression off a tag body.

    Nested braces (e.g., {Object<string, {a: number}>}) are balanced.
    """
    rest = rest.strip()
    if not rest.startswith("{"):
        return "", rest
    depth = 0
    for pos, char in enumerate(rest):
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return rest[1:pos].strip(), rest[pos + 1:].strip()
    return "", rest


def tag_parse(tag: str, rest: str) -> IRTag:
    """
    Parse the body of a single tag.

    Args:
        tag: Tag name, lower-cased, without "@"
        rest: Everything after the tag name

    Returns:
        IRTag with name/type split out where the tag has them
    """
    if tag in PARAM_TAGS:
        param_type, rest = typeExpression_split(rest)
        parts = rest.split(maxsplit=1)
        name = parts[0] if parts else ""
        description = parts[1] if len(parts) > 1 else ""
        optional = False
        if name.startswith("[") and name.endswith("]"):
            optional = True
            name = name[1:-1].split("=", 1)[0]
        if description.startswith("- "):
            description = description[2:]
        return IRTag(tag="param", name=name, type=param_type,
                     description=description.strip(), optional=optional)

    if tag in RETURN_TAGS:
        return_type, description = typeExpression_split(rest)
        return IRTag(tag="return", type=return_type, description=description)

    if tag in THROWS_TAGS:
        error_type, description = typeExpression_split(rest)
        return IRTag(tag="throws", type=error_type, description=description)

    if tag == "example":
        return IRTag(tag="example", description=rest)

    type_expression, description = typeExpression_split(rest)
    return IRTag(tag=tag, type=type_expression, description=description)


def docLines_clean(text: str) -> List[str]:
    """Strip comment delimiters and leading asterisks, keeping indentation"""
    lines = []
    for raw in text.splitlines():
        cleaned = raw.strip()
        if cleaned.startswith("/**"):
            cleaned = cleaned[3:]
        if cleaned.endswith("*/"):
            cleaned = cleaned[:-2]
        if cleaned.startswith("*"):
            cleaned = cleaned[1:]
        if cleaned.startswith(" "):
            cleaned = cleaned[1:]
        lines.append(cleaned.rstrip())
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return lines


def docBlock_parse(text: str) -> Tuple[str, List[IRTag]]:
    """
    Parse a doc comment block.

    Lines before the first tag form the description. A tag's body runs
    until the next tag; @example bodies keep their line breaks, other
    tag bodies are joined with spaces.

    Args:
        text: Raw comment including the /** and */ delimiters

    Returns:
        (description, tags)
    """
    description_lines: List[str] = []
    tags: List[Tuple[str, List[str]]] = []

    for line in docLines_clean(text):
        stripped = line.strip()
        if stripped.startswith("@"):
            tag, _, rest = stripped[1:].partition(" ")
            tags.append((tag.lower(), [rest]))
        elif tags:
            tags[-1][1].append(line)
        else:
            description_lines.append(stripped)

    parsed: List[IRTag] = []
    for tag, body in tags:
        if tag == "example":
            rest = "\n".join(body).strip("\n")
        else:
            rest = " ".join(part.strip() for part in body if part.strip())
        parsed.append(tag_parse(tag, rest))

    return "\n".join(description_lines).strip(), parsed

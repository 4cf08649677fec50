"""
Doc comment parsing tests
"""

from docgen.lib.jsdoc import docBlock_parse, tag_parse, typeExpression_split


class TestDescription:
    """Test description extraction"""

    def test_single_line(self):
        description, tags = docBlock_parse("/** Returns the answer. */")
        assert description == "Returns the answer."
        assert tags == []

    def test_multi_paragraph(self):
        text = "/**\n * First line.\n * Second line.\n *\n * Next paragraph.\n */"
        description, _ = docBlock_parse(text)
        assert description == "First line.\nSecond line.\n\nNext paragraph."

    def test_tags_only(self):
        description, tags = docBlock_parse("/**\n * @private\n */")
        assert description == ""
        assert tags[0].tag == "private"


class TestTags:
    """Test tag bodies"""

    def test_param_with_type(self):
        tag = tag_parse("param", "{Object} targetAst The remark AST.")
        assert (tag.tag, tag.name, tag.type, tag.description) == ("param", "targetAst", "Object", "The remark AST.")
        assert tag.optional is False

    def test_optional_param_with_default(self):
        tag = tag_parse("param", "{number} [depth=1] - Heading depth.")
        assert tag.name == "depth"
        assert tag.optional is True
        assert tag.description == "Heading depth."

    def test_returns_alias(self):
        tag = tag_parse("returns", "{boolean} Whether it worked.")
        assert (tag.tag, tag.type, tag.description) == ("return", "boolean", "Whether it worked.")

    def test_nested_type_braces(self):
        assert typeExpression_split("{Object<string, {a: number}>} rest") == ("Object<string, {a: number}>", "rest")

    def test_unknown_tag_kept(self):
        tag = tag_parse("deprecated", "Use embed() instead.")
        assert (tag.tag, tag.description) == ("deprecated", "Use embed() instead.")

    def test_multiline_tag_body_joined(self):
        text = "/**\n * @param {string} token String to embed\n *                       in the tokens.\n */"
        _, tags = docBlock_parse(text)
        assert tags[0].description == "String to embed in the tokens."

    def test_example_keeps_layout(self):
        text = (
            "/**\n"
            " * Does it.\n"
            " *\n"
            " * @example\n"
            " * const ok = embed( 'API', target, contents );\n"
            " * if ( ! ok ) {\n"
            " *     throw new Error();\n"
            " * }\n"
            " */"
        )
        _, tags = docBlock_parse(text)
        assert tags[0].tag == "example"
        assert tags[0].description == (
            "const ok = embed( 'API', target, contents );\n"
            "if ( ! ok ) {\n"
            "    throw new Error();\n"
            "}"
        )

"""Tests for the parse error taxonomy."""

from mini_markup_parser.parsing import (
    DepthLimitExceeded,
    LiteralMismatch,
    ParseError,
    QuoteMismatch,
    TagMismatch,
    UnexpectedEof,
)


class TestParseErrorFormatting:
    """Test messages and dictionary forms."""

    def test_message_with_location(self):
        error = UnexpectedEof(12, line=2, column=4)

        assert str(error) == "Unexpected end of input at byte 12 (line 2, column 4)"
        assert error.kind == "UnexpectedEof"

    def test_message_without_location(self):
        assert str(UnexpectedEof(3)) == "Unexpected end of input at byte 3"

    def test_literal_mismatch(self):
        error = LiteralMismatch("=", 4, found=">")

        assert error.message == "Expected '=' but found '>'"
        assert error.to_dict() == {
            "kind": "LiteralMismatch",
            "message": "Expected '=' but found '>'",
            "position": 4,
            "expected": "=",
            "found": ">",
        }

    def test_literal_mismatch_without_found(self):
        assert LiteralMismatch("name", 0).message == "Expected 'name'"

    def test_quote_mismatch(self):
        error = QuoteMismatch('"', "'", 7, line=1, column=8)
        data = error.to_dict()

        assert data["opening"] == '"'
        assert data["closing"] == "'"
        assert data["line"] == 1
        assert data["column"] == 8

    def test_tag_mismatch(self):
        error = TagMismatch("a", "b", 5)
        assert error.message == "Closing tag </b> does not match opening tag <a>"
        assert error.details() == {"opening": "a", "closing": "b"}

    def test_depth_limit(self):
        error = DepthLimitExceeded(10, 40)
        assert error.max_depth == 10
        assert "maximum depth of 10" in str(error)

    def test_base_class_has_no_details(self):
        assert ParseError("custom", 0).details() == {}

"""Tests for the package's public interface."""

import pytest

import mini_markup_parser


class TestPackageInterface:
    """Test top-level exports."""

    def test_version(self):
        assert mini_markup_parser.__version__ == "0.1.0"

    def test_all_exports_exist(self):
        for name in mini_markup_parser.__all__:
            assert hasattr(mini_markup_parser, name), name

    def test_progressive_levels(self):
        """Test that the three API levels agree on the same input."""
        source = '<a x="1"><b>hi</b></a>'

        root = mini_markup_parser.parse(source)
        result = mini_markup_parser.parse_string(source)
        configured = mini_markup_parser.MarkupParser().parse(source)

        assert result.root == root
        assert configured.root == root
        assert mini_markup_parser.to_markup(root) == source

    def test_error_hierarchy(self):
        for error_class in (
            mini_markup_parser.UnexpectedEof,
            mini_markup_parser.LiteralMismatch,
            mini_markup_parser.QuoteMismatch,
            mini_markup_parser.TagMismatch,
            mini_markup_parser.DepthLimitExceeded,
        ):
            assert issubclass(error_class, mini_markup_parser.ParseError)

    def test_level_one_raises(self):
        with pytest.raises(mini_markup_parser.ParseError):
            mini_markup_parser.parse("<a>")

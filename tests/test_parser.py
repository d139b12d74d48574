# =============================================================================
# test_parser.py - Instruction Parser Tests
# =============================================================================
# Tests for splitting instruction lines into A- and C-instruction fields.
# =============================================================================

import pytest

from hackasm.assembler.lexer import LineClassifier
from hackasm.assembler.parser import (
    AddressStatement,
    ComputeStatement,
    Parser,
    strip_comment,
)
from hackasm.config import AssemblerConfig
from hackasm.errors import AssemblySyntaxError


def parse(text: str, config: AssemblerConfig | None = None):
    """Classify and parse a single instruction line."""
    line = LineClassifier("Test.asm", config).classify(text, 1)
    return Parser(config).parse(line)


# =============================================================================
# A-Instructions
# =============================================================================

class TestAddressInstructions:
    """Test @value parsing."""

    def test_literal(self):
        stmt = parse("@21")
        assert isinstance(stmt, AddressStatement)
        assert stmt.literal == 21
        assert stmt.symbol is None

    def test_literal_not_range_checked(self):
        """The parser leaves range policy to the code generator."""
        assert parse("@99999").literal == 99999

    def test_symbol(self):
        stmt = parse("@LOOP")
        assert stmt.symbol == "LOOP"
        assert stmt.literal is None

    def test_symbol_with_comment(self):
        assert parse("   @sum // running total").symbol == "sum"

    def test_long_symbol_truncated(self):
        assert parse("@" + "v" * 80).symbol == "v" * 64

    def test_long_symbol_strict(self):
        with pytest.raises(AssemblySyntaxError):
            parse("@" + "v" * 80, AssemblerConfig(strict_identifiers=True))

    @pytest.mark.parametrize("text", ["@", "@   // nothing", "@12x", "@1 2", "@a b"])
    def test_malformed(self, text):
        with pytest.raises(AssemblySyntaxError):
            parse(text)


# =============================================================================
# C-Instructions
# =============================================================================

class TestComputeInstructions:
    """Test dest=comp;jump parsing."""

    def test_all_fields(self):
        stmt = parse("AM=M+1;JGT")
        assert isinstance(stmt, ComputeStatement)
        assert (stmt.dest, stmt.comp, stmt.jump) == ("AM", "M+1", "JGT")

    def test_comp_only(self):
        stmt = parse("D+1")
        assert (stmt.dest, stmt.comp, stmt.jump) == ("", "D+1", "")

    def test_comp_and_jump(self):
        stmt = parse("0;JMP")
        assert (stmt.dest, stmt.comp, stmt.jump) == ("", "0", "JMP")

    def test_dest_and_comp(self):
        stmt = parse("D=A")
        assert (stmt.dest, stmt.comp, stmt.jump) == ("D", "A", "")

    def test_spaces_and_comment(self):
        stmt = parse("  D = D + A ; JGT   // add")
        assert (stmt.dest, stmt.comp, stmt.jump) == ("D", "D+A", "JGT")

    def test_fields_kept_as_written(self):
        """Lookup and M rewriting happen later."""
        stmt = parse("MD=D|M")
        assert stmt.comp == "D|M"
        assert stmt.dest == "MD"

    @pytest.mark.parametrize("text", [
        "=D",          # empty destination
        "X=D",         # bad destination letter
        "AX=1",
        "D=",          # empty computation
        ";JMP",
        "0;",          # empty jump
    ])
    def test_malformed(self, text):
        with pytest.raises(AssemblySyntaxError):
            parse(text)

    def test_error_location(self):
        line = LineClassifier("Prog.asm").classify("  Q=1", 5)
        with pytest.raises(AssemblySyntaxError) as exc_info:
            Parser().parse(line)
        message = str(exc_info.value)
        assert "Prog.asm:5:3" in message
        assert "invalid destination 'Q'" in message


# =============================================================================
# Helpers
# =============================================================================

class TestParseAll:
    """Test parsing a whole classified source."""

    def test_skips_labels_and_comments(self):
        lines = LineClassifier().classify_all(["// c", "(L)", "@L", "0;JMP"])
        statements = list(Parser().parse_all(lines))
        assert len(statements) == 2
        assert statements[0].symbol == "L"
        assert statements[1].jump == "JMP"

    @pytest.mark.parametrize("text,expected", [
        ("D=A", "D=A"),
        ("D=A // c", "D=A"),
        ("  @1//c  ", "@1"),
    ])
    def test_strip_comment(self, text, expected):
        assert strip_comment(text) == expected

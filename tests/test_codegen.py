# =============================================================================
# test_codegen.py - Code Generator Tests
# =============================================================================
# Tests for the two passes: label resolution, variable allocation and
# instruction encoding, plus error collection across lines.
# =============================================================================

import pytest

from hackasm.assembler.codegen import CodeGenerator
from hackasm.config import AssemblerConfig
from hackasm.cpu import (
    COMP_TABLE,
    JUMP_TABLE,
    AddressInstruction,
    ComputeInstruction,
)
from hackasm.errors import (
    AssemblerError,
    AssemblySyntaxError,
    DuplicateSymbolError,
    LiteralRangeError,
    TooManyErrors,
    UnknownMnemonicError,
)


def generate(source: str, config: AssemblerConfig | None = None) -> list[str]:
    """Assemble source text and return binary strings."""
    codegen = CodeGenerator(config)
    codegen.generate(source.splitlines(), "Test.asm")
    return codegen.get_binary()


# =============================================================================
# Instruction Words
# =============================================================================

class TestInstructionWords:
    """Test the tagged instruction word types."""

    def test_address_word(self):
        word = AddressInstruction(5)
        assert word.word == 5
        assert word.to_binary() == "0000000000000101"

    def test_compute_word(self):
        word = ComputeInstruction(selector=1, comp=0b110000, dest=0b010, jump=0)
        assert word.to_binary() == "1111110000010000"

    def test_field_ranges(self):
        with pytest.raises(ValueError):
            AddressInstruction(32768)
        with pytest.raises(ValueError):
            ComputeInstruction(selector=2, comp=0)
        with pytest.raises(ValueError):
            ComputeInstruction(selector=0, comp=64)
        with pytest.raises(ValueError):
            ComputeInstruction(selector=0, comp=0, dest=8)


# =============================================================================
# A-Instruction Encoding
# =============================================================================

class TestAddressEncoding:
    """Test @value encoding."""

    @pytest.mark.parametrize("value", [0, 1, 2, 255, 1000, 16384, 32767])
    def test_literal(self, value):
        """@n is a 0 bit followed by n in 15 bits."""
        (word,) = generate(f"@{value}")
        assert word == "0" + format(value, "015b")
        assert len(word) == 16

    def test_literal_overflow_rejected(self):
        with pytest.raises(LiteralRangeError) as exc_info:
            generate("@32768")
        assert exc_info.value.value == 32768
        assert "Test.asm:1:1" in str(exc_info.value)
        assert "literal_overflow='wrap'" in exc_info.value.hint
        assert "--overflow wrap" in exc_info.value.hint

    def test_literal_overflow_wrapped(self):
        config = AssemblerConfig(literal_overflow="wrap")
        assert generate("@32768", config) == ["0000000000000000"]
        assert generate("@40000", config) == [format(40000 % 32768, "016b")]

    def test_predefined_symbols(self):
        assert generate("@SCREEN\n@KBD\n@R15\n@THAT") == [
            "0100000000000000",
            "0110000000000000",
            "0000000000001111",
            "0000000000000100",
        ]


# =============================================================================
# C-Instruction Encoding
# =============================================================================

class TestComputeEncoding:
    """Test dest=comp;jump encoding."""

    @pytest.mark.parametrize("source,expected", [
        ("0;JMP", "1110101010000111"),
        ("D=A", "1110110000010000"),
        ("D=D+A", "1110000010010000"),
        ("M=D", "1110001100001000"),
        ("D=M", "1111110000010000"),
        ("D=D-M", "1111010011010000"),
        ("M=!M", "1111110001001000"),
        ("D;JGT", "1110001100000001"),
        ("D=D|A", "1110010101010000"),
        ("MD=M-1", "1111110010011000"),
        ("AMD=-1", "1110111010111000"),
        ("D&M;JNE", "1111000000000101"),
    ])
    def test_known_encodings(self, source, expected):
        assert generate(source) == [expected]

    @pytest.mark.parametrize("comp,code", list(COMP_TABLE.items()))
    def test_every_comp(self, comp, code):
        """Every table entry encodes with selector 0 and its control code."""
        (word,) = generate(comp)
        assert word == "1110" + format(code, "06b") + "000000"

    @pytest.mark.parametrize("comp", [c for c in COMP_TABLE if "A" in c])
    def test_memory_forms(self, comp):
        """Replacing A with M only flips the selector bit."""
        (a_word,) = generate(comp)
        (m_word,) = generate(comp.replace("A", "M"))
        assert a_word[3] == "0"
        assert m_word[3] == "1"
        assert a_word[:3] + a_word[4:] == m_word[:3] + m_word[4:]

    @pytest.mark.parametrize("jump,code", [(j, c) for j, c in JUMP_TABLE.items() if j])
    def test_every_jump(self, jump, code):
        (word,) = generate(f"0;{jump}")
        assert word[-3:] == format(code, "03b")

    def test_selector_round_trip(self):
        """AM=M+1;JGT and AM=A+1;JGT differ only in the selector bit."""
        (memory,) = generate("AM=M+1;JGT")
        (register,) = generate("AM=A+1;JGT")
        assert memory == "1111110111101001"
        assert register == "1110110111101001"

    @pytest.mark.parametrize("dest", ["ADM", "AMD", "DAM", "DMA", "MAD", "MDA", "AADM", "MMDDAA"])
    def test_dest_order_insensitive(self, dest):
        """Any order or repetition of A, D, M sets the same bits."""
        (word,) = generate(f"{dest}=0")
        assert word[10:13] == "111"

    @pytest.mark.parametrize("dest,bits", [("A", "100"), ("D", "010"), ("M", "001"), ("AM", "101")])
    def test_dest_bits(self, dest, bits):
        (word,) = generate(f"{dest}=1")
        assert word[10:13] == bits

    def test_unknown_comp(self):
        with pytest.raises(UnknownMnemonicError) as exc_info:
            generate("@1\nD=D*A")
        error = exc_info.value
        assert error.kind == "computation"
        assert error.mnemonic == "D*A"
        assert "Test.asm:2:1" in str(error)

    def test_commuted_comp_is_unknown(self):
        """Only the exact table spelling is accepted."""
        with pytest.raises(UnknownMnemonicError):
            generate("D=A+D")

    def test_mixed_a_and_m_is_unknown(self):
        with pytest.raises(UnknownMnemonicError):
            generate("D=A+M")

    def test_unknown_jump(self):
        with pytest.raises(UnknownMnemonicError) as exc_info:
            generate("0;JXX")
        assert exc_info.value.kind == "jump"
        assert "JMP" in exc_info.value.hint


# =============================================================================
# Pass 1: Labels
# =============================================================================

class TestLabelResolution:
    """Test label binding across the two passes."""

    def test_label_at_start(self):
        assert generate("(LOOP)\n@LOOP\n0;JMP") == [
            "0000000000000000",
            "1110101010000111",
        ]

    def test_forward_and_backward_references(self):
        """A label resolves the same before and after its declaration."""
        source = "\n".join([
            "@END",      # 0
            "0;JMP",     # 1
            "(MID)",
            "@MID",      # 2
            "(END)",
            "@END",      # 3
            "0;JMP",     # 4
        ])
        codegen = CodeGenerator()
        codegen.generate(source.splitlines())
        assert codegen.get_symbols()["MID"] == 2
        assert codegen.get_symbols()["END"] == 3
        binary = codegen.get_binary()
        assert binary[0] == binary[3] == format(3, "016b")
        assert binary[2] == format(2, "016b")

    def test_comments_do_not_count(self):
        source = "// header\n\n@1\n   // note\nD=A\n(HERE)\n@HERE"
        codegen = CodeGenerator()
        codegen.generate(source.splitlines())
        assert codegen.get_symbols()["HERE"] == 2

    def test_consecutive_labels(self):
        """Two labels in a row bind to the same instruction."""
        codegen = CodeGenerator()
        codegen.generate(["@0", "(A1)", "(A2)", "D=A"])
        symbols = codegen.get_symbols()
        assert symbols["A1"] == symbols["A2"] == 1

    def test_label_is_not_a_variable(self):
        """A label referenced before declaration never takes RAM."""
        codegen = CodeGenerator()
        codegen.generate(["@LOOP", "@x", "(LOOP)", "0;JMP"])
        assert codegen.symbol_table.labels() == {"LOOP": 2}
        assert codegen.symbol_table.variables() == {"x": 16}

    def test_duplicate_label(self):
        with pytest.raises(DuplicateSymbolError):
            generate("(L)\n@0\n(L)\n@1")

    def test_label_shadowing_predefined(self):
        with pytest.raises(DuplicateSymbolError):
            generate("(SCREEN)\n@0")

    def test_pass1_error_stops_before_pass2(self):
        """No words are encoded when labels are broken."""
        codegen = CodeGenerator()
        with pytest.raises(AssemblerError):
            codegen.generate(["@0", "()", "@1"])
        assert codegen.get_words() == []


# =============================================================================
# Pass 2: Variables
# =============================================================================

class TestVariableAllocation:
    """Test variable allocation on first use."""

    def test_variables_from_16(self):
        assert generate("@i\n@sum\n@i\n@n") == [
            format(16, "016b"),
            format(17, "016b"),
            format(16, "016b"),
            format(18, "016b"),
        ]

    def test_variables_case_sensitive(self):
        assert generate("@x\n@X") == [format(16, "016b"), format(17, "016b")]

    def test_custom_variable_base(self):
        config = AssemblerConfig(first_variable_address=100)
        assert generate("@tmp", config) == [format(100, "016b")]

    def test_runs_do_not_share_variables(self):
        codegen = CodeGenerator()
        codegen.generate(["@a", "@b"])
        codegen.generate(["@b"])
        assert codegen.get_binary() == [format(16, "016b")]


# =============================================================================
# Error Collection
# =============================================================================

class TestErrorCollection:
    """Test reporting several bad lines in one run."""

    def test_multiple_errors_reported(self):
        codegen = CodeGenerator()
        with pytest.raises(AssemblerError) as exc_info:
            codegen.generate(["D=D*A", "@1", "0;JXX", "X=1"], "Bad.asm")
        message = str(exc_info.value)
        assert "3 errors" in message
        assert "Bad.asm:1:1" in message
        assert "Bad.asm:3:1" in message
        assert "Bad.asm:4:1" in message
        assert codegen.has_errors()

    def test_single_error_keeps_type(self):
        with pytest.raises(AssemblySyntaxError):
            generate("@1\n@")

    def test_error_limit(self):
        config = AssemblerConfig(max_errors=3)
        with pytest.raises(TooManyErrors):
            generate("\n".join(["D=D*A"] * 10), config)

    def test_failed_run_keeps_no_words(self):
        """Lines that encoded before or after the bad one are discarded."""
        codegen = CodeGenerator()
        with pytest.raises(UnknownMnemonicError) as exc_info:
            codegen.generate(["@7", "D=A", "D=D*A", "@9"], "Prog.asm")
        assert "Prog.asm:3:1" in str(exc_info.value)
        assert codegen.get_words() == []
        assert codegen.get_binary() == []
        assert codegen.get_hack() == ""

    def test_failed_run_writes_nothing(self, tmp_path):
        """Writers refuse to run after a failed assembly."""
        codegen = CodeGenerator()
        with pytest.raises(UnknownMnemonicError):
            codegen.generate(["@7", "D=A", "D=D*A", "@9"])

        for write in (codegen.write_hack, codegen.write_listing, codegen.write_symbols):
            with pytest.raises(AssemblerError, match="no output"):
                write(tmp_path / "Prog.out")
        assert list(tmp_path.iterdir()) == []

    def test_success_after_failure_writes_again(self, tmp_path):
        codegen = CodeGenerator()
        with pytest.raises(AssemblerError):
            codegen.generate(["D=D*A"])
        codegen.generate(["@1"])
        codegen.write_hack(tmp_path / "Prog.hack")
        assert (tmp_path / "Prog.hack").read_text() == "0000000000000001\n"

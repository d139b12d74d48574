"""
Hack Assembly Parser
====================

Turns INSTRUCTION lines from the classifier into statements:

- ``@123``     -> AddressStatement(literal=123)
- ``@LOOP``    -> AddressStatement(symbol="LOOP")
- ``AM=M+1;JGT`` -> ComputeStatement(dest="AM", comp="M+1", jump="JGT")

The parser only checks syntax. Table lookups, symbol resolution and the
literal range policy belong to the code generator.

Grammar
-------
::

    instruction := '@' operand | compute
    operand     := DIGITS | IDENTIFIER
    compute     := [dest '='] comp [';' jump]
    dest        := ('A' | 'D' | 'M')+

Trailing ``//`` comments are dropped. Spaces inside a compute instruction
are ignored, so ``D = D + A`` reads as ``D=D+A``.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Union

from hackasm.config import AssemblerConfig
from hackasm.assembler.lexer import SourceLine, truncate_identifier
from hackasm.cpu import DEST_BITS
from hackasm.errors import AssemblySyntaxError, SourceLocation


ADDRESS_MARKER = "@"
DEST_SEPARATOR = "="
JUMP_SEPARATOR = ";"
INLINE_COMMENT = "//"


# =============================================================================
# Statement Types
# =============================================================================

@dataclass(frozen=True)
class AddressStatement:
    """
    Parsed A-instruction.

    Exactly one of literal and symbol is set.

    Attributes:
        literal: Decimal value for "@123" (not yet range-checked)
        symbol: Identifier for "@name", already length-limited
        source: The SourceLine this came from
    """
    source: SourceLine
    literal: Optional[int] = None
    symbol: Optional[str] = None

    @property
    def location(self) -> SourceLocation:
        return self.source.location


@dataclass(frozen=True)
class ComputeStatement:
    """
    Parsed C-instruction, fields exactly as written.

    Attributes:
        dest: Destination letters ("" when there is no '=')
        comp: Computation mnemonic, M not yet rewritten
        jump: Jump mnemonic ("" when there is no ';')
        source: The SourceLine this came from
    """
    source: SourceLine
    comp: str
    dest: str = ""
    jump: str = ""

    @property
    def location(self) -> SourceLocation:
        return self.source.location


Statement = Union[AddressStatement, ComputeStatement]


# =============================================================================
# Parser
# =============================================================================

class Parser:
    """
    Parses classified instruction lines.

    Usage:
        parser = Parser(config)
        stmt = parser.parse(source_line)
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        self.config = config or AssemblerConfig()

    def parse_all(self, lines: Iterable[SourceLine]) -> Iterator[Statement]:
        """Parse every INSTRUCTION line, skipping labels and ignorable lines."""
        for line in lines:
            if line.is_instruction:
                yield self.parse(line)

    def parse(self, line: SourceLine) -> Statement:
        """
        Parse one instruction line.

        Raises:
            AssemblySyntaxError: If the instruction is malformed
        """
        body = strip_comment(line.text)
        if body.startswith(ADDRESS_MARKER):
            return self._parse_address(line, body[1:].strip())
        return self._parse_compute(line, "".join(body.split()))

    def _parse_address(self, line: SourceLine, operand: str) -> AddressStatement:
        if not operand:
            raise AssemblySyntaxError(
                "missing value after '@'",
                location=line.location,
                source_line=line.original,
                hint="write @number or @symbol",
            )

        if any(ch.isspace() for ch in operand):
            raise AssemblySyntaxError(
                f"unexpected text after '@{operand.split()[0]}'",
                location=line.location,
                source_line=line.original,
            )

        if operand[0].isdigit():
            if not (operand.isascii() and operand.isdigit()):
                raise AssemblySyntaxError(
                    f"invalid decimal literal '{operand}'",
                    location=line.location,
                    source_line=line.original,
                    hint="symbols cannot start with a digit",
                )
            return AddressStatement(source=line, literal=int(operand))

        symbol = truncate_identifier(operand, self.config, line.location, line.original)
        return AddressStatement(source=line, symbol=symbol)

    def _parse_compute(self, line: SourceLine, body: str) -> ComputeStatement:
        comp, sep, jump = body.partition(JUMP_SEPARATOR)
        if sep and not jump:
            raise AssemblySyntaxError(
                "missing jump after ';'",
                location=line.location,
                source_line=line.original,
            )

        dest = ""
        if DEST_SEPARATOR in comp:
            dest, _, comp = comp.partition(DEST_SEPARATOR)
            if not dest:
                raise AssemblySyntaxError(
                    "missing destination before '='",
                    location=line.location,
                    source_line=line.original,
                )
            if any(ch not in DEST_BITS for ch in dest):
                raise AssemblySyntaxError(
                    f"invalid destination '{dest}'",
                    location=line.location,
                    source_line=line.original,
                    hint="destinations are made of the letters A, D and M",
                )

        if not comp:
            raise AssemblySyntaxError(
                "missing computation",
                location=line.location,
                source_line=line.original,
            )

        return ComputeStatement(source=line, comp=comp, dest=dest, jump=jump)


def strip_comment(text: str) -> str:
    """Drop a trailing // comment and surrounding whitespace."""
    index = text.find(INLINE_COMMENT)
    if index >= 0:
        text = text[:index]
    return text.strip()

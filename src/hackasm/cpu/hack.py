"""
Hack Instruction Set Definition
===============================

This module defines the Hack machine language: the two instruction
formats, the predefined symbols, and the fixed mnemonic tables used to
encode computation and jump fields.

Instruction Formats
-------------------
Every instruction is one 16-bit word.

1. **A-instruction** (address load): ``@value``
   ::

       0vvv vvvv vvvv vvvv
       bit 15 = 0, bits 14..0 = 15-bit unsigned value

2. **C-instruction** (compute, store, branch): ``dest=comp;jump``
   ::

       111a cccc ccdd djjj
       a    = source selector (0 = A register, 1 = memory at M[A])
       c    = 6-bit ALU control code
       ddd  = destination mask (A, D, M from left to right)
       jjj  = jump condition

Memory Map
----------
=========  =============  ====================================
Range      Symbol         Use
=========  =============  ====================================
0-15       R0-R15         Virtual registers (SP, LCL, ARG, ...)
16-16383   (variables)    Allocated by the assembler from 16
16384      SCREEN         Screen memory map base
24576      KBD            Keyboard register
=========  =============  ====================================

Reference
---------
- Nisan & Schocken, The Elements of Computing Systems, chapter 6
- https://www.nand2tetris.org/course (project 6)
"""

from dataclasses import dataclass
from typing import Optional, Union


# =============================================================================
# Word Geometry
# =============================================================================

WORD_BITS = 16
ADDRESS_BITS = 15
MAX_ADDRESS = (1 << ADDRESS_BITS) - 1   # 32767

# Top three bits of every C-instruction
COMPUTE_PREFIX = 0b111


# =============================================================================
# Predefined Symbols
# =============================================================================
# Seeded into every symbol table before the first pass. Several names alias
# the same address (SP and R0, LCL and R1, ...).
# =============================================================================

PREDEFINED_SYMBOLS: dict[str, int] = {
    "SP": 0,
    "LCL": 1,
    "ARG": 2,
    "THIS": 3,
    "THAT": 4,
    **{f"R{n}": n for n in range(16)},
    "SCREEN": 16384,
    "KBD": 24576,
}

# First RAM address handed out to variables
VARIABLE_BASE = 16


# =============================================================================
# Computation Table
# =============================================================================
# Key: computation mnemonic with M already rewritten to A
# Value: 6-bit ALU control code (zx nx zy ny f no)
#
# Memory forms (D+M, M-1, ...) share the A-form code and set the
# source-selector bit instead.
# =============================================================================

COMP_TABLE: dict[str, int] = {
    "0":   0b101010,
    "1":   0b111111,
    "-1":  0b111010,
    "D":   0b001100,
    "A":   0b110000,
    "!D":  0b001101,
    "!A":  0b110001,
    "-D":  0b001111,
    "-A":  0b110011,
    "D+1": 0b011111,
    "A+1": 0b110111,
    "D-1": 0b001110,
    "A-1": 0b110010,
    "D+A": 0b000010,
    "D-A": 0b010011,
    "A-D": 0b000111,
    "D&A": 0b000000,
    "D|A": 0b010101,
}


# =============================================================================
# Jump Table
# =============================================================================
# The empty string stands for "no jump" (instruction has no ';' part).
# =============================================================================

JUMP_TABLE: dict[str, int] = {
    "":    0b000,
    "JGT": 0b001,
    "JEQ": 0b010,
    "JGE": 0b011,
    "JLT": 0b100,
    "JNE": 0b101,
    "JLE": 0b110,
    "JMP": 0b111,
}


# =============================================================================
# Destination Bits
# =============================================================================
# Order inside the 3-bit field is A, D, M from the most significant bit.
# =============================================================================

DEST_BITS: dict[str, int] = {
    "A": 0b100,
    "D": 0b010,
    "M": 0b001,
}


# =============================================================================
# Instruction Words
# =============================================================================

@dataclass(frozen=True)
class AddressInstruction:
    """
    A-instruction: load a 15-bit value into the A register.

    Attributes:
        value: Literal or resolved symbol address (0..32767)
    """
    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= MAX_ADDRESS:
            raise ValueError(f"A-instruction value {self.value} does not fit in 15 bits")

    @property
    def word(self) -> int:
        return self.value

    def to_binary(self) -> str:
        return format(self.word, "016b")


@dataclass(frozen=True)
class ComputeInstruction:
    """
    C-instruction: compute, optionally store, optionally jump.

    Attributes:
        selector: 1 when the ALU reads M (memory at A) instead of A
        comp: 6-bit ALU control code
        dest: 3-bit destination mask (A=4, D=2, M=1)
        jump: 3-bit jump condition
    """
    selector: int
    comp: int
    dest: int = 0
    jump: int = 0

    def __post_init__(self) -> None:
        if self.selector not in (0, 1):
            raise ValueError(f"selector must be 0 or 1, not {self.selector}")
        if not 0 <= self.comp <= 0b111111:
            raise ValueError(f"comp code {self.comp} does not fit in 6 bits")
        if not 0 <= self.dest <= 0b111:
            raise ValueError(f"dest mask {self.dest} does not fit in 3 bits")
        if not 0 <= self.jump <= 0b111:
            raise ValueError(f"jump code {self.jump} does not fit in 3 bits")

    @property
    def word(self) -> int:
        return (
            (COMPUTE_PREFIX << 13)
            | (self.selector << 12)
            | (self.comp << 6)
            | (self.dest << 3)
            | self.jump
        )

    def to_binary(self) -> str:
        return format(self.word, "016b")


InstructionWord = Union[AddressInstruction, ComputeInstruction]


# =============================================================================
# Lookup Functions
# =============================================================================

def lookup_comp(mnemonic: str) -> Optional[int]:
    """
    Look up the ALU control code for a normalized computation.

    Args:
        mnemonic: Computation with M already rewritten to A (e.g. "D+A")

    Returns:
        6-bit control code, or None if the computation is not defined
    """
    return COMP_TABLE.get(mnemonic)


def lookup_jump(mnemonic: str) -> Optional[int]:
    """
    Look up the 3-bit code for a jump mnemonic.

    Args:
        mnemonic: "JGT", "JMP", ... or "" for no jump

    Returns:
        3-bit jump code, or None if the mnemonic is not defined
    """
    return JUMP_TABLE.get(mnemonic)


def dest_mask(dest: str) -> int:
    """
    Build the destination mask from destination letters.

    Order and repetition do not matter: "MD", "DM" and "DMD" give the
    same mask. Letters outside A, D and M are ignored here; the parser
    rejects them before encoding.
    """
    mask = 0
    for letter in dest:
        mask |= DEST_BITS.get(letter, 0)
    return mask


def comp_mnemonics() -> list[str]:
    """All computation mnemonics in table order, for error hints."""
    return list(COMP_TABLE)


def jump_mnemonics() -> list[str]:
    """All jump mnemonics (excluding the empty no-jump entry)."""
    return [name for name in JUMP_TABLE if name]

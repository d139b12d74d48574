"""
hackasm CPU Package
===================

Definitions of the Hack machine language shared by the assembler and
its tests: instruction word types, predefined symbols, and the fixed
computation and jump tables.

Usage:
    from hackasm.cpu import (
        COMP_TABLE,
        JUMP_TABLE,
        AddressInstruction,
        ComputeInstruction,
    )
"""

from hackasm.cpu.hack import (
    # Word geometry
    WORD_BITS,
    ADDRESS_BITS,
    MAX_ADDRESS,
    # Symbols
    PREDEFINED_SYMBOLS,
    VARIABLE_BASE,
    # Mnemonic tables
    COMP_TABLE,
    JUMP_TABLE,
    DEST_BITS,
    # Instruction words
    AddressInstruction,
    ComputeInstruction,
    InstructionWord,
    # Lookup functions
    lookup_comp,
    lookup_jump,
    dest_mask,
    comp_mnemonics,
    jump_mnemonics,
)

__all__ = [
    "WORD_BITS",
    "ADDRESS_BITS",
    "MAX_ADDRESS",
    "PREDEFINED_SYMBOLS",
    "VARIABLE_BASE",
    "COMP_TABLE",
    "JUMP_TABLE",
    "DEST_BITS",
    "AddressInstruction",
    "ComputeInstruction",
    "InstructionWord",
    "lookup_comp",
    "lookup_jump",
    "dest_mask",
    "comp_mnemonics",
    "jump_mnemonics",
]

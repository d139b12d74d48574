"""
Hack Assembler
==============

This package translates Hack assembly language into Hack machine code,
the 16-bit instruction format of the computer built in "The Elements of
Computing Systems".

Main Components
---------------
- **Assembler**: Main assembler class that orchestrates the assembly process
- **LineClassifier**: Sorts source lines into labels, instructions and noise
- **Parser**: Parses instruction lines into A- and C-instruction statements
- **SymbolTable**: Predefined symbols, labels and variables for one run
- **CodeGenerator**: Two-pass label resolution and instruction encoding

Assembly Process
----------------
1. **Pass 1** (label resolution):
   - Classify every line
   - Bind each ``(LABEL)`` to the ROM address of the next instruction

2. **Pass 2** (code generation):
   - Parse each instruction line
   - Resolve symbols, allocating variables from RAM[16] on first use
   - Encode 16-bit words

Example Usage
-------------
>>> from hackasm.assembler import assemble
>>> assemble("(LOOP)\\n@LOOP\\n0;JMP")
['0000000000000000', '1110101010000111']
"""

from hackasm.assembler.assembler import Assembler, assemble, assemble_file
from hackasm.assembler.lexer import LineClassifier, LineKind, SourceLine
from hackasm.assembler.parser import (
    Parser,
    Statement,
    AddressStatement,
    ComputeStatement,
)
from hackasm.assembler.symbols import Symbol, SymbolKind, SymbolTable
from hackasm.assembler.codegen import CodeGenerator, ListingEntry

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Line classifier
    "LineClassifier",
    "LineKind",
    "SourceLine",
    # Parser
    "Parser",
    "Statement",
    "AddressStatement",
    "ComputeStatement",
    # Symbols
    "Symbol",
    "SymbolKind",
    "SymbolTable",
    # Code generator
    "CodeGenerator",
    "ListingEntry",
]

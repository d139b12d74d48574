"""
hackasm - Assembler Configuration
=================================

Tunable limits and policies for an assembly run. Configuration can come from:
- Default values (defined here)
- Environment variables (AssemblerConfig.from_env)
- Command-line options (hackasm CLI)

The defaults reproduce the classic toolchain: 127-character source lines,
64-character identifiers (longer names are truncated), and variables
allocated from RAM address 16 upward.
"""

from dataclasses import dataclass
import os


# Policies for "@n" literals that do not fit in 15 bits
OVERFLOW_ERROR = "error"
OVERFLOW_WRAP = "wrap"
OVERFLOW_POLICIES = (OVERFLOW_ERROR, OVERFLOW_WRAP)


@dataclass
class AssemblerConfig:
    """
    Configuration for a single assembly run.

    Attributes:
        max_line_length: Longest accepted source line, excluding the line
            terminator. Longer lines are rejected (default: 127)
        max_identifier_length: Labels and variable names are cut to this
            many characters (default: 64)
        strict_identifiers: Reject overlong identifiers instead of
            truncating them (default: False)
        literal_overflow: "error" rejects @n with n > 32767, "wrap" keeps
            n modulo 2**15 (default: "error")
        first_variable_address: First RAM address handed to a variable
            (default: 16)
        max_errors: Errors collected before the run is abandoned
            (default: 100)
    """

    max_line_length: int = 127
    max_identifier_length: int = 64
    strict_identifiers: bool = False
    literal_overflow: str = OVERFLOW_ERROR
    first_variable_address: int = 16
    max_errors: int = 100

    def __post_init__(self) -> None:
        if self.literal_overflow not in OVERFLOW_POLICIES:
            raise ValueError(
                f"literal_overflow must be one of {', '.join(OVERFLOW_POLICIES)}, "
                f"not {self.literal_overflow!r}"
            )
        for name in ("max_line_length", "max_identifier_length", "max_errors"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Environment variables (all optional):
            HACKASM_MAX_LINE_LENGTH: Longest source line (integer, at least 1)
            HACKASM_MAX_IDENTIFIER_LENGTH: Identifier truncation length (integer, at least 1)
            HACKASM_STRICT_IDENTIFIERS: "1"/"true"/"yes" to reject long names
            HACKASM_LITERAL_OVERFLOW: "error" or "wrap"
            HACKASM_MAX_ERRORS: Error collector limit (integer, at least 1)

        Returns:
            AssemblerConfig with values from environment variables
        """
        config = cls()

        if line_length := os.environ.get("HACKASM_MAX_LINE_LENGTH"):
            try:
                if int(line_length) >= 1:
                    config.max_line_length = int(line_length)
            except ValueError:
                pass  # Ignore invalid values

        if ident_length := os.environ.get("HACKASM_MAX_IDENTIFIER_LENGTH"):
            try:
                if int(ident_length) >= 1:
                    config.max_identifier_length = int(ident_length)
            except ValueError:
                pass

        if strict := os.environ.get("HACKASM_STRICT_IDENTIFIERS"):
            config.strict_identifiers = strict.lower() in ("1", "true", "yes", "on")

        if overflow := os.environ.get("HACKASM_LITERAL_OVERFLOW"):
            if overflow.lower() in OVERFLOW_POLICIES:
                config.literal_overflow = overflow.lower()

        if max_errors := os.environ.get("HACKASM_MAX_ERRORS"):
            try:
                if int(max_errors) >= 1:
                    config.max_errors = int(max_errors)
            except ValueError:
                pass

        return config

"""Mapping between sensor command codes and expression identifiers.

Command codes are usually hexadecimal strings such as ``010D`` and may start
with a digit, so each one is exposed to expressions behind a fixed letter
prefix (``s010D``).

Two extraction modes are supported:

- ``strict``: finds whole identifiers that start with the prefix, using word
  boundaries, and returns the remainder as the command code.
- ``coarse``: splits the raw text on every occurrence of the prefix letter,
  drops empty pieces and keeps the first ``token_width`` characters of each.
  This over-matches when the letter appears anywhere else in the text (in a
  command code, a function name or a keyword) and is kept only for rule texts
  written against that behaviour.
"""

import re
from collections.abc import Iterable
from typing import Literal

DEFAULT_PREFIX = "s"

MatchingMode = Literal["strict", "coarse"]


def sensor_identifier(command: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Build the expression identifier for a sensor command code."""
    return f"{prefix}{command}"


def command_from_identifier(identifier: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Inverse of sensor_identifier()."""
    if not identifier.startswith(prefix):
        raise ValueError(f"Identifier {identifier!r} does not start with prefix {prefix!r}")
    return identifier[len(prefix):]


def _strict_pattern(prefix: str) -> re.Pattern:
    return re.compile(rf"(?<![\w.]){re.escape(prefix)}(\w+)")


def extract_commands(
    expression: str,
    prefix: str = DEFAULT_PREFIX,
    mode: MatchingMode = "strict",
    token_width: int = 4,
    reserved: Iterable[str] = (),
) -> list[str]:
    """
    Extract candidate command codes referenced by an expression.

    Args:
        expression: Rule text
        prefix: Identifier prefix letter
        mode: "strict" or "coarse" (see module docstring)
        token_width: Characters kept per token in coarse mode
        reserved: Names never treated as sensors in strict mode (e.g., "max")

    Returns:
        Unique command codes in order of first appearance
    """
    if mode == "coarse":
        candidates = [token[:token_width] for token in expression.split(prefix) if token != ""]
    elif mode == "strict":
        reserved = set(reserved)
        candidates = [
            match.group(1)
            for match in _strict_pattern(prefix).finditer(expression)
            if match.group(0) not in reserved
        ]
    else:
        raise ValueError(f"Unknown identifier matching mode: {mode}")

    return list(dict.fromkeys(candidates))

"""
Provides the `PrecedenceTable` class mapping operator symbols to integer ranks.

A higher rank binds tighter. Operators sharing a rank have equal precedence
and associate to the left with each other. A table is immutable once built,
so one instance can be shared by any number of independent parses.

Features:
    - Validates symbols and ranks, reporting every problem at once
    - Loads tables from JSON configuration files, with comma-separated
      symbol groups sharing one rank
    - Derives new tables with overrides applied
    - Generates a readable report, tightest binding first

Usage:
    >>> table = PrecedenceTable.arithmetic()
    >>> table.rank("*")
    2
    >>> table.merged({"%": 2}).rank("%")
    2
"""

import json
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from infix.infix_constants import DEFAULT_PRECEDENCE, RESERVED_CHARS
from infix.infix_errors import TableError, UnknownOperator


class PrecedenceTable:
    """Immutable operator → rank mapping.

    Args:
        ranks: Mapping from operator symbol to a non-negative integer rank.

    Raises:
        TableError: If any symbol or rank is invalid.
    """

    __slots__ = ("_ranks",)

    def __init__(self, ranks: Mapping[str, int]) -> None:
        problems: list[str] = []
        for sym, rank in ranks.items():
            problems.extend(self._check_entry(sym, rank))
        if problems:
            raise TableError("Invalid precedence table", problems)
        self._ranks: Mapping[str, int] = MappingProxyType(dict(ranks))

    @staticmethod
    def _check_entry(sym: Any, rank: Any) -> list[str]:
        problems: list[str] = []
        if not isinstance(sym, str) or not sym:
            problems.append(f"{sym!r} → operator symbol must be a non-empty string")
        elif any(ch.isspace() or ch in RESERVED_CHARS for ch in sym):
            problems.append(
                f"{sym!r} → operator symbol cannot contain whitespace or parentheses"
            )
        # bool is an int subclass, but True/False as a rank is a config mistake
        if isinstance(rank, bool) or not isinstance(rank, int):
            problems.append(f"{sym!r} → rank {rank!r} is not an integer")
        elif rank < 0:
            problems.append(f"{sym!r} → rank {rank} is negative")
        return problems

    @classmethod
    def arithmetic(cls) -> "PrecedenceTable":
        """Returns the default table: `+ -` below `* /` below `^`."""
        return cls(DEFAULT_PRECEDENCE)

    @classmethod
    def load_from_json(cls, path: str) -> "PrecedenceTable":
        """
        Loads a table from a JSON file.

        The file holds a single object. Each key is one symbol or several
        comma-separated symbols sharing the rank given as the value.

        Example JSON structure:
            {
                "+,-": 1,
                "*,/,%": 2,
                "^": 3
            }

        Args:
            path: Path to the JSON file.

        Returns:
            The loaded table.

        Raises:
            TableError: If the file cannot be read, is not a JSON object,
                assigns two ranks to one symbol, or holds invalid entries.
        """
        try:
            with open(path, encoding="utf-8") as f:
                raw_cfg = json.load(f)
        except (OSError, ValueError) as e:
            raise TableError(f"Failed to load precedence file: {e}") from e

        if not isinstance(raw_cfg, dict):
            raise TableError("Precedence file must contain a JSON object")

        ranks: dict[str, int] = {}
        conflicts: list[str] = []
        for key, rank in raw_cfg.items():
            for sym in (part.strip() for part in key.split(",")):
                if sym in ranks and ranks[sym] != rank:
                    conflicts.append(
                        f"{sym!r} → conflict between rank {ranks[sym]} and {rank}"
                    )
                else:
                    ranks[sym] = rank
        if conflicts:
            raise TableError("Operator rank collision(s) detected", conflicts)
        return cls(ranks)

    def rank(self, op: str) -> int:
        """Returns the rank of `op`.

        Raises:
            UnknownOperator: If `op` is not registered.
        """
        try:
            return self._ranks[op]
        except KeyError:
            raise UnknownOperator(op) from None

    def binds_tighter(self, op: str, other: str) -> bool:
        """True if `op` has a strictly greater rank than `other`."""
        return self.rank(op) > self.rank(other)

    def symbols(self) -> list[str]:
        """Returns registered symbols, longest first (the order the lexer matches them)."""
        return sorted(self._ranks, key=lambda s: (-len(s), s))

    def merged(self, overrides: Mapping[str, int]) -> "PrecedenceTable":
        """Returns a new table with `overrides` applied on top of this one."""
        ranks = dict(self._ranks)
        ranks.update(overrides)
        return PrecedenceTable(ranks)

    def as_dict(self) -> dict[str, int]:
        return dict(self._ranks)

    def report(self) -> str:
        """Formats the table one rank per line, tightest binding first.

        Returns:
            A newline-separated string such as `   3 → ^`.
        """
        by_rank: dict[int, list[str]] = {}
        for sym, rank in self._ranks.items():
            by_rank.setdefault(rank, []).append(sym)
        return "\n".join(
            f"{rank:>4} → {' '.join(sorted(syms))}"
            for rank, syms in sorted(by_rank.items(), reverse=True)
        )

    def __contains__(self, op: object) -> bool:
        return op in self._ranks

    def __iter__(self) -> Iterator[str]:
        return iter(self._ranks)

    def __len__(self) -> int:
        return len(self._ranks)

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, PrecedenceTable) and dict(self._ranks) == dict(
            other._ranks
        )

    def __hash__(self) -> int:
        return hash(frozenset(self._ranks.items()))

    def __repr__(self) -> str:
        return f"PrecedenceTable({dict(self._ranks)!r})"

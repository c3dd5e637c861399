import json
from pathlib import Path
from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from infix.infix_errors import TableError, UnknownOperator
from infix.infix_precedence import PrecedenceTable


def write_json(tmp_path: Path, data: Any) -> str:
    path = tmp_path / "table.json"
    path.write_text(json.dumps(data))
    return str(path)


def test_arithmetic_ranks(arithmetic: PrecedenceTable) -> None:
    assert [arithmetic.rank(op) for op in "+-*/^"] == [1, 1, 2, 2, 3]
    assert len(arithmetic) == 5
    assert "*" in arithmetic
    assert "%" not in arithmetic


def test_rank_unknown_operator(arithmetic: PrecedenceTable) -> None:
    with pytest.raises(UnknownOperator) as exc:
        arithmetic.rank("%")
    assert exc.value.symbol == "%"
    assert exc.value.index is None


def test_binds_tighter(arithmetic: PrecedenceTable) -> None:
    assert arithmetic.binds_tighter("*", "+")
    assert not arithmetic.binds_tighter("+", "-")
    assert not arithmetic.binds_tighter("+", "^")


def test_symbols_longest_first() -> None:
    table = PrecedenceTable({"*": 2, "**": 3, "mod": 2})
    assert table.symbols() == ["mod", "**", "*"]


@pytest.mark.parametrize(
    "ranks,fragment",
    [
        ({"+": -1}, "negative"),
        ({"+": 1.5}, "not an integer"),
        ({"+": True}, "not an integer"),
        ({"": 1}, "non-empty string"),
        ({"a b": 1}, "whitespace or parentheses"),
        ({"(": 1}, "whitespace or parentheses"),
        ({"+\v": 1}, "whitespace or parentheses"),
        ({"\u00a0": 1}, "whitespace or parentheses"),
    ],
)
def test_invalid_entries(ranks: dict[Any, Any], fragment: str) -> None:
    with pytest.raises(TableError) as exc:
        PrecedenceTable(ranks)
    assert any(fragment in p for p in exc.value.problems)


def test_all_problems_reported() -> None:
    with pytest.raises(TableError) as exc:
        PrecedenceTable({"+": -1, "*": "high"})
    assert len(exc.value.problems) == 2


def test_table_is_read_only(arithmetic: PrecedenceTable) -> None:
    with pytest.raises(AttributeError):
        arithmetic.extra = 1  # type: ignore[attr-defined]
    ranks = arithmetic.as_dict()
    ranks["+"] = 9
    assert arithmetic.rank("+") == 1


def test_constructor_copies_input() -> None:
    ranks = {"+": 1}
    table = PrecedenceTable(ranks)
    ranks["+"] = 5
    assert table.rank("+") == 1


def test_merged_leaves_original(arithmetic: PrecedenceTable) -> None:
    merged = arithmetic.merged({"%": 2, "+": 0})
    assert merged.rank("%") == 2
    assert merged.rank("+") == 0
    assert "%" not in arithmetic
    assert arithmetic.rank("+") == 1


def test_equality_and_hash() -> None:
    assert PrecedenceTable({"+": 1}) == PrecedenceTable({"+": 1})
    assert PrecedenceTable({"+": 1}) != PrecedenceTable({"+": 2})
    assert hash(PrecedenceTable.arithmetic()) == hash(PrecedenceTable.arithmetic())
    assert repr(PrecedenceTable({"+": 1})) == "PrecedenceTable({'+': 1})"


def test_report(arithmetic: PrecedenceTable) -> None:
    assert arithmetic.report().splitlines() == [
        "   3 → ^",
        "   2 → * /",
        "   1 → + -",
    ]


def test_load_from_json(table_file: Path) -> None:
    table = PrecedenceTable.load_from_json(str(table_file))
    assert table.rank("mod") == 2
    assert table.rank("-") == 1
    assert set(table) == {"+", "-", "*", "/", "%", "mod", "^"}


def test_load_from_json_conflict(tmp_path: Path) -> None:
    path = write_json(tmp_path, {"+,-": 1, "-": 2})
    with pytest.raises(TableError) as exc:
        PrecedenceTable.load_from_json(path)
    assert exc.value.problems == ["'-' → conflict between rank 1 and 2"]


def test_load_from_json_duplicate_same_rank(tmp_path: Path) -> None:
    path = write_json(tmp_path, {"+,-": 1, " - ": 1})
    assert PrecedenceTable.load_from_json(path).rank("-") == 1


def test_load_from_json_not_object(tmp_path: Path) -> None:
    path = write_json(tmp_path, [["+", 1]])
    with pytest.raises(TableError, match="JSON object"):
        PrecedenceTable.load_from_json(path)


def test_load_from_json_missing_file(tmp_path: Path) -> None:
    with pytest.raises(TableError, match="Failed to load precedence file"):
        PrecedenceTable.load_from_json(str(tmp_path / "missing.json"))


def test_load_from_json_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    with pytest.raises(TableError, match="Failed to load precedence file"):
        PrecedenceTable.load_from_json(str(path))


def test_load_from_json_invalid_rank(tmp_path: Path) -> None:
    path = write_json(tmp_path, {"+": "one"})
    with pytest.raises(TableError, match="Invalid precedence table"):
        PrecedenceTable.load_from_json(path)


@given(  # type: ignore[misc]
    st.dictionaries(
        st.text(alphabet="+-*/%^&|<>=!~", min_size=1, max_size=3),
        st.integers(min_value=0, max_value=100),
        min_size=1,
    )
)
def test_any_valid_mapping_round_trips(ranks: dict[str, int]) -> None:
    table = PrecedenceTable(ranks)
    assert table.as_dict() == ranks
    assert all(table.rank(sym) == rank for sym, rank in ranks.items())

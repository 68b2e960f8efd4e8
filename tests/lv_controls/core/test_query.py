from __future__ import annotations

import pandas as pd
import pytest

from lv_controls.core.exceptions import QuerySyntaxError
from lv_controls.core.query import constraint_mask, dataframe_query_source, tokenize


def _make_frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Name": ["Claw hammer", "Garden hose", "Pruning shears", "Chef's knife"],
            "Category": ["Hardware", "Garden", "Garden", "Kitchen"],
            "Status": ["Active", "Backorder", "Active", "Discontinued"],
            "Price": [14.5, 32.0, 19.5, 45.0],
        }
    )


def _names(df: pd.DataFrame, constraints: str) -> list:
    return list(df[constraint_mask(df, constraints)]["Name"])


def test_empty_constraint_keeps_every_row():
    df = _make_frame()

    assert _names(df, "") == list(df["Name"])
    assert _names(df, "   ") == list(df["Name"])


def test_search_predicate_ors_attributes():
    df = _make_frame()

    assert _names(df, "[contains(Name,'HOSE') or Status='Discontinued']") == ["Garden hose", "Chef's knife"]
    assert _names(df, '[contains(Name,\'zzz\') or contains(Status," ")]') == []


def test_consecutive_predicates_are_anded():
    df = _make_frame()

    assert _names(df, "[Category='Garden' or Category='Kitchen'][Price < 20]") == ["Pruning shears"]


def test_doubled_quotes_are_unescaped():
    assert tokenize("[contains(Name,'chef''s')]")[5] == ("string", "chef's")
    assert _names(_make_frame(), "[contains(Name,'chef''s')]") == ["Chef's knife"]


def test_not_and_parentheses():
    df = _make_frame()

    constraint = "[not(Category='Garden') and (Price >= 45 or Status!='Active')]"

    assert _names(df, constraint) == ["Chef's knife"]


def test_numeric_literals_compare_numerically():
    df = _make_frame()

    assert _names(df, "[Price = 32]") == ["Garden hose"]
    assert _names(df, "[Price > 19.5]") == ["Garden hose", "Chef's knife"]


def test_unknown_attribute_matches_nothing():
    assert _names(_make_frame(), "[Colour='Red']") == []


@pytest.mark.parametrize("constraint", ["[Name='x'", "Name='x'", "[Name ~ 'x']", "[Name=]", "[contains(Name 'x')]"])
def test_malformed_constraints_raise(constraint):
    with pytest.raises(QuerySyntaxError):
        constraint_mask(_make_frame(), constraint)


def test_query_source_filters_then_sorts():
    query = dataframe_query_source(_make_frame())

    rows = query("[Category='Garden']", [("Price", "desc")])

    assert list(rows["Name"]) == ["Garden hose", "Pruning shears"]

from __future__ import annotations

import pytest

from vscsetup.selection import parse_selection

CANDIDATES = ["a", "b", "c", "d", "e"]


@pytest.mark.parametrize("expression", ["all", "ALL", "  All ", "a", "A"])
def test_all_returns_every_candidate_in_order(expression: str) -> None:
    assert parse_selection(expression, CANDIDATES) == CANDIDATES


def test_all_returns_a_copy() -> None:
    result = parse_selection("all", CANDIDATES)
    result.append("z")

    assert CANDIDATES == ["a", "b", "c", "d", "e"]


@pytest.mark.parametrize("expression", ["", "   ", "none", "NONE", " None "])
def test_empty_and_none_select_nothing(expression: str) -> None:
    assert parse_selection(expression, CANDIDATES) == []


def test_indices_and_ranges_keep_first_occurrence_order() -> None:
    assert parse_selection("2,2,5-3,1", CANDIDATES) == ["b", "a"]


def test_out_of_range_tokens_are_dropped() -> None:
    assert parse_selection("0,99,1-1", ["a", "b"]) == ["a"]


def test_ranges_are_inclusive() -> None:
    assert parse_selection("1,3-5", CANDIDATES) == ["a", "c", "d", "e"]


def test_reversed_range_is_dropped_entirely() -> None:
    assert parse_selection("3-1", CANDIDATES) == []


@pytest.mark.parametrize(
    "expression",
    [
        "x",
        "1-x",
        "x-2",
        "-2",
        "2-",
        "1-2-3",
        "1.5",
        "+1",
        "0-2",
        "4-6",
        "9" * 5000,
        "1-" + "9" * 5000,
        "0" * 5000,
    ],
)
def test_malformed_tokens_are_dropped(expression: str) -> None:
    assert parse_selection(expression, CANDIDATES) == []


def test_huge_index_next_to_valid_one_keeps_the_valid_one() -> None:
    assert parse_selection("9" * 5000 + ",1", ["a", "b"]) == ["a"]


def test_leading_zeros_are_accepted() -> None:
    assert parse_selection("002,0001-0001", CANDIDATES) == ["b", "a"]


def test_repeated_indices_collapse() -> None:
    assert parse_selection("2,2,2", CANDIDATES) == ["b"]


def test_blank_tokens_and_stray_commas_are_ignored() -> None:
    assert parse_selection(" ,1,, 3 ,", CANDIDATES) == ["a", "c"]


def test_overlapping_ranges_are_deduplicated() -> None:
    assert parse_selection("4-5,2-4,1", CANDIDATES) == ["d", "e", "b", "c", "a"]


def test_whitespace_around_range_bounds_is_allowed() -> None:
    assert parse_selection("2 - 3", CANDIDATES) == ["b", "c"]


def test_duplicates_differing_only_in_case_are_removed() -> None:
    candidates = ["Pub.Ext", "other.ext", "pub.ext"]

    assert parse_selection("1-3", candidates) == ["Pub.Ext", "other.ext"]


def test_empty_candidate_list_never_fails() -> None:
    assert parse_selection("1,2-3", []) == []
    assert parse_selection("all", []) == []


def test_result_elements_come_from_candidates() -> None:
    result = parse_selection("5,1-2,9,0", CANDIDATES)

    assert result == ["e", "a", "b"]
    assert all(item in CANDIDATES for item in result)

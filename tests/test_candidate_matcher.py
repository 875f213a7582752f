"""Tests for results-listing parsing and candidate selection."""

from __future__ import annotations

from ebeszamolo.extractor.candidate_matcher import (
    find_results_table,
    parse_result_rows,
    rank_candidates,
    select_candidate,
)
from ebeszamolo.extractor.dom import parse_html
from ebeszamolo.extractor.types import SearchCriterion

# =============================================================================
# Results table reading
# =============================================================================


class TestParseResultRows:
    """Tests for reading names out of the results table."""

    def test_finds_table_by_header(self, results_tree) -> None:
        assert find_results_table(results_tree) is not None
        assert find_results_table(results_tree, "Adószám") is None

    def test_merged_names_split_on_line_breaks(self, results_tree) -> None:
        rows = parse_result_rows(results_tree)
        assert len(rows) == 3
        assert rows[0] == ["OTP BANK NYRT.", "OTP BANK RÉSZVÉNYTÁRSASÁG", "ORSZÁGOS TAKARÉKPÉNZTÁR"]
        assert rows[1] == ["OTP Bank Nyrt."]
        assert rows[2] == ["OTP BANKHOLDING ZRT."]

    def test_rows_without_link_are_skipped(self) -> None:
        """Index alignment with the clickable links is kept."""
        tree = parse_html(
            """
            <table>
              <thead><tr><th>Cégnév</th></tr></thead>
              <tbody>
                <tr><td>Nincs találat a szűrésre</td></tr>
                <tr><td><a href="#">ALFA KFT.</a></td></tr>
              </tbody>
            </table>
            """,
        )
        assert parse_result_rows(tree) == [["ALFA KFT."]]

    def test_missing_table_gives_no_rows(self) -> None:
        tree = parse_html("<html><body><p>Nincs találat</p></body></html>")
        assert parse_result_rows(tree) == []


# =============================================================================
# Ranking
# =============================================================================


class TestRankCandidates:
    """Tests for the candidate ranking rules."""

    ROWS = [
        ["OTP BANK NYRT.", "OTP BANK RÉSZVÉNYTÁRSASÁG", "ORSZÁGOS TAKARÉKPÉNZTÁR"],
        ["OTP Bank Nyrt."],
        ["OTP BANKHOLDING ZRT."],
    ]

    def test_exact_match_with_fewest_names_wins(self) -> None:
        ranked = rank_candidates(self.ROWS, SearchCriterion.for_name("OTP Bank Nyrt."))
        assert [c.row_index for c in ranked] == [1, 0, 2]
        assert ranked[0].is_exact_match
        assert not ranked[-1].is_exact_match

    def test_exact_outranks_prefix_regardless_of_order(self) -> None:
        rows = [["ALFA TRADE KFT."], ["ALFA KFT.", "ALFA BT.", "ALFA ZRT."]]
        ranked = rank_candidates(rows, SearchCriterion.for_name("Alfa"))
        assert [c.row_index for c in ranked] == [1, 0]

    def test_fewest_merged_names_tie_break(self) -> None:
        """Matches observed portal behaviour: the single-name row is the filer's own entry."""
        rows = [["BETA KFT.", "BETA TERMELŐ KFT.", "BETA 2000 KFT."], ["BETA KFT."]]
        ranked = rank_candidates(rows, SearchCriterion.for_name("Beta Kft."))
        assert ranked[0].row_index == 1
        assert ranked[0].merged_name_count == 1

    def test_prefix_only_match(self) -> None:
        ranked = rank_candidates(self.ROWS, SearchCriterion.for_name("OTP Bankh"))
        assert [c.row_index for c in ranked] == [2]
        assert not ranked[0].is_exact_match

    def test_name_search_ignores_unrelated_rows(self) -> None:
        assert rank_candidates(self.ROWS, SearchCriterion.for_name("Richter Gedeon Nyrt.")) == []

    def test_tax_search_prefers_fewest_names(self) -> None:
        rows = [["A KFT.", "A BT."], ["B KFT."], ["C KFT."]]
        ranked = rank_candidates(rows, SearchCriterion.for_tax_id("12345678"))
        assert [c.row_index for c in ranked] == [1, 2, 0]

    def test_ties_go_to_lowest_index(self) -> None:
        rows = [["ALFA KFT."], ["ALFA KFT."]]
        ranked = rank_candidates(rows, SearchCriterion.for_name("Alfa"))
        assert ranked[0].row_index == 0


class TestSelectCandidate:
    """Tests for select_candidate outcomes."""

    def test_selects_exact_single_name_row(self, results_tree) -> None:
        selection = select_candidate(parse_result_rows(results_tree), SearchCriterion.for_name("OTP Bank"))
        assert selection.found
        assert selection.index == 1

    def test_empty_listing_is_not_found(self) -> None:
        assert not select_candidate([], SearchCriterion.for_tax_id("12345678")).found

    def test_unmatched_name_is_not_found(self, results_tree) -> None:
        selection = select_candidate(parse_result_rows(results_tree), SearchCriterion.for_name("Mol Nyrt."))
        assert not selection.found

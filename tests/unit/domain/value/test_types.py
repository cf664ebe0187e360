"""Unit tests for domain value objects."""

import pytest

from threadsync.domain.value import PageInfo, RepliesPageState, VotableType, VoteType


class TestVoteType:
    """Tests for VoteType parsing."""

    @pytest.mark.parametrize("raw", ["UPVOTE", "upvote", "Upvote"])
    def test_accepts_any_case(self, raw):
        """Vote types parse case-insensitively."""
        assert VoteType(raw) is VoteType.UPVOTE

    def test_rejects_unknown(self):
        """Unknown vote type raises."""
        with pytest.raises(ValueError):
            VoteType("sideways")

    def test_votable_type_accepts_upper_case(self):
        """Target types parse case-insensitively."""
        assert VotableType("COMMENT") is VotableType.COMMENT


class TestRepliesPageState:
    """Tests for RepliesPageState monotonicity."""

    def test_advance_merges_page(self):
        """Advancing adds the appended count and moves the cursor."""
        state = RepliesPageState(loaded_count=3, total_count=10, next_cursor="c3")

        advanced = state.advance(
            4, PageInfo(has_next_page=True, end_cursor="c7"), total_count=10
        )

        assert advanced.loaded_count == 7
        assert advanced.total_count == 10
        assert advanced.next_cursor == "c7"
        assert not advanced.exhausted
        assert advanced.has_more

    def test_last_page_exhausts(self):
        """A page without a next page exhausts the state."""
        state = RepliesPageState(loaded_count=3, total_count=5, next_cursor="c3")

        advanced = state.advance(2, PageInfo(has_next_page=False, end_cursor="c5"))

        assert advanced.exhausted
        assert not advanced.has_more

    def test_exhausted_never_reverts(self):
        """Once exhausted, a later page claiming more does not reopen it."""
        state = RepliesPageState(loaded_count=5, total_count=5, exhausted=True)

        advanced = state.advance(0, PageInfo(has_next_page=True, end_cursor="c9"))

        assert advanced.exhausted

    def test_cursor_kept_when_page_has_none(self):
        """An empty page without cursor does not reset the cursor."""
        state = RepliesPageState(loaded_count=3, total_count=9, next_cursor="c3")

        advanced = state.advance(0, PageInfo(has_next_page=True, end_cursor=None))

        assert advanced.next_cursor == "c3"
        assert advanced.loaded_count == 3

    def test_total_at_least_loaded(self):
        """Total never falls below what was loaded."""
        state = RepliesPageState(loaded_count=2, total_count=2)

        advanced = state.advance(3, PageInfo(has_next_page=True, end_cursor="c5"), 4)

        assert advanced.total_count == 5

    def test_removed_keeps_loaded_high_water_mark(self):
        """Removal shrinks the total only."""
        state = RepliesPageState(loaded_count=3, total_count=3)

        removed = state.with_removed()

        assert removed.loaded_count == 3
        assert removed.total_count == 2

    def test_removed_never_negative(self):
        """Total does not go below zero."""
        assert RepliesPageState().with_removed().total_count == 0

    def test_added_increments_both(self):
        """Attaching a child raises loaded and total."""
        added = RepliesPageState(loaded_count=1, total_count=4).with_added()

        assert added.loaded_count == 2
        assert added.total_count == 5

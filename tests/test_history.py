"""Tests for the hand aggregate and its copy-on-write edits."""

import pytest
from handscribe.engine.actions import ActionKind
from handscribe.engine.base import (
    ActionIndexError,
    DuplicateCardError,
    HandHistoryError,
    IllegalActionError,
    InvalidCardError,
    InvalidPositionError,
    InvalidStakeError,
    InvalidTableSizeError,
)
from handscribe.engine.cards import UNSET, Card, CardSlot
from handscribe.engine.history import NO_VILLAIN_SEAT, new_hand
from handscribe.engine.variants import get_game

F, X, C, B, R, AI = (
    ActionKind.FOLD,
    ActionKind.CHECK,
    ActionKind.CALL,
    ActionKind.BET,
    ActionKind.RAISE,
    ActionKind.ALL_IN,
)


def _preflop_btn_vs_bb(hand):
    """UTG, HJ, CO fold; BTN raises; SB folds; BB calls."""
    for i, kind in enumerate([F, F, F, R, F, C]):
        hand = hand.set_action(0, i, kind)
    return hand


class TestNewHand:
    def test_first_round_seeded_with_every_seat(self, hand):
        actions = hand.rounds[0].actions
        assert [a.position for a in actions] == ["UTG", "HJ", "CO", "BTN", "SB", "BB"]
        assert all(a.is_blank for a in actions)

    def test_rounds_per_family(self, hand, draw_hand):
        assert [r.name for r in hand.rounds] == ["Preflop", "Flop", "Turn", "River"]
        assert [r.name for r in draw_hand.rounds] == ["Pre-Draw", "Draw 1", "Draw 2", "Draw 3"]
        stud = new_hand(get_game("Razz"), table_size=4)
        assert [r.name for r in stud.rounds][0] == "3rd Street"
        assert len(stud.rounds) == 5
        assert len(stud.hero_cards) == 7

    def test_board_slots(self, hand):
        assert [len(r.community_cards) for r in hand.rounds] == [0, 3, 1, 1]

    def test_pot_is_seeded(self, hand):
        assert [r.pot for r in hand.rounds] == [3, 3, 3, 3]

    def test_preflop_entries_face_the_blinds(self, hand):
        assert all(a.legal == (F, C, R, AI) for a in hand.rounds[0].actions)

    def test_current_bet_starts_at_big_blind(self, hand):
        assert hand.current_bet == 2

    def test_small_and_big_bet(self, hand):
        assert hand.small_bet == 2
        assert hand.big_bet == 4

    def test_invalid_table_size(self, limit_holdem):
        with pytest.raises(InvalidTableSizeError):
            new_hand(limit_holdem, table_size=10)


class TestCopyOnWrite:
    def test_edit_leaves_original_untouched(self, hand):
        edited = hand.set_action(0, 0, F)
        assert hand.rounds[0].actions[0].kind is None
        assert edited.rounds[0].actions[0].kind is F
        assert edited is not hand

    def test_rejected_edit_leaves_original_usable(self, hand):
        with pytest.raises(InvalidTableSizeError):
            hand.set_table_size(1)
        assert hand.table_size == 6
        assert len(hand.rounds[0].actions) == 6


class TestStakes:
    def test_small_blind_sets_big_blind(self, hand):
        edited = hand.set_stakes(small_blind=5)
        assert edited.big_blind == 10
        assert edited.rounds[0].pot == 15

    def test_negative_rejected(self, hand):
        with pytest.raises(InvalidStakeError):
            hand.set_stakes(ante=-1)

    def test_ante_repots_every_round(self, hand):
        edited = hand.set_stakes(ante=1)
        assert [r.pot for r in edited.rounds] == [9, 9, 9, 9]

    def test_ante_follows_big_blind_in_no_limit_holdem(self, nl_holdem):
        hand = new_hand(nl_holdem, table_size=6, small_blind=1)
        assert hand.ante == 2
        # one flat big-blind ante
        assert hand.rounds[0].pot == 5
        assert hand.set_stakes(small_blind=5).ante == 10

    def test_single_draw_ante_ratio(self):
        hand = new_hand(get_game("No Limit 2-7 Single Draw"), table_size=3, small_blind=5)
        assert hand.ante == 15

    def test_set_ante_to_big_blind(self, hand):
        assert hand.set_ante_to_big_blind().ante == 2


class TestTableSize:
    def test_reseeds_first_round(self, hand):
        hand = hand.set_action(0, 0, F)
        resized = hand.set_table_size(3)
        assert [a.position for a in resized.rounds[0].actions] == ["BTN", "SB", "BB"]
        assert all(a.is_blank for a in resized.rounds[0].actions)

    def test_clears_hero_not_at_new_table(self, hand):
        hand = hand.set_hero_position("UTG")
        assert hand.set_table_size(3).hero_position is None
        assert hand.set_hero_position("SB").set_table_size(3).hero_position == "SB"

    def test_invalid_hero_position(self, hand):
        with pytest.raises(InvalidPositionError):
            hand.set_hero_position("UTG+3")

    def test_draw_changes_reset(self, draw_hand):
        draw_hand = draw_hand.set_player_changes(1, "BB", 2)
        resized = draw_hand.set_table_size(4)
        assert resized.rounds[1].changes == {"CO": 0, "BTN": 0, "SB": 0, "BB": 0}

    def test_later_rounds_cleared(self, limit_holdem):
        hand = new_hand(limit_holdem, table_size=9, small_blind=1, big_blind=2)
        hand = hand.append_next_actors(1)
        assert hand.rounds[1].actions[4].position == "UTG+2"
        hand = hand.set_action(1, 4, B)
        resized = hand.set_table_size(3)
        assert resized.rounds[1].actions == ()
        for rnd in resized.rounds:
            assert {a.position for a in rnd.actions} <= set(resized.positions)
        assert [r.pot for r in resized.rounds] == [3, 3, 3, 3]
        assert "UTG+2" not in resized.to_text()

    def test_removed_villain_seat_is_cleared(self, hand):
        hand = hand.set_hero_position("BTN").add_villain_hand().history
        assert hand.villains[0].position == "UTG"
        resized = hand.set_table_size(3)
        assert resized.villains[0].position is None
        assert resized.set_villain_position(0, "BB").villains[0].position == "BB"


class TestActions:
    def test_limit_preflop_raise_and_call(self, hand):
        hand = _preflop_btn_vs_bb(hand)
        actions = hand.rounds[0].actions
        assert actions[3].amount == 4
        assert actions[5].amount == 4
        # 3 blinds + BTN 4 + BB tops up 2
        assert hand.rounds[0].pot == 9
        assert hand.rounds[0].bet_count == 1

    def test_pot_chain_through_flop(self, hand):
        hand = _preflop_btn_vs_bb(hand).append_next_actors(1)
        assert [a.position for a in hand.rounds[1].actions] == ["BB", "BTN"]
        hand = hand.set_action(1, 0, X).set_action(1, 1, B)
        hand = hand.append_next_actors(1).set_action(1, 2, C)
        assert hand.rounds[1].actions[1].amount == 2
        assert hand.rounds[1].actions[2].amount == 2
        assert hand.rounds[1].pot == 13
        assert hand.rounds[2].pot == 13
        assert hand.current_bet == 2

    def test_turn_uses_big_bet(self, hand):
        hand = _preflop_btn_vs_bb(hand).append_next_actors(2)
        hand = hand.set_action(2, 0, B)
        assert hand.rounds[2].actions[0].amount == 4

    def test_fixed_limit_bet_on_flop_with_big_blind_four(self, limit_holdem):
        hand = new_hand(limit_holdem, table_size=2, small_blind=2, big_blind=4)
        hand = hand.set_action(0, 0, C).set_action(0, 1, C)
        hand = hand.append_next_actors(1).set_action(1, 0, B).set_action(1, 1, R)
        assert [a.amount for a in hand.rounds[1].actions] == [4, 8]
        assert hand.rounds[1].bet_count == 2

    def test_illegal_kind_rejected(self, hand):
        with pytest.raises(IllegalActionError):
            hand.set_action(0, 0, X)

    def test_kind_by_name(self, hand):
        assert hand.set_action(0, 0, "fold").rounds[0].actions[0].kind is F

    def test_no_limit_amount_entry(self, nl_hand):
        hand = nl_hand.set_action(0, 0, R)
        assert hand.rounds[0].actions[0].amount == 0
        hand = hand.set_amount(0, 0, 7)
        assert hand.rounds[0].actions[0].amount == 7
        hand = hand.set_action(0, 1, C)
        assert hand.rounds[0].actions[1].amount == 7

    def test_set_action_with_amount(self, nl_hand):
        hand = nl_hand.set_action(0, 0, R, amount=6)
        assert hand.rounds[0].actions[0].amount == 6

    def test_changing_kind_resets_entered_amount(self, nl_hand):
        hand = nl_hand.set_action(0, 0, R, amount=6).set_action(0, 0, C)
        assert hand.rounds[0].actions[0].amount == 2

    def test_bad_round_index(self, hand):
        with pytest.raises(ActionIndexError):
            hand.set_action(9, 0, F)

    def test_later_entries_relegalized(self, hand):
        hand = _preflop_btn_vs_bb(hand).append_next_actors(1)
        assert hand.rounds[1].actions[1].legal == (F, X, B, AI)
        hand = hand.set_action(1, 0, B)
        assert hand.rounds[1].actions[1].legal == (F, C, R, AI)


class TestDeleteAction:
    def test_deleting_only_bet_demotes_dependents(self, nl_hand):
        hand = _preflop_btn_vs_bb(nl_hand.set_action(0, 3, R, amount=6))
        hand = hand.set_amount(0, 3, 6).append_next_actors(1)
        hand = hand.set_action(1, 0, B, amount=10).set_action(1, 1, C)
        assert hand.rounds[1].actions[1].amount == 10
        assert hand.rounds[1].actions[1].legal == (F, C, R, AI)
        before = hand.rounds[1].pot

        hand = hand.delete_action(1, 0)
        remaining = hand.rounds[1].actions
        assert len(remaining) == 1
        assert remaining[0].amount == 0
        assert remaining[0].legal == (F, X, B, AI)
        assert remaining[0].is_legal is False
        assert hand.rounds[1].pot == before - 20
        assert hand.rounds[1].bet_count == 0

    def test_delete_repots_later_rounds(self, hand):
        hand = _preflop_btn_vs_bb(hand).append_next_actors(1)
        hand = hand.set_action(1, 0, B)
        assert hand.rounds[3].pot == 11
        hand = hand.delete_action(0, 3)
        # BB's call of the deleted raise now completes only the big blind
        assert hand.rounds[0].pot == 3
        assert hand.rounds[3].pot == 5


class TestCards:
    def test_set_and_read(self, hand):
        hand = hand.set_card(CardSlot.hero(0), "a", "S")
        assert hand.card_at(CardSlot.hero(0)) == Card("A", "s")

    def test_duplicate_refused(self, hand):
        hand = hand.set_card(CardSlot.hero(0), "A", "s")
        with pytest.raises(DuplicateCardError):
            hand.set_card(CardSlot.board(1, 0), "A", "s")

    def test_same_slot_may_keep_its_card(self, hand):
        hand = hand.set_card(CardSlot.hero(0), "A", "s")
        assert hand.is_card_available("s", "A", excluding=CardSlot.hero(0))
        assert not hand.is_card_available("s", "A", excluding=CardSlot.hero(1))
        assert not hand.is_card_available("s", "A")
        hand = hand.set_card(CardSlot.hero(0), "A", "s")
        assert hand.card_at(CardSlot.hero(0)) == Card("A", "s")

    def test_partial_card_allowed(self, hand):
        hand = hand.set_card(CardSlot.hero(0), rank="K")
        assert hand.card_at(CardSlot.hero(0)) == Card("K", "")
        assert hand.is_card_available("h", "K")

    def test_invalid_rank_or_suit(self, hand):
        with pytest.raises(InvalidCardError):
            hand.set_card(CardSlot.hero(0), "1", "s")
        with pytest.raises(InvalidCardError):
            hand.set_card(CardSlot.hero(0), "A", "x")

    def test_invalid_slot(self, hand):
        with pytest.raises(InvalidCardError):
            hand.set_card(CardSlot.hero(5), "A", "s")
        with pytest.raises(InvalidCardError):
            hand.set_card(CardSlot.board(0, 0), "A", "s")

    def test_card_text(self, hand):
        result = hand.set_card_text(CardSlot.board(1, 0), "qd")
        assert result.ok
        assert result.history.card_at(CardSlot.board(1, 0)) == Card("Q", "d")

    def test_malformed_text_clears_slot(self, hand):
        hand = hand.set_card(CardSlot.hero(0), "A", "s")
        result = hand.set_card_text(CardSlot.hero(0), "Zz")
        assert not result.ok
        assert "Invalid card input" in result.message
        assert result.history.card_at(CardSlot.hero(0)) == UNSET

    def test_duplicate_text_clears_slot(self, hand):
        hand = hand.set_card(CardSlot.hero(0), "A", "s")
        hand = hand.set_card(CardSlot.hero(1), "K", "h")
        result = hand.set_card_text(CardSlot.hero(1), "As")
        assert not result.ok
        assert result.history.card_at(CardSlot.hero(1)) == UNSET
        assert result.history.card_at(CardSlot.hero(0)) == Card("A", "s")


class TestVillains:
    def test_add_picks_first_active_non_hero(self, hand):
        hand = _preflop_btn_vs_bb(hand).set_hero_position("BTN")
        assert hand.available_villain_positions() == ["BB"]
        result = hand.add_villain_hand()
        assert result.ok
        villain = result.history.villains[0]
        assert villain.position == "BB"
        assert villain.cards == (UNSET, UNSET)

    def test_no_seat_is_advisory_noop(self, hand):
        hand = _preflop_btn_vs_bb(hand).set_hero_position("BTN")
        hand = hand.add_villain_hand().history
        result = hand.add_villain_hand()
        assert result.message == NO_VILLAIN_SEAT
        assert result.history is hand

    def test_folded_seat_cannot_hold_villain(self, hand):
        hand = _preflop_btn_vs_bb(hand).set_hero_position("BTN")
        hand = hand.add_villain_hand().history
        with pytest.raises(InvalidPositionError):
            hand.set_villain_position(0, "UTG")

    def test_villain_cards_share_the_pool(self, hand):
        hand = _preflop_btn_vs_bb(hand).set_hero_position("BTN")
        hand = hand.add_villain_hand().history
        hand = hand.set_card(CardSlot.villain(0, 0), "Q", "c")
        with pytest.raises(DuplicateCardError):
            hand.set_card(CardSlot.hero(0), "Q", "c")

    def test_remove(self, hand):
        hand = _preflop_btn_vs_bb(hand).set_hero_position("BTN")
        hand = hand.add_villain_hand().history.remove_villain_hand(0)
        assert hand.villains == ()
        with pytest.raises(ActionIndexError):
            hand.remove_villain_hand(0)


class TestDrawRounds:
    def test_discards_and_draws(self, draw_hand):
        hand = draw_hand.set_card(CardSlot.hero(4), "K", "d")
        hand = hand.toggle_discard(1, 4, True).add_drawn_card(1)
        hand = hand.set_card(CardSlot.drawn(1, 0), "2", "c")
        assert hand.discarded_cards(1) == [Card("K", "d")]
        assert hand.rounds[1].drawn_cards == (Card("2", "c"),)
        assert hand.toggle_discard(1, 4, False).rounds[1].discards == ()

    def test_drawn_card_cannot_repeat_hero_card(self, draw_hand):
        hand = draw_hand.set_card(CardSlot.hero(0), "7", "s").add_drawn_card(1)
        with pytest.raises(DuplicateCardError):
            hand.set_card(CardSlot.drawn(1, 0), "7", "s")

    def test_change_counts(self, draw_hand):
        hand = draw_hand.set_player_changes(2, "SB", 3)
        assert hand.rounds[2].changes == {"BTN": 0, "SB": 3, "BB": 0}

    def test_change_count_bounds(self, draw_hand):
        with pytest.raises(HandHistoryError):
            draw_hand.set_player_changes(1, "SB", 6)
        with pytest.raises(InvalidPositionError):
            draw_hand.set_player_changes(1, "UTG", 1)

    def test_not_a_draw_round(self, draw_hand, hand):
        with pytest.raises(HandHistoryError):
            draw_hand.add_drawn_card(0)
        with pytest.raises(HandHistoryError):
            hand.toggle_discard(1, 0, True)

    def test_draw_rounds_use_post_flop_order(self, draw_hand):
        hand = draw_hand.set_action(0, 0, R).set_action(0, 1, F).set_action(0, 2, C)
        hand = hand.append_next_actors(1)
        assert [a.position for a in hand.rounds[1].actions] == ["BB", "BTN"]
        assert hand.rounds[0].pot == 45

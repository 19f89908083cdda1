"""
Tests for side pot calculation in Texas Hold'em.

Side pots are opt-in (TableConfig.side_pots). These tests verify the
layering of contributions when seats go all-in with different stacks,
and that a short all-in seat can only win what it matched.
"""

import pytest
from pokersim.core.player import Player, PlayerStatus
from pokersim.core.pots import Pot, build_side_pots, single_pot
from pokersim.core.rules import GamePhase, ActionType
from pokersim.core.state import Winner


def contributor(pid, total, status=PlayerStatus.ALL_IN):
    return Player(pid, f"P{pid}", 0, status=status, total_hand_bet=total)


class TestSidePotCalculation:
    """Tests for side pot calculation logic."""

    def test_equal_contributions_one_pot(self):
        players = [contributor(i, 100, PlayerStatus.ACTIVE) for i in range(3)]
        assert build_side_pots(players) == [Pot(300, [0, 1, 2])]

    def test_single_allin_creates_side_pot(self):
        """
        A(100) all-in, B(500) call, C(500) call
        Expected: Main pot 300, Side pot 800
        """
        players = [
            contributor(0, 100),
            contributor(1, 500, PlayerStatus.ACTIVE),
            contributor(2, 500, PlayerStatus.ACTIVE),
        ]
        assert build_side_pots(players) == [Pot(300, [0, 1, 2]), Pot(800, [1, 2])]

    def test_three_different_stacks(self):
        players = [contributor(0, 50), contributor(1, 150), contributor(2, 300, PlayerStatus.ACTIVE)]
        pots = build_side_pots(players)
        assert pots == [Pot(150, [0, 1, 2]), Pot(200, [1, 2]), Pot(150, [2])]
        assert sum(p.amount for p in pots) == 500

    def test_folded_chips_stay_in_pot(self):
        players = [
            contributor(0, 100),
            contributor(1, 200, PlayerStatus.FOLDED),
            contributor(2, 200, PlayerStatus.ACTIVE),
        ]
        pots = build_side_pots(players)
        assert pots == [Pot(300, [0, 2]), Pot(200, [2])]

    def test_folded_top_contribution_folds_into_pot_below(self):
        players = [
            contributor(0, 100),
            contributor(1, 100, PlayerStatus.ALL_IN),
            contributor(2, 400, PlayerStatus.FOLDED),
        ]
        pots = build_side_pots(players)
        assert pots == [Pot(600, [0, 1])]

    def test_no_contributions(self):
        assert build_side_pots([contributor(0, 0, PlayerStatus.ACTIVE)]) == []

    def test_single_pot_everyone_live(self):
        players = [
            contributor(0, 100),
            contributor(1, 500, PlayerStatus.FOLDED),
            contributor(2, 500, PlayerStatus.ACTIVE),
        ]
        assert single_pot(players, 1100) == [Pot(1100, [0, 2])]


class TestSidePotGame:
    """Side pots in a played hand."""

    def test_short_stack_wins_main_pot_only(self, make_game, rig):
        game = make_game(3, side_pots=True)
        game.players[0].chips = 100
        game.start_new_hand(0)
        rig(game, {0: "As Ah", 1: "Kd Kc", 2: "Qd Qc"}, board="2c 7d 9h Js 3c")

        assert game.submit_action(0, ActionType.ALL_IN).success
        assert game.submit_action(1, ActionType.CALL).success
        assert game.submit_action(2, ActionType.CALL).success
        assert game.submit_action(1, ActionType.RAISE, 200).success
        assert game.submit_action(2, ActionType.CALL).success
        while game.is_hand_running():
            assert game.submit_action(game.state.current_player.id, ActionType.CHECK).success

        state = game.state
        assert state.phase == GamePhase.SHOWDOWN
        assert state.winners == [Winner(0, 300, "Pair"), Winner(1, 400, "Pair")]
        assert [p.chips for p in state.players] == [300, 1100, 700]

    def test_short_stack_loses_main_pot(self, make_game, rig):
        game = make_game(3, side_pots=True)
        game.players[0].chips = 100
        game.start_new_hand(0)
        rig(game, {0: "7h 2s", 1: "Kd Kc", 2: "Qd Qc"}, board="3c 8d 9h Js 4c")

        assert game.submit_action(0, ActionType.ALL_IN).success
        assert game.submit_action(1, ActionType.CALL).success
        assert game.submit_action(2, ActionType.CALL).success
        while game.is_hand_running():
            assert game.submit_action(game.state.current_player.id, ActionType.CHECK).success

        assert game.state.winners == [Winner(1, 300, "Pair")]
        assert sum(p.chips for p in game.players) == 2100

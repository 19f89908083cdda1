"""
Tests for the heuristic bots and the scripted agents.

Decisions depend on one uniform draw (two for sized post-flop raises),
so the tests feed fixed draws instead of a seeded generator.
"""

import pytest
from pokersim.agents.base import HumanAgent
from pokersim.agents.bot import BotAgent, PROFILES, decide, legalize
from pokersim.agents.simple import CallAgent, FoldAgent
from pokersim.core.card import parse_cards
from pokersim.core.rules import Action, ActionType, Difficulty, GamePhase


class FixedRng:
    """Stands in for random.Random, returning queued draws."""

    def __init__(self, *values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


def seat_to_act(game, cards=None):
    player = game.state.current_player
    if cards is not None:
        player.hole_cards = parse_cards(cards)
    return player


@pytest.fixture
def utg(six_player_game):
    """Six seats, button on seat 0, seat 3 to act facing the big blind."""
    six_player_game.start_new_hand(0)
    return six_player_game


@pytest.fixture
def flop(three_player_game, rig):
    """Three seats limped to a flop of 7h 2c 9s; seat 1 to act."""
    three_player_game.start_new_hand(0)
    rig(three_player_game, {}, board="7h 2c 9s Kd 4c")
    while three_player_game.phase == GamePhase.PREFLOP:
        seat = three_player_game.state.current_player
        to_call = three_player_game.state.current_bet - seat.current_bet
        three_player_game.submit_action(seat.id, ActionType.CALL if to_call else ActionType.CHECK)
    return three_player_game


class TestProfiles:
    """Difficulty tiers."""

    def test_every_difficulty_has_profile(self):
        assert set(PROFILES) == set(Difficulty)

    def test_hard_is_tighter_and_more_aggressive(self):
        easy, hard = PROFILES[Difficulty.EASY], PROFILES[Difficulty.HARD]
        assert hard.tightness > easy.tightness
        assert hard.aggression > easy.aggression
        assert hard.bluff > easy.bluff
        assert hard.stickiness < easy.stickiness


class TestPreflopDecisions:
    """Hole-card tree."""

    def test_premium_raises_on_low_roll(self, utg):
        player = seat_to_act(utg, "As Ah")
        action = decide(player, utg.state, Difficulty.MEDIUM, FixedRng(0.0))
        assert action == Action.raise_to(60)

    def test_hard_raises_bigger(self, utg):
        player = seat_to_act(utg, "As Ah")
        action = decide(player, utg.state, Difficulty.HARD, FixedRng(0.0))
        assert action == Action.raise_to(100)

    def test_premium_calls_on_high_roll(self, utg):
        player = seat_to_act(utg, "As Ah")
        action = decide(player, utg.state, Difficulty.MEDIUM, FixedRng(0.99))
        assert action.type == ActionType.CALL

    def test_trash_folds_facing_bet(self, utg):
        player = seat_to_act(utg, "7c 2d")
        action = decide(player, utg.state, Difficulty.HARD, FixedRng(0.1))
        assert action.type == ActionType.FOLD

    def test_easy_sometimes_calls_trash(self, utg):
        player = seat_to_act(utg, "7c 2d")
        action = decide(player, utg.state, Difficulty.EASY, FixedRng(0.1))
        assert action.type == ActionType.CALL

    def test_trash_checks_big_blind_option(self, three_player_game):
        three_player_game.start_new_hand(0)
        three_player_game.submit_action(0, ActionType.CALL)
        three_player_game.submit_action(1, ActionType.CALL)
        player = seat_to_act(three_player_game, "7c 2d")
        assert player.id == 2

        action = decide(player, three_player_game.state, Difficulty.HARD, FixedRng(0.9))
        assert action.type == ActionType.CHECK

    def test_no_hole_cards_folds(self, utg):
        player = seat_to_act(utg)
        player.hole_cards = []
        assert decide(player, utg.state, Difficulty.MEDIUM, FixedRng(0.5)).type == ActionType.FOLD


class TestPostflopDecisions:
    """Made-hand tree."""

    def test_hard_traps_with_monster(self, flop):
        player = seat_to_act(flop, "7c 7d")
        action = decide(player, flop.state, Difficulty.HARD, FixedRng(0.1))
        assert action.type == ActionType.CHECK

    def test_monster_bets_half_pot_or_more(self, flop):
        player = seat_to_act(flop, "7c 7d")
        assert flop.state.pot == 60
        action = decide(player, flop.state, Difficulty.HARD, FixedRng(0.5, 0.0))
        assert action == Action.raise_to(30)

    def test_air_checks_when_free(self, flop):
        player = seat_to_act(flop, "Jc 3d")
        action = decide(player, flop.state, Difficulty.MEDIUM, FixedRng(0.9))
        assert action.type == ActionType.CHECK

    def test_air_folds_to_bet(self, flop):
        flop.submit_action(1, ActionType.RAISE, 60)
        player = seat_to_act(flop, "Jc 3d")
        assert player.id == 2
        action = decide(player, flop.state, Difficulty.MEDIUM, FixedRng(0.9))
        assert action.type == ActionType.FOLD

    def test_weak_pair_facing_bet(self, flop):
        flop.submit_action(1, ActionType.RAISE, 20)
        player = seat_to_act(flop, "2d 5s")
        action = decide(player, flop.state, Difficulty.HARD, FixedRng(0.9))
        # 20 to call is more than a fifth of the 80 pot, so stickiness decides
        assert action.type == ActionType.FOLD

        action = decide(player, flop.state, Difficulty.EASY, FixedRng(0.5))
        assert action.type == ActionType.CALL


class TestLegalize:
    """Suggestions mapped onto legal actions."""

    def test_check_facing_bet_becomes_call(self, utg):
        player = seat_to_act(utg)
        assert legalize(Action.check(), player, utg.state) == Action.call()

    def test_free_call_and_fold_become_check(self, flop):
        player = seat_to_act(flop)
        assert legalize(Action.call(), player, flop.state) == Action.check()
        assert legalize(Action.fold(), player, flop.state) == Action.check()

    def test_fold_facing_bet_kept(self, utg):
        player = seat_to_act(utg)
        assert legalize(Action.fold(), player, utg.state) == Action.fold()

    def test_small_raise_lifted_to_minimum(self, utg):
        player = seat_to_act(utg)
        assert legalize(Action.raise_to(25), player, utg.state) == Action.raise_to(40)
        assert legalize(Action.raise_to(), player, utg.state) == Action.raise_to(40)

    def test_fractional_raise_floored(self, utg):
        player = seat_to_act(utg)
        assert legalize(Action.raise_to(55.9), player, utg.state) == Action.raise_to(55)

    def test_raise_beyond_stack_is_all_in(self, utg):
        player = seat_to_act(utg)
        assert legalize(Action.raise_to(5000), player, utg.state) == Action.all_in()

    def test_no_reraise_after_short_all_in(self, make_game):
        game = make_game(3)
        game.players[2].chips = 150
        game.start_new_hand(0)
        game.submit_action(0, ActionType.RAISE, 100)
        game.submit_action(1, ActionType.CALL)
        game.submit_action(2, ActionType.ALL_IN)

        player = seat_to_act(game)
        assert player.id == 0
        assert legalize(Action.raise_to(400), player, game.state) == Action.call()
        assert legalize(Action.all_in(), player, game.state) == Action.call()

    def test_short_stack_may_still_shove(self, make_game):
        game = make_game(3)
        game.players[2].chips = 150
        game.players[0].chips = 140
        game.start_new_hand(0)
        game.submit_action(0, ActionType.RAISE, 100)
        game.submit_action(1, ActionType.CALL)
        game.submit_action(2, ActionType.ALL_IN)

        player = seat_to_act(game)
        assert player.chips == 40
        assert legalize(Action.raise_to(400), player, game.state) == Action.all_in()
        # The engine agrees with the unadjusted raise
        assert game.submit_action(0, ActionType.RAISE, 400).success


class TestAgents:
    """Seat controllers."""

    def test_bot_agent_follows_table_difficulty(self, utg):
        utg.state.get_player(3).hole_cards = parse_cards("As Ah")
        agent = BotAgent(3, rng=FixedRng(0.0))
        assert agent.act(utg.state, 3) == Action.raise_to(60)

        utg.set_difficulty("hard")
        agent = BotAgent(3, rng=FixedRng(0.0))
        assert agent.act(utg.state, 3) == Action.raise_to(100)

    def test_bot_agent_fixed_difficulty(self, utg):
        utg.state.get_player(3).hole_cards = parse_cards("As Ah")
        agent = BotAgent(3, difficulty=Difficulty.HARD, rng=FixedRng(0.0))
        assert agent.act(utg.state, 3) == Action.raise_to(100)

    def test_bot_agent_unknown_seat_folds(self, utg):
        assert BotAgent(42).act(utg.state, 42) == Action.fold()

    def test_call_agent(self, utg):
        assert CallAgent(3).act(utg.state, 3) == Action.call()
        assert CallAgent(2).act(utg.state, 2) == Action.check()

    def test_fold_agent(self, utg):
        assert FoldAgent(3).act(utg.state, 3) == Action.fold()
        assert FoldAgent(2).act(utg.state, 2) == Action.check()

    def test_human_agent_is_driven_externally(self, utg):
        with pytest.raises(NotImplementedError):
            HumanAgent(0).act(utg.state, 0)

    def test_game_bot_decision_only_for_seat_to_act(self, utg):
        assert utg.bot_decision(0) is None
        action = utg.bot_decision(3)
        assert isinstance(action, Action)

    def test_play_bot_turn(self, utg):
        result = utg.play_bot_turn()
        assert result is not None and result.success
        assert utg.state.current_player_index == 4

    def test_play_bot_turn_waits_for_human(self, three_player_game):
        three_player_game.start_new_hand(0)
        assert three_player_game.state.current_player.id == 0
        assert three_player_game.play_bot_turn() is None

"""
Heuristic bot opponents.

Each decision is a fixed tree over the seat's hole cards (pre-flop) or
made hand (post-flop), tuned by a per-difficulty profile and one fresh
uniform draw. Bots keep no memory between decisions.

The tree is allowed to suggest anything; `legalize` then maps the
suggestion onto an action the engine accepts for the current betting
state (check facing a bet becomes a call, undersized raises are lifted to
the minimum, raises the stack cannot cover become all-ins).
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import Optional

from pokersim.agents.base import BaseAgent
from pokersim.core.hand import HandRank, evaluate_hand
from pokersim.core.player import Player
from pokersim.core.rules import Action, ActionType, Difficulty, GamePhase, min_raise_total
from pokersim.core.state import GameState


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BotProfile:
    """
    Tuning parameters for a difficulty tier.

    Attributes:
        bluff: Chance to raise with a weak hand
        tightness: Higher folds more medium hands
        aggression: Higher raises more often with good hands
        stickiness: Higher calls more often with marginal hands
    """
    bluff: float
    tightness: float
    aggression: float
    stickiness: float


PROFILES = {
    Difficulty.EASY: BotProfile(bluff=0.05, tightness=0.2, aggression=0.1, stickiness=0.8),      # loose-passive
    Difficulty.MEDIUM: BotProfile(bluff=0.15, tightness=0.5, aggression=0.5, stickiness=0.5),    # balanced
    Difficulty.HARD: BotProfile(bluff=0.30, tightness=0.8, aggression=0.8, stickiness=0.3),      # tight-aggressive
}

HIGH_CARD_RANK = 10    # Ten or better counts as a high card
PREMIUM_PAIR_RANK = 12
STRONG_PAIR_RANK = 10
SMALL_PAIR_RANK = 7


def decide(
    player: Player,
    state: GameState,
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
) -> Action:
    """
    Pick a legal action for `player`.

    Args:
        player: The seat to act
        state: Current game state (not mutated)
        difficulty: Tier selecting the BotProfile
        rng: Random source (defaults to the module-level generator)

    Returns:
        An Action the engine accepts in the current betting state
    """
    rng = rng or random
    suggestion = _suggest(player, state, difficulty, rng)
    action = legalize(suggestion, player, state)
    logger.debug(f"{player.name} ({difficulty.value}) suggests {suggestion.type.value}, plays {action.type.value}")
    return action


def _suggest(player: Player, state: GameState, difficulty: Difficulty, rng) -> Action:
    if len(player.hole_cards) < 2:
        return Action.fold()

    profile = PROFILES[difficulty]
    roll = rng.random()
    to_call = max(0, state.current_bet - player.current_bet)

    if state.phase == GamePhase.PREFLOP:
        return _preflop(player, state, difficulty, profile, roll, to_call)
    return _postflop(player, state, difficulty, profile, roll, to_call, rng)


def _preflop(
    player: Player,
    state: GameState,
    difficulty: Difficulty,
    profile: BotProfile,
    roll: float,
    to_call: int,
) -> Action:
    first, second = player.hole_cards[:2]
    high_cards = sum(1 for c in (first, second) if c.rank >= HIGH_CARD_RANK)
    is_pair = first.rank == second.rank
    is_suited = first.suit == second.suit
    is_connected = abs(first.rank - second.rank) == 1
    min_raise = state.min_raise

    # Premium: QQ+, two suited high cards, or AK/KQ-type offsuit
    if (is_pair and first.rank >= PREMIUM_PAIR_RANK) or (
        high_cards == 2 and (is_suited or first.rank >= 13)
    ):
        if roll < profile.aggression + 0.2:
            multiplier = 4 if difficulty == Difficulty.HARD else 2
            return Action.raise_to(min(player.chips, state.current_bet + min_raise * multiplier))
        return Action.call()

    # Good: pairs, two high cards, suited connectors with a high card
    if is_pair or high_cards == 2 or (is_suited and is_connected and high_cards > 0):
        if to_call <= min_raise * 3 or roll < profile.stickiness:
            if roll < profile.aggression * 0.4 and to_call == 0:
                return Action.raise_to(min_raise * 2)
            return Action.call()

    # Speculative: suited connectors, small pairs
    if (is_suited and is_connected) or (is_pair and first.rank < SMALL_PAIR_RANK):
        if to_call <= min_raise or (difficulty == Difficulty.EASY and to_call <= min_raise * 2):
            return Action.call()

    # Trash
    if to_call == 0:
        return Action.check()
    if difficulty == Difficulty.EASY and roll < 0.2 and to_call <= min_raise:
        return Action.call()
    return Action.fold()


def _postflop(
    player: Player,
    state: GameState,
    difficulty: Difficulty,
    profile: BotProfile,
    roll: float,
    to_call: int,
    rng,
) -> Action:
    hand = evaluate_hand(player.hole_cards + state.community_cards)
    pot = state.pot
    min_raise = state.min_raise
    pot_odds = to_call / ((pot + to_call) or 1)

    # Monster: two pair or better
    if hand.rank >= HandRank.TWO_PAIR:
        if roll < 0.2 and difficulty == Difficulty.HARD:
            return Action.check()  # trap
        if roll < profile.aggression + 0.3:
            size = max(min_raise, pot * (0.5 + rng.random() * 0.5))
            return Action.raise_to(min(player.chips, size))
        return Action.call()

    if hand.rank == HandRank.ONE_PAIR and hand.best_cards:
        if hand.best_cards[0].rank >= STRONG_PAIR_RANK:
            if to_call > pot * 0.7 and difficulty == Difficulty.HARD:
                return Action.fold()
            if roll < profile.aggression and to_call < pot * 0.5:
                return Action.raise_to(min_raise + pot * 0.3)
            return Action.call()

        # Weak pair
        if to_call == 0:
            return Action.check()
        if to_call < pot * 0.2 or roll < profile.stickiness:
            return Action.call()
        return Action.fold()

    # No draw detection: a share of hard-tier decisions play as if drawing
    if roll < 0.3 and difficulty == Difficulty.HARD:
        if roll < profile.aggression and to_call < pot * 0.33:
            return Action.raise_to(min_raise + pot * 0.4)  # semi-bluff
        if pot_odds < 0.3:
            return Action.call()

    # Air
    if to_call == 0:
        if roll < profile.bluff:
            return Action.raise_to(min_raise + pot * 0.5)
        return Action.check()

    if difficulty != Difficulty.EASY and roll < profile.bluff * 0.5:
        return Action.raise_to(min(player.chips, pot))

    return Action.fold()


def legalize(action: Action, player: Player, state: GameState) -> Action:
    """
    Map a suggested action onto one the engine accepts.

    - check facing a bet -> call; call with nothing to call -> check
    - raise when betting is not reopened for this seat -> call/check
    - raise below the minimum -> minimum raise
    - raise the stack cannot cover -> all-in
    """
    to_call = max(0, state.current_bet - player.current_bet)
    passive = Action.check() if to_call == 0 else Action.call()

    if action.type in (ActionType.CHECK, ActionType.CALL):
        return passive

    if action.type == ActionType.FOLD:
        return Action.check() if to_call == 0 else action

    max_total = player.chips + player.current_bet
    may_raise = not player.has_acted

    if action.type == ActionType.ALL_IN:
        if may_raise or player.chips <= to_call:
            return Action.all_in()
        return passive

    # RAISE
    if not may_raise:
        return Action.all_in() if player.chips <= to_call else passive

    minimum = min_raise_total(state.current_bet, state.min_raise)
    target = minimum if action.amount is None else max(int(action.amount), minimum)
    if target >= max_total:
        return Action.all_in()
    return Action.raise_to(target)


class BotAgent(BaseAgent):
    """
    Seat controller backed by `decide`.

    Without an explicit difficulty the agent follows the table's current
    difficulty, so a difficulty change applies from the next decision.
    """

    def __init__(
        self,
        player_id: int,
        name: Optional[str] = None,
        difficulty: Optional[Difficulty] = None,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(player_id, name or f"Bot-{player_id}")
        self.difficulty = difficulty
        self.rng = rng

    def act(self, state: GameState, seat_id: int) -> Action:
        player = state.get_player(seat_id)
        if player is None:
            return Action.fold()
        return decide(player, state, self.difficulty or state.difficulty, self.rng)

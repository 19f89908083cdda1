"""
Headless simulation driver.

Plays agents against each other through the TexasHoldemGame facade, the
same way the server paces a table but without the delays, and checks the
chip bookkeeping after every transition.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from pokersim.agents.base import BaseAgent
from pokersim.agents.bot import BotAgent
from pokersim.core.errors import PokerError
from pokersim.core.game import TexasHoldemGame, check_invariants


logger = logging.getLogger(__name__)

# Per-hand guard; a hand of N seats needs far fewer steps than this
MAX_STEPS_PER_HAND = 1000


@dataclass
class SimulationResult:
    """Outcome of a simulation run."""
    hands_played: int = 0
    final_chips: Dict[int, int] = field(default_factory=dict)
    wins: Dict[int, int] = field(default_factory=dict)
    game_over: bool = False


def play_hand(game: TexasHoldemGame, agents: Mapping[int, BaseAgent]) -> None:
    """
    Drive the current hand to showdown.

    Raises:
        PokerError: an agent returned an illegal action, the bookkeeping
            broke, or the hand did not finish
    """
    total = sum(p.chips for p in game.players) + game.state.pot

    for _ in range(MAX_STEPS_PER_HAND):
        if not game.is_hand_running():
            return

        if game.needs_runout():
            game.proceed()
        else:
            seat = game.state.current_player
            action = agents[seat.id].act(game.state, seat.id)
            result = game.submit_action(seat.id, action.type, action.amount)
            if not result.success:
                raise PokerError(f"{seat.name} submitted an illegal {action.type.value}: {result.message}")

        problems = check_invariants(game.state, total)
        if problems:
            raise PokerError("; ".join(problems))

    raise PokerError(f"Hand #{game.state.hand_number} did not finish in {MAX_STEPS_PER_HAND} steps")


def simulate_hands(
    game: TexasHoldemGame,
    agents: Mapping[int, BaseAgent],
    max_hands: int = 100,
    dealer_index: Optional[int] = None,
) -> SimulationResult:
    """
    Play up to `max_hands` hands, stopping early when the session is over.

    Args:
        game: Session to play (its current stacks are used)
        agents: Agent per seat id; every seat needs one
        max_hands: Upper bound on hands played
        dealer_index: Button for the first hand (default: keep/rotate)

    Returns:
        SimulationResult with hands played, final stacks and win counts
    """
    result = SimulationResult()

    for i in range(max_hands):
        if i == 0 and dealer_index is not None:
            started = game.start_new_hand(dealer_index)
        else:
            started = game.start_next_hand()
        if not started:
            result.game_over = True
            break

        play_hand(game, agents)
        result.hands_played += 1
        for winner in game.state.winners:
            result.wins[winner.player_id] = result.wins.get(winner.player_id, 0) + 1

    result.final_chips = {p.id: p.chips for p in game.players}
    logger.info(f"Simulated {result.hands_played} hands, final stacks {result.final_chips}")
    return result


def bot_table(game: TexasHoldemGame) -> Dict[int, BaseAgent]:
    """BotAgents for every seat, sharing the game's random source."""
    return {p.id: BotAgent(p.id, p.name, rng=game.rng) for p in game.players}


def summarize(result: SimulationResult, names: List[str]) -> str:
    lines = [f"{result.hands_played} hands"]
    for seat, chips in sorted(result.final_chips.items()):
        lines.append(f"  {names[seat]:>8}: {chips:>6} chips, {result.wins.get(seat, 0)} pots")
    return "\n".join(lines)

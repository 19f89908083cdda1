"""
Texas Hold'em Game Engine - State Machine Implementation.

The engine is a set of transitions over GameState:

    start_new_hand(state, dealer_index, rng) -> state   # Waiting/Showdown -> PreFlop
    apply_action(state, seat_id, action)     -> state   # one betting action
    advance_turn(state)                      -> state   # next seat, street or showdown
    advance_street(state)                    -> state   # deal board / showdown

Every transition copies its input, so old snapshots stay valid and
re-running advance_turn on a state that has not changed is a no-op.
TexasHoldemGame wraps the transitions for a single table session.

Pot handling: a single pot shared by everyone still in the hand, split
evenly between tied hands with the odd chips to the first tied seat.
Tables configured with side_pots=True layer the pot by stake instead.
"""

from __future__ import annotations
from typing import List, Dict, Optional, Any, Callable, Union
from dataclasses import dataclass
import logging
import random

from pokersim.config import TableConfig
from pokersim.core.card import Card, create_deck
from pokersim.core.errors import IllegalActionError
from pokersim.core.player import Player, PlayerStatus
from pokersim.core.hand import evaluate_hand, get_hand_description
from pokersim.core.pots import Pot, single_pot, build_side_pots, split_amount
from pokersim.core.state import GameState, Winner, ActionEvent
from pokersim.core.rules import (
    GamePhase, ActionType, Action, Difficulty,
    get_blind_positions, next_seat, next_dealer_index, min_raise_total, seat_names,
    HOLE_CARDS, NEXT_STREET, STREET_CARDS, STREET_MESSAGES,
    OPPONENTS_FOLDED, SPLIT_POT,
)


logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Result of a player action."""
    success: bool
    message: str
    action_type: Optional[ActionType] = None
    amount: int = 0


# ============= Pure transitions =============

def create_players(config: TableConfig) -> List[Player]:
    """Seat every configured name with a fresh starting stack."""
    return [
        Player(
            id=i,
            name=name,
            chips=config.starting_chips,
            is_bot=(i != config.human_seat),
        )
        for i, name in enumerate(seat_names(config.num_players, config.seat_names))
    ]


def initialize_game(config: TableConfig, difficulty: Optional[Difficulty] = None) -> GameState:
    """A fresh session: full stacks, no hand running."""
    return GameState(
        players=create_players(config),
        min_raise=config.big_blind,
        phase=GamePhase.WAITING,
        message="Starting new game...",
        difficulty=difficulty or config.difficulty,
        small_blind=config.small_blind,
        big_blind=config.big_blind,
        side_pots=config.side_pots,
    )


def start_new_hand(
    state: GameState,
    dealer_index: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> GameState:
    """
    Start a new hand: reset seats, deal hole cards, post blinds.

    With fewer than two seats holding chips the session is over and the
    state goes to WAITING with a game-over message instead.
    """
    state = state.copy()
    if dealer_index is not None:
        state.dealer_index = dealer_index

    for player in state.players:
        player.reset_for_new_hand()

    state.community_cards = []
    state.pot = 0
    state.winners = []
    state.last_event = None
    state.current_bet = 0
    state.min_raise = state.big_blind
    state.current_player_index = None

    active = [p for p in state.players if p.status == PlayerStatus.ACTIVE]
    if len(active) < 2:
        survivor = active[0] if active else None
        state.phase = GamePhase.WAITING
        state.message = "Game Over! You Lost." if survivor is None or survivor.is_bot else "Game Over! You Won!"
        logger.info(f"Session over: {state.message}")
        return state

    state.hand_number += 1
    state.deck = create_deck(rng)

    for player in active:
        player.hole_cards = state.deck.deal(HOLE_CARDS)

    sb_index, bb_index = get_blind_positions(state.players, state.dealer_index)
    sb_amount = _post_blind(state.players[sb_index], state.small_blind, "SB")
    bb_amount = _post_blind(state.players[bb_index], state.big_blind, "BB")
    logger.debug(f"Blinds posted: SB={sb_amount} (seat {sb_index}) BB={bb_amount} (seat {bb_index})")

    state.pot = sb_amount + bb_amount
    state.current_bet = state.big_blind
    state.min_raise = state.big_blind
    state.phase = GamePhase.PREFLOP
    state.message = STREET_MESSAGES[GamePhase.PREFLOP]

    if not _runout_pending(state):
        state.current_player_index = next_seat(state.players, bb_index, lambda p: p.can_act)

    logger.info(
        f"Hand #{state.hand_number} started: dealer seat {state.dealer_index}, "
        f"{len(active)} players, pot {state.pot}"
    )
    return state


def _post_blind(player: Player, blind: int, label: str) -> int:
    amount = player.commit(min(player.chips, int(blind)))
    player.last_action = label
    return amount


def apply_action(state: GameState, seat_id: int, action: Action) -> GameState:
    """
    Apply one betting action for the seat whose turn it is.

    An action from any other seat (stale or out-of-order submissions) is
    ignored and the input state is returned unchanged.

    Raises:
        IllegalActionError: check facing a bet, raise below the minimum,
            re-raise that is not open to this seat, or a seat that cannot act.
    """
    if not state.is_hand_running or state.current_player_index is None:
        return state

    index = state.current_player_index
    if state.players[index].id != seat_id:
        logger.warning(f"Ignoring action from seat {seat_id}: seat {state.players[index].id} is to act")
        return state

    state = state.copy()
    player = state.players[index]
    if not player.can_act:
        raise IllegalActionError(f"{player.name} cannot act ({player.status.value})")

    to_call = max(0, state.current_bet - player.current_bet)
    chips_before = player.chips

    if action.type == ActionType.FOLD:
        player.fold()

    elif action.type == ActionType.CHECK:
        if to_call > 0:
            raise IllegalActionError(f"Cannot check, must call ${to_call}")
        player.last_action = "CHECK"

    elif action.type == ActionType.CALL:
        if to_call == 0:
            player.last_action = "CHECK"
        else:
            player.commit(to_call)
            player.last_action = "ALL IN" if player.status == PlayerStatus.ALL_IN else "CALL"

    elif action.type == ActionType.RAISE:
        if action.amount is None:
            target = min_raise_total(state.current_bet, state.min_raise)
        else:
            target = int(action.amount)
        needed = target - player.current_bet

        # An uncoverable raise is an all-in; once acted, only if the call is uncoverable too
        if player.chips <= needed and (not player.has_acted or player.chips <= to_call):
            _go_all_in(state, player)
        elif player.has_acted:
            raise IllegalActionError("Betting was not reopened, you may only call or fold")
        else:
            minimum = min_raise_total(state.current_bet, state.min_raise)
            if target < minimum:
                raise IllegalActionError(
                    f"Minimum raise is to ${minimum} (current: ${state.current_bet}, "
                    f"min raise: ${state.min_raise})"
                )
            player.commit(needed)
            player.last_action = "RAISE"
            _register_full_raise(state, player)

    elif action.type == ActionType.ALL_IN:
        if player.has_acted and player.chips > to_call:
            raise IllegalActionError("Betting was not reopened, you may only call or fold")
        _go_all_in(state, player)

    else:
        raise IllegalActionError(f"Unknown action: {action.type}")

    moved = chips_before - player.chips
    state.pot += moved
    player.has_acted = True

    state.last_event = ActionEvent(
        player_id=player.id,
        action=action.type,
        amount=moved,
        total_bet=player.current_bet,
        phase=state.phase,
    )
    state.message = f"{player.name} {player.last_action}"
    logger.debug(f"{player.name}: {action.type.value} moved {moved}, pot {state.pot}")
    return state


def _go_all_in(state: GameState, player: Player) -> None:
    """
    Commit the whole stack.

    An all-in that raises by at least the minimum increment reopens the
    betting; a short one only lifts the bet to match.
    """
    player.commit(player.chips)
    player.last_action = "ALL IN"

    if player.current_bet > state.current_bet:
        increment = player.current_bet - state.current_bet
        if increment >= state.min_raise:
            _register_full_raise(state, player)
        else:
            state.current_bet = player.current_bet


def _register_full_raise(state: GameState, raiser: Player) -> None:
    increment = raiser.current_bet - state.current_bet
    if increment > 0:
        state.min_raise = increment
    state.current_bet = raiser.current_bet

    # Everyone else has to act again
    for player in state.players:
        if player is not raiser and player.can_act:
            player.has_acted = False


def _needs_action(state: GameState) -> Callable[[Player], bool]:
    def predicate(player: Player) -> bool:
        return player.can_act and (not player.has_acted or player.current_bet < state.current_bet)
    return predicate


def _runout_pending(state: GameState) -> bool:
    """
    At most one seat can still bet and nobody owes chips: the board is
    dealt out without further betting.
    """
    live = [p for p in state.players if p.is_in_hand]
    if sum(1 for p in live if p.can_act) >= 2:
        return False
    max_bet = max(p.current_bet for p in live)
    return all(p.current_bet == max_bet or p.status == PlayerStatus.ALL_IN for p in live)


def _round_complete(state: GameState) -> bool:
    return not any(_needs_action(state)(p) for p in state.players)


def advance_turn(state: GameState) -> GameState:
    """
    Decide what happens after an action (or on a pacing tick).

    - One seat left in the hand: it takes the pot.
    - Nobody left to bet against: deal the next street (runout).
    - Betting round complete: deal the next street or go to showdown.
    - Otherwise: pass the turn to the next seat that owes an action.

    Returns the input state unchanged when there is nothing to advance.
    """
    if not state.is_hand_running:
        return state

    live = [p for p in state.players if p.is_in_hand]
    if len(live) == 1:
        return _award_uncontested(state)

    if _runout_pending(state):
        return advance_street(state)

    current = state.current_player
    needs_action = _needs_action(state)
    if current is not None and needs_action(current):
        return state

    if _round_complete(state):
        return advance_street(state)

    start = state.current_player_index
    if start is None:
        start = state.dealer_index
    nxt = next_seat(state.players, start, needs_action)

    state = state.copy()
    state.current_player_index = nxt
    return state


def advance_street(state: GameState) -> GameState:
    """
    Close the betting round and move to the next street.

    Leaving the river goes to showdown. When fewer than two seats can bet,
    the street is dealt with nobody to act; the next advance_turn deals the
    following one.
    """
    state = state.copy()
    for player in state.players:
        player.reset_for_new_round()

    state.current_bet = 0
    state.min_raise = state.big_blind
    state.last_event = None
    state.current_player_index = None

    next_phase = NEXT_STREET[state.phase]
    if next_phase == GamePhase.SHOWDOWN:
        return _showdown(state)

    state.community_cards.extend(state.deck.deal(STREET_CARDS[next_phase]))
    state.phase = next_phase
    state.message = STREET_MESSAGES[next_phase]
    logger.debug(f"{next_phase.value}: {' '.join(str(c) for c in state.community_cards)}")

    if sum(1 for p in state.players if p.can_act) >= 2:
        state.current_player_index = next_seat(state.players, state.dealer_index, lambda p: p.can_act)

    return state


def _award_uncontested(state: GameState) -> GameState:
    state = state.copy()
    winner = next(p for p in state.players if p.is_in_hand)
    winner.chips += state.pot

    state.winners = [Winner(winner.id, state.pot, OPPONENTS_FOLDED)]
    state.phase = GamePhase.SHOWDOWN
    state.current_player_index = None
    state.message = OPPONENTS_FOLDED
    logger.info(f"Hand #{state.hand_number}: {winner.name} wins {state.pot} uncontested")
    return state


def _showdown(state: GameState) -> GameState:
    if state.side_pots:
        pots = build_side_pots(state.players)
    else:
        pots = single_pot(state.players, state.pot)

    winners = determine_winners(state.players, state.community_cards, pots)
    for winner in winners:
        state.get_player(winner.player_id).chips += winner.amount

    state.winners = winners
    state.phase = GamePhase.SHOWDOWN
    state.current_player_index = None
    if len(winners) > 1:
        state.message = SPLIT_POT
    else:
        state.message = f"{state.get_player(winners[0].player_id).name} Wins!"

    logger.info(
        f"Hand #{state.hand_number} showdown: "
        + ", ".join(f"{state.get_player(w.player_id).name} +{w.amount} ({w.hand_name})" for w in winners)
    )
    return state


def determine_winners(
    players: List[Player],
    community_cards: List[Card],
    pots: List[Pot],
) -> List[Winner]:
    """
    Award each pot to the best hand among its eligible seats.

    Ties split the pot by integer division; the odd chips go to the first
    tied seat in seat order. Returns one Winner per seat, in seat order.
    """
    results = {
        p.id: evaluate_hand(p.hole_cards + community_cards)
        for p in players if p.is_in_hand
    }
    awards: Dict[int, int] = {}

    for pot in pots:
        contenders = [pid for pid in pot.eligible_players if pid in results]
        if not contenders:
            continue
        best = max(results[pid].score for pid in contenders)
        tied = [pid for pid in contenders if results[pid].score == best]
        for pid, share in zip(tied, split_amount(pot.amount, len(tied))):
            awards[pid] = awards.get(pid, 0) + share

    return [
        Winner(p.id, awards[p.id], results[p.id].name)
        for p in players if p.id in awards
    ]


def legal_actions(state: GameState, seat_id: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Legal actions for a seat (default: the seat to act).

    Returns:
        List of action dicts with type and constraints; empty when the
        seat is not the one to act.
    """
    player = state.current_player
    if player is None or not state.is_hand_running:
        return []
    if seat_id is not None and player.id != seat_id:
        return []
    if not player.can_act:
        return []

    actions: List[Dict[str, Any]] = [{"type": ActionType.FOLD.value}]
    to_call = max(0, state.current_bet - player.current_bet)

    if to_call == 0:
        actions.append({"type": ActionType.CHECK.value})
    else:
        actions.append({"type": ActionType.CALL.value, "amount": min(to_call, player.chips)})

    max_total = player.chips + player.current_bet
    may_raise = not player.has_acted

    if may_raise and player.chips > to_call:
        actions.append({
            "type": ActionType.RAISE.value,
            "min": min(min_raise_total(state.current_bet, state.min_raise), max_total),
            "max": max_total,
        })

    if may_raise or player.chips <= to_call:
        actions.append({"type": ActionType.ALL_IN.value, "amount": max_total})

    return actions


def check_invariants(state: GameState, starting_total: Optional[int] = None) -> List[str]:
    """
    Chip bookkeeping checks; returns a list of violations (empty if sound).

    starting_total is the sum of all stacks when the hand started.
    """
    problems = []
    for p in state.players:
        if p.chips < 0 or p.current_bet < 0 or p.total_hand_bet < 0:
            problems.append(f"{p.name} has a negative amount")
        if p.current_bet > p.total_hand_bet:
            problems.append(f"{p.name} current_bet exceeds total_hand_bet")

    if state.is_hand_running:
        committed = sum(p.total_hand_bet for p in state.players)
        if state.pot != committed:
            problems.append(f"pot {state.pot} != committed {committed}")
        if starting_total is not None:
            on_table = sum(p.chips for p in state.players) + state.pot
            if on_table != starting_total:
                problems.append(f"chips + pot {on_table} != {starting_total}")
    elif starting_total is not None:
        on_table = sum(p.chips for p in state.players)
        if on_table != starting_total:
            problems.append(f"chips {on_table} != {starting_total}")

    return problems


# ============= Session facade =============

ActionListener = Callable[[ActionEvent, GameState], None]


class TexasHoldemGame:
    """
    A single table session around the engine transitions.

    Usage:
        game = TexasHoldemGame(TableConfig(), seed=7)
        game.start_new_hand()

        while game.is_hand_running():
            seat = game.state.current_player
            if seat is None:
                game.proceed()  # all-in runout, one street per call
                continue
            result = game.submit_action(seat.id, ActionType.CALL)

        winners = game.get_winners()
        game.start_next_hand()
    """

    def __init__(
        self,
        config: Optional[TableConfig] = None,
        difficulty: Optional[Difficulty] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ):
        """
        Args:
            config: Table settings (blinds, stacks, seats)
            difficulty: Bot difficulty, defaults to the config's
            rng: Random source for shuffles and bot decisions
            seed: Seed for a private random source when rng is not given
        """
        self.config = config or TableConfig()
        self.rng = rng or random.Random(seed)
        self.state = initialize_game(self.config, difficulty)
        self.hand_history: List[Dict[str, Any]] = []
        self._listeners: List[ActionListener] = []

    @property
    def num_players(self) -> int:
        return len(self.state.players)

    @property
    def players(self) -> List[Player]:
        return self.state.players

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    @property
    def human_player(self) -> Optional[Player]:
        return next((p for p in self.state.players if not p.is_bot), None)

    def is_hand_running(self) -> bool:
        return self.state.is_hand_running

    def is_game_over(self) -> bool:
        """Fewer than two seats have chips and no hand is running."""
        if self.state.is_hand_running:
            return False
        return sum(1 for p in self.state.players if p.chips > 0) < 2

    def needs_runout(self) -> bool:
        """A hand is running but no seat is to act (board being dealt out)."""
        return self.state.is_hand_running and self.state.current_player_index is None

    def initialize_game(self) -> GameState:
        """Reset the session: full stacks, no hand running."""
        self.state = initialize_game(self.config, self.state.difficulty)
        self.hand_history = []
        return self.state

    def start_new_hand(self, dealer_index: Optional[int] = None) -> bool:
        """
        Start a hand with the button at dealer_index (default: unchanged).

        Returns:
            True if a hand started, False if the session is over
        """
        self.state = start_new_hand(self.state, dealer_index, self.rng)
        if self.state.phase != GamePhase.PREFLOP:
            return False

        self.hand_history = []
        self._log_action("HAND_START", {
            "hand_number": self.state.hand_number,
            "dealer": self.state.dealer_index,
        })
        return True

    def start_next_hand(self) -> bool:
        """Start the following hand with the button moved on."""
        dealer = self.state.dealer_index
        if self.state.hand_number > 0:
            dealer = next_dealer_index(self.state.players, dealer)
        return self.start_new_hand(dealer)

    def submit_action(
        self,
        seat_id: int,
        action_type: Union[ActionType, str],
        amount: Optional[int] = None,
    ) -> ActionResult:
        """
        Process a player action and advance the turn.

        Args:
            seat_id: Seat submitting the action
            action_type: FOLD, CHECK, CALL, RAISE or ALL_IN
            amount: For RAISE, the new total bet (None = minimum raise)
        """
        if isinstance(action_type, str):
            try:
                action_type = ActionType.parse(action_type)
            except ValueError:
                return ActionResult(False, f"Invalid action type: {action_type}")

        if not self.state.is_hand_running:
            return ActionResult(False, "No hand in progress")

        current = self.state.current_player
        if current is None or current.id != seat_id:
            return ActionResult(False, "Not your turn")

        try:
            acted = apply_action(self.state, seat_id, Action(action_type, amount))
        except IllegalActionError as e:
            logger.warning(f"Rejected {action_type.value} from seat {seat_id}: {e}")
            return ActionResult(False, str(e))

        event = acted.last_event
        self.state = advance_turn(acted)

        self._log_action(action_type.value, {"player": seat_id, "amount": event.amount})
        self._after_transition(acted.phase)
        for listener in list(self._listeners):
            listener(event, self.state)

        return ActionResult(True, acted.message, action_type, event.amount)

    def proceed(self) -> GameState:
        """Pacing tick: re-evaluate the turn (deals runout streets)."""
        before = self.state.phase
        self.state = advance_turn(self.state)
        self._after_transition(before)
        return self.state

    def bot_decision(self, seat_id: Optional[int] = None) -> Optional[Action]:
        """
        Heuristic decision for a seat (default: the seat to act) at the
        table's difficulty. None when that seat is not the one to act.
        """
        from pokersim.agents.bot import decide

        player = self.state.current_player
        if player is None or (seat_id is not None and player.id != seat_id):
            return None
        return decide(player, self.state, self.state.difficulty, self.rng)

    def play_bot_turn(self) -> Optional[ActionResult]:
        """Let the bot to act take its turn. None when a human (or nobody) is to act."""
        player = self.state.current_player
        if player is None or not player.is_bot:
            return None
        action = self.bot_decision(player.id)
        return self.submit_action(player.id, action.type, action.amount)

    def set_difficulty(self, level: Union[Difficulty, str]) -> Difficulty:
        if isinstance(level, str):
            level = Difficulty.parse(level)
        state = self.state.copy()
        state.difficulty = level
        self.state = state
        return level

    def subscribe(self, listener: ActionListener) -> Callable[[], None]:
        """
        Register a callback for completed actions.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def get_legal_actions(self, seat_id: Optional[int] = None) -> List[Dict[str, Any]]:
        return legal_actions(self.state, seat_id)

    def get_winners(self) -> List[Dict[str, Any]]:
        """Winner information after the hand is complete."""
        if self.state.phase != GamePhase.SHOWDOWN:
            return []
        return [w.to_dict() for w in self.state.winners]

    def get_state(self, for_player_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Get the current game state.

        Args:
            for_player_id: If specified, include private info for this seat

        Returns:
            Dict with public_info and private_info
        """
        state = self.state
        public_info = state.to_dict(for_player_id=for_player_id)

        private_info: Dict[str, Any] = {}
        player = state.get_player(for_player_id) if for_player_id is not None else None
        if player is not None:
            to_call = max(0, state.current_bet - player.current_bet)
            cards = player.hole_cards + state.community_cards
            private_info = {
                "hand": [c.to_dict() for c in player.hole_cards],
                "is_turn": state.current_player is not None and state.current_player.id == player.id,
                "available_moves": [a["type"] for a in legal_actions(state, player.id)],
                "legal_actions": legal_actions(state, player.id),
                "chips_to_call": min(to_call, player.chips),
                "min_raise_to": min_raise_total(state.current_bet, state.min_raise),
                "hand_rank": evaluate_hand(cards).name if player.hole_cards else None,
                "hand_description": get_hand_description(cards) if player.hole_cards else None,
            }

        return {
            "public_info": public_info,
            "private_info": private_info,
        }

    def _after_transition(self, phase_before: GamePhase) -> None:
        if self.state.phase == phase_before:
            return
        if self.state.phase == GamePhase.SHOWDOWN:
            self._log_action("SHOWDOWN", {"winners": [w.to_dict() for w in self.state.winners]})
        else:
            self._log_action(self.state.phase.name, {
                "cards": [str(c) for c in self.state.community_cards],
            })

    def _log_action(self, action: str, details: Dict[str, Any]) -> None:
        """Log an action to hand history."""
        self.hand_history.append({
            "action": action,
            "phase": self.state.phase.name,
            **details
        })

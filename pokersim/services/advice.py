"""
Coaching advice from an OpenAI-compatible chat completion endpoint.

The service formats the human seat's situation into a short prompt and
returns whatever prose comes back. It never touches the game state, and
every failure (no key configured, network, quota, malformed or empty
response) degrades to FALLBACK_ADVICE.
"""

from __future__ import annotations
import logging
from typing import Optional

from openai import AsyncOpenAI

from pokersim.config import AdviceSettings
from pokersim.core.hand import evaluate_hand
from pokersim.core.player import Player
from pokersim.core.state import GameState


logger = logging.getLogger(__name__)

FALLBACK_ADVICE = "I can't analyze the table right now. Trust your gut!"

SYSTEM_PROMPT = "You are a professional world-class poker coach."

PROMPT_TEMPLATE = """Analyze this Texas Hold'em situation concisely and give the best move.

Current Phase: {phase}
My Hole Cards: {hole_cards}
Community Cards: {community_cards}
My Chip Stack: {chips}
Current Pot: {pot}
Active Opponents: {opponents}
Cost to Call: {to_call}
Pot Odds: {pot_odds}
My Hand Rank: {hand_rank}

Advise on whether to Fold, Check, Call, or Raise, and briefly explain why based on pot odds and hand strength. Keep it under 50 words."""


def build_advice_prompt(state: GameState, player: Player) -> str:
    """
    Format the seat's situation for the coach.

    Active opponents are the other seats still contesting the pot. Pot odds
    are cost / (pot + cost), "N/A" when there is nothing to call.
    """
    to_call = max(0, state.current_bet - player.current_bet)
    opponents = sum(
        1 for p in state.players
        if p.id != player.id and p.is_in_hand
    )
    hand = evaluate_hand(player.hole_cards + state.community_cards)

    return PROMPT_TEMPLATE.format(
        phase=state.phase.value,
        hole_cards=", ".join(c.long_name for c in player.hole_cards),
        community_cards=", ".join(c.long_name for c in state.community_cards) or "None",
        chips=player.chips,
        pot=state.pot,
        opponents=opponents,
        to_call=to_call,
        pot_odds=f"{to_call / (state.pot + to_call):.2f}" if to_call > 0 else "N/A",
        hand_rank=hand.name,
    )


class AdviceService:
    """
    One-shot advice requests.

    Usage:
        service = AdviceService(AdviceSettings.from_env())
        text = await service.get_advice(game.state, player_id=0)
    """

    def __init__(self, settings: Optional[AdviceSettings] = None, client: Optional[AsyncOpenAI] = None):
        """
        Args:
            settings: Endpoint settings (default: from environment)
            client: Preconfigured client, mainly for tests
        """
        self.settings = settings or AdviceSettings.from_env()
        self.client = client
        if self.client is None and self.settings.enabled:
            self.client = AsyncOpenAI(
                api_key=self.settings.api_key,
                base_url=self.settings.base_url,
                timeout=self.settings.timeout,
            )
            logger.info(f"Advice client configured with model {self.settings.model}")

    @property
    def available(self) -> bool:
        return self.client is not None

    async def get_advice(self, state: GameState, player_id: int) -> str:
        """Advice text for `player_id`, or FALLBACK_ADVICE on any failure."""
        player = state.get_player(player_id)
        if player is None or not player.hole_cards:
            return FALLBACK_ADVICE
        if self.client is None:
            logger.warning("Advice requested but no API key is configured")
            return FALLBACK_ADVICE

        prompt = build_advice_prompt(state, player)
        try:
            response = await self.client.chat.completions.create(
                model=self.settings.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=self.settings.max_tokens,
            )
            text = response.choices[0].message.content
        except Exception as e:
            logger.error(f"Advice request failed: {e}")
            return FALLBACK_ADVICE

        if not text or not text.strip():
            logger.error("Advice response was empty")
            return FALLBACK_ADVICE
        return text.strip()

"""
pokersim Services - integrations outside the game engine
"""

from pokersim.services.advice import AdviceService, build_advice_prompt, FALLBACK_ADVICE

__all__ = ["AdviceService", "build_advice_prompt", "FALLBACK_ADVICE"]

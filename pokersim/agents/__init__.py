"""
pokersim Agents - seat controllers

This module provides the base agent interface, the heuristic bots that
fill the table, and simple scripted agents for simulations.
"""

from pokersim.agents.base import BaseAgent, HumanAgent
from pokersim.agents.bot import BotAgent, BotProfile, PROFILES, decide, legalize
from pokersim.agents.simple import CallAgent, FoldAgent

__all__ = [
    "BaseAgent",
    "HumanAgent",
    "BotAgent",
    "BotProfile",
    "PROFILES",
    "decide",
    "legalize",
    "CallAgent",
    "FoldAgent",
]

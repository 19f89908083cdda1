"""
Exceptions raised by the poker engine.
"""


class PokerError(Exception):
    """Base class for engine errors."""


class IllegalActionError(PokerError, ValueError):
    """
    An action that is not legal in the current betting state.

    Examples: checking while facing a bet, raising below the minimum,
    re-raising after a short all-in the seat has already answered.
    """

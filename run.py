#!/usr/bin/env python3
"""
pokersim - Server Startup Script

Usage:
    python run.py [--host HOST] [--port PORT] [--reload]
    python run.py --simulate 200 [--seed 7] [--difficulty Hard]
"""

import argparse
import logging

import uvicorn

from pokersim.config import TableConfig
from pokersim.core.game import TexasHoldemGame
from pokersim.core.rules import Difficulty
from pokersim.simulate import bot_table, simulate_hands, summarize


def main():
    parser = argparse.ArgumentParser(description="pokersim Server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--simulate", type=int, metavar="HANDS", help="Play bots against each other instead of serving")
    parser.add_argument("--seed", type=int, default=None, help="Seed for shuffles and bot decisions")
    parser.add_argument("--difficulty", default="Medium", help="Bot difficulty (Easy, Medium, Hard)")
    args = parser.parse_args()

    if args.simulate:
        logging.basicConfig(level=logging.INFO)
        game = TexasHoldemGame(
            TableConfig(human_seat=None),
            difficulty=Difficulty.parse(args.difficulty),
            seed=args.seed,
        )
        result = simulate_hands(game, bot_table(game), max_hands=args.simulate, dealer_index=0)
        print(summarize(result, [p.name for p in game.players]))
        return

    uvicorn.run(
        "pokersim.server.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()

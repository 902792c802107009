#!/usr/bin/env python3
"""
Doomsday Headless Planner Simulator

Generates random bunker fields, runs the winning-strategy planner for one
faction, and checks every plan by replaying it. When a block hash gives no
guaranteed line the simulator draws the next one, the way a live caller
re-plans each time a new hash is committed.

Usage:
    python3 tools/simulator.py                      # 200 games, 30 bunkers, seed 42
    python3 tools/simulator.py --games 1000         # more games
    python3 tools/simulator.py --bunkers 80         # bigger fields
    python3 tools/simulator.py --faction-share 0.5  # faction owns half the bunkers
    python3 tools/simulator.py --rounds 1           # single hash per game, no re-planning
    python3 tools/simulator.py --verbose            # per-game logs
"""

import argparse
import logging
import os
import random
import sys
from dataclasses import dataclass

# Add doomsday dir to path so a source checkout runs without installing
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "doomsday"))

from config import MAP_WIDTH, MAP_HEIGHT, DAO_ADDRESS  # noqa: E402
from game import Bunker, Doomsday  # noqa: E402
from planner import find_winning_strategy, replay  # noqa: E402

log = logging.getLogger("simulator")

MAX_REINFORCEMENT = 3
OPPONENTS = 8  # distinct non-faction owners

# ============================================================================
# Field generation
# ============================================================================

def generate_game(rng, num_bunkers, faction_share, faction=DAO_ADDRESS):
    """Random field with at least one faction bunker and one opponent."""
    bunkers = {}
    for i in range(num_bunkers):
        token_id = i + 1
        if i == 0:
            owner = faction
        elif i == 1:
            owner = f"0xopponent{rng.randrange(OPPONENTS)}"
        elif rng.random() < faction_share:
            owner = faction
        else:
            owner = f"0xopponent{rng.randrange(OPPONENTS)}"
        reinforcement = rng.randint(0, MAX_REINFORCEMENT)
        bunkers[token_id] = Bunker(
            token_id=token_id,
            owner=owner,
            x=rng.randrange(MAP_WIDTH) - MAP_WIDTH // 2,
            y=rng.randrange(MAP_HEIGHT) - MAP_HEIGHT // 2,
            reinforcement=reinforcement,
            damage=rng.randint(0, reinforcement),
        )
    return Doomsday(bunkers, rng.getrandbits(256))

# ============================================================================
# Game runner
# ============================================================================

@dataclass
class GameResult:
    won: bool
    attempts: int      # block hashes tried
    plan_length: int
    population: int
    faction_bunkers: int

def run_game(seed, num_bunkers, faction_share, max_rounds, verbose=False):
    """Plan one field, re-drawing the block hash up to max_rounds times."""
    rng = random.Random(seed)
    game = generate_game(rng, num_bunkers, faction_share)
    owned = len(game.bunkers_of(DAO_ADDRESS))

    for attempt in range(1, max_rounds + 1):
        actions = find_winning_strategy(game, DAO_ADDRESS)
        if actions:
            winner = replay(game.clone(), actions)
            if winner is None or winner.owner != DAO_ADDRESS:
                raise AssertionError(f"seed {seed}: plan replays to {winner}")
            if verbose:
                log.info(f"seed {seed}: won on hash #{attempt} with {len(actions)} actions, keeper #{winner.token_id}")
            return GameResult(True, attempt, len(actions), num_bunkers, owned)
        game.set_seed(rng.getrandbits(256))

    if verbose:
        log.info(f"seed {seed}: no plan after {max_rounds} hashes")
    return GameResult(False, max_rounds, 0, num_bunkers, owned)

# ============================================================================
# Simulation
# ============================================================================

def run_simulation(num_games, num_bunkers, faction_share, base_seed, max_rounds, verbose=False):
    """Run all games, print a summary and return the results."""
    results = [
        run_game(base_seed + i, num_bunkers, faction_share, max_rounds, verbose)
        for i in range(num_games)
    ]

    wins = [r for r in results if r.won]
    n = len(results)
    print(f"\n{'='*60}")
    print(f"  DOOMSDAY PLANNER SIMULATION: {n} games, {num_bunkers} bunkers")
    print(f"{'='*60}\n")
    print(f"{'Win rate':<24} {len(wins) / n * 100 if n else 0:>8.1f}%")
    if wins:
        print(f"{'Avg plan length':<24} {sum(r.plan_length for r in wins) / len(wins):>8.1f}")
        print(f"{'Avg hashes to plan':<24} {sum(r.attempts for r in wins) / len(wins):>8.2f}")
        print(f"{'First-hash wins':<24} {sum(1 for r in wins if r.attempts == 1):>8}")
    print(f"{'Avg faction bunkers':<24} {sum(r.faction_bunkers for r in results) / n if n else 0:>8.1f}")
    print(f"\n{'='*60}")
    return results

# ============================================================================
# CLI
# ============================================================================

def main():
    parser = argparse.ArgumentParser(description="Doomsday headless planner simulator")
    parser.add_argument("--games", type=int, default=200, help="Games to simulate (default: 200)")
    parser.add_argument("--bunkers", type=int, default=30, help="Bunkers per field (default: 30)")
    parser.add_argument("--faction-share", type=float, default=0.3, help="Chance a bunker belongs to the faction")
    parser.add_argument("--rounds", type=int, default=10, help="Block hashes to try per game (default: 10)")
    parser.add_argument("--seed", type=int, default=42, help="Base RNG seed (default: 42)")
    parser.add_argument("--verbose", action="store_true", help="Per-game logs")
    args = parser.parse_args()

    if args.bunkers < 2:
        parser.error("--bunkers must be at least 2")

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.ERROR,
        format="%(asctime)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    print("Doomsday Planner Simulator")
    print(f"Games: {args.games} | Bunkers: {args.bunkers} | Faction share: {args.faction_share} | Seed: {args.seed}")
    run_simulation(args.games, args.bunkers, args.faction_share, args.seed, args.rounds, args.verbose)

if __name__ == "__main__":
    main()

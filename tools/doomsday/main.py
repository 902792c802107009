#!/usr/bin/env python3
"""
Doomsday Hunter: plan a guaranteed win for one faction from a state snapshot.

Loads a snapshot of the live bunkers and the current block hash, runs the
greedy planner, verifies the plan by replaying it on a fresh copy, and prints
the moves, the contract calls and the bounty calldata as JSON.

Usage:
    python main.py snapshot.json                        # plan for the DAO
    python main.py snapshot.json --faction 0xabc...     # plan for another owner
    python main.py snapshot.json --seed 0x1234...       # plan against a newer block hash
    python main.py snapshot.json --out calls.json       # also write the multicall file
"""

import argparse
import json
import logging
import sys

from config import DAO_ADDRESS
from game import GameRuleError, find_closest, not_owned_by
from planner import find_winning_strategy, replay, summarize, keeper_distance
from state import load_snapshot, parse_seed
from executor import actions_to_calls, bounty_calldata, write_calls

log = logging.getLogger("main")

ZERO_ADDRESS = "0x" + "0" * 40


def build_report(game, faction: str, bounty_address: str) -> dict:
    """Plan and verify. Returns the report dict, or None when no plan exists."""
    impact = game.current_impact()
    log.info(
        f"Impact ({impact.x}, {impact.y}) r={impact.radius} | "
        f"{game.population()} alive, {len(game.all_vulnerable())} vulnerable"
    )
    exposed = find_closest(game, impact, not_owned_by(faction))
    if exposed is not None:
        log.info(f"Most exposed opponent: #{exposed}")

    actions = find_winning_strategy(game, faction)
    if not actions:
        return None

    winner = replay(game.clone(), actions)
    if winner is None or winner.owner != faction:
        raise GameRuleError("plan does not replay to a faction win")

    counts = summarize(actions)
    log.info(
        f"Winner #{winner.token_id} (d²={keeper_distance(game, winner.token_id)}) | "
        f"{counts['hit']}H {counts['evacuate']}E {counts['transfer']}T"
    )

    winner_id, hits, evacuations, transfers = bounty_calldata(winner.token_id, actions)
    return {
        "faction": faction,
        "winner": winner.token_id,
        "moves": [{"move": a.move, "tokenId": a.token_id} for a in actions],
        "calls": actions_to_calls(actions, faction, bounty_address),
        "bounty": {
            "winnerId": winner_id,
            "hits": hits,
            "evacuations": evacuations,
            "transfers": transfers,
        },
    }


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Doomsday winning-strategy planner")
    parser.add_argument("snapshot", help="JSON snapshot: {seed, bunkers: [...]}")
    parser.add_argument("--faction", default=DAO_ADDRESS, help="Owner that must win (default: DAO)")
    parser.add_argument("--seed", help="Override the snapshot's block hash")
    parser.add_argument("--bounty", default=ZERO_ADDRESS, help="Bounty contract receiving the keeper")
    parser.add_argument("--out", help="Also write the multicall JSON here")
    parser.add_argument("--verbose", action="store_true", help="Log every simulated move")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    faction = args.faction.lower()
    try:
        game = load_snapshot(args.snapshot)
        if args.seed is not None:
            game.set_seed(parse_seed(args.seed))
        report = build_report(game, faction, args.bounty.lower())
    except (OSError, KeyError, ValueError, GameRuleError) as e:
        log.error(f"Cannot plan: {e!r}")
        return 2

    if report is None:
        log.warning(f"No guaranteed win for {faction} with this seed")
        return 1

    if args.out:
        write_calls(report["calls"], args.out)
    print(json.dumps(report, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())

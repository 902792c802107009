"""Game state loading from ground-truth snapshots."""

import json
import logging

from config import IMPACT_BLOCK_INTERVAL, ELIMINATION_BLOCK_OFFSET
from game import Bunker, Doomsday, canonical_fingerprint

log = logging.getLogger("state")


def parse_seed(value) -> int:
    """Block hash as int. Accepts ints, 0x-prefixed hex and decimal strings."""
    if isinstance(value, bool):
        raise ValueError(f"Bad seed: {value!r}")
    if isinstance(value, int):
        seed = value
    elif isinstance(value, str):
        text = value.strip()
        seed = int(text, 16) if text.lower().startswith("0x") else int(text)
    else:
        raise ValueError(f"Bad seed: {value!r}")
    if seed < 0:
        raise ValueError(f"Seed must be unsigned: {value!r}")
    return seed


def _parse_fingerprint(value) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Bad lastImpact: {value!r}")
    try:
        return canonical_fingerprint(value)
    except TypeError as e:
        raise ValueError(f"Bad lastImpact: {value!r}") from e


def parse_bunker(node: dict) -> Bunker:
    """Build a Bunker from one (tokenId, owner, x, y, reinforcement, damage, lastImpact) record."""
    bunker = Bunker(
        token_id=int(node["tokenId"]),
        owner=str(node["owner"]).lower(),
        x=int(node["x"]),
        y=int(node["y"]),
        reinforcement=int(node["reinforcement"]),
        damage=int(node.get("damage", 0)),
        last_impact=_parse_fingerprint(node.get("lastImpact", 0)),
    )
    if bunker.reinforcement < 0:
        raise ValueError(f"Bunker #{bunker.token_id}: negative reinforcement")
    if bunker.damage > bunker.reinforcement:
        raise ValueError(f"Bunker #{bunker.token_id}: damage exceeds reinforcement")
    return bunker


def build_game(nodes: list, seed) -> Doomsday:
    bunkers = {}
    for node in nodes:
        bunker = parse_bunker(node)
        if bunker.token_id in bunkers:
            raise ValueError(f"Duplicate bunker #{bunker.token_id}")
        bunkers[bunker.token_id] = bunker
    return Doomsday(bunkers, parse_seed(seed))


def load_snapshot(path) -> Doomsday:
    """Read {"seed": ..., "bunkers": [...]} from a JSON file."""
    with open(path) as f:
        data = json.load(f)
    game = build_game(data["bunkers"], data["seed"])
    log.info(f"Loaded {game.population()} bunkers from {path}")
    return game


def elimination_block(block_number: int) -> int:
    """Block whose hash seeds the impact in force at `block_number`."""
    return block_number - block_number % IMPACT_BLOCK_INTERVAL - ELIMINATION_BLOCK_OFFSET

"""Shared fixtures for the Doomsday simulator tests."""

import pytest

from config import MAP_WIDTH, MAP_HEIGHT
from game import Bunker, Doomsday

FACTION = "0x7bb7bd0e8923b1f698eeaf0ab49834b8f1810d58"
OTHER = "0x39355a7b5f15361582e55852af9c6b061ba4c10d"

# Block hash whose impact is centered on (0, 0) with the minimum radius
CENTER_SEED = MAP_WIDTH // 2 + (MAP_HEIGHT // 2) * MAP_WIDTH


def bunker(token_id, owner, x, y, reinforcement=0, damage=0, last_impact=0):
    return Bunker(token_id, owner, x, y, reinforcement, damage, last_impact)


@pytest.fixture
def build():
    """Factory: build(bunker, bunker, ..., seed=CENTER_SEED) -> Doomsday."""
    def _build(*bunkers, seed=CENTER_SEED):
        return Doomsday({b.token_id: b for b in bunkers}, seed)
    return _build

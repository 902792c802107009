"""Off-chain mirror of the Doomsday contract: bunkers, impacts, hits and evacuations.

Every rule here must agree with the contract move-for-move, otherwise a plan
computed against this model reverts when replayed on-chain. All geometry uses
Python ints so nothing is truncated to machine words.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from functools import partial
from typing import Callable, Optional

from config import (
    MAP_WIDTH, MAP_HEIGHT, BASE_BLAST_RADIUS,
    SEED_MODULUS, FINGERPRINT_MODULUS,
    FINGERPRINT_COORD_BYTES, FINGERPRINT_RADIUS_BYTES,
)

log = logging.getLogger("game")


class Stage(Enum):
    APOCALYPSE = 2
    POST_APOCALYPSE = 3


# ── Errors ─────────────────────────────────────────────────────────

class GameRuleError(Exception):
    """A move the contract would revert."""


class WrongStageError(GameRuleError):
    pass


class InvalidTokenError(GameRuleError):
    pass


class VulnerabilityError(GameRuleError):
    pass


class NoWinnerError(GameRuleError):
    pass


# ── Data ───────────────────────────────────────────────────────────

@dataclass
class Bunker:
    token_id: int
    owner: str
    x: int
    y: int
    reinforcement: int
    damage: int = 0
    last_impact: object = 0  # fingerprint: int, hex str or bytes


@dataclass(frozen=True)
class Impact:
    x: int
    y: int
    radius: int
    fingerprint: int


# ── Fingerprints ───────────────────────────────────────────────────

def encode_impact(x: int, y: int, radius: int) -> int:
    """
    Tight-pack (int64[] [x, y], int64 radius) the way the contract does.
    Array elements take a full 32-byte word each, the radius takes 8 bytes.
    """
    packed = (
        x.to_bytes(FINGERPRINT_COORD_BYTES, "big", signed=True)
        + y.to_bytes(FINGERPRINT_COORD_BYTES, "big", signed=True)
        + radius.to_bytes(FINGERPRINT_RADIUS_BYTES, "big", signed=True)
    )
    return int.from_bytes(packed, "big")


def canonical_fingerprint(value) -> int:
    """Reduce a raw or stored fingerprint so equal impacts compare equal."""
    if isinstance(value, (bytes, bytearray)):
        value = int.from_bytes(value, "big")
    elif isinstance(value, str):
        text = value.strip()
        value = int(text, 16) if text not in ("", "0x", "0X") else 0
    elif not isinstance(value, int):
        raise TypeError(f"Unsupported fingerprint type: {type(value).__name__}")
    return value % FINGERPRINT_MODULUS


# ── Geometry ───────────────────────────────────────────────────────

def distance_squared(x1: int, y1: int, x2: int, y2: int) -> int:
    """Squared distance on a map that wraps east-west (not north-south)."""
    dx = x1 - x2
    dy = y1 - y2
    return min(
        dx ** 2 + dy ** 2,
        (dx + MAP_WIDTH) ** 2 + dy ** 2,
        (dx - MAP_WIDTH) ** 2 + dy ** 2,
    )


# ── Game ───────────────────────────────────────────────────────────

class Doomsday:
    """Registry of live bunkers plus the seed of the current impact."""

    def __init__(self, bunkers: dict, seed: int):
        self.bunkers = bunkers  # {token_id: Bunker}, insertion order matters
        self.seed = seed

    def clone(self) -> "Doomsday":
        bunkers = {token_id: replace(b) for token_id, b in self.bunkers.items()}
        return Doomsday(bunkers, self.seed)

    def set_seed(self, value: int):
        self.seed = value

    def population(self) -> int:
        return len(self.bunkers)

    def stage(self) -> Stage:
        return Stage.APOCALYPSE if len(self.bunkers) > 1 else Stage.POST_APOCALYPSE

    def is_valid_token(self, token_id: int) -> bool:
        return token_id in self.bunkers

    def bunkers_of(self, owner: str) -> list:
        return [tid for tid, b in self.bunkers.items() if b.owner == owner]

    def current_impact(self) -> Impact:
        seed = self.seed % SEED_MODULUS
        # Min radius is half map height divided by population, never below base
        min_radius = MAP_HEIGHT // 2 // (self.population() + 1)
        if min_radius < BASE_BLAST_RADIUS:
            min_radius = BASE_BLAST_RADIUS

        # Same reduced seed, consumed in this order
        x = seed % MAP_WIDTH - MAP_WIDTH // 2
        y = (seed // MAP_WIDTH) % MAP_HEIGHT - MAP_HEIGHT // 2
        radius = (seed // MAP_WIDTH // MAP_HEIGHT) % min_radius + min_radius
        return Impact(x, y, radius, encode_impact(x, y, radius))

    def _get(self, token_id: int) -> Bunker:
        bunker = self.bunkers.get(token_id)
        if bunker is None:
            raise InvalidTokenError(f"invalid id: {token_id}")
        return bunker

    def is_vulnerable(self, token_id: int) -> bool:
        bunker = self._get(token_id)
        impact = self.current_impact()

        # Already resolved this exact impact
        if canonical_fingerprint(bunker.last_impact) == canonical_fingerprint(impact.fingerprint):
            return False

        return distance_squared(bunker.x, bunker.y, impact.x, impact.y) < impact.radius ** 2

    def all_vulnerable(self) -> list:
        if self.stage() == Stage.POST_APOCALYPSE:
            return []
        return [tid for tid in self.bunkers if self.is_vulnerable(tid)]

    def confirm_hit(self, token_id: int):
        if self.stage() != Stage.APOCALYPSE:
            raise WrongStageError("wrong stage")
        bunker = self._get(token_id)
        if not self.is_vulnerable(token_id):
            raise VulnerabilityError(f"not vulnerable: {token_id}")

        if bunker.damage < bunker.reinforcement:
            bunker.damage += 1
            bunker.last_impact = canonical_fingerprint(self.current_impact().fingerprint)
            log.debug(f"Hit #{token_id}: damage {bunker.damage}/{bunker.reinforcement}")
        else:
            del self.bunkers[token_id]
            log.debug(f"Hit #{token_id}: eliminated, {self.population()} left")

    def evacuate(self, token_id: int):
        if self.stage() != Stage.APOCALYPSE:
            raise WrongStageError("wrong stage")
        self._get(token_id)
        if self.is_vulnerable(token_id):
            raise VulnerabilityError(f"vulnerable: {token_id}")
        del self.bunkers[token_id]
        log.debug(f"Evacuated #{token_id}, {self.population()} left")

    def winner(self) -> Bunker:
        if len(self.bunkers) != 1:
            raise NoWinnerError(f"{len(self.bunkers)} bunkers remain")
        (bunker,) = self.bunkers.values()
        return replace(bunker)


# ── Search helpers ─────────────────────────────────────────────────

Include = Callable[[int, Bunker], bool]


def _owner_is(owner: str, token_id: int, bunker: Bunker) -> bool:
    return bunker.owner == owner


def _owner_is_not(owner: str, token_id: int, bunker: Bunker) -> bool:
    return bunker.owner != owner


def _member_of(token_ids: frozenset, token_id: int, bunker: Bunker) -> bool:
    return token_id in token_ids


def owned_by(owner: str) -> Include:
    return partial(_owner_is, owner)


def not_owned_by(owner: str) -> Include:
    return partial(_owner_is_not, owner)


def member_of(token_ids) -> Include:
    return partial(_member_of, frozenset(token_ids))


def find_farthest(game: Doomsday, impact: Impact, include: Include) -> Optional[int]:
    """Included bunker farthest from the epicenter; first one wins ties."""
    best_id = None
    best_distance = 0
    for token_id, bunker in game.bunkers.items():
        if not include(token_id, bunker):
            continue
        d = distance_squared(bunker.x, bunker.y, impact.x, impact.y)
        if best_id is None or d > best_distance:
            best_id, best_distance = token_id, d
    return best_id


def find_closest(game: Doomsday, impact: Impact, include: Include) -> Optional[int]:
    """Included bunker closest to the epicenter; first one wins ties."""
    best_id = None
    best_distance = 0
    for token_id, bunker in game.bunkers.items():
        if not include(token_id, bunker):
            continue
        d = distance_squared(bunker.x, bunker.y, impact.x, impact.y)
        if best_id is None or d < best_distance:
            best_id, best_distance = token_id, d
    return best_id

"""Greedy planner: find a move sequence that leaves one faction holding the last bunker."""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Optional

from config import HIT, EVACUATE, TRANSFER
from game import (
    Doomsday, Bunker, Stage, GameRuleError, WrongStageError, InvalidTokenError,
    distance_squared, find_farthest, owned_by, member_of,
)

log = logging.getLogger("planner")

# ── Action dataclasses ──────────────────────────────────────────────

@dataclass
class HitAction:
    token_id: int
    move = HIT

@dataclass
class EvacuateAction:
    token_id: int
    move = EVACUATE

@dataclass
class TransferAction:
    token_id: int
    move = TRANSFER


ACTION_TYPES = {HIT: HitAction, EVACUATE: EvacuateAction, TRANSFER: TransferAction}


def make_action(move: str, token_id: int):
    if move not in ACTION_TYPES:
        raise ValueError(f"Unknown move: {move!r}")
    return ACTION_TYPES[move](token_id)


# ── Planning ───────────────────────────────────────────────────────

def find_winning_strategy(game: Doomsday, faction: str) -> list:
    """
    Plan hits, evacuations and the keeper transfer so that `faction` ends up
    owning the sole surviving bunker.

    Works on a private clone; `game` is never touched. Every action is applied
    to the clone as soon as it is planned, so each decision sees the state the
    contract will be in at that point. Returns [] when no guaranteed line
    exists.
    """
    game = game.clone()
    if game.stage() == Stage.POST_APOCALYPSE:
        raise WrongStageError("wrong stage")

    owned = len(game.bunkers_of(faction))
    if owned == 0:
        log.warning(f"Faction {faction} owns no bunkers")
        return []

    # Keeper: the faction bunker least likely to be struck soon
    impact = game.current_impact()
    keeper = find_farthest(game, impact, owned_by(faction))
    if game.bunkers[keeper].owner != faction:
        raise GameRuleError(f"keeper #{keeper} is not owned by {faction}")
    log.info(f"Keeper #{keeper} of {owned} owned, {game.population()} alive")

    actions = []
    locked = False

    while True:
        if owned == 0:
            log.warning("Ran out of faction bunkers")
            return []
        if game.stage() == Stage.POST_APOCALYPSE:
            if not locked:
                log.warning(f"Keeper #{keeper} never got out of the blast")
                return []
            log.info(f"Plan found: {len(actions)} actions, winner #{keeper}")
            return actions

        if not locked and not game.is_vulnerable(keeper):
            locked = True
            actions.append(TransferAction(keeper))

        # Chip every opponent that survives a hit, defer the ones that die
        impact = game.current_impact()
        lethal = []
        for token_id, bunker in list(game.bunkers.items()):
            if bunker.owner == faction or not game.is_vulnerable(token_id):
                continue
            if bunker.reinforcement > bunker.damage:
                actions.append(HitAction(token_id))
                game.confirm_hit(token_id)
            else:
                lethal.append(token_id)

        # Eliminate the one hardest to reach once the radius changes
        target = find_farthest(game, impact, member_of(lethal))
        if target is not None:
            actions.append(HitAction(target))
            game.confirm_hit(target)
            continue

        evacuee = _next_evacuee(game, faction, keeper)
        if evacuee is None:
            log.warning("No faction bunker left to sacrifice")
            return []
        _retire(game, evacuee, actions)

        if not locked and not game.is_vulnerable(keeper):
            locked = True
            actions.append(TransferAction(keeper))
        owned -= 1


def _next_evacuee(game: Doomsday, faction: str, keeper: int) -> Optional[int]:
    for token_id, bunker in game.bunkers.items():
        if bunker.owner == faction and token_id != keeper:
            return token_id
    return None


def _retire(game: Doomsday, token_id: int, actions: list):
    """Take one of our own bunkers off the board."""
    bunker = game.bunkers[token_id]
    if game.is_vulnerable(token_id):
        # Must resolve the blast first; a hit it cannot absorb removes it anyway
        survives = bunker.reinforcement > bunker.damage
        actions.append(HitAction(token_id))
        game.confirm_hit(token_id)
        if survives:
            actions.append(EvacuateAction(token_id))
            game.evacuate(token_id)
    else:
        actions.append(EvacuateAction(token_id))
        game.evacuate(token_id)


# ── Replay ─────────────────────────────────────────────────────────

def replay(game: Doomsday, actions: list) -> Optional[Bunker]:
    """
    Apply a plan to `game` in order. Transfers only move the token to the
    bounty contract, so they leave the simulated board alone.
    Returns the winner once a single bunker remains, else None.
    """
    for action in actions:
        if action.move == HIT:
            game.confirm_hit(action.token_id)
        elif action.move == EVACUATE:
            game.evacuate(action.token_id)
        elif action.move == TRANSFER:
            if not game.is_valid_token(action.token_id):
                raise InvalidTokenError(f"invalid id: {action.token_id}")
        else:
            raise ValueError(f"Unknown move: {action.move!r}")
    if game.population() == 1:
        return game.winner()
    return None


def summarize(actions: list) -> dict:
    counts = Counter(a.move for a in actions)
    return {move: counts.get(move, 0) for move in (HIT, EVACUATE, TRANSFER)}


def keeper_distance(game: Doomsday, token_id: int) -> int:
    """Squared distance from a bunker to the current epicenter."""
    impact = game.current_impact()
    bunker = game.bunkers[token_id]
    return distance_squared(bunker.x, bunker.y, impact.x, impact.y)

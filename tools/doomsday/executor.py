"""Multicall JSON builder for a finished plan. Nothing here submits transactions."""

import json
import logging

from config import DOOMSDAY_CONTRACT, ENTRYPOINTS, HIT, EVACUATE, TRANSFER

log = logging.getLogger("executor")


def actions_to_calls(actions: list, faction: str, bounty_address: str) -> list:
    """
    Convert plan actions to contract call entries, in plan order.
    The keeper transfer moves the token from the faction to the bounty contract.
    """
    calls = []
    for action in actions:
        if action.move in (HIT, EVACUATE):
            calldata = [str(action.token_id)]
        elif action.move == TRANSFER:
            calldata = [faction, bounty_address, str(action.token_id)]
        else:
            raise ValueError(f"Unknown move: {action.move!r}")
        calls.append({
            "contractAddress": DOOMSDAY_CONTRACT,
            "entrypoint": ENTRYPOINTS[action.move],
            "calldata": calldata,
        })
    return calls


def bounty_calldata(winner_id: int, actions: list) -> tuple:
    """
    Parallel (hits, evacuations, transfers) arrays for collectBounty.
    Slot i carries the token id in the array of step i's move and 0 elsewhere.
    """
    hits = [a.token_id if a.move == HIT else 0 for a in actions]
    evacuations = [a.token_id if a.move == EVACUATE else 0 for a in actions]
    transfers = [a.token_id if a.move == TRANSFER else 0 for a in actions]
    return winner_id, hits, evacuations, transfers


def write_calls(calls: list, filepath: str):
    with open(filepath, "w") as f:
        json.dump({"calls": calls}, f, indent=2)
    log.info(f"Wrote {len(calls)} calls to {filepath}")

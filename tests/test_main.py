"""
End-to-end tests for the planning CLI.
"""

import json

import pytest

from main import main
from conftest import FACTION, OTHER, CENTER_SEED

BOUNTY = "0x5fbdb2315678afecb367f032d93f642f64180aa3"


def write_snapshot(path, bunkers, seed=CENTER_SEED):
    path.write_text(json.dumps({"seed": hex(seed), "bunkers": bunkers}))
    return str(path)


def node(token_id, owner, x, y, reinforcement=0):
    return {"tokenId": token_id, "owner": owner, "x": x, "y": y,
            "reinforcement": reinforcement, "damage": 0, "lastImpact": "0x"}


@pytest.fixture
def winnable(tmp_path):
    return write_snapshot(tmp_path / "snapshot.json", [
        node(1, FACTION, 2000000, 1000000, reinforcement=5),
        node(2, OTHER, 60000, 0),
        node(3, OTHER, 0, 0),
    ])


class TestMain:

    def test_prints_plan(self, winnable, capsys):
        assert main([winnable, "--faction", FACTION, "--bounty", BOUNTY]) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["winner"] == 1
        assert report["moves"] == [
            {"move": "transfer", "tokenId": 1},
            {"move": "hit", "tokenId": 2},
            {"move": "hit", "tokenId": 3},
        ]
        assert report["calls"][0]["calldata"] == [FACTION, BOUNTY, "1"]
        assert report["bounty"] == {"winnerId": 1, "hits": [0, 2, 3], "evacuations": [0, 0, 0], "transfers": [1, 0, 0]}

    def test_faction_is_case_insensitive(self, winnable, capsys):
        assert main([winnable, "--faction", FACTION.upper().replace("0X", "0x")]) == 0
        assert json.loads(capsys.readouterr().out)["faction"] == FACTION

    def test_writes_calls_file(self, winnable, tmp_path, capsys):
        out = tmp_path / "calls.json"
        assert main([winnable, "--faction", FACTION, "--out", str(out)]) == 0
        report = json.loads(capsys.readouterr().out)
        assert json.loads(out.read_text()) == {"calls": report["calls"]}

    def test_seed_override(self, tmp_path, capsys):
        # Snapshot hash puts the blast far from everyone; the override centers it
        path = write_snapshot(tmp_path / "snapshot.json", [
            node(1, FACTION, 2000000, 1000000, reinforcement=5),
            node(2, OTHER, 60000, 0),
            node(3, OTHER, 0, 0),
        ], seed=0)
        assert main([path, "--faction", FACTION]) == 1
        assert main([path, "--faction", FACTION, "--seed", hex(CENTER_SEED)]) == 0

    def test_no_plan(self, tmp_path):
        path = write_snapshot(tmp_path / "snapshot.json", [
            node(1, FACTION, 0, 0, reinforcement=5),
            node(2, OTHER, 2000000, 1000000),
        ])
        assert main([path, "--faction", FACTION]) == 1

    def test_bad_input(self, tmp_path):
        assert main([str(tmp_path / "missing.json"), "--faction", FACTION]) == 2
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"bunkers": []}))
        assert main([str(bad), "--faction", FACTION]) == 2

    def test_bad_last_impact(self, tmp_path):
        bad = node(2, OTHER, 60000, 0)
        bad["lastImpact"] = 1.5
        path = write_snapshot(tmp_path / "snapshot.json", [node(1, FACTION, 2000000, 1000000), bad])
        assert main([path, "--faction", FACTION]) == 2

    def test_terminal_snapshot(self, tmp_path):
        path = write_snapshot(tmp_path / "snapshot.json", [node(1, FACTION, 0, 0)])
        assert main([path, "--faction", FACTION]) == 2

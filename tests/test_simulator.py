"""
Tests for the headless planner simulator.
"""

import random

from config import DAO_ADDRESS, MAP_WIDTH, MAP_HEIGHT
from simulator import generate_game, run_game, run_simulation


class TestGenerateGame:

    def test_field_shape(self):
        game = generate_game(random.Random(3), 12, 0.3)
        assert game.population() == 12
        assert game.bunkers[1].owner == DAO_ADDRESS
        assert game.bunkers[2].owner != DAO_ADDRESS
        for b in game.bunkers.values():
            assert -MAP_WIDTH // 2 <= b.x < MAP_WIDTH // 2
            assert -MAP_HEIGHT // 2 <= b.y <= MAP_HEIGHT // 2
            assert 0 <= b.damage <= b.reinforcement

    def test_reproducible(self):
        a = generate_game(random.Random(9), 10, 0.5)
        b = generate_game(random.Random(9), 10, 0.5)
        assert a.bunkers == b.bunkers and a.seed == b.seed


class TestRunGame:

    def test_deterministic(self):
        assert run_game(5, 15, 0.3, 5) == run_game(5, 15, 0.3, 5)

    def test_result_bounds(self):
        result = run_game(11, 10, 0.4, 3)
        assert 1 <= result.attempts <= 3
        assert result.population == 10
        assert result.faction_bunkers >= 1
        assert (result.plan_length > 0) == result.won


class TestRunSimulation:

    def test_summary(self, capsys):
        results = run_simulation(4, 8, 0.3, 42, 4)
        assert len(results) == 4
        out = capsys.readouterr().out
        assert "Win rate" in out

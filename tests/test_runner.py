"""
Tests for antmachine/services/runner.py

Tick driver, coarse locking, and the command line.
"""

import logging
import time

import pytest

from antmachine.services.runner import RunnerConfig, SimulationRunner, main


@pytest.fixture
def runner():
    r = SimulationRunner(RunnerConfig(num_ants=8, threads=2, seed=1))
    yield r
    r.close()


class TestRunnerConfig:
    """Tests for RunnerConfig."""

    def test_default_config(self):
        config = RunnerConfig()
        assert config.num_ants == 256
        assert config.threads == 16
        assert config.threaded is True
        assert config.max_ticks is None
        assert config.seed is None

    def test_invalid_threads(self):
        with pytest.raises(ValueError):
            SimulationRunner(RunnerConfig(num_ants=2, threads=0))

    def test_zero_threads_allowed_when_sequential(self):
        r = SimulationRunner(RunnerConfig(num_ants=2, threads=0, threaded=False))
        r.tick()
        assert r.ticks == 1

    def test_invalid_log_interval(self):
        with pytest.raises(ValueError):
            SimulationRunner(RunnerConfig(num_ants=2, log_interval=0))


class TestSimulationRunner:
    """Tests for SimulationRunner."""

    def test_tick(self, runner):
        micros = runner.tick()
        assert micros >= 0
        assert runner.ticks == 1
        assert len(runner.world.pheromones) == 8

    def test_sequential_tick(self):
        r = SimulationRunner(RunnerConfig(num_ants=5, threaded=False, seed=2))
        r.run(ticks=3)
        assert r.ticks == 3
        assert len(r.world.pheromones) == 15

    def test_run_limit(self, runner):
        runner.run(ticks=5)
        assert runner.ticks == 5
        assert runner.running is False

    def test_run_uses_max_ticks(self):
        r = SimulationRunner(RunnerConfig(num_ants=3, threaded=False, max_ticks=4))
        r.run()
        assert r.ticks == 4

    def test_snapshot_between_ticks(self, runner):
        runner.run(ticks=2)
        snap = runner.snapshot()
        assert snap.time == 2
        assert snap.num_ants == 8
        assert snap.num_pheromones == 16

    def test_background_start_stop(self, runner):
        runner.start()
        deadline = time.time() + 5.0
        while runner.ticks < 3 and time.time() < deadline:
            time.sleep(0.01)
        runner.stop(timeout=5.0)

        assert runner.ticks >= 3
        assert runner.running is False
        # World is whole after stopping: one deposit per ant per recent tick
        status = runner.get_status()
        assert status["ants"] == 8
        assert status["pheromones"] > 0

    def test_background_with_limit(self, runner):
        runner.start(ticks=4)
        runner.join(timeout=5.0)
        assert runner.ticks == 4

    def test_join_waits_for_background_loop(self, runner):
        runner.start(ticks=3)
        runner.join(timeout=5.0)
        assert runner.ticks == 3
        assert runner.running is False

    def test_join_without_thread(self, runner):
        runner.join(timeout=0.1)
        assert runner.ticks == 0

    def test_close_stops_loop_and_releases_pool(self):
        r = SimulationRunner(RunnerConfig(num_ants=8, threads=2, seed=2))
        r.start()
        deadline = time.time() + 5.0
        while r.ticks < 1 and time.time() < deadline:
            time.sleep(0.01)
        r.close()

        assert r.running is False
        assert r.world._executor is None

    def test_snapshots_during_background_run(self, runner):
        """Every snapshot is taken between ticks."""
        runner.start(ticks=10)
        for _ in range(20):
            snap = runner.snapshot()
            assert snap.num_ants == 8
            # Deposits land in whole ticks of 8 until pheromones start to expire
            if snap.time <= 10:
                assert snap.num_pheromones == 8 * snap.time
        runner.join(timeout=5.0)

    def test_logs_tick_statistics(self, runner, caplog):
        caplog.set_level(logging.INFO, logger="antmachine.services.runner")
        runner.tick()
        assert "8 ants" in caplog.text
        assert "8 pheromones" in caplog.text
        assert "micros to compute" in caplog.text

    def test_get_status(self, runner):
        status = runner.get_status()
        assert status == {
            "ants": 8,
            "pheromones": 0,
            "ticks": 0,
            "last_tick_micros": 0,
            "running": False,
        }


class TestMain:
    """Tests for the command line entry point."""

    def test_headless_run(self):
        main(["--ants", "4", "--ticks", "3", "--sequential", "--seed", "0"])

    def test_threaded_run(self):
        main(["--ants", "4", "--ticks", "2", "--threads", "2"])

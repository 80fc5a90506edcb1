"""
antmachine/services/runner.py

Simulation runner service.

The runner drives the tick loop:
1. Holds the world behind one coarse lock
2. Advances it one whole tick at a time (threaded or sequential)
3. Hands out snapshots taken between ticks, never during one
4. Logs per-tick statistics

Renderers and the tick loop run on different threads; the lock is the
only thing they share.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from antmachine.environments.world import World, WorldConfig, WorldSnapshot

logger = logging.getLogger(__name__)


@dataclass
class RunnerConfig:
    """Configuration for the simulation runner."""
    # Population
    num_ants: int = 256

    # Parallelism
    threaded: bool = True
    threads: int = 16

    # Loop behavior
    max_ticks: int | None = None  # None = run until stopped
    log_interval: int = 1  # Ticks between statistics lines

    # Random seed (None = fresh entropy, the normal mode)
    seed: int | None = None

    world: WorldConfig = field(default_factory=WorldConfig)


class SimulationRunner:
    """
    Owns a World and advances it under a lock.

    Runs either in the caller's thread (run) or in a background thread
    (start/stop).
    """

    def __init__(self, config: RunnerConfig | None = None):
        self.config = config or RunnerConfig()
        if self.config.threaded and self.config.threads < 1:
            raise ValueError(f"threads must be at least 1, got {self.config.threads}")
        if self.config.log_interval < 1:
            raise ValueError(
                f"log_interval must be at least 1, got {self.config.log_interval}"
            )

        self.world = World(
            self.config.num_ants,
            config=self.config.world,
            rng=np.random.default_rng(self.config.seed),
        )
        self._lock = threading.Lock()

        # Status
        self.running = False
        self.ticks = 0
        self.last_tick_micros = 0
        self._thread: threading.Thread | None = None
        self._stop_requested = threading.Event()

        logger.info(
            f"Runner initialized: {self.config.num_ants} ants, "
            f"{'threaded x' + str(self.config.threads) if self.config.threaded else 'sequential'}"
        )

    def tick(self) -> int:
        """
        Advance the world by one tick.

        Returns microseconds spent computing it.
        """
        with self._lock:
            start = time.perf_counter()
            if self.config.threaded:
                self.world.evolve_threaded(self.config.threads)
            else:
                self.world.evolve()
            micros = int((time.perf_counter() - start) * 1_000_000)

            self.ticks += 1
            self.last_tick_micros = micros

            if self.ticks % self.config.log_interval == 0:
                logger.info(
                    f"{len(self.world.ants)} ants\t"
                    f"{len(self.world.pheromones)} pheromones\t"
                    f"{self.ticks} evolution\t"
                    f"{micros} micros to compute"
                )
        return micros

    def snapshot(self) -> WorldSnapshot:
        """Consistent copy of the world between ticks."""
        with self._lock:
            return self.world.snapshot()

    def _done(self, limit: int | None) -> bool:
        return limit is not None and self.ticks >= limit

    def run(self, ticks: int | None = None) -> None:
        """
        Tick until the limit is reached or stop() is called.

        ticks overrides config.max_ticks; both None means forever.
        """
        self._stop_requested.clear()
        self._loop(ticks)

    def _loop(self, ticks: int | None) -> None:
        limit = ticks if ticks is not None else self.config.max_ticks
        self.running = True
        logger.info(f"Runner starting (limit={limit})")

        try:
            while not self._stop_requested.is_set() and not self._done(limit):
                self.tick()

        except KeyboardInterrupt:
            logger.info("Runner interrupted by user")

        finally:
            self.running = False
            logger.info(f"Runner stopped after {self.ticks} ticks")

    def _loop_background(self, ticks: int | None) -> None:
        try:
            self._loop(ticks)
        except Exception:
            logger.exception("Tick loop failed")

    def start(self, ticks: int | None = None) -> None:
        """Run the tick loop in a daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            logger.warning("Runner already started")
            return
        self._stop_requested.clear()
        self._thread = threading.Thread(
            target=self._loop_background,
            args=(ticks,),
            name="antmachine-ticks",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """Stop after the current tick and wait for the loop to exit."""
        self._stop_requested.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def join(self, timeout: float | None = None) -> None:
        """Wait for the background loop, if any, to finish."""
        if self._thread is not None:
            self._thread.join(timeout)

    def close(self) -> None:
        """Stop the loop and release the world's thread pool."""
        self.stop()
        self.world.close()

    def get_status(self) -> dict[str, Any]:
        """Get current runner status."""
        with self._lock:
            return {
                "ants": len(self.world.ants),
                "pheromones": len(self.world.pheromones),
                "ticks": self.ticks,
                "last_tick_micros": self.last_tick_micros,
                "running": self.running,
            }


def main(argv: list[str] | None = None) -> None:
    """
    Run the simulation from the command line.

    Headless unless --animate is given.
    """
    import argparse

    parser = argparse.ArgumentParser(description="Ant pheromone simulation")
    parser.add_argument("--ants", type=int, default=256)
    parser.add_argument("--threads", type=int, default=16)
    parser.add_argument("--sequential", action="store_true", help="Use the single-threaded tick")
    parser.add_argument("--ticks", type=int, default=None, help="Stop after this many ticks")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-interval", type=int, default=1)
    parser.add_argument("--animate", action="store_true", help="Show frames with matplotlib")
    parser.add_argument("--width", type=int, default=256)
    parser.add_argument("--height", type=int, default=256)
    parser.add_argument("--save", metavar="PATH", default=None, help="Write the final frame to an image file")
    parser.add_argument("--verbose", "-v", action="store_true")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    config = RunnerConfig(
        num_ants=args.ants,
        threaded=not args.sequential,
        threads=args.threads,
        max_ticks=args.ticks,
        log_interval=args.log_interval,
        seed=args.seed,
    )
    runner = SimulationRunner(config)

    try:
        if args.animate:
            from antmachine.observations.visualize import FrameConfig, animate

            animate(
                runner,
                frames=args.ticks,
                frame_config=FrameConfig(width=args.width, height=args.height),
            )
        else:
            runner.run()

        if args.save:
            from antmachine.observations.visualize import FrameConfig, save_frame

            save_frame(
                runner.snapshot(),
                args.save,
                FrameConfig(width=args.width, height=args.height),
            )
    finally:
        runner.close()


if __name__ == "__main__":
    main()

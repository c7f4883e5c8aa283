"""Engine layer: world loop and worker pool."""

from mimic.engine.worker_pool import WorkerPool
from mimic.engine.world_loop import WorldLoop

__all__ = ["WorkerPool", "WorldLoop"]

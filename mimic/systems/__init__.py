"""Engine systems: balance config store, stat scaling, spawning, RNG."""

from mimic.systems.config_file import ConfigFile
from mimic.systems.config_store import ConfigStore, ConfigUnavailableError
from mimic.systems.rng import DeterministicRNG

__all__ = ["ConfigFile", "ConfigStore", "ConfigUnavailableError", "DeterministicRNG"]

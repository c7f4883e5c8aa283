"""ConfigStore — the one live ``BalanceConfig`` shared by every mimic.

The store is an explicitly constructed handle passed to whoever needs it.
It materializes the config lazily on first ``get()`` and again after
``reset()``:

    Uninitialized --get()--> Materializing --> Ready --reset()--> Uninitialized

Readers take a lock-free fast path once Ready.  Materialization follows a
checked-read / lock / re-check / construct / publish sequence, so exactly one
thread builds the config and every caller receives the same finished,
immutable instance.  Publication is a single reference assignment.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from mimic.core.balance import BalanceConfig, create_defaults

logger = logging.getLogger(__name__)

ConfigLoader = Callable[[], Optional[BalanceConfig]]


class ConfigUnavailableError(RuntimeError):
    """No balance config could be produced, not even the defaults."""


class ConfigStore:
    """Thread-safe lazy holder for the active balance config."""

    __slots__ = ("_loader", "_config", "_lock", "_generation")

    def __init__(self, loader: ConfigLoader | None = None) -> None:
        self._loader = loader
        self._config: BalanceConfig | None = None
        self._lock = threading.Lock()
        self._generation = 0

    @property
    def ready(self) -> bool:
        return self._config is not None

    @property
    def generation(self) -> int:
        """Number of materializations so far; changes after every reload."""
        return self._generation

    def get(self) -> BalanceConfig:
        config = self._config
        if config is not None:
            return config
        with self._lock:
            config = self._config
            if config is None:
                config = self._materialize()
                self._generation += 1
                self._config = config
        return config

    def ensure_initialized(self) -> BalanceConfig:
        """Materialize eagerly; called once by the host at startup."""
        return self.get()

    def reset(self) -> None:
        """Drop the cached config; the next ``get()`` loads again."""
        with self._lock:
            self._config = None
        logger.info("Balance config cache reset")

    def reload(self) -> BalanceConfig:
        self.reset()
        return self.get()

    def _materialize(self) -> BalanceConfig:
        config = self._load()
        if config is not None and config.validate():
            logger.info("Balance config installed (generation %d)", self._generation + 1)
            return config

        if config is not None:
            logger.warning("Invalid balance config detected, using defaults")
        defaults = create_defaults()
        if not defaults.validate():
            raise ConfigUnavailableError("Default balance config failed validation")
        return defaults

    def _load(self) -> BalanceConfig | None:
        if self._loader is None:
            return None
        try:
            return self._loader()
        except Exception:
            logger.warning("Balance config loader failed, using defaults", exc_info=True)
            return None

"""Core data models: variants, balance document, entities, derived state."""

from mimic.core.balance import BalanceConfig, create_defaults
from mimic.core.derived_state import EntityDerivedState, EntityDerivedStateCache
from mimic.core.enums import Difficulty, Domain
from mimic.core.models import BlockPos, Mimic
from mimic.core.variants import MimicVariant

__all__ = [
    "BalanceConfig",
    "BlockPos",
    "Difficulty",
    "Domain",
    "EntityDerivedState",
    "EntityDerivedStateCache",
    "Mimic",
    "MimicVariant",
    "create_defaults",
]

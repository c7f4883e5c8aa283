"""Mimic variant catalog.

Four fixed variants, each with a stable string id used in persisted data and
the balance document, plus built-in multipliers.  Lookup by id is total:
anything unknown resolves to CLASSIC.

Key types:
  MimicVariant  — closed set of variant tags
  VariantDef    — immutable per-variant constants
  VARIANT_DEFS  — tag → VariantDef table
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique


@unique
class MimicVariant(str, Enum):
    """Variant tag.  The value is the stable string id."""

    CLASSIC = "classic"
    CORRUPTED = "corrupted"
    ENDER = "ender"
    CHRISTMAS = "christmas"

    @property
    def id(self) -> str:
        return self.value

    @property
    def health_multiplier(self) -> float:
        return VARIANT_DEFS[self].health

    @property
    def damage_multiplier(self) -> float:
        return VARIANT_DEFS[self].damage

    @property
    def experience_multiplier(self) -> float:
        return VARIANT_DEFS[self].experience

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class VariantDef:
    """Fixed multipliers carried by a variant."""

    variant: MimicVariant
    health: float
    damage: float
    experience: float


VARIANT_DEFS: dict[MimicVariant, VariantDef] = {
    MimicVariant.CLASSIC:   VariantDef(MimicVariant.CLASSIC,   1.0, 1.0, 1.0),
    MimicVariant.CORRUPTED: VariantDef(MimicVariant.CORRUPTED, 1.5, 1.4, 2.0),
    MimicVariant.ENDER:     VariantDef(MimicVariant.ENDER,     2.0, 1.8, 3.0),
    MimicVariant.CHRISTMAS: VariantDef(MimicVariant.CHRISTMAS, 1.2, 1.1, 1.5),
}

# Catalog order; the first entry is the fallback.
VARIANT_IDS: tuple[str, ...] = tuple(v.value for v in MimicVariant)
FALLBACK_VARIANT = MimicVariant.CLASSIC

_BY_ID: dict[str, MimicVariant] = {v.value: v for v in MimicVariant}


def resolve(identifier: str | None) -> MimicVariant:
    """Return the variant for *identifier*, or CLASSIC when unknown/empty/None."""
    if not identifier:
        return FALLBACK_VARIANT
    return _BY_ID.get(identifier, FALLBACK_VARIANT)


def multiplier_for(variant: MimicVariant) -> tuple[float, float, float]:
    """(health, damage, experience) built-in multipliers of *variant*."""
    d = VARIANT_DEFS[variant]
    return d.health, d.damage, d.experience

"""NFT Tier Table — donor recognition level derived from cumulative donations.

Invariants:
    - Tier is a pure function of the donor's cumulative amount to one project
    - Thresholds are strictly increasing; the highest threshold met wins
    - Amounts below every threshold map to the base tier
    - Monotonic: a larger cumulative amount never yields a lower tier

Design Decisions:
    - Table built from settings (name -> minimum) and validated once at startup
    - Frozen dataclasses: a table cannot change under concurrent donations
"""

from dataclasses import dataclass
from typing import Mapping

DEFAULT_TIERS: dict[str, int] = {
    "Bronze Supporter": 1_000,
    "Silver Supporter": 5_000,
    "Gold Supporter": 10_000,
}
DEFAULT_BASE_TIER = "Supporter"


@dataclass(frozen=True)
class TierThreshold:
    name: str
    minimum: int


@dataclass(frozen=True)
class TierTable:
    """Ordered threshold table (ascending by minimum)."""
    thresholds: tuple[TierThreshold, ...]
    base_tier: str = DEFAULT_BASE_TIER

    def tier_for(self, cumulative_amount: int) -> str:
        """Highest tier whose minimum is met by `cumulative_amount`."""
        tier = self.base_tier
        for threshold in self.thresholds:
            if cumulative_amount < threshold.minimum:
                break
            tier = threshold.name
        return tier

    def rank(self, tier: str) -> int:
        """Position of `tier` in the table; the base tier ranks 0."""
        for index, threshold in enumerate(self.thresholds, start=1):
            if threshold.name == tier:
                return index
        if tier == self.base_tier:
            return 0
        raise KeyError(tier)


def build_tier_table(
    tiers: Mapping[str, int], base_tier: str = DEFAULT_BASE_TIER,
) -> TierTable:
    """Validate a name -> minimum mapping and return the ordered table.

    Raises ValueError for non-positive or duplicate minimums, blank names,
    or a tier named like the base tier.
    """
    if not base_tier.strip():
        raise ValueError("base tier name must not be blank")
    ordered = sorted(tiers.items(), key=lambda item: item[1])
    seen: set[int] = set()
    thresholds = []
    for name, minimum in ordered:
        if not name.strip():
            raise ValueError("tier names must not be blank")
        if name == base_tier:
            raise ValueError(f"tier '{name}' collides with the base tier")
        if minimum <= 0:
            raise ValueError(f"tier '{name}' needs a positive minimum, got {minimum}")
        if minimum in seen:
            raise ValueError(f"duplicate tier minimum {minimum}")
        seen.add(minimum)
        thresholds.append(TierThreshold(name=name, minimum=minimum))
    return TierTable(thresholds=tuple(thresholds), base_tier=base_tier)

"""Transport cost allocation by vehicle bundles.

Carriers quote a fixed EUR price per truckload of 1, 2, 4, 8 or 9+ cars.
A shipment of N cars is split into bundles of those sizes:

    N <= 9  -> one bundle, the smallest tier that fits N (3 cars ship as 4)
    N > 9   -> greedy, largest tier first (11 -> 9 + 2, 19 -> 9 + 9 + 1)

Greedy minimizes the number of bundles. It is only cost-optimal when the
per-car price falls as bundles grow, which is what carrier tables look like.
"""

from collections.abc import Mapping
from typing import Any

from showroom.pricing.vat import coerce_amount, round_money

TRANSPORT_TIERS: tuple[int, ...] = (1, 2, 4, 8, 9)

# Largest shipment size accepted from API clients
MAX_TRANSPORT_COUNT = 1000

TransportTiers = dict[int, float]


def normalize_transport_tiers(tiers: Mapping[Any, Any] | None = None) -> TransportTiers:
    """Fill in a partner's tier table.

    Stored tables come back from JSON with string keys ("1", "9"), so both
    int and str keys are accepted. Missing, negative or invalid prices
    become 0.

    Args:
        tiers: Raw tier table, or None

    Returns:
        Mapping with all five tiers present
    """
    raw = tiers if isinstance(tiers, Mapping) else {}
    normalized: TransportTiers = {}
    for tier in TRANSPORT_TIERS:
        value = raw.get(tier, raw.get(str(tier)))
        normalized[tier] = max(0.0, coerce_amount(value))
    return normalized


def decompose_transport_bundles(
    count: int,
    tiers: Mapping[Any, Any] | None = None,
) -> list[int]:
    """Split a vehicle count into transport bundle sizes.

    The tier prices do not affect the split; ``tiers`` is accepted so all
    transport functions share one call shape. The list has one entry per
    bundle, so callers pricing large counts should use the cost functions,
    which work on bundle counts instead.

    Args:
        count: Number of vehicles shipped together
        tiers: Partner tier table (unused)

    Returns:
        Bundle sizes, largest first; empty for count <= 0
    """
    counts = count_transport_bundles(count)
    return [tier for tier in sorted(counts, reverse=True) for _ in range(counts[tier])]


def count_transport_bundles(count: int) -> dict[int, int]:
    """Number of bundles per tier size for ``count`` vehicles.

    Same split as ``decompose_transport_bundles``, computed with one
    ``divmod`` per tier so the work does not grow with ``count``.
    """
    if count <= 0:
        return {}

    largest = TRANSPORT_TIERS[-1]
    if count <= largest:
        return {_smallest_tier_covering(count): 1}

    counts: dict[int, int] = {}
    remaining = count
    for tier in sorted(TRANSPORT_TIERS, reverse=True):
        bundles, remaining = divmod(remaining, tier)
        if bundles:
            counts[tier] = bundles

    if remaining > 0:
        tier = _smallest_tier_covering(remaining)
        counts[tier] = counts.get(tier, 0) + 1

    return counts or {TRANSPORT_TIERS[0]: 1}


def calculate_transport_cost_total_eur(
    count: int,
    tiers: Mapping[Any, Any] | None = None,
) -> float:
    """Total transport cost in EUR for shipping ``count`` vehicles."""
    prices = normalize_transport_tiers(tiers)
    total = sum(
        prices.get(tier, 0.0) * bundles for tier, bundles in count_transport_bundles(count).items()
    )
    return round_money(total)


def calculate_transport_cost_per_car_eur(
    count: int,
    tiers: Mapping[Any, Any] | None = None,
) -> float:
    """Transport cost in EUR allocated to each of ``count`` vehicles."""
    if count <= 0:
        return 0.0
    return round_money(calculate_transport_cost_total_eur(count, tiers) / count)


def _smallest_tier_covering(count: int) -> int:
    for tier in TRANSPORT_TIERS:
        if tier >= count:
            return tier
    return TRANSPORT_TIERS[-1]

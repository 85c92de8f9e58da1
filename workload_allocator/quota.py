from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction

from .workloads.base import WorkloadKind

WEIGHTED_KINDS: tuple[WorkloadKind, ...] = (
    WorkloadKind.SHARED_COUNTER,
    WorkloadKind.TRANSFER_OBJECT,
    WorkloadKind.DELEGATION,
)

MAX_HOTNESS_FACTOR = 100


@dataclass(frozen=True)
class Weights:
    """Relative emphasis of the three weighted workload kinds."""

    shared_counter: int = 0
    transfer_object: int = 0
    delegation: int = 0

    @property
    def total(self) -> int:
        return self.shared_counter + self.transfer_object + self.delegation

    def for_kind(self, kind: WorkloadKind) -> int:
        return getattr(self, kind.value)

    def ratio(self, kind: WorkloadKind) -> Fraction:
        if self.total == 0:
            return Fraction(0)
        return Fraction(self.for_kind(kind), self.total)


@dataclass(frozen=True)
class RunTargets:
    """Run-wide targets supplied once per run."""

    target_qps: int
    num_workers: int
    in_flight_ratio: int
    shared_counter_hotness_factor: int = 50
    num_transfer_accounts: int = 2


@dataclass(frozen=True)
class Quota:
    qps: int = 0
    num_workers: int = 0
    max_ops: int = 0

    @property
    def is_degenerate(self) -> bool:
        return self.qps == 0 or self.num_workers == 0 or self.max_ops == 0


EMPTY_QUOTA = Quota()


def compute_disjoint_quotas(weights: Weights, targets: RunTargets) -> dict[WorkloadKind, Quota]:
    """Give every weighted kind its own share of throughput and workers.

    qps and max ops truncate; workers round up. A kind with zero weight, or one
    whose share rounds any component to zero, gets ``EMPTY_QUOTA``.
    """
    quotas: dict[WorkloadKind, Quota] = {}
    for kind in WEIGHTED_KINDS:
        ratio = weights.ratio(kind)
        if ratio == 0:
            quotas[kind] = EMPTY_QUOTA
            continue
        qps = math.floor(ratio * targets.target_qps)
        quota = Quota(
            qps=qps,
            num_workers=math.ceil(ratio * targets.num_workers),
            max_ops=qps * targets.in_flight_ratio,
        )
        quotas[kind] = EMPTY_QUOTA if quota.is_degenerate else quota
    return quotas


def compute_combined_quota(weights: Weights, targets: RunTargets) -> Quota:
    """One quota over the whole mix; weights are left for the merged workload."""
    if weights.total == 0:
        return EMPTY_QUOTA
    return Quota(
        qps=targets.target_qps,
        num_workers=targets.num_workers,
        max_ops=targets.target_qps * targets.in_flight_ratio,
    )


def novelty_ratio(hotness_factor: int) -> Fraction:
    clamped = min(max(hotness_factor, 0), MAX_HOTNESS_FACTOR)
    return 1 - Fraction(clamped, MAX_HOTNESS_FACTOR)


def num_shared_counters(max_ops: int, hotness_factor: int) -> int:
    return math.floor(max_ops * novelty_ratio(hotness_factor))


__all__ = [
    "EMPTY_QUOTA",
    "Quota",
    "RunTargets",
    "WEIGHTED_KINDS",
    "Weights",
    "compute_combined_quota",
    "compute_disjoint_quotas",
    "novelty_ratio",
    "num_shared_counters",
]

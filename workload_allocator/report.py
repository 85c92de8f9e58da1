from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from .configuration import AllocationPlan, EndpointWorkloads

LOGGER = logging.getLogger("workload_allocator.report")

ALLOCATION_COLUMNS = [
    "endpoint",
    "kind",
    "qps",
    "num_workers",
    "max_in_flight_ops",
    "gas",
    "gas_count",
]


def allocation_frame(endpoint_workloads: EndpointWorkloads) -> pd.DataFrame:
    """One row per (endpoint, workload, gas bucket) of a configured run."""
    rows = []
    for endpoint, workloads in endpoint_workloads:
        for info in workloads:
            for gas_name, gas_count in info.workload.gas_summary().items():
                rows.append(
                    {
                        "endpoint": endpoint.name,
                        "kind": info.kind.value,
                        "qps": info.qps,
                        "num_workers": info.num_workers,
                        "max_in_flight_ops": info.max_in_flight_ops,
                        "gas": gas_name,
                        "gas_count": gas_count,
                    }
                )
    if not rows:
        return pd.DataFrame(columns=ALLOCATION_COLUMNS)
    return pd.DataFrame(rows, columns=ALLOCATION_COLUMNS)


def plan_frame(plan: AllocationPlan, endpoint_names: list[str] | None = None) -> pd.DataFrame:
    """Gas config counts per endpoint, one column per gas list."""
    names = endpoint_names or [f"endpoint-{i}" for i in range(len(plan.endpoint_gas_configs))]
    frame = pd.DataFrame(
        [gas_config.counts() for gas_config in plan.endpoint_gas_configs],
        index=pd.Index(names, name="endpoint"),
    )
    return frame.reset_index()


def quota_frame(plan: AllocationPlan) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "kind": kind.value,
                "qps": quota.qps,
                "num_workers": quota.num_workers,
                "max_ops": quota.max_ops,
                "elided": quota.is_degenerate,
            }
            for kind, quota in plan.quotas.items()
        ]
    )


def write_allocation_csv(endpoint_workloads: EndpointWorkloads, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    df = allocation_frame(endpoint_workloads)
    path = output_dir / "allocation.csv"
    df.to_csv(path, index=False)
    LOGGER.info("Saved allocation to %s (%d rows)", path, len(df))
    return path


__all__ = ["allocation_frame", "plan_frame", "quota_frame", "write_allocation_csv"]

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from .configuration import EndpointWorkloads, WorkloadConfiguration
from .endpoints import KafkaEndpoint, StaticPriceObserver
from .gas import Gas, GasGenerationError, LocalGasMinter
from .quota import RunTargets, Weights
from .report import plan_frame, quota_frame, write_allocation_csv

LOGGER = logging.getLogger("workload_allocator.main")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    env = os.environ
    parser = argparse.ArgumentParser(description="Allocate benchmark workloads across endpoints")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in WorkloadConfiguration],
        default=env.get("WORKLOAD_MODE", WorkloadConfiguration.DISJOINT.value),
        help="combined: one merged workload per endpoint; disjoint: one per kind",
    )
    parser.add_argument("--target-qps", type=int, default=env.get("WORKLOAD_TARGET_QPS", "1000"))
    parser.add_argument("--num-workers", type=int, default=env.get("WORKLOAD_NUM_WORKERS", "12"))
    parser.add_argument(
        "--in-flight-ratio",
        type=int,
        default=env.get("WORKLOAD_IN_FLIGHT_RATIO", "5"),
        help="Multiplier from target qps to max outstanding operations",
    )
    parser.add_argument(
        "--shared-counter", type=int, default=env.get("WORKLOAD_SHARED_COUNTER_WEIGHT", "0")
    )
    parser.add_argument(
        "--transfer-object", type=int, default=env.get("WORKLOAD_TRANSFER_OBJECT_WEIGHT", "1")
    )
    parser.add_argument("--delegation", type=int, default=env.get("WORKLOAD_DELEGATION_WEIGHT", "0"))
    parser.add_argument(
        "--shared-counter-hotness-factor",
        type=int,
        default=env.get("WORKLOAD_SHARED_COUNTER_HOTNESS_FACTOR", "50"),
        help="0-100; share of shared counter operations hitting reused counters",
    )
    parser.add_argument(
        "--num-transfer-accounts",
        type=int,
        default=env.get("WORKLOAD_NUM_TRANSFER_ACCOUNTS", "2"),
    )
    parser.add_argument("--broker", default=env.get("KAFKA_BROKER", "kafka:9092"))
    parser.add_argument(
        "--topics",
        default=env.get("WORKLOAD_ENDPOINT_TOPICS", "validator-0"),
        help="Comma-separated Kafka topics; each topic is one endpoint",
    )
    parser.add_argument(
        "--base-gas-balance",
        type=int,
        default=env.get("WORKLOAD_BASE_GAS_BALANCE", str(10**18)),
    )
    parser.add_argument(
        "--pay-coin-balance",
        type=int,
        default=env.get("WORKLOAD_PAY_COIN_BALANCE", str(10**18)),
    )
    parser.add_argument("--coin-type", default=env.get("WORKLOAD_COIN_TYPE", "0x2::sui::SUI"))
    parser.add_argument(
        "--reference-gas-price",
        type=int,
        default=env.get("WORKLOAD_REFERENCE_GAS_PRICE", "1"),
    )
    parser.add_argument(
        "--output-dir",
        default=env.get("WORKLOAD_OUTPUT_DIR", "logs/allocation"),
        help="Directory for the allocation CSV",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only print the computed quotas and per-endpoint gas counts",
    )
    parser.add_argument("--log-level", default=env.get("WORKLOAD_LOG_LEVEL", "INFO"))
    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def parse_topics(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _print_plan(
    mode: WorkloadConfiguration,
    weights: Weights,
    targets: RunTargets,
    topics: list[str],
) -> None:
    plan = mode.plan(weights, targets, len(topics))
    print(f"Mode: {mode.value} (weights={weights}, targets={targets})")
    print("Quotas:")
    print(quota_frame(plan).to_string(index=False))
    print("Gas per endpoint:")
    print(plan_frame(plan, topics).to_string(index=False))


async def _configure(
    mode: WorkloadConfiguration,
    weights: Weights,
    targets: RunTargets,
    args: argparse.Namespace,
    endpoints: list[KafkaEndpoint],
) -> EndpointWorkloads:
    gas = Gas(object_id="base-gas", owner="benchmark", value=args.base_gas_balance)
    pay_coin = Gas(object_id="pay-coin", owner="benchmark", value=args.pay_coin_balance)
    return await mode.configure(
        weights,
        targets,
        gas,
        pay_coin,
        args.coin_type,
        endpoints,
        StaticPriceObserver(args.reference_gas_price),
        LocalGasMinter(),
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    mode = WorkloadConfiguration(args.mode)
    weights = Weights(
        shared_counter=args.shared_counter,
        transfer_object=args.transfer_object,
        delegation=args.delegation,
    )
    targets = RunTargets(
        target_qps=args.target_qps,
        num_workers=args.num_workers,
        in_flight_ratio=args.in_flight_ratio,
        shared_counter_hotness_factor=args.shared_counter_hotness_factor,
        num_transfer_accounts=args.num_transfer_accounts,
    )
    topics = parse_topics(args.topics)
    if not topics:
        LOGGER.error("no endpoint topics configured")
        return 2
    LOGGER.info("Endpoints: %s", ", ".join(topics))

    if args.dry_run:
        _print_plan(mode, weights, targets, topics)
        return 0

    endpoints = [KafkaEndpoint(args.broker, topic) for topic in topics]
    try:
        endpoint_workloads = asyncio.run(_configure(mode, weights, targets, args, endpoints))
    except GasGenerationError:
        LOGGER.exception("gas generation failed; no workloads scheduled")
        return 1
    except ConnectionError:
        LOGGER.exception("endpoint unreachable; no workloads scheduled")
        return 1
    finally:
        for endpoint in endpoints:
            endpoint.close()

    write_allocation_csv(endpoint_workloads, Path(args.output_dir))
    return 0


if __name__ == "__main__":
    sys.exit(main())

from workload_allocator import endpoints
from workload_allocator.main import main, parse_args, parse_topics


def test_parse_topics() -> None:
    assert parse_topics("a, b,,c ") == ["a", "b", "c"]
    assert parse_topics("") == []


def test_env_defaults(monkeypatch) -> None:
    monkeypatch.setenv("WORKLOAD_TARGET_QPS", "250")
    monkeypatch.setenv("WORKLOAD_MODE", "combined")

    args = parse_args([])

    assert args.target_qps == 250
    assert args.mode == "combined"


def test_dry_run_prints_plan(capsys) -> None:
    exit_code = main(
        [
            "--dry-run",
            "--mode",
            "disjoint",
            "--target-qps",
            "100",
            "--num-workers",
            "4",
            "--in-flight-ratio",
            "2",
            "--shared-counter",
            "1",
            "--transfer-object",
            "1",
            "--delegation",
            "0",
            "--topics",
            "validator-0,validator-1",
        ]
    )

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Quotas:" in out
    assert "validator-1" in out
    assert "delegation" in out


def test_unreachable_broker_exits_with_error(monkeypatch, tmp_path) -> None:
    def refuse(broker: str, connect_timeout_s: float = 60.0):
        raise ConnectionError(f"failed to connect to {broker}")

    monkeypatch.setattr(endpoints, "create_producer", refuse)

    exit_code = main(
        [
            "--target-qps",
            "10",
            "--num-workers",
            "1",
            "--in-flight-ratio",
            "1",
            "--shared-counter",
            "1",
            "--transfer-object",
            "0",
            "--topics",
            "validator-0",
            "--output-dir",
            str(tmp_path / "out"),
        ]
    )

    assert exit_code == 1
    assert not (tmp_path / "out").exists()


def test_no_topics_is_an_error() -> None:
    assert main(["--dry-run", "--topics", ""]) == 2

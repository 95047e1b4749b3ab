from __future__ import annotations

from pathlib import Path

import pytest

from aws_results.config import DEFAULT_MAX_WORKERS, RunConfig, dump_config, load_run_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in (
        "AWS_REGION",
        "AWS_RESULTS_REGION",
        "AWS_RESULTS_FORMAT",
        "AWS_RESULTS_MAX_WORKERS",
        "AWS_RESULTS_MAX_RESULTS",
        "AWS_RESULTS_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults_for_query_results() -> None:
    command, cfg = load_run_config(argv=["query-results", "qid-1"])
    assert command == "query-results"
    assert isinstance(cfg, RunConfig)
    assert cfg.query_execution_id == "qid-1"
    assert cfg.output_format == "table"
    assert cfg.max_workers == DEFAULT_MAX_WORKERS
    assert cfg.skip_header is False
    assert cfg.region is None


def test_get_parameters_collects_names() -> None:
    command, cfg = load_run_config(argv=["get-parameters", "/a", "/b", "--with-decryption"])
    assert command == "get-parameters"
    assert cfg.names == ["/a", "/b"]
    assert cfg.with_decryption is True
    assert cfg.reveal_secure is False


def test_env_overrides_defaults(monkeypatch) -> None:
    monkeypatch.setenv("AWS_RESULTS_FORMAT", "jsonl")
    monkeypatch.setenv("AWS_REGION", "eu-central-1")
    _, cfg = load_run_config(argv=["query-results", "qid"])
    assert cfg.output_format == "jsonl"
    assert cfg.region == "eu-central-1"


def test_cli_overrides_env(monkeypatch) -> None:
    monkeypatch.setenv("AWS_RESULTS_FORMAT", "jsonl")
    _, cfg = load_run_config(argv=["query-results", "qid", "--format", "csv"])
    assert cfg.output_format == "csv"


def test_config_file_used_when_env_and_cli_missing(tmp_path) -> None:
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("region: us-west-2\nmax_results: 250\nskip_header: true\n", encoding="utf-8")

    _, cfg = load_run_config(argv=["query-results", "qid", "--config", str(cfg_path)])
    assert cfg.region == "us-west-2"
    assert cfg.max_results == 250
    assert cfg.skip_header is True


def test_json_config_file(tmp_path) -> None:
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text('{"timeout": "12.5", "max_workers": 2}', encoding="utf-8")

    _, cfg = load_run_config(argv=["query-results", "qid", "--config", str(cfg_path)])
    assert cfg.timeout == 12.5
    assert cfg.max_workers == 2


def test_env_overrides_config_file(monkeypatch, tmp_path) -> None:
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("max_workers: 3\n", encoding="utf-8")
    monkeypatch.setenv("AWS_RESULTS_MAX_WORKERS", "7")

    _, cfg = load_run_config(argv=["query-results", "qid", "--config", str(cfg_path)])
    assert cfg.max_workers == 7


def test_cli_overrides_env_and_config(monkeypatch, tmp_path) -> None:
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("max_workers: 3\n", encoding="utf-8")
    monkeypatch.setenv("AWS_RESULTS_MAX_WORKERS", "7")

    _, cfg = load_run_config(argv=["query-results", "qid", "--config", str(cfg_path), "--max-workers", "9"])
    assert cfg.max_workers == 9


def test_config_file_rejects_bad_types(tmp_path) -> None:
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("skip_header: maybe\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_run_config(argv=["query-results", "qid", "--config", str(cfg_path)])


def test_config_file_warns_on_unknown_keys(tmp_path) -> None:
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("region: us-east-1\nbogus: 1\n", encoding="utf-8")
    with pytest.warns(UserWarning, match="bogus"):
        _, cfg = load_run_config(argv=["query-results", "qid", "--config", str(cfg_path)])
    assert cfg.region == "us-east-1"


def test_config_file_must_be_mapping(tmp_path) -> None:
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_run_config(argv=["query-results", "qid", "--config", str(cfg_path)])


def test_missing_config_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_run_config(argv=["query-results", "qid", "--config", str(tmp_path / "nope.yaml")])


def test_dump_config_round_trips_paths() -> None:
    _, cfg = load_run_config(argv=["query-results", "qid", "--out", "rows.jsonl", "--format", "jsonl"])
    dumped = dump_config(cfg)
    assert dumped["out"] == str(Path("rows.jsonl"))
    assert dumped["output_format"] == "jsonl"

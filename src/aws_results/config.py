from __future__ import annotations

import argparse
import json
import os
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .transport.http import DEFAULT_ENDPOINT_TEMPLATE

# --------
# Defaults
# --------
DEFAULT_MAX_WORKERS = 4
DEFAULT_TIMEOUT = 60.0
DEFAULT_CONNECT_TIMEOUT = 5.0
OUTPUT_FORMATS = {"table", "jsonl", "csv", "parquet"}
QUERY_RESULT_TYPES = {"DATA_ROWS", "DATA_MANIFEST"}
ALLOWED_CONFIG_KEYS = {
    "region",
    "athena_endpoint",
    "ssm_endpoint",
    "endpoint_template",
    "timeout",
    "connect_timeout",
    "max_workers",
    "connection_pool_size",
    "json_logs",
    "log_level",
    "log_file",
    "output_format",
    "out",
    "max_results",
    "max_rows",
    "query_result_type",
    "skip_header",
    "with_decryption",
    "reveal_secure",
}
BOOL_CONFIG_KEYS = {"json_logs", "skip_header", "with_decryption", "reveal_secure"}
INT_CONFIG_KEYS = {"max_workers", "connection_pool_size", "max_results", "max_rows"}
FLOAT_CONFIG_KEYS = {"timeout", "connect_timeout"}
PATH_CONFIG_KEYS = {"out", "log_file"}
STR_CONFIG_KEYS = {
    "region",
    "athena_endpoint",
    "ssm_endpoint",
    "endpoint_template",
    "log_level",
    "output_format",
    "query_result_type",
}


@dataclass(frozen=True)
class RunConfig:
    # Transport
    region: Optional[str] = None
    athena_endpoint: Optional[str] = None
    ssm_endpoint: Optional[str] = None
    endpoint_template: str = DEFAULT_ENDPOINT_TEMPLATE
    timeout: float = DEFAULT_TIMEOUT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    connection_pool_size: Optional[int] = None

    # Logging
    json_logs: bool = False
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    # Output
    output_format: str = "table"
    out: Optional[Path] = None
    max_rows: Optional[int] = None

    # query-results
    query_execution_id: Optional[str] = None
    max_results: Optional[int] = None
    query_result_type: Optional[str] = None
    skip_header: bool = False

    # get-parameters
    names: Optional[List[str]] = None
    with_decryption: bool = False
    reveal_secure: bool = False


def _parse_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text) or {}
    except (yaml.YAMLError, ValueError) as e:
        raise ValueError(f"Failed to parse config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Top-level config must be an object")
    return data


def _env_str(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def _env_bool(name: str) -> Optional[bool]:
    raw = _env_str(name)
    if raw is None:
        return None
    return raw.lower() in {"1", "true", "yes", "on"}


def _env_int(name: str) -> Optional[int]:
    raw = _env_str(name)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _env_float(name: str) -> Optional[float]:
    raw = _env_str(name)
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _coerce_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        raw = value.strip().lower()
        if raw in {"1", "true", "yes", "on"}:
            return True
        if raw in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"Config field '{key}' must be a boolean")


def _coerce_int(key: str, value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return int(value)
        except ValueError:
            pass
    raise ValueError(f"Config field '{key}' must be an integer")


def _coerce_float(key: str, value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str) and value.strip():
        try:
            return float(value)
        except ValueError:
            pass
    raise ValueError(f"Config field '{key}' must be a number")


def _normalize_config_file(data: Dict[str, Any]) -> Dict[str, Any]:
    unknown = sorted(set(data.keys()) - ALLOWED_CONFIG_KEYS)
    if unknown:
        warnings.warn(f"Unknown config keys ignored: {', '.join(unknown)}")
    normalized: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in ALLOWED_CONFIG_KEYS or value is None:
            continue
        if key in BOOL_CONFIG_KEYS:
            normalized[key] = _coerce_bool(key, value)
        elif key in INT_CONFIG_KEYS:
            normalized[key] = _coerce_int(key, value)
        elif key in FLOAT_CONFIG_KEYS:
            normalized[key] = _coerce_float(key, value)
        elif key in PATH_CONFIG_KEYS:
            if not isinstance(value, (str, Path)):
                raise ValueError(f"Config field '{key}' must be a string path")
            normalized[key] = value
        elif key in STR_CONFIG_KEYS:
            if not isinstance(value, str):
                raise ValueError(f"Config field '{key}' must be a string")
            normalized[key] = value
    return normalized


def _compact_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Drop keys with None values so they don't override lower-precedence config.
    """
    return {k: v for k, v in data.items() if v is not None}


def _merge_dicts(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow merge: values in b override a.
    """
    merged = dict(a)
    merged.update(b)
    return merged


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="aws-results", description="Athena query results and SSM parameters")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--config", type=Path, help="Optional YAML/JSON config file")
        p.add_argument("--region", default=None, help="Service region (default: AWS_REGION)")
        p.add_argument("--endpoint-template", default=None, help="Endpoint URL template with {service} and {region}")
        p.add_argument("--timeout", type=float, default=None, help=f"Read timeout in seconds (default {DEFAULT_TIMEOUT})")
        p.add_argument("--max-workers", type=int, default=None, help=f"Concurrent calls (default {DEFAULT_MAX_WORKERS})")
        p.add_argument(
            "--json-logs",
            action=argparse.BooleanOptionalAction,
            default=None,
            help="Enable JSON logs",
        )
        p.add_argument("--log-level", default=None, help="Log level (INFO, DEBUG, ...)")
        p.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file")
        p.add_argument(
            "--format",
            dest="output_format",
            default=None,
            choices=sorted(OUTPUT_FORMATS),
            help="Output format (default: table)",
        )
        p.add_argument("--out", type=Path, default=None, help="Output file (default: stdout; required for parquet)")
        p.add_argument("--max-rows", type=int, default=None, help="Stop after this many rows")

    p_q = subparsers.add_parser("query-results", help="Stream the results of an Athena query execution")
    add_common(p_q)
    p_q.add_argument("query_execution_id", help="Query execution id")
    p_q.add_argument("--endpoint", dest="athena_endpoint", default=None, help="Athena endpoint URL override")
    p_q.add_argument("--max-results", type=int, default=None, help="Rows per page requested from the service")
    p_q.add_argument(
        "--result-type",
        dest="query_result_type",
        default=None,
        choices=sorted(QUERY_RESULT_TYPES),
        help="Query result type",
    )
    p_q.add_argument(
        "--skip-header",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Drop the first row (column labels of SELECT results)",
    )

    p_p = subparsers.add_parser("get-parameters", help="Look up SSM parameters")
    add_common(p_p)
    p_p.add_argument("names", nargs="+", help="Parameter names or ARNs")
    p_p.add_argument("--endpoint", dest="ssm_endpoint", default=None, help="SSM endpoint URL override")
    p_p.add_argument(
        "--with-decryption",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Decrypt SecureString values",
    )
    p_p.add_argument(
        "--reveal-secure",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Print decrypted SecureString values instead of redacting them",
    )
    return parser


def load_run_config(
    args: Optional[argparse.Namespace] = None,
    argv: Optional[list[str]] = None,
) -> Tuple[str, RunConfig]:
    """
    Build RunConfig by merging defaults, optional config file, env vars, and CLI args.
    Precedence (low -> high): defaults < config file < env < CLI.

    Returns:
      (command, RunConfig) where command is query-results|get-parameters
    """
    ns = args if args is not None else build_parser().parse_args(argv)
    command = ns.command

    base: Dict[str, Any] = {
        "endpoint_template": DEFAULT_ENDPOINT_TEMPLATE,
        "timeout": DEFAULT_TIMEOUT,
        "connect_timeout": DEFAULT_CONNECT_TIMEOUT,
        "max_workers": DEFAULT_MAX_WORKERS,
        "json_logs": False,
        "log_level": "INFO",
        "output_format": "table",
        "skip_header": False,
        "with_decryption": False,
        "reveal_secure": False,
    }

    file_cfg: Dict[str, Any] = {}
    if getattr(ns, "config", None):
        file_cfg = _normalize_config_file(_parse_config_file(Path(ns.config)))

    env_cfg: Dict[str, Any] = _compact_dict(
        {
            "region": _env_str("AWS_RESULTS_REGION") or _env_str("AWS_REGION"),
            "athena_endpoint": _env_str("AWS_RESULTS_ATHENA_ENDPOINT"),
            "ssm_endpoint": _env_str("AWS_RESULTS_SSM_ENDPOINT"),
            "endpoint_template": _env_str("AWS_RESULTS_ENDPOINT_TEMPLATE"),
            "timeout": _env_float("AWS_RESULTS_TIMEOUT"),
            "connect_timeout": _env_float("AWS_RESULTS_CONNECT_TIMEOUT"),
            "max_workers": _env_int("AWS_RESULTS_MAX_WORKERS"),
            "connection_pool_size": _env_int("AWS_RESULTS_CONNECTION_POOL_SIZE"),
            "json_logs": _env_bool("AWS_RESULTS_JSON_LOGS"),
            "log_level": _env_str("AWS_RESULTS_LOG_LEVEL"),
            "output_format": _env_str("AWS_RESULTS_FORMAT"),
            "max_results": _env_int("AWS_RESULTS_MAX_RESULTS"),
        }
    )

    cli_cfg: Dict[str, Any] = _compact_dict(
        {
            "region": getattr(ns, "region", None),
            "athena_endpoint": getattr(ns, "athena_endpoint", None),
            "ssm_endpoint": getattr(ns, "ssm_endpoint", None),
            "endpoint_template": getattr(ns, "endpoint_template", None),
            "timeout": getattr(ns, "timeout", None),
            "max_workers": getattr(ns, "max_workers", None),
            "json_logs": getattr(ns, "json_logs", None),
            "log_level": getattr(ns, "log_level", None),
            "log_file": getattr(ns, "log_file", None),
            "output_format": getattr(ns, "output_format", None),
            "out": getattr(ns, "out", None),
            "max_rows": getattr(ns, "max_rows", None),
            "max_results": getattr(ns, "max_results", None),
            "query_result_type": getattr(ns, "query_result_type", None),
            "skip_header": getattr(ns, "skip_header", None),
            "with_decryption": getattr(ns, "with_decryption", None),
            "reveal_secure": getattr(ns, "reveal_secure", None),
        }
    )

    merged = _merge_dicts(base, _merge_dicts(file_cfg, _merge_dicts(env_cfg, cli_cfg)))

    output_format = str(merged.get("output_format") or "table").lower()
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Output format must be one of: {', '.join(sorted(OUTPUT_FORMATS))}")
    query_result_type = merged.get("query_result_type")
    if query_result_type is not None and query_result_type not in QUERY_RESULT_TYPES:
        raise ValueError(f"Query result type must be one of: {', '.join(sorted(QUERY_RESULT_TYPES))}")
    max_workers = int(merged.get("max_workers") or DEFAULT_MAX_WORKERS)
    if max_workers < 1:
        raise ValueError("max_workers must be at least 1")

    cfg = RunConfig(
        region=merged.get("region"),
        athena_endpoint=merged.get("athena_endpoint"),
        ssm_endpoint=merged.get("ssm_endpoint"),
        endpoint_template=str(merged.get("endpoint_template") or DEFAULT_ENDPOINT_TEMPLATE),
        timeout=float(merged["timeout"]),
        connect_timeout=float(merged["connect_timeout"]),
        max_workers=max_workers,
        connection_pool_size=merged.get("connection_pool_size"),
        json_logs=bool(merged["json_logs"]),
        log_level=str(merged.get("log_level") or "INFO").upper(),
        log_file=Path(merged["log_file"]) if merged.get("log_file") else None,
        output_format=output_format,
        out=Path(merged["out"]) if merged.get("out") else None,
        max_rows=merged.get("max_rows"),
        query_execution_id=getattr(ns, "query_execution_id", None),
        max_results=merged.get("max_results"),
        query_result_type=query_result_type,
        skip_header=bool(merged["skip_header"]),
        names=list(getattr(ns, "names", None) or []) or None,
        with_decryption=bool(merged["with_decryption"]),
        reveal_secure=bool(merged["reveal_secure"]),
    )
    return command, cfg


def dump_config(cfg: RunConfig) -> Dict[str, Any]:
    return {
        "region": cfg.region,
        "athena_endpoint": cfg.athena_endpoint,
        "ssm_endpoint": cfg.ssm_endpoint,
        "endpoint_template": cfg.endpoint_template,
        "timeout": cfg.timeout,
        "connect_timeout": cfg.connect_timeout,
        "max_workers": cfg.max_workers,
        "connection_pool_size": cfg.connection_pool_size,
        "json_logs": cfg.json_logs,
        "log_level": cfg.log_level,
        "log_file": str(cfg.log_file) if cfg.log_file else None,
        "output_format": cfg.output_format,
        "out": str(cfg.out) if cfg.out else None,
        "max_rows": cfg.max_rows,
        "max_results": cfg.max_results,
        "query_result_type": cfg.query_result_type,
        "skip_header": cfg.skip_header,
        "with_decryption": cfg.with_decryption,
        "reveal_secure": cfg.reveal_secure,
    }

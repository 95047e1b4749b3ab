from __future__ import annotations

import logging
import sys
from itertools import islice
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from .athena.client import AthenaClient
from .athena.input import GetQueryResultsInput
from .athena.models import Row
from .config import RunConfig, dump_config, load_run_config
from .export.csv import write_csv, write_csv_stream
from .export.jsonl import write_jsonl, write_jsonl_stream
from .export.parquet import write_parquet
from .logging import LogConfig, StepTimers, add_run_log_file, get_logger, log_event, setup_logging
from .ssm.client import SsmClient
from .ssm.parameters import fetch_parameters
from .transport.http import HttpTransport
from .util.errors import ConfigError, as_exit_code
from .util.rich_table import render_records_table, render_summary_table
from .util.serialization import parameters_to_records, row_to_record

LOG = get_logger(__name__)

PARAMETER_FIELDS = ["name", "type", "value", "version", "last_modified_date", "arn", "data_type"]


def _make_transport(cfg: RunConfig) -> HttpTransport:
    endpoints = {}
    if cfg.athena_endpoint:
        endpoints["athena"] = cfg.athena_endpoint
    if cfg.ssm_endpoint:
        endpoints["ssm"] = cfg.ssm_endpoint
    return HttpTransport(
        endpoints=endpoints,
        endpoint_template=cfg.endpoint_template,
        timeout=(cfg.connect_timeout, cfg.timeout),
        connection_pool_size=cfg.connection_pool_size,
    )


def _write_records(
    cfg: RunConfig,
    records: Iterable[Dict[str, Any]],
    *,
    fields: Optional[Sequence[str]],
    title: str,
    string_fields: bool = True,
) -> int:
    fmt = cfg.output_format
    if cfg.max_rows is not None:
        records = islice(records, max(cfg.max_rows, 0))
    if fmt == "table":
        return render_records_table(records, fields=fields, title=title)
    if fmt == "jsonl":
        return write_jsonl(records, cfg.out) if cfg.out else write_jsonl_stream(records, sys.stdout)
    if fmt == "csv":
        return write_csv(records, cfg.out, fields=fields) if cfg.out else write_csv_stream(records, sys.stdout, fields=fields)
    if fmt == "parquet":
        if not cfg.out:
            raise ConfigError("--out is required for parquet output")
        # non-string values (versions, dates) need an inferred schema
        return write_parquet(records, cfg.out, fields=fields if string_fields else None)
    raise ConfigError(f"Unknown output format: {fmt}")


def _iter_row_records(rows: Iterator[Row], columns: Sequence[str]) -> Iterator[Dict[str, Any]]:
    for row in rows:
        yield row_to_record(row, columns)


def cmd_query_results(cfg: RunConfig) -> int:
    if not cfg.query_execution_id:
        raise ConfigError("A query execution id is required")
    timers = StepTimers()
    log_event(
        LOG,
        logging.INFO,
        "Query results export started",
        step="query-results",
        phase="start",
        timers=timers,
        query_execution_id=cfg.query_execution_id,
    )
    with AthenaClient(
        _make_transport(cfg),
        region=cfg.region,
        max_workers=cfg.max_workers,
        timeout=cfg.timeout,
    ) as client:
        result = client.get_query_results(
            GetQueryResultsInput(
                query_execution_id=cfg.query_execution_id,
                max_results=cfg.max_results,
                query_result_type=cfg.query_result_type,
            )
        )
        columns: List[str] = result.column_names()
        rows = result.items()
        try:
            if cfg.skip_header:
                next(rows, None)
            count = _write_records(
                cfg,
                _iter_row_records(rows, columns),
                fields=columns or None,
                title=f"Query {cfg.query_execution_id}",
            )
        finally:
            rows.close()
        update_count = result.update_count
    log_event(
        LOG,
        logging.INFO,
        "Query results export complete",
        step="query-results",
        phase="complete",
        timers=timers,
        rows=count,
        update_count=update_count,
        output=str(cfg.out) if cfg.out else "stdout",
    )
    return 0


def cmd_get_parameters(cfg: RunConfig) -> int:
    if not cfg.names:
        raise ConfigError("At least one parameter name is required")
    timers = StepTimers()
    log_event(LOG, logging.INFO, "Parameter lookup started", step="get-parameters", phase="start", timers=timers)
    with SsmClient(
        _make_transport(cfg),
        region=cfg.region,
        max_workers=cfg.max_workers,
        timeout=cfg.timeout,
    ) as client:
        lookup = fetch_parameters(client, cfg.names, with_decryption=cfg.with_decryption)
    records = parameters_to_records(lookup.parameters, reveal_secure=cfg.reveal_secure and cfg.with_decryption)
    count = _write_records(cfg, records, fields=PARAMETER_FIELDS, title="Parameters", string_fields=False)
    if lookup.invalid_parameters:
        LOG.warning(
            "Some parameters were not found",
            extra={"step": "get-parameters", "phase": "warning", "invalid_parameters": lookup.invalid_parameters},
        )
    log_event(
        LOG,
        logging.INFO,
        "Parameter lookup complete",
        step="get-parameters",
        phase="complete",
        timers=timers,
        found=count,
        invalid=len(lookup.invalid_parameters),
    )
    if cfg.output_format == "table":
        render_summary_table(
            title="Lookup Summary",
            metrics={
                "Requested": len(cfg.names),
                "Found": count,
                "Invalid": ", ".join(lookup.invalid_parameters) or "-",
            },
        )
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    try:
        command, cfg = load_run_config(argv=argv)
        setup_logging(LogConfig(level=cfg.log_level, json_logs=cfg.json_logs))
        if cfg.log_file:
            add_run_log_file(cfg.log_file)
        LOG.debug("Resolved configuration", extra={"config": dump_config(cfg)})

        if command == "query-results":
            code = cmd_query_results(cfg)
        elif command == "get-parameters":
            code = cmd_get_parameters(cfg)
        else:
            raise ConfigError(f"Unknown command: {command}")

        sys.exit(code)
    except SystemExit:
        raise
    except BrokenPipeError:
        # Common when users pipe to `head` or similar tools.
        sys.exit(0)
    except Exception as e:
        setup_logging(LogConfig())
        LOG.error("Execution failed", extra={"error": str(e)})
        sys.exit(as_exit_code(e))


if __name__ == "__main__":
    main()

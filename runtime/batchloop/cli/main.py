"""Process entry point: `batchloop <batch-name>`.

Wires the loop's collaborators from configuration, installs SIGTERM/SIGINT
handling and runs the batch. Exit codes: 0 on a normal stop, 2 on a
configuration error. Handler exceptions are not caught.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from batchloop.config.logging import apply_logging_config
from batchloop.config.settings import BatchConfig, default_config_paths, load_batch_config, load_liveness_config
from batchloop.errors import ConfigurationError, SchemaValidationError
from batchloop.process.liveness import FileLivenessSink
from batchloop.process.signals import TerminationFlag
from batchloop.registry.registry import HandlerRegistry
from batchloop.scheduler.runner import BatchRunner

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2


@dataclass(frozen=True)
class BatchComponents:
    config: BatchConfig
    runner: BatchRunner
    signals: TerminationFlag


def build_components(
    batch_name: str,
    *,
    batch_config_path: Path,
    ping_file: Path | None = None,
    handlers: HandlerRegistry | None = None,
) -> BatchComponents:
    # Fail closed before the loop: config, mode and handler must all resolve.
    config = load_batch_config(batch_config_path, batch_name)
    liveness_cfg = load_liveness_config(batch_name, ping_file)

    signals = TerminationFlag()
    runner = BatchRunner(
        config,
        handlers=handlers or HandlerRegistry(),
        signals=signals,
        liveness=FileLivenessSink(liveness_cfg.ping_file),
    )
    return BatchComponents(config=config, runner=runner, signals=signals)


def _parser() -> argparse.ArgumentParser:
    default_batch, default_logging = default_config_paths()
    p = argparse.ArgumentParser(prog="batchloop", description="Run a configured batch handler in a loop")
    p.add_argument("batch", help="batch name (top-level key in the batch config file)")
    p.add_argument("--config", type=Path, default=default_batch, help="batch config YAML")
    p.add_argument("--logging-config", type=Path, default=default_logging, help="logging dictConfig YAML")
    p.add_argument("--ping-file", type=Path, default=None, help="liveness file touched on every ping")
    return p


def _report_config_error(err: ConfigurationError) -> None:
    logger.error("batch_config_error: %s", err, extra={"event": "batch_config_error"})
    print(f"error: {err}", file=sys.stderr)
    if isinstance(err, SchemaValidationError):
        for v in err.violations:
            print(f"  {v.path}: {v.message}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)

    try:
        apply_logging_config(args.logging_config)
        components = build_components(args.batch, batch_config_path=args.config, ping_file=args.ping_file)
    except ConfigurationError as e:
        _report_config_error(e)
        return EXIT_CONFIG_ERROR

    with components.signals:
        components.runner.run()
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())

"""Configuration loader for batch processes.

Rules:
- Fail closed when config is missing or invalid.
- A batch file is a YAML mapping of batch name -> section.
- Defaults and the ping precedence are resolved once, here. The loop only
  ever sees a resolved BatchConfig.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from batchloop.errors import ConfigurationError
from batchloop.executor.state_machine import RunMode
from batchloop.registry.schema_validator import BATCH_SECTION_KIND, SchemaValidator

DEFAULT_SLEEP_SECONDS = 60
DEFAULT_RUN_MODE = RunMode.CONTINUOUS


@dataclass(frozen=True)
class BatchConfig:
    name: str
    handler: str
    sleep_seconds: int = DEFAULT_SLEEP_SECONDS
    run_mode: RunMode = DEFAULT_RUN_MODE
    ping_enabled: bool = True


@dataclass(frozen=True)
class LivenessConfig:
    ping_file: Path


def resolve_ping(explicit: bool | None, run_mode: RunMode) -> bool:
    """Explicit value wins; `once` batches default to no ping; everything else pings."""
    if explicit is not None:
        return bool(explicit)
    return run_mode != RunMode.ONCE


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Missing required config file: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML: {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid YAML root object in config file: {path}")
    return data


def build_batch_config(name: str, raw: Any, *, validator: SchemaValidator | None = None) -> BatchConfig:
    validator = validator or SchemaValidator.default()
    validator.validate(BATCH_SECTION_KIND, raw, prefix=[name])

    run_mode = RunMode.parse(raw.get("mode", DEFAULT_RUN_MODE.value), batch_name=name)

    return BatchConfig(
        name=name,
        handler=str(raw["handler"]),
        sleep_seconds=int(raw.get("sleepSeconds", DEFAULT_SLEEP_SECONDS)),
        run_mode=run_mode,
        ping_enabled=resolve_ping(raw.get("ping"), run_mode),
    )


def load_batch_config(path: Path, section: str) -> BatchConfig:
    raw = _load_yaml(path)
    if section not in raw:
        known = ", ".join(sorted(map(str, raw))) or "none"
        raise ConfigurationError(f"Batch {section} is not configured in {path} (known: {known})")
    return build_batch_config(section, raw[section])


def load_all_batch_configs(path: Path) -> dict[str, BatchConfig]:
    raw = _load_yaml(path)
    validator = SchemaValidator.default()
    return {str(name): build_batch_config(str(name), section, validator=validator) for name, section in raw.items()}


def load_liveness_config(batch_name: str, ping_file: Path | None = None) -> LivenessConfig:
    if ping_file is None:
        env = os.environ.get("BATCHLOOP_PING_FILE")
        if env:
            ping_file = Path(env)
        else:
            ping_file = Path(tempfile.gettempdir()) / f"batchloop-{batch_name}.ping"
    return LivenessConfig(ping_file=ping_file)


def default_config_paths() -> tuple[Path, Path]:
    # Relative to the working directory unless overridden from the environment.
    batch_path = Path(os.environ.get("BATCHLOOP_CONFIG") or Path.cwd() / "config" / "batch.yml")
    logging_path = Path(os.environ.get("BATCHLOOP_LOGGING_CONFIG") or Path.cwd() / "config" / "logging.yaml")
    return batch_path, logging_path

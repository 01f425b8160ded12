#!/usr/bin/env python3
from __future__ import annotations

import sys
from pathlib import Path


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[2]


def main(argv: list[str]) -> int:
    repo = _repo_root()
    sys.path.insert(0, str(repo / "runtime"))

    from batchloop.errors import ConfigurationError, SchemaValidationError
    from batchloop.config.settings import load_all_batch_configs

    path = Path(argv[1]) if len(argv) > 1 else repo / "runtime" / "config" / "batch.yml"
    try:
        configs = load_all_batch_configs(path)
    except ConfigurationError as e:
        print("config_evaluation=FAIL")
        print(f"reason={e}")
        if isinstance(e, SchemaValidationError):
            for v in e.violations:
                print(f"violation={v.path}: {v.message}")
        return 1

    for name, cfg in configs.items():
        print(
            f"batch={name} handler={cfg.handler} mode={cfg.run_mode.value} "
            f"sleep_seconds={cfg.sleep_seconds} ping={str(cfg.ping_enabled).lower()}"
        )
    print("config_evaluation=PASS")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))

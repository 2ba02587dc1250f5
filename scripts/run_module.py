#!/usr/bin/env python3
"""Headless runner for the YouTube module.

Drives ``YouTubeModule`` without a control-surface host: statuses and
variable updates are logged, the token is written back to a JSON config
file, and a few actions can be fired from the command line.

Configuration sourcing:
- ``--config`` JSON file (written back when the credential changes)
- YTLIVE_CLIENT_ID / YTLIVE_CLIENT_SECRET / YTLIVE_REDIRECT_URL
- YTLIVE_AUTH_TOKEN, YTLIVE_REFRESH_INTERVAL, YTLIVE_UNFINISHED_COUNT

Example::

    YTLIVE_CLIENT_ID=... YTLIVE_CLIENT_SECRET=... \\
        python scripts/run_module.py --config ytlive.json --watch 120
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyytlive import ActionEvent, InstanceStatus, ModuleConfig, YouTubeModule, combine_rgb  # noqa: E402

_logger = logging.getLogger("run_module")


class LoggingHost:
    """Minimal host printing what a control surface would render."""

    def __init__(self, config_path: Path | None) -> None:
        self._config_path = config_path
        self.variables: dict[str, str] = {}

    def rgb(self, r: int, g: int, b: int) -> int:
        return combine_rgb(r, g, b)

    def status(self, level: InstanceStatus, message: str | None = None) -> None:
        _logger.info("status=%s %s", level.value, message or "")

    def save_config(self, config: ModuleConfig) -> None:
        if self._config_path is None:
            _logger.info("Credential changed (no --config given, not persisted)")
            return
        self._config_path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
        _logger.info("Saved configuration to %s", self._config_path)

    def set_variable_definitions(self, definitions: Sequence[Any]) -> None:
        _logger.info("%d variables defined", len(definitions))

    def set_variable_values(self, values: Mapping[str, str]) -> None:
        changed = {k: v for k, v in values.items() if self.variables.get(k) != v}
        self.variables.update(values)
        for name, value in sorted(changed.items()):
            _logger.info("  $(youtube:%s) = %s", name, value)

    def set_preset_definitions(self, presets: Sequence[Any]) -> None:
        _logger.debug("%d presets defined", len(presets))

    def set_feedback_definitions(self, feedbacks: Sequence[Any]) -> None:
        _logger.debug("%d feedbacks defined", len(feedbacks))

    def set_action_definitions(self, actions: Sequence[Any]) -> None:
        _logger.debug("%d actions defined", len(actions))

    def check_feedbacks(self, *feedback_types: str) -> None:
        _logger.debug("check_feedbacks(%s)", ", ".join(feedback_types) or "*")


def _load_config(path: Path | None) -> ModuleConfig:
    if path is not None and path.exists():
        data = json.loads(path.read_text(encoding="utf-8"))
        known = set(ModuleConfig().to_dict())
        return ModuleConfig.from_env(**{k: v for k, v in data.items() if k in known})
    return ModuleConfig.from_env()


async def _run(args: argparse.Namespace) -> int:
    host = LoggingHost(args.config)
    module = YouTubeModule(host, _load_config(args.config))
    try:
        await module.init()
        if args.action is not None:
            task = module.action(ActionEvent(action=args.action, options={"broadcast": args.broadcast}))
            if task is None:
                _logger.error("Module is not ready; action skipped")
                return 1
            await asyncio.wait([task])
        if args.watch > 0:
            await asyncio.sleep(args.watch)
    finally:
        await module.destroy()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--config", type=Path, help="JSON configuration file")
    parser.add_argument("--action", help="action id to run once initialized, e.g. toggle_broadcast")
    parser.add_argument("--broadcast", default="unfinished_0", help="broadcast id or unfinished_<n> slot")
    parser.add_argument("--watch", type=float, default=0.0, help="seconds to keep polling before exiting")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())

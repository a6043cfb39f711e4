from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from pathlib import Path

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def load_action(name: str) -> Callable:
    module_name, _, attribute = name.partition(":")
    if not module_name or not attribute:
        raise ConfigurationError(f"Pre-action {name!r} must look like 'package.module:callable'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Can't import pre-action module {module_name!r}: {exc}") from exc
    action = getattr(module, attribute, None)
    if not callable(action):
        raise ConfigurationError(f"Pre-action {name!r} is not callable")
    return action


def execute_pre_actions(actions: list[dict], source: Path, target: Path) -> None:
    for entry in actions:
        if isinstance(entry, str):
            entry = {"name": entry}
        name = entry.get("name")
        if not name:
            raise ConfigurationError(f"Pre-action without a name: {entry!r}")
        configuration = entry.get("configuration") or {}
        logger.info("Executing pre-action %s", name)
        load_action(str(name))(source, target, **configuration)

"""Editor configuration, read from ``KILO_*`` environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)


@dataclass
class EditorConfig:
    """Tunable editor settings."""

    tab_stop: int = 8
    message_timeout: float = 5.0
    read_timeout_ds: int = 1
    log_path: str = ""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EditorConfig:
        env = os.environ if environ is None else environ
        config = cls()

        tab_stop = _parse(env, "KILO_TAB_STOP", int)
        if tab_stop is not None and tab_stop >= 1:
            config.tab_stop = tab_stop

        message_timeout = _parse(env, "KILO_MESSAGE_TIMEOUT", float)
        if message_timeout is not None and message_timeout >= 0:
            config.message_timeout = message_timeout

        read_timeout = _parse(env, "KILO_READ_TIMEOUT", int)
        if read_timeout is not None:
            config.read_timeout_ds = min(max(read_timeout, 0), 255)

        config.log_path = env.get("KILO_LOG", "")
        return config


def _parse(env: Mapping[str, str], name: str, kind: type):
    raw = env.get(name)
    if raw is None or raw == "":
        return None
    try:
        return kind(raw)
    except ValueError:
        logger.warning("ignoring malformed %s=%r", name, raw)
        return None

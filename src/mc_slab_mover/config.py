"""
Mover Configuration

Settings consumed by the driver loop. Defaults can be overridden from the
environment (MC_SLAB_MOVER_*) and then from command-line flags.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Mapping

from .slab_types import RankMetric

ENV_PREFIX = "MC_SLAB_MOVER_"
TRUTHY = {"1", "true", "yes"}


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(ENV_PREFIX + name)
    if raw is None:
        return default
    return raw.strip().lower() in TRUTHY


def _env_number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(ENV_PREFIX + name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        return default


@dataclass
class MoverConfig:
    """Runtime settings for one monitoring process."""

    host: str = "127.0.0.1"
    port: int = 11211
    sleep_interval: float = 10.0
    loops_threshold: int = 3
    automove_enabled: bool = False
    metric: str = RankMetric.EVICTIONS.value
    clamp_negative_deltas: bool = False
    report_enabled: bool = True
    connect_timeout: float = 5.0

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> MoverConfig:
        env = os.environ if env is None else env
        defaults = cls()
        return cls(
            host=env.get(ENV_PREFIX + "HOST", defaults.host),
            port=_env_number(env, "PORT", defaults.port, int),
            sleep_interval=_env_number(env, "SLEEP", defaults.sleep_interval, float),
            loops_threshold=_env_number(env, "LOOPS", defaults.loops_threshold, int),
            automove_enabled=_env_bool(env, "AUTOMOVE", defaults.automove_enabled),
            metric=env.get(ENV_PREFIX + "METRIC", defaults.metric),
            clamp_negative_deltas=_env_bool(
                env, "CLAMP_NEGATIVE", defaults.clamp_negative_deltas
            ),
            report_enabled=_env_bool(env, "REPORT", defaults.report_enabled),
            connect_timeout=_env_number(
                env, "TIMEOUT", defaults.connect_timeout, float
            ),
        )

    def validate(self) -> MoverConfig:
        """Raise ValueError on settings the loop cannot run with."""
        if not self.host:
            raise ValueError("host must be a non-empty string")
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")
        if not math.isfinite(self.sleep_interval) or self.sleep_interval <= 0:
            raise ValueError("sleep_interval must be a positive finite number")
        if self.loops_threshold < 1:
            raise ValueError("loops_threshold must be at least 1")
        if not math.isfinite(self.connect_timeout) or self.connect_timeout <= 0:
            raise ValueError("connect_timeout must be a positive finite number")
        valid = {m.value for m in RankMetric}
        if self.metric not in valid:
            raise ValueError(
                f"metric must be one of {sorted(valid)}, got {self.metric!r}"
            )
        return self

"""Logger setup and key=value metric lines for the simulator and its runners.

Project loggers ("buck-plane", "buck_plane", "harness") each get one stream
handler of their own and do not propagate to root. Metric lines are
"metrics k1=v1 k2=v2 [step=N]" with keys sorted.
"""
from __future__ import annotations

import logging
import math
from typing import Mapping

_DEFAULT_NAME = "buck-plane"
PROJECT_LOGGERS = (_DEFAULT_NAME, "buck_plane", "harness")
_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


def get_logger(name: str = _DEFAULT_NAME, level: int | None = None) -> logging.Logger:
    """
    Fetch `name`, attaching the project stream handler the first time.

    A logger seen for the first time starts at INFO; afterwards the level only
    changes when `level` is passed.
    """
    logger = logging.getLogger(name)
    logger.propagate = False
    if not any(getattr(h, "_buck_plane_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler._buck_plane_handler = True  # type: ignore[attr-defined]
        handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)
        if level is None:
            level = logging.INFO
    if level is not None:
        logger.setLevel(int(level))
    return logger


def parse_level(level: int | str) -> int:
    """Resolve "debug"/"WARNING"/20 style levels; unknown names raise ValueError."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level: {level}")
    return resolved


def set_level(level: int | str, names: tuple[str, ...] = PROJECT_LOGGERS) -> None:
    lvl = parse_level(level)
    for n in names:
        get_logger(n, lvl)


def format_metrics(metrics: Mapping[str, float], step: int | None = None) -> str:
    """Render a metrics line; values must be finite reals."""
    if not isinstance(metrics, Mapping) or not metrics:
        raise ValueError("metrics must be a non-empty mapping of str->float")
    parts: list[str] = []
    for k in sorted(metrics):
        if not isinstance(k, str) or not k:
            raise ValueError("metric keys must be non-empty strings")
        try:
            v = float(metrics[k])
        except (TypeError, ValueError) as e:
            raise TypeError(f"value for '{k}' must be a real number") from e
        if not math.isfinite(v):
            raise ValueError(f"value for '{k}' must be finite, got {v}")
        parts.append(f"{k}={v:.10g}")
    line = "metrics " + " ".join(parts)
    if step is not None:
        line += f" step={int(step)}"
    return line


def log_metrics(
    metrics: Mapping[str, float],
    step: int | None = None,
    logger: logging.Logger | None = None,
) -> None:
    (logger if logger is not None else get_logger()).info(format_metrics(metrics, step))


__all__ = ["PROJECT_LOGGERS", "get_logger", "parse_level", "set_level", "format_metrics", "log_metrics"]

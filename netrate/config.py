#!/usr/bin/env python3
"""Configuration management for netrate"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .counter_source import PROC_NET_DEV
from .errors import ConfigError

ALTERNATE_PREFIX_DIR = "/tmp"

DEFAULT_SEND_TOTAL_FILENAME = "netrate_send_total"
DEFAULT_RECV_TOTAL_FILENAME = "netrate_recv_total"
DEFAULT_SEND_INTERVAL_FILENAME = "netrate_send_interval"
DEFAULT_RECV_INTERVAL_FILENAME = "netrate_recv_interval"
DEFAULT_PID_FILENAME = "netrate_pid"

DEFAULT_LOG_DIR = os.path.join("/tmp", f"netrate_logs_{os.getuid()}")


@dataclass
class AppConfig:
    """Application configuration"""

    net_dev: str
    scaling_enabled: bool = True
    enable_alternate_prefix: bool = False
    alternate_prefix_dir: str = ALTERNATE_PREFIX_DIR
    send_total_filename: str = DEFAULT_SEND_TOTAL_FILENAME
    recv_total_filename: str = DEFAULT_RECV_TOTAL_FILENAME
    send_interval_filename: str = DEFAULT_SEND_INTERVAL_FILENAME
    recv_interval_filename: str = DEFAULT_RECV_INTERVAL_FILENAME
    pid_filename: str = DEFAULT_PID_FILENAME
    interval_seconds: int = 5
    source_path: str = PROC_NET_DEV
    log_dir: str = DEFAULT_LOG_DIR
    log_level: str = "INFO"


@dataclass
class OutputPaths:
    """Files written by the sampling loop"""

    send_total: Path
    recv_total: Path
    send_interval: Path
    recv_interval: Path
    pid: Path


def resolve_prefix_dir(
    config: AppConfig, environ: Optional[Mapping[str, str]] = None
) -> Path:
    """Directory holding the output files: $XDG_RUNTIME_DIR or the alternate prefix"""
    if config.enable_alternate_prefix:
        return Path(config.alternate_prefix_dir)

    if environ is None:
        environ = os.environ
    runtime_dir = environ.get("XDG_RUNTIME_DIR", "")
    if not runtime_dir:
        raise ConfigError(
            "XDG_RUNTIME_DIR is not set (use --enable-alt-prefix to write elsewhere)"
        )
    return Path(runtime_dir)


def build_output_paths(
    config: AppConfig, environ: Optional[Mapping[str, str]] = None
) -> OutputPaths:
    prefix = resolve_prefix_dir(config, environ)
    return OutputPaths(
        send_total=prefix / config.send_total_filename,
        recv_total=prefix / config.recv_total_filename,
        send_interval=prefix / config.send_interval_filename,
        recv_interval=prefix / config.recv_interval_filename,
        pid=prefix / config.pid_filename,
    )

#!/usr/bin/env python3
"""Main application for netrate

Samples one interface's byte counters every few seconds and keeps the totals
and per-interval deltas in small text files (for status bars and widgets).
"""

import argparse
import os
import sys
import time
from typing import List, Mapping, Optional

from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import (
    ALTERNATE_PREFIX_DIR,
    DEFAULT_LOG_DIR,
    DEFAULT_PID_FILENAME,
    DEFAULT_RECV_INTERVAL_FILENAME,
    DEFAULT_RECV_TOTAL_FILENAME,
    DEFAULT_SEND_INTERVAL_FILENAME,
    DEFAULT_SEND_TOTAL_FILENAME,
    AppConfig,
    build_output_paths,
)
from .counter_source import PROC_NET_DEV
from .delta_engine import sample
from .errors import NetRateError
from .formatter import format_bytes
from .logger import get_logger
from .scheduler import Scheduler
from .state_store import store_text


class NetRate:
    """Sampling loop bound to one interface and its output files"""

    def __init__(self, config: AppConfig, environ: Optional[Mapping[str, str]] = None):
        self.config = config
        self.logger = get_logger(config.log_dir, config.log_level)
        self.paths = build_output_paths(config, environ)
        self.scheduler = Scheduler(config.interval_seconds)

    def write_pid_file(self):
        """Write the process id once at startup"""
        store_text(self.paths.pid, str(os.getpid()))
        self.logger.log_debug(f"PID written to {self.paths.pid}")

    def step(self):
        """Sample the interface and write the interval files"""
        start = time.monotonic()
        delta = sample(
            self.config.net_dev,
            self.paths.send_total,
            self.paths.recv_total,
            self.config.source_path,
        )
        store_text(
            self.paths.send_interval,
            format_bytes(delta.sent, self.config.scaling_enabled),
        )
        store_text(
            self.paths.recv_interval,
            format_bytes(delta.received, self.config.scaling_enabled),
        )
        self.logger.log_sample(self.config.net_dev, delta, time.monotonic() - start)

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Write the PID file and run the sampling loop"""
        self.logger.log_info(
            f"Sampling {self.config.net_dev} every {self.config.interval_seconds}s "
            f"into {self.paths.send_total.parent}"
        )
        self.write_pid_file()
        return self.scheduler.run(self.step, max_ticks)


def interval_seconds(value: str) -> int:
    """argparse type for --interval-seconds"""
    try:
        seconds = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if seconds < 1:
        raise argparse.ArgumentTypeError("interval must be at least 1 second")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="netrate",
        description="Write the byte totals and per-interval byte rate of a network interface to files",
    )
    parser.add_argument("net_dev", help="Network interface to sample (e.g. eth0)")
    parser.add_argument(
        "-c", "--disable-scaling",
        action="store_true",
        help="Write raw byte counts into the interval files instead of B/KB/MB",
    )
    parser.add_argument(
        "-e", "--enable-alt-prefix",
        action="store_true",
        help="Use --prefix instead of XDG_RUNTIME_DIR",
    )
    parser.add_argument(
        "-p", "--prefix",
        default=ALTERNATE_PREFIX_DIR,
        help=f"Directory used instead of XDG_RUNTIME_DIR if enabled (default: {ALTERNATE_PREFIX_DIR})",
    )
    parser.add_argument(
        "-u", "--send-total",
        default=DEFAULT_SEND_TOTAL_FILENAME,
        help="Filename of total bytes sent (in prefix dir)",
    )
    parser.add_argument(
        "-d", "--recv-total",
        default=DEFAULT_RECV_TOTAL_FILENAME,
        help="Filename of total bytes received (in prefix dir)",
    )
    parser.add_argument(
        "-s", "--send-interval",
        default=DEFAULT_SEND_INTERVAL_FILENAME,
        help="Filename of interval bytes sent (in prefix dir)",
    )
    parser.add_argument(
        "-r", "--recv-interval",
        default=DEFAULT_RECV_INTERVAL_FILENAME,
        help="Filename of interval bytes received (in prefix dir)",
    )
    parser.add_argument(
        "-i", "--pid-filename",
        default=DEFAULT_PID_FILENAME,
        help="Filename to write the pid to (in prefix dir)",
    )
    parser.add_argument(
        "-v", "--interval-seconds",
        type=interval_seconds,
        default=5,
        metavar="SECONDS",
        help="Interval in seconds between samples (default: 5)",
    )
    parser.add_argument(
        "--source",
        default=PROC_NET_DEV,
        help=f"Interface statistics table (default: {PROC_NET_DEV})",
    )
    parser.add_argument(
        "--log-dir",
        default=DEFAULT_LOG_DIR,
        help=f"Directory for log files (default: {DEFAULT_LOG_DIR})",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"netrate {__version__}",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> AppConfig:
    return AppConfig(
        net_dev=args.net_dev,
        scaling_enabled=not args.disable_scaling,
        enable_alternate_prefix=args.enable_alt_prefix,
        alternate_prefix_dir=args.prefix,
        send_total_filename=args.send_total,
        recv_total_filename=args.recv_total,
        send_interval_filename=args.send_interval,
        recv_interval_filename=args.recv_interval,
        pid_filename=args.pid_filename,
        interval_seconds=args.interval_seconds,
        source_path=args.source,
        log_dir=args.log_dir,
        log_level=args.log_level,
    )


def main(argv: Optional[List[str]] = None):
    """Entry point"""
    args = build_parser().parse_args(argv)
    config = config_from_args(args)

    console = Console(stderr=True)
    console.print(f'Using net_dev == "{escape(config.net_dev)}"')

    logger = None
    try:
        logger = get_logger(config.log_dir, config.log_level)
        logger.cleanup_old_logs()
        logger.log_system_info(config.net_dev)
        NetRate(config).run()
    except NetRateError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if logger is not None:
            logger.log_error(e, "netrate")
        sys.exit(1)
    except KeyboardInterrupt:
        if logger is not None:
            logger.log_info("netrate shutdown")


if __name__ == "__main__":
    main()

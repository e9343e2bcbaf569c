"""Exceptions raised by netrate"""


class NetRateError(Exception):
    """Base class for errors reported by the netrate CLI"""


class ConfigError(NetRateError):
    """Output directory or other configuration could not be resolved"""

"""netrate - network interface byte-rate probe"""

__version__ = "1.0.0"

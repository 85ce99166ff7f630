"""Process biathlon competition event logs and report the results."""

__version__ = "0.1.0"
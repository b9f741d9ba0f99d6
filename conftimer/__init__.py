"""ConfTimer: elapsed / countdown clock for live sessions."""

__version__ = "0.1.0"

"""SwingDesk - technical analysis and trade signals for equities."""

__version__ = "1.0.0"

"""Car Prices SQL — used-car sales analysis on an embedded SQLite catalog."""
__version__ = "1.0.0"

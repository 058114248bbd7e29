"""CloverLens - correlate Clover coverage reports with PHP source code."""

__version__ = "0.1.0"

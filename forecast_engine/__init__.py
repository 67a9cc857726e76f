"""Lead-time forecasting and capacity rollup engine."""

__version__ = "0.1.0"

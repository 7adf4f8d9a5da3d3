"""PredLaunch - phased token-launch market core."""

__version__ = "0.1.0"

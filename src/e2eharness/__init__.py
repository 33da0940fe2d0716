"""Bounded-wait browser and mobile E2E test harness."""

__version__ = "0.1.0"

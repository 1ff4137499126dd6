"""Version utilities for Disc Sniffer."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION_NAME = "disc-sniffer"


def load_version() -> str:
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        # running from a source checkout
        return "1.0.0"

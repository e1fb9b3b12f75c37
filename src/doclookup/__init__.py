"""Class documentation lookup over a live-watched folder of documentation archives."""

from __future__ import annotations

__version__ = "0.1.0"

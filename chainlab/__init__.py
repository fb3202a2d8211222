"""Response-time analysis of call chains from captured event logs.

The package is headless and batch-only: load a chain catalog, parse an event
log, and reduce each chain's completed cycles to best/average/worst case
response times.

    python -m chainlab analyze --chains chains.json --log events.log
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"

"""
Engines: CSV reader, REST fetcher, SQL composition, ConnectionExecutor.
"""

from beakdash.engines.executor import ConnectionExecutor
from beakdash.engines.service import FetchResult

__all__ = [
    "ConnectionExecutor",
    "FetchResult",
]

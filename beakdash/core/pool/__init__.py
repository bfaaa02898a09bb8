"""
Ephemeral SQL pools for stored connections.

resolve_connection_string turns a SqlConfig into a URL; ephemeral_pool opens
a pool for one call and closes it on every exit path.
"""

from .connect import resolve_connection_string
from .ephemeral import EphemeralPool, Pool, PoolFactory, ephemeral_pool

__all__ = [
    "resolve_connection_string",
    "ephemeral_pool",
    "EphemeralPool",
    "Pool",
    "PoolFactory",
]

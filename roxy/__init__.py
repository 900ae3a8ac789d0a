"""HTTP backends, load balancing, failover, health tracking and caches for a JSON-RPC proxy."""

__version__ = "0.1.0"
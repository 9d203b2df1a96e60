"""Reusable middleware built on the engine's middleware contract."""

from rpcstack.middleware.async_middleware import create_async_middleware
from rpcstack.middleware.id_remap import create_id_remap_middleware
from rpcstack.middleware.merge import merge_middleware
from rpcstack.middleware.scaffold import create_scaffold_middleware

__all__ = [
    "create_async_middleware",
    "create_id_remap_middleware",
    "merge_middleware",
    "create_scaffold_middleware",
]

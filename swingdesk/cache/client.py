"""Valkey connection handling.

One ``Redis`` client (with its own connection pool) per running event loop.
Test clients and worker threads each drive their own loop, and a pool bound to
a closed loop cannot be reused.
"""

from __future__ import annotations

import asyncio

from redis.asyncio import Redis

from swingdesk.core.config import settings
from swingdesk.core.logging import get_logger


logger = get_logger("cache.client")

PING_TIMEOUT = 5.0

_clients: dict[int, Redis] = {}


def _loop_key() -> int:
    try:
        return id(asyncio.get_running_loop())
    except RuntimeError:
        return 0


def _build_client() -> Redis:
    return Redis.from_url(
        settings.valkey_url,
        max_connections=settings.valkey_max_connections,
        decode_responses=True,
        socket_timeout=PING_TIMEOUT,
        socket_connect_timeout=PING_TIMEOUT,
        retry_on_timeout=True,
        health_check_interval=30,
    )


async def get_valkey_client() -> Redis:
    """Client for the current event loop, created on first use."""
    key = _loop_key()
    client = _clients.get(key)
    if client is None:
        client = _clients[key] = _build_client()
        logger.info("Valkey client created", extra={"url": settings.valkey_url})
    return client


async def close_valkey_client() -> None:
    """Close the current loop's client and its pool."""
    client = _clients.pop(_loop_key(), None)
    if client is not None:
        await client.aclose()
        logger.info("Valkey client closed")


async def valkey_healthcheck() -> bool:
    """True when the server answers PING within the timeout."""
    try:
        client = await get_valkey_client()
        return bool(await asyncio.wait_for(client.ping(), timeout=PING_TIMEOUT))
    except Exception as e:
        logger.warning(f"Valkey healthcheck failed: {e}")
        return False

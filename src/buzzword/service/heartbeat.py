"""Liveness ping to an external uptime monitor."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)


async def push_heartbeat(url: str, timeout: float = 10.0, client: httpx.AsyncClient | None = None) -> bool:
    """GET ``url``. Failures are logged and reported as False, never raised."""
    try:
        if client is not None:
            response = await client.get(url, timeout=timeout)
        else:
            async with httpx.AsyncClient() as own_client:
                response = await own_client.get(url, timeout=timeout)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning("Heartbeat to %s failed: %s", url, e)
        return False
    return True

"""Bridges change-feed callbacks onto a WebSocket connection.

Feed callbacks fire synchronously on whichever thread committed the change.
``FeedStream`` hands each payload to the connection's event loop through a
queue and pumps it out until the client disconnects.
"""

import asyncio
from typing import Any

import structlog
from fastapi import WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder

logger = structlog.get_logger(__name__)


class FeedStream:
    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket
        self._loop = asyncio.get_running_loop()
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    def push(self, payload: dict[str, Any]) -> None:
        """Queue ``payload`` for delivery. Safe to call from any thread."""
        self._loop.call_soon_threadsafe(self._queue.put_nowait, payload)

    async def send_now(self, payload: dict[str, Any]) -> None:
        await self.websocket.send_json(jsonable_encoder(payload))

    async def run(self) -> None:
        """Forward queued payloads until the client goes away."""
        receiver = asyncio.create_task(self._wait_for_disconnect())
        try:
            while True:
                getter = asyncio.create_task(self._queue.get())
                done, _ = await asyncio.wait({getter, receiver}, return_when=asyncio.FIRST_COMPLETED)
                if receiver in done:
                    getter.cancel()
                    return
                await self.websocket.send_json(jsonable_encoder(getter.result()))
        except WebSocketDisconnect:
            return
        finally:
            receiver.cancel()
            logger.debug("Feed stream closed")

    async def _wait_for_disconnect(self) -> None:
        while True:
            message = await self.websocket.receive()
            if message["type"] == "websocket.disconnect":
                return

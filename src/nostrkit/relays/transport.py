"""minimal relay transport: one websocket per relay, one REQ per query."""
import json
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from websockets.asyncio.client import ClientConnection, connect

logger = logging.getLogger(__name__)


class RelayConnection(ABC):
    @abstractmethod
    async def query(self, filter: Dict[str, Any]) -> List[dict]:
        """Run one filter and return the matching events."""
        pass

    @abstractmethod
    async def close(self) -> None:
        pass


class RelayTransport(ABC):
    @abstractmethod
    async def connect(self, url: str) -> RelayConnection:
        """Open a connection to one relay."""
        pass


class WebsocketConnection(RelayConnection):
    """an open websocket to a single relay."""

    def __init__(self, url: str, websocket: ClientConnection):
        self.url = url
        self.websocket = websocket

    async def query(self, filter: Dict[str, Any]) -> List[dict]:
        """
        run one subscription and collect stored events.

        events are gathered until the relay signals end of stored events
        (EOSE) or closes the subscription.
        """
        sub_id = uuid.uuid4().hex[:16]
        await self.websocket.send(json.dumps(["REQ", sub_id, filter]))

        events = []
        while True:
            message = await self.websocket.recv()
            try:
                frame = json.loads(message)
            except (TypeError, json.JSONDecodeError):
                logger.debug(f"{self.url}: skipping non-JSON frame")
                continue

            if not isinstance(frame, list) or not frame:
                continue

            label = frame[0]
            if label == "EVENT" and len(frame) >= 3 and frame[1] == sub_id:
                if isinstance(frame[2], dict):
                    events.append(frame[2])
            elif label == "EOSE" and len(frame) >= 2 and frame[1] == sub_id:
                break
            elif label == "CLOSED" and len(frame) >= 2 and frame[1] == sub_id:
                reason = frame[2] if len(frame) >= 3 else ""
                logger.debug(f"{self.url}: subscription closed by relay: {reason}")
                return events
            elif label == "NOTICE":
                logger.debug(f"{self.url}: notice: {frame[1:]}")

        await self.websocket.send(json.dumps(["CLOSE", sub_id]))
        return events

    async def close(self) -> None:
        await self.websocket.close()


class WebsocketTransport(RelayTransport):
    """opens relay connections with the websockets client."""

    async def connect(self, url: str) -> WebsocketConnection:
        websocket = await connect(url, open_timeout=None)
        return WebsocketConnection(url, websocket)

import asyncio
import time
from contextlib import asynccontextmanager

from internal.errors import BusError
from internal.logging import get_logger

FRAME_TOPIC = "frame"
EVENT_TOPIC = "event"


class Subscriber:
    __slots__ = ("name", "queue", "topics", "created_at", "received", "dropped")

    def __init__(self, name, queue, topics=None):
        self.name = name
        self.queue = queue
        self.topics = topics or set()
        self.created_at = time.time()
        self.received = 0
        self.dropped = 0

    def wants(self, topic):
        return not self.topics or topic in self.topics


class EventBus:
    """Copy-on-write pub/sub for frames and lifecycle events. Publish path is lock-free.

    A slow renderer never stalls the tick loop: when its queue is full the
    newest item is dropped for that subscriber only.
    """

    def __init__(self, queue_size=50):
        self._lock = asyncio.Lock()
        self._subscribers = {}
        self._subscribers_snapshot = []
        self._queue_size = queue_size
        self._log = get_logger("bus")
        self.total_published = 0
        self.total_delivered = 0
        self.total_dropped = 0

    async def subscribe(self, name, max_queue_size=None, topics=None):
        async with self._lock:
            if name in self._subscribers:
                return self._subscribers[name]
            subscriber = Subscriber(name, asyncio.Queue(maxsize=max_queue_size or self._queue_size),
                                    set(topics) if topics else set())
            self._subscribers[name] = subscriber
            self._subscribers_snapshot = list(self._subscribers.values())
            self._log.info("subscribed", subscriber=name, topics=sorted(subscriber.topics))
            return subscriber

    async def unsubscribe(self, name):
        async with self._lock:
            if name not in self._subscribers:
                return False
            del self._subscribers[name]
            self._subscribers_snapshot = list(self._subscribers.values())
            self._log.info("unsubscribed", subscriber=name)
            return True

    @asynccontextmanager
    async def subscription(self, name, max_queue_size=None, topics=None):
        """Subscribe for the duration of a block; released on every exit path."""
        if name in self._subscribers:
            raise BusError("subscriber name already in use", subscriber_name=name)
        subscriber = await self.subscribe(name, max_queue_size=max_queue_size, topics=topics)
        try:
            yield subscriber
        finally:
            await self.unsubscribe(name)

    async def publish(self, item, topic=EVENT_TOPIC):
        delivered = dropped = 0
        for subscriber in self._subscribers_snapshot:
            if not subscriber.wants(topic):
                continue
            try:
                subscriber.queue.put_nowait(item)
                subscriber.received += 1
                delivered += 1
            except asyncio.QueueFull:
                subscriber.dropped += 1
                dropped += 1
        self.total_published += 1
        self.total_delivered += delivered
        self.total_dropped += dropped
        return delivered

    def get_stats(self):
        return {
            "subscriber_count": len(self._subscribers_snapshot),
            "total_published": self.total_published,
            "total_delivered": self.total_delivered,
            "total_dropped": self.total_dropped
        }

    async def get_subscriber_info(self):
        return [
            {   "name": subscriber.name,
                "topics": sorted(subscriber.topics),
                "queued": subscriber.queue.qsize(),
                "received": subscriber.received,
                "dropped": subscriber.dropped
            } for subscriber in self._subscribers_snapshot
        ]

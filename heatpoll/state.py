from typing import Optional

import redis.asyncio as redis

from heatpoll.db import PollStore

# Global runtime state initialized in lifespan.setup_resources
redis_client: Optional[redis.Redis] = None
store: Optional[PollStore] = None

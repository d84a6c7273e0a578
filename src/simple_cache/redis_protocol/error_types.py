"""
Shared exception groupings for backend calls.
"""

import asyncio
from typing import Tuple, Type

from redis.exceptions import RedisError

ExceptionTuple = Tuple[Type[BaseException], ...]

# redis-py errors plus the generic timeout/socket failures the transport can surface.
REDIS_ERRORS: ExceptionTuple = (RedisError, asyncio.TimeoutError, OSError, RuntimeError)

__all__ = ["ExceptionTuple", "REDIS_ERRORS"]

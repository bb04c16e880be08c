"""ARQ Redis pool for the narration queue.

The API only enqueues; storyforest.worker runs the jobs.
"""

from typing import Optional

from arq import ArqRedis, create_pool
from arq.connections import RedisSettings
from arq.jobs import Job

from .config import REDIS_URL

# Must match the task function registered in WorkerSettings.functions
AUDIO_JOB_NAME = "generate_audio_task"

_pool: Optional[ArqRedis] = None


def get_redis_settings() -> RedisSettings:
    return RedisSettings.from_dsn(REDIS_URL)


async def init_pool() -> ArqRedis:
    """Connect to Redis. Called from the API lifespan."""
    pool = await create_pool(get_redis_settings())
    set_pool(pool)
    return pool


def set_pool(pool: ArqRedis) -> None:
    global _pool
    _pool = pool


def get_pool() -> ArqRedis:
    """The narration queue. Raises if Redis was unreachable at startup."""
    if _pool is None:
        raise RuntimeError("Narration queue unavailable: Redis was not reachable at startup")
    return _pool


async def enqueue_audio_job(pool: ArqRedis, user_id: str, voice_id: str) -> Optional[Job]:
    """Queue a full-library narration pass for one user's cloned voice."""
    return await pool.enqueue_job(AUDIO_JOB_NAME, user_id=user_id, voice_id=voice_id)


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.aclose()
        _pool = None

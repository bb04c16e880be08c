"""
Narration worker.

Runs the library-narration job queued by voice registration.

Run with: arq storyforest.worker.WorkerSettings
"""

import logging
from typing import Any

from dotenv import load_dotenv

# Environment must be loaded before config modules read it
load_dotenv()

from storyforest.api.arq_pool import get_redis_settings
from storyforest.api.config import LOG_JSON, LOG_LEVEL
from storyforest.api.database.firebase import init_firebase
from storyforest.api.logging import configure_logging
from storyforest.api.services.audio_generation import generate_user_audio

logger = logging.getLogger(__name__)

IN_PROGRESS_PATTERN = "arq:in-progress:*"


async def generate_audio_task(
    ctx: dict[str, Any],
    user_id: str | None = None,
    voice_id: str | None = None,
) -> dict[str, Any]:
    """
    Narrate every book page with a user's cloned voice.

    Per-page failures are counted, not raised. The cloned voice is deleted
    when the pass ends, whatever the outcome.

    Args:
        ctx: ARQ context (job_id, redis)
        user_id: Owner of the cloned voice
        voice_id: ElevenLabs voice to narrate with

    Returns:
        {"successCount": int, "failCount": int}
    """
    job_id = ctx.get("job_id", "unknown")
    logger.info(f"Narration job {job_id} picked up for user {user_id}", extra={"job_id": job_id, "user_id": user_id})

    result = await generate_user_audio(user_id, voice_id)

    logger.info(
        f"Narration job {job_id} finished: {result['successCount']} pages narrated, {result['failCount']} failed",
        extra={"job_id": job_id, "user_id": user_id},
    )
    return result


async def _clear_in_progress_keys(ctx: dict[str, Any]) -> None:
    """Drop in-progress markers left by a worker that died mid-narration.

    With max_jobs=1 a stale marker would hold that job id forever.
    """
    redis = ctx.get("redis")
    if not redis:
        logger.warning("No redis connection in worker context; skipping in-progress cleanup")
        return

    try:
        keys = await redis.keys(IN_PROGRESS_PATTERN)
        for key in keys:
            await redis.delete(key)
        if keys:
            logger.info(f"Cleared {len(keys)} stale narration marker(s)")
    except Exception as e:
        logger.error(f"In-progress cleanup failed: {e}")


async def startup(ctx: dict[str, Any]) -> None:
    configure_logging(json_format=LOG_JSON, level=LOG_LEVEL)
    init_firebase()
    logger.info("Narration worker starting")
    await _clear_in_progress_keys(ctx)


async def shutdown(ctx: dict[str, Any]) -> None:
    logger.info("Narration worker stopping")


class WorkerSettings:
    """ARQ settings for the narration worker."""

    functions = [generate_audio_task]
    on_startup = startup
    on_shutdown = shutdown
    redis_settings = get_redis_settings()

    # ElevenLabs rate limits narration; one library pass at a time
    max_jobs = 1
    job_timeout = 540
    # A retry would narrate with a voice the first attempt already deleted
    max_tries = 1
    health_check_interval = 30

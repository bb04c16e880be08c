"""
Standalone cloned-voice narration job.

Narrates every page of every book with a user's freshly cloned voice,
then deletes the voice to free the ElevenLabs slot. Runs from the ARQ
worker; generate_user_audio builds its own Firebase clients.
"""

import time
from dataclasses import dataclass
from typing import Optional

from ...core.elevenlabs import ElevenLabsClient
from ..database.repository import AudioFileRepository, BookRepository, UserRepository
from ..database.storage import BlobStorage, user_audio_path
from ..logging import AudioJobLogger, audio_logger
from ..models.documents import AudioFileRecord
from ..models.enums import GenerationStatus


@dataclass
class NarrationTask:
    book_id: str
    page_number: int
    text: str


class AudioGenerationJob:
    """
    Narrate the whole library with one user's cloned voice.

    Args:
        elevenlabs: ElevenLabs client
        storage: Blob storage for the MP3 files
        books: Book repository (source of page text)
        users: User repository (status and voice id)
        audio_files: Narration record repository
        job_logger: Structured logger for job events
    """

    def __init__(
        self,
        elevenlabs: ElevenLabsClient,
        storage: BlobStorage,
        books: BookRepository,
        users: UserRepository,
        audio_files: AudioFileRepository,
        job_logger: AudioJobLogger = audio_logger,
    ):
        self.elevenlabs = elevenlabs
        self.storage = storage
        self.books = books
        self.users = users
        self.audio_files = audio_files
        self.log = job_logger

    async def collect_tasks(self) -> list[NarrationTask]:
        """Every page with text across all books, pages in order."""
        tasks: list[NarrationTask] = []
        for book in await self.books.list_all_books():
            for page in await self.books.get_pages(book.id):
                if page.text:
                    tasks.append(NarrationTask(book.id, page.page_number, page.text))
        return tasks

    async def _narrate(self, user_id: str, voice_id: str, task: NarrationTask) -> None:
        audio = await self.elevenlabs.generate_speech(task.text, voice_id)

        path = user_audio_path(user_id, task.book_id, task.page_number)
        await self.storage.upload_bytes(
            path,
            audio,
            content_type="audio/mpeg",
            metadata={
                "userId": user_id,
                "bookId": task.book_id,
                "pageNumber": str(task.page_number),
                "voiceId": voice_id,
            },
        )

        await self.audio_files.save_record(
            AudioFileRecord(
                user_id=user_id,
                book_id=task.book_id,
                page_number=task.page_number,
                storage_path=path,
            )
        )

    async def run(self, user_id: Optional[str], voice_id: Optional[str]) -> dict:
        """
        Run the job.

        Pages are narrated one at a time; a failing page is counted and
        skipped. The cloned voice is always deleted afterwards.

        Returns:
            {"successCount": int, "failCount": int}
        """
        success_count = 0
        fail_count = 0

        if not user_id or not voice_id:
            self.log.logger.error("Audio generation requested without userId or voiceId")
            return {"successCount": success_count, "failCount": fail_count}

        start_time = time.time()
        try:
            tasks = await self.collect_tasks()
            self.log.job_started(user_id, voice_id, len(tasks))

            for task in tasks:
                try:
                    await self._narrate(user_id, voice_id, task)
                    success_count += 1
                except Exception as e:
                    fail_count += 1
                    self.log.item_failed(user_id, task.book_id, task.page_number, e)

            await self.users.set_generation_status(user_id, GenerationStatus.COMPLETE)
            self.log.job_completed(user_id, success_count, fail_count, time.time() - start_time)

        except Exception as e:
            self.log.job_failed(user_id, e)
            try:
                await self.users.set_generation_status(user_id, GenerationStatus.ERROR)
            except Exception as status_error:
                self.log.logger.error(f"Failed to mark generation error for {user_id}: {status_error}")

        finally:
            await self._release_voice(user_id, voice_id)

        return {"successCount": success_count, "failCount": fail_count}

    async def _release_voice(self, user_id: str, voice_id: str) -> None:
        """Delete the cloned voice and clear it from the user. Never raises."""
        try:
            await self.elevenlabs.delete_voice(voice_id)
            await self.users.clear_voice(user_id)
            self.log.logger.info(f"Released voice {voice_id} for user {user_id}")
        except Exception as e:
            self.log.cleanup_failed(user_id, voice_id, e)


async def generate_user_audio(user_id: Optional[str], voice_id: Optional[str]) -> dict:
    """Build the job against the live Firebase project and run it."""
    # Import here to keep worker startup light
    from ..database.firebase import get_bucket, get_firestore

    db = get_firestore()
    job = AudioGenerationJob(
        elevenlabs=ElevenLabsClient(),
        storage=BlobStorage(get_bucket()),
        books=BookRepository(db),
        users=UserRepository(db),
        audio_files=AudioFileRepository(db),
    )
    return await job.run(user_id, voice_id)

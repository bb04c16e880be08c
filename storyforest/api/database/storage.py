"""Blob storage for page images, narration and voice samples."""

import asyncio
import logging
import uuid
from typing import Optional
from urllib.parse import quote

from google.api_core.exceptions import NotFound

logger = logging.getLogger(__name__)

DOWNLOAD_URL = "https://firebasestorage.googleapis.com/v0/b/{bucket}/o/{path}?alt=media&token={token}"


def page_image_path(book_id: str, page_number: int) -> str:
    return f"books/{book_id}/pages/page_{page_number}.png"


def page_audio_path(book_id: str, page_number: int, voice_key: str) -> str:
    return f"books/{book_id}/pages/{page_number}_audio_{voice_key}.mp3"


def user_audio_path(user_id: str, book_id: str, page_number: int) -> str:
    return f"user_audio/{user_id}/{book_id}/page_{page_number}.mp3"


def book_prefix(book_id: str) -> str:
    return f"books/{book_id}/"


class BlobStorage:
    """
    Async facade over a google-cloud-storage bucket.

    The bucket client is synchronous, so every call runs in a worker thread.
    """

    def __init__(self, bucket):
        self.bucket = bucket

    def download_url(self, path: str, token: str) -> str:
        """Build a Firebase Storage download URL for a tokenised blob."""
        return DOWNLOAD_URL.format(bucket=self.bucket.name, path=quote(path, safe=""), token=token)

    async def upload_bytes(
        self,
        path: str,
        data: bytes,
        content_type: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> str:
        """
        Upload bytes and return a public download URL.

        Args:
            path: Object path in the bucket
            data: Object content
            content_type: MIME type
            metadata: Optional custom metadata

        Returns:
            Download URL carrying a fresh access token
        """
        token = str(uuid.uuid4())

        def _upload():
            blob = self.bucket.blob(path)
            blob.metadata = {**(metadata or {}), "firebaseStorageDownloadTokens": token}
            blob.upload_from_string(data, content_type=content_type)

        await asyncio.to_thread(_upload)
        logger.debug(f"Uploaded {len(data)} bytes to {path}")
        return self.download_url(path, token)

    async def download(self, path: str) -> Optional[bytes]:
        """Download a blob, or None if it does not exist."""

        def _download():
            try:
                return self.bucket.blob(path).download_as_bytes()
            except NotFound:
                return None

        return await asyncio.to_thread(_download)

    async def delete(self, path: str) -> bool:
        """Delete a blob. Returns False if it was already gone."""

        def _delete():
            try:
                self.bucket.blob(path).delete()
                return True
            except NotFound:
                return False

        return await asyncio.to_thread(_delete)

    async def delete_prefix(self, prefix: str) -> int:
        """Delete every blob under a prefix. Returns the number deleted."""

        def _delete_all():
            count = 0
            for blob in self.bucket.list_blobs(prefix=prefix):
                try:
                    blob.delete()
                    count += 1
                except NotFound:
                    continue
            return count

        return await asyncio.to_thread(_delete_all)

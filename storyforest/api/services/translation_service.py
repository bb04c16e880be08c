"""Translation cache for published books."""

import asyncio
import logging
from typing import Optional

from ...config import get_gemini_api_key
from ...core.modules import Translator
from ..database.repository import BookRepository
from ..errors import failed_precondition, invalid_argument, not_found, wrap_internal
from ..models.documents import TranslatedBook

logger = logging.getLogger(__name__)


def validate_language(language: Optional[str]) -> str:
    if not language or not language.strip():
        raise invalid_argument("Missing language")
    return language.strip()


class TranslationService:
    """
    Translate whole books and cache them under books/{id}/translations/{language}.

    Args:
        books: Book repository
        translator: Optional Translator module (created on first use)
    """

    def __init__(self, books: BookRepository, translator: Optional[Translator] = None):
        self.books = books
        self._translator = translator

    @property
    def translator(self) -> Translator:
        if self._translator is None:
            self._translator = Translator()
        return self._translator

    async def _translate(self, text: str, language: str) -> str:
        return await asyncio.to_thread(self.translator, text=text, target_language=language)

    async def get_cached_translation(self, book_id: str, language: str) -> Optional[TranslatedBook]:
        return await self.books.get_translation(book_id, validate_language(language))

    async def translate_and_cache_book(self, book_id: str, language: str) -> TranslatedBook:
        """Translate title, description and each page in turn, then cache the result."""
        language = validate_language(language)
        if not get_gemini_api_key():
            raise failed_precondition("Gemini API key not configured")

        book = await self.books.get_book(book_id)
        if book is None:
            raise not_found(f"Book {book_id} not found")

        try:
            title = await self._translate(book.title, language)
            description = await self._translate(book.description, language)

            pages: dict[str, str] = {}
            for page in book.pages:
                pages[str(page.page_number)] = await self._translate(page.text, language)
        except Exception as e:
            raise wrap_internal(e, "Book translation") from e

        translation = TranslatedBook(language=language, title=title, description=description, pages=pages)
        await self.books.save_translation(book_id, translation)
        logger.info(f"Cached {language} translation of book {book_id} ({len(pages)} pages)")
        return translation

"""Tests for the book translation cache and user settings."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from storyforest.api.database.repository import BookRepository, UserRepository
from storyforest.api.errors import CallableError
from storyforest.api.models.documents import Book, Page, UserProfile, UserSettings
from storyforest.api.models.requests import UpdateUserSettingsRequest
from storyforest.api.services.translation_service import TranslationService
from storyforest.api.services.user_service import UserService

MODULE = "storyforest.api.services.translation_service"


@pytest.fixture
def books():
    repo = AsyncMock(spec=BookRepository)
    repo.get_book.return_value = Book(
        id="book-1",
        title="The Forest Library",
        author_id="a",
        description="A story",
        pages=[Page(page_number=1, text="Once"), Page(page_number=2, text="Twice")],
    )
    return repo


class TestTranslationService:
    @pytest.mark.asyncio
    async def test_translates_and_caches(self, books):
        translator = MagicMock(side_effect=lambda text, target_language: f"[{target_language}] {text}")
        service = TranslationService(books, translator=translator)

        with patch(f"{MODULE}.get_gemini_api_key", return_value="key"):
            translation = await service.translate_and_cache_book("book-1", " Korean ")

        assert translation.language == "Korean"
        assert translation.title == "[Korean] The Forest Library"
        assert translation.pages == {"1": "[Korean] Once", "2": "[Korean] Twice"}
        assert [c.kwargs["text"] for c in translator.call_args_list] == [
            "The Forest Library",
            "A story",
            "Once",
            "Twice",
        ]
        books.save_translation.assert_awaited_once_with("book-1", translation)

    @pytest.mark.asyncio
    async def test_translator_failure_is_internal(self, books):
        service = TranslationService(books, translator=MagicMock(side_effect=RuntimeError("quota")))

        with patch(f"{MODULE}.get_gemini_api_key", return_value="key"):
            with pytest.raises(CallableError) as exc:
                await service.translate_and_cache_book("book-1", "Korean")

        assert exc.value.code == "internal"
        books.save_translation.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_book(self, books):
        books.get_book.return_value = None
        service = TranslationService(books, translator=MagicMock())

        with patch(f"{MODULE}.get_gemini_api_key", return_value="key"):
            with pytest.raises(CallableError) as exc:
                await service.translate_and_cache_book("nope", "Korean")

        assert exc.value.code == "not-found"

    @pytest.mark.asyncio
    async def test_blank_language(self, books):
        service = TranslationService(books, translator=MagicMock())

        with pytest.raises(CallableError) as exc:
            await service.get_cached_translation("book-1", "  ")

        assert exc.value.code == "invalid-argument"


class TestUserService:
    @pytest.mark.asyncio
    async def test_profile_for_new_user(self):
        users = AsyncMock(spec=UserRepository)
        users.get_user.return_value = None

        profile = await UserService(users).get_profile("user-123")

        assert profile == UserProfile(uid="user-123")

    @pytest.mark.asyncio
    async def test_save_only_changes_sent_fields(self):
        users = AsyncMock(spec=UserRepository)
        users.get_settings.return_value = UserSettings(selected_voice_id="v1")
        service = UserService(users)

        settings = await service.save_settings("user-123", UpdateUserSettingsRequest(preferred_language="Korean"))

        assert settings.selected_voice_id == "v1"
        users.update_user.assert_awaited_once_with("user-123", {"preferredLanguage": "Korean"})

    @pytest.mark.asyncio
    async def test_explicit_null_selects_default_narrator(self):
        users = AsyncMock(spec=UserRepository)
        users.get_user.return_value = None
        users.get_settings.return_value = UserSettings(selected_voice_id="v1")

        settings = await UserService(users).save_settings(
            "user-123", UpdateUserSettingsRequest.model_validate({"selectedVoiceId": None})
        )

        assert settings.selected_voice_id is None
        users.save_settings.assert_awaited_once_with("user-123", UserSettings(selected_voice_id=None))
        users.update_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_settings_include_profile_language(self):
        users = AsyncMock(spec=UserRepository)
        users.get_settings.return_value = UserSettings(selected_voice_id="v1")
        users.get_user.return_value = UserProfile(uid="user-123", preferred_language="Korean")

        settings = await UserService(users).get_settings("user-123")

        assert settings == UserSettings(selected_voice_id="v1", preferred_language="Korean")

    @pytest.mark.asyncio
    async def test_saved_language_is_returned(self):
        users = AsyncMock(spec=UserRepository)
        users.get_settings.return_value = UserSettings()

        settings = await UserService(users).save_settings("user-123", UpdateUserSettingsRequest(preferred_language="Korean"))

        assert settings.preferred_language == "Korean"
        users.save_settings.assert_awaited_once_with("user-123", UserSettings())

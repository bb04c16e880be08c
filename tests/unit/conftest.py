"""Pytest fixtures for API tests."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from storyforest.api.auth.tokens import AuthUser
from storyforest.api.dependencies import (
    get_admin_service,
    get_book_service,
    get_draft_service,
    get_generation_service,
    get_optional_user,
    get_translation_service,
    get_user_service,
    get_voice_service,
)
from storyforest.api.main import app
from storyforest.api.services import (
    AdminService,
    BookService,
    DraftService,
    GenerationService,
    TranslationService,
    UserService,
    VoiceService,
)


@pytest.fixture
def test_user():
    return AuthUser(uid="user-123", email="parent@example.com")


@pytest.fixture
def mock_services():
    """One AsyncMock per service, keyed like the dependency aliases."""
    return SimpleNamespace(
        generation=AsyncMock(spec=GenerationService),
        voices=AsyncMock(spec=VoiceService),
        books=AsyncMock(spec=BookService),
        drafts=AsyncMock(spec=DraftService),
        translations=AsyncMock(spec=TranslationService),
        users=AsyncMock(spec=UserService),
        admin=AsyncMock(spec=AdminService),
    )


def _make_client(services, user):
    app.dependency_overrides[get_generation_service] = lambda: services.generation
    app.dependency_overrides[get_voice_service] = lambda: services.voices
    app.dependency_overrides[get_book_service] = lambda: services.books
    app.dependency_overrides[get_draft_service] = lambda: services.drafts
    app.dependency_overrides[get_translation_service] = lambda: services.translations
    app.dependency_overrides[get_user_service] = lambda: services.users
    app.dependency_overrides[get_admin_service] = lambda: services.admin
    app.dependency_overrides[get_optional_user] = lambda: user

    # Keep the lifespan away from Firebase, Redis and the root logger
    with patch("storyforest.api.main.init_firebase", MagicMock()), \
            patch("storyforest.api.main.init_pool", AsyncMock()), \
            patch("storyforest.api.main.configure_logging", MagicMock()):
        with TestClient(app) as client:
            yield client

    app.dependency_overrides.clear()


@pytest.fixture
def client(mock_services, test_user):
    """TestClient signed in as test_user, with mocked services."""
    yield from _make_client(mock_services, test_user)


@pytest.fixture
def anon_client(mock_services):
    """TestClient with no signed-in user."""
    yield from _make_client(mock_services, None)

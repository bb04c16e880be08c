"""Tests for the raw Gemini text proxy."""

from unittest.mock import MagicMock

import pytest

from storyforest.core.modules.text_proxy import EmptyResponseError, TextProxy, build_generate_config


class TestBuildGenerateConfig:
    def test_defaults(self):
        config = build_generate_config()

        assert config.temperature == 0.7
        assert config.max_output_tokens == 2048
        assert len(config.safety_settings) == 4
        assert {s.threshold.value for s in config.safety_settings} == {"BLOCK_MEDIUM_AND_ABOVE"}

    def test_rest_keys_are_mapped(self):
        config = build_generate_config({"temperature": 0.1, "topK": 20, "topP": 0.9, "stopSequences": ["x"]})

        assert (config.temperature, config.top_k, config.top_p) == (0.1, 20, 0.9)
        assert config.max_output_tokens is None

    def test_custom_safety_settings(self):
        config = build_generate_config(
            safety_settings=[{"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"}]
        )

        assert len(config.safety_settings) == 1


class TestTextProxy:
    def test_returns_text(self):
        client = MagicMock()
        client.models.generate_content.return_value = MagicMock(text="Hello there")

        assert TextProxy(client, model="test-model").generate("Hi") == "Hello there"

    def test_empty_response(self):
        client = MagicMock()
        client.models.generate_content.return_value = MagicMock(text=None)

        with pytest.raises(EmptyResponseError):
            TextProxy(client, model="test-model").generate("Hi")

"""Tests for the shared generation types."""

import pytest

from storyforest.config.story import (
    ART_STYLE_PROMPTS,
    INTEREST_LABELS,
    MESSAGE_LABELS,
    get_interest_labels,
    get_message_label,
)
from storyforest.core.types import (
    ChildProfile,
    GeneratedImage,
    GeneratedPage,
    GeneratedStory,
    InlineImage,
    StoryContext,
    get_aspect_ratio,
    parse_data_url,
)


class TestChildProfile:
    def test_unknown_style_falls_back_to_watercolor(self):
        for style in (None, "", "oil-painting"):
            assert ChildProfile("Mina", 5, art_style=style).style_prompt == ART_STYLE_PROMPTS["watercolor"]

    def test_known_style(self):
        assert ChildProfile("Mina", 5, art_style="papercut").style_prompt == ART_STYLE_PROMPTS["papercut"]

    def test_unknown_interest_passes_through(self):
        profile = ChildProfile("Mina", 5, interests=["dinosaur", "baking"])

        assert profile.interest_labels == ["dinosaurs", "baking"]

    def test_messages(self):
        assert ChildProfile("Mina", 5, message="brave").message_label == "Be brave"
        assert ChildProfile("Mina", 5, message="custom", custom_message="Sleep well").message_label == "Sleep well"
        assert get_message_label("custom") == ""
        assert get_message_label("unknown-id") == "unknown-id"


class TestWizardLabels:
    def test_every_wizard_interest_has_a_label(self):
        assert set(INTEREST_LABELS) == {
            "dinosaur", "car", "space", "animal", "princess", "superhero",
            "robot", "ocean", "fairy", "dragon", "train", "food",
        }

    def test_every_wizard_message_has_a_label(self):
        assert set(MESSAGE_LABELS) == {"sleep", "eat", "brave", "love", "friend", "clean", "share"}

    def test_bedtime_message_and_food_interest(self):
        assert get_message_label("sleep") == "Let's go to bed early tonight"
        assert get_interest_labels(["food", "dragon"]) == ["food", "dragons"]


class TestDataUrls:
    def test_parse_data_url(self):
        assert parse_data_url("data:image/png;base64,AAAA") == ("image/png", "AAAA")

    def test_bare_base64(self):
        assert parse_data_url("AAAA") == (None, "AAAA")

    def test_generated_image_round_trip(self):
        url = GeneratedImage("image/jpeg", b"\xff\xd8").to_data_url()

        assert parse_data_url(url) == ("image/jpeg", "/9g=")

    def test_invalid_inline_image(self):
        with pytest.raises(ValueError):
            InlineImage(mime_type="image/png", data="not base64!").to_bytes()


class TestAspectRatios:
    @pytest.mark.parametrize(
        "key,size,orientation",
        [
            ("16:9", "1920x1080", "landscape"),
            ("3:4", "768x1024", "portrait"),
            ("1:1", "1024x1024", "square"),
            (None, "1920x1080", "landscape"),
            ("21:9", "1920x1080", "landscape"),
        ],
    )
    def test_lookup(self, key, size, orientation):
        ratio = get_aspect_ratio(key)

        assert (ratio.size, ratio.orientation) == (size, orientation)


class TestStoryContext:
    def test_prompt_numbers_previous_pages(self):
        context = StoryContext(title="Fox Reads", page_number=4, total_pages=10, previous_texts=["Two", "Three"])

        prompt = context.to_prompt_string()

        assert 'Title: "Fox Reads"' in prompt
        assert "Current Page: 4 of 10" in prompt
        assert 'Page 2: "Two"' in prompt
        assert 'Page 3: "Three"' in prompt


def test_story_to_dict():
    story = GeneratedStory(
        title="T",
        style="S",
        pages=[GeneratedPage(1, "Hi", "data:x"), GeneratedPage(2, "Bye")],
    )

    assert story.to_dict() == {
        "title": "T",
        "style": "S",
        "pages": [
            {"pageNumber": 1, "text": "Hi", "imageUrl": "data:x"},
            {"pageNumber": 2, "text": "Bye", "imageUrl": None},
        ],
    }
    assert story.illustrated_count == 1

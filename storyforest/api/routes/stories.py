"""Generation endpoints: stories, illustrations, translation and the raw text proxy."""

import logging

from fastapi import APIRouter

from ..dependencies import CurrentUser, Generation, OptionalUser
from ..models.requests import (
    GeminiGenerateRequest,
    GenerateImageRequest,
    PhotoStoryVariables,
    StoryVariables,
    TranslateRequest,
)
from ..models.responses import GeneratedStoryResponse, ImageResponse, TextResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/story",
    response_model=GeneratedStoryResponse,
    response_model_exclude_none=True,
    summary="Generate a story",
    description="Write a 10-15 page story for the child and illustrate each page. "
    "Pages whose illustration failed have no imageUrl.",
)
async def generate_story(variables: StoryVariables, service: Generation, user: OptionalUser):
    logger.info(f"Story requested by {user.uid if user else 'anonymous'}")
    story = await service.generate_story(variables)
    return story.to_dict()


@router.post(
    "/photo-story",
    response_model=GeneratedStoryResponse,
    response_model_exclude_none=True,
    summary="Generate a story from a photo",
    description="Like /story, with an optional family photo attached to the prompt.",
)
async def generate_photo_story(variables: PhotoStoryVariables, service: Generation, user: OptionalUser):
    logger.info(f"Photo story requested by {user.uid if user else 'anonymous'}")
    story = await service.generate_photo_story(variables)
    return story.to_dict()


@router.post("/translate", response_model=TextResponse, summary="Translate text")
async def translate_content(request: TranslateRequest, service: Generation):
    text = await service.translate(request.text, request.target_language)
    return TextResponse(text=text)


@router.post(
    "/image",
    response_model=ImageResponse,
    summary="Generate an illustration",
    description="Returns the illustration as a data URL.",
)
async def generate_image(request: GenerateImageRequest, service: Generation):
    image_url = await service.generate_image(request)
    return ImageResponse(image_url=image_url)


@router.post(
    "/text",
    response_model=TextResponse,
    summary="Raw Gemini text generation",
    description="Forward a prompt to Gemini with optional generationConfig and safetySettings. "
    "Requires authentication.",
)
async def gemini_generate(request: GeminiGenerateRequest, service: Generation, user: CurrentUser):
    text = await service.gemini_generate(request.prompt, request.generation_config, request.safety_settings)
    return TextResponse(text=text)

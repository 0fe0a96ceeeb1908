"""Content bundle generation endpoint

One POST runs the full script → title → scenes → narration chain with the
caller's own API key.
"""
from fastapi import APIRouter, Depends

from backend.core.models import GenerateRequest, StoryBundle, ErrorResponse
from backend.core.story_service import StoryBundleService
from backend.core.exceptions import ValidationException
from backend.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


def get_story_service() -> StoryBundleService:
    return StoryBundleService()


@router.post(
    "/generate",
    response_model=StoryBundle,
    summary="Generate Crime Story Video Content",
    responses={
        400: {"model": ErrorResponse, "description": "Missing API key"},
        502: {"model": ErrorResponse, "description": "Upstream LLM call failed"},
    }
)
async def generate_video_content(
    request: GenerateRequest,
    service: StoryBundleService = Depends(get_story_service)
):
    """
    Generate a true crime video content bundle.

    **Parameters:**
    - **apiKey**: LLM API key, used for this request only and never stored
    - **customPrompt**: Optional story topic (random topic when blank)

    **Returns:**
    - title, script, sceneDescriptions, narration, wordCount, estimatedDuration
    """
    if not request.api_key or not request.api_key.strip():
        raise ValidationException("API key is required", field="apiKey")

    logger.info(
        f"Generate request | custom_prompt_length={len((request.custom_prompt or '').strip())}"
    )

    bundle = await service.generate(
        api_key=request.api_key.strip(),
        custom_prompt=request.custom_prompt
    )

    logger.info(f"Generate successful | title={bundle.title!r} | scenes={len(bundle.scene_descriptions)}")
    return bundle

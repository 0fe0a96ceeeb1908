"""Story bundle generation service

This module chains the four completion calls that produce a video content
bundle: script, then title, scenes and narration, each derived from the
script produced by the first call.
"""
import time
from typing import Callable, Optional

from backend.core.models import StoryBundle
from backend.core.exceptions import ServiceException
from backend.utils.logger import get_logger
from config.settings import settings
from services.llm_service import LLMService, LLMServiceError
from services.story_prompts import (
    StepParams,
    SCRIPT_PARAMS,
    TITLE_PARAMS,
    SCENES_PARAMS,
    NARRATION_PARAMS,
    SCRIPT_SYSTEM_PROMPT,
    TITLE_SYSTEM_PROMPT,
    SCENES_SYSTEM_PROMPT,
    NARRATION_SYSTEM_PROMPT,
    pick_story_prompt,
    build_title_prompt,
    build_scenes_prompt,
    build_narration_prompt,
)
from utils.script_utils import (
    script_excerpt,
    clean_title,
    parse_scene_descriptions,
    count_words,
    estimate_duration,
)

logger = get_logger(__name__)


class StoryBundleService:
    """Service for orchestrating the script → title → scenes → narration chain"""

    def __init__(self, service_factory: Optional[Callable[[str], LLMService]] = None):
        """
        Args:
            service_factory: Builds an LLMService for a credential. Defaults to
                one configured from settings.
        """
        self.service_factory = service_factory or self._default_factory

    @staticmethod
    def _default_factory(api_key: str) -> LLMService:
        return LLMService(
            api_key=api_key,
            api_url=settings.llm_api_url,
            model=settings.llm_model,
            timeout=settings.llm_timeout
        )

    async def _run_step(
        self,
        llm: LLMService,
        stage: str,
        system_prompt: str,
        user_prompt: str,
        params: StepParams
    ) -> str:
        start_time = time.time()
        logger.info(f"StoryBundleService | Step started | stage={stage} | input_length={len(user_prompt)}")

        try:
            content = await llm.complete_text(
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                temperature=params.temperature,
                max_tokens=params.max_tokens
            )
        except LLMServiceError as e:
            raise ServiceException(
                e.message,
                service_name="LLMService",
                retryable=e.status_code is None or e.status_code >= 500 or e.status_code == 429,
                original_error=e,
                error_code=e.error_code,
                stage=stage,
                upstream_status=e.status_code,
                api_response=e.response_body
            ) from e

        logger.info(
            f"StoryBundleService | Step completed | stage={stage} | "
            f"output_length={len(content)} | duration={time.time() - start_time:.2f}s"
        )
        return content

    async def generate(self, api_key: str, custom_prompt: Optional[str] = None) -> StoryBundle:
        """
        Generate a complete content bundle

        Args:
            api_key: Caller's credential for the upstream API
            custom_prompt: Story topic; random built-in topic when blank

        Returns:
            StoryBundle with title, script, scenes, narration and estimates

        Raises:
            ServiceException: When any step's upstream call fails
        """
        start_time = time.time()
        story_prompt = pick_story_prompt(custom_prompt)
        logger.info(
            f"StoryBundleService | Generating bundle | "
            f"custom_prompt={bool(custom_prompt and custom_prompt.strip())} | topic={story_prompt[:80]}"
        )

        llm = self.service_factory(api_key)
        try:
            script = await self._run_step(
                llm, "script", SCRIPT_SYSTEM_PROMPT, story_prompt, SCRIPT_PARAMS
            )

            raw_title = await self._run_step(
                llm, "title", TITLE_SYSTEM_PROMPT, build_title_prompt(script_excerpt(script)), TITLE_PARAMS
            )
            title = clean_title(raw_title)

            raw_scenes = await self._run_step(
                llm, "scenes", SCENES_SYSTEM_PROMPT, build_scenes_prompt(script), SCENES_PARAMS
            )
            scene_descriptions = parse_scene_descriptions(raw_scenes)
            logger.debug(f"StoryBundleService | Parsed scenes | count={len(scene_descriptions)}")

            narration = await self._run_step(
                llm, "narration", NARRATION_SYSTEM_PROMPT, build_narration_prompt(script), NARRATION_PARAMS
            )
        finally:
            await llm.close()

        word_count = count_words(script)
        bundle = StoryBundle(
            title=title,
            script=script,
            scene_descriptions=scene_descriptions,
            narration=narration,
            word_count=word_count,
            estimated_duration=estimate_duration(word_count)
        )

        logger.info(
            f"StoryBundleService | Bundle completed | title={title!r} | "
            f"scenes={len(scene_descriptions)} | words={word_count} | "
            f"duration={time.time() - start_time:.2f}s"
        )
        return bundle

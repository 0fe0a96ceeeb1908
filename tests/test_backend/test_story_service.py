"""Tests for the story bundle generation chain"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from backend.core.story_service import StoryBundleService
from backend.core.exceptions import ServiceException
from services.llm_service import LLMServiceError
from services.story_prompts import (
    CRIME_STORY_PROMPTS,
    SCRIPT_SYSTEM_PROMPT,
    TITLE_SYSTEM_PROMPT,
    SCENES_SYSTEM_PROMPT,
    NARRATION_SYSTEM_PROMPT,
)

SCRIPT = "On a cold night in 1984, " + "word " * 1494


def make_llm(replies):
    llm = MagicMock()
    llm.complete_text = AsyncMock(side_effect=replies)
    llm.close = AsyncMock()
    return llm


@pytest.fixture
def llm():
    return make_llm([
        SCRIPT,
        '  "The Millbrook Vanishing"  ',
        '["Foggy main street at night, 1984", "Detective office full of case files"]',
        "It was a night... like ANY other.",
    ])


@pytest.fixture
def service(llm):
    factory = MagicMock(return_value=llm)
    return StoryBundleService(service_factory=factory)


@pytest.mark.asyncio
async def test_generate_bundle(service, llm):
    bundle = await service.generate(api_key="sk-user", custom_prompt="A museum art theft")

    service.service_factory.assert_called_once_with("sk-user")
    assert bundle.script == SCRIPT
    assert bundle.title == "The Millbrook Vanishing"
    assert bundle.scene_descriptions == ["Foggy main street at night, 1984", "Detective office full of case files"]
    assert bundle.narration == "It was a night... like ANY other."
    assert bundle.word_count == 1500
    assert bundle.estimated_duration == "10-12 minutes"
    llm.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_steps_run_in_order_and_chain_script(service, llm):
    await service.generate(api_key="sk-user", custom_prompt="A museum art theft")

    calls = llm.complete_text.await_args_list
    assert [c.kwargs["system_prompt"] for c in calls] == [
        SCRIPT_SYSTEM_PROMPT,
        TITLE_SYSTEM_PROMPT,
        SCENES_SYSTEM_PROMPT,
        NARRATION_SYSTEM_PROMPT,
    ]

    assert calls[0].kwargs["user_prompt"] == "A museum art theft"
    assert calls[0].kwargs["temperature"] == 0.8
    assert calls[0].kwargs["max_tokens"] == 3000

    title_prompt = calls[1].kwargs["user_prompt"]
    assert title_prompt.endswith(SCRIPT[:500] + "...")
    assert SCRIPT not in title_prompt
    assert calls[1].kwargs["max_tokens"] == 100

    assert calls[2].kwargs["user_prompt"].endswith(SCRIPT)
    assert calls[2].kwargs["max_tokens"] == 1500
    assert calls[3].kwargs["user_prompt"].endswith(SCRIPT)


@pytest.mark.asyncio
async def test_random_topic_when_prompt_blank(service, llm):
    await service.generate(api_key="sk-user", custom_prompt="   ")
    topic = llm.complete_text.await_args_list[0].kwargs["user_prompt"]
    assert topic in CRIME_STORY_PROMPTS


@pytest.mark.asyncio
async def test_empty_replies_use_defaults():
    llm = make_llm(["", "", "", ""])
    service = StoryBundleService(service_factory=MagicMock(return_value=llm))

    bundle = await service.generate(api_key="sk-user")

    assert bundle.title == "Untitled Crime Story"
    assert bundle.scene_descriptions == []
    assert bundle.narration == ""
    assert bundle.word_count == 0


@pytest.mark.asyncio
async def test_upstream_failure_aborts_chain():
    llm = make_llm([
        SCRIPT,
        LLMServiceError("Rate limit reached", status_code=429, error_code="rate_limit_exceeded"),
    ])
    service = StoryBundleService(service_factory=MagicMock(return_value=llm))

    with pytest.raises(ServiceException) as exc_info:
        await service.generate(api_key="sk-user")

    exc = exc_info.value
    assert exc.message == "Rate limit reached"
    assert exc.stage == "title"
    assert exc.upstream_status == 429
    assert exc.retryable is True
    assert llm.complete_text.await_count == 2
    llm.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_auth_failure_not_retryable():
    llm = make_llm([LLMServiceError("Incorrect API key provided", status_code=401)])
    service = StoryBundleService(service_factory=MagicMock(return_value=llm))

    with pytest.raises(ServiceException) as exc_info:
        await service.generate(api_key="sk-bad")

    assert exc_info.value.stage == "script"
    assert exc_info.value.retryable is False

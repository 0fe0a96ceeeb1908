"""Tests for the LLM chat completion client"""
import pytest
import httpx
from unittest.mock import AsyncMock, patch
from services.llm_service import LLMService, LLMServiceError


def _completion(content):
    return {
        "id": "chatcmpl-1",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
        "usage": {"total_tokens": 42}
    }


class TestLLMService:
    """Tests for LLMService"""

    @pytest.fixture
    def service(self):
        return LLMService(
            api_key="sk-test-key-1234567890",
            api_url="https://llm.example.com/v1/",
            model="gpt-test"
        )

    def test_client_headers(self, service):
        assert service.client.headers["Authorization"] == "Bearer sk-test-key-1234567890"
        assert service.api_url == "https://llm.example.com/v1"
        assert service.model == "gpt-test"

    @pytest.mark.asyncio
    async def test_chat_completion_payload(self, service):
        with patch.object(service.client, 'post', new_callable=AsyncMock) as mock_post:
            mock_post.return_value = httpx.Response(200, json=_completion("hello"))

            result = await service.chat_completion(
                messages=[{"role": "user", "content": "hi"}],
                temperature=0.8,
                max_tokens=3000
            )

            assert result["choices"][0]["message"]["content"] == "hello"
            assert mock_post.call_args.args[0] == "https://llm.example.com/v1/chat/completions"
            payload = mock_post.call_args.kwargs['json']
            assert payload == {
                "model": "gpt-test",
                "messages": [{"role": "user", "content": "hi"}],
                "temperature": 0.8,
                "max_tokens": 3000
            }

    @pytest.mark.asyncio
    async def test_upstream_error_message_is_surfaced(self, service):
        body = {"error": {"message": "Incorrect API key provided", "type": "invalid_request_error", "code": "invalid_api_key"}}
        with patch.object(service.client, 'post', new_callable=AsyncMock) as mock_post:
            mock_post.return_value = httpx.Response(401, json=body)

            with pytest.raises(LLMServiceError) as exc_info:
                await service.chat_completion(messages=[{"role": "user", "content": "hi"}])

        assert exc_info.value.message == "Incorrect API key provided"
        assert exc_info.value.status_code == 401
        assert exc_info.value.error_code == "invalid_api_key"
        assert exc_info.value.response_body == body

    @pytest.mark.asyncio
    async def test_upstream_plain_text_error(self, service):
        with patch.object(service.client, 'post', new_callable=AsyncMock) as mock_post:
            mock_post.return_value = httpx.Response(503, text="Service Unavailable")

            with pytest.raises(LLMServiceError) as exc_info:
                await service.chat_completion(messages=[])

        assert exc_info.value.message == "Service Unavailable"
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_transport_error(self, service):
        with patch.object(service.client, 'post', new_callable=AsyncMock) as mock_post:
            mock_post.side_effect = httpx.ConnectError("connection refused")

            with pytest.raises(LLMServiceError) as exc_info:
                await service.chat_completion(messages=[])

        assert "connection refused" in exc_info.value.message
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_complete_text_sends_system_and_user(self, service):
        with patch.object(service.client, 'post', new_callable=AsyncMock) as mock_post:
            mock_post.return_value = httpx.Response(200, json=_completion("A story"))

            text = await service.complete_text("be dramatic", "tell a story", temperature=0.5, max_tokens=10)

            assert text == "A story"
            messages = mock_post.call_args.kwargs['json']['messages']
            assert messages == [
                {"role": "system", "content": "be dramatic"},
                {"role": "user", "content": "tell a story"}
            ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"choices": []},
        {"choices": [{"message": {"content": None}}]},
        {"object": "chat.completion"},
    ])
    async def test_complete_text_missing_content(self, service, body):
        with patch.object(service.client, 'post', new_callable=AsyncMock) as mock_post:
            mock_post.return_value = httpx.Response(200, json=body)
            assert await service.complete_text("s", "u") == ""

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self):
        async with LLMService(api_key="sk-x") as service:
            client = service.client
        assert client.is_closed

    @pytest.mark.asyncio
    async def test_non_object_reply_is_service_error(self, service):
        with patch.object(service.client, 'post', new_callable=AsyncMock) as mock_post:
            mock_post.return_value = httpx.Response(200, json=["oops"])

            with pytest.raises(LLMServiceError) as exc_info:
                await service.complete_text("s", "u")

        assert exc_info.value.message == "LLM API returned an unexpected response"
        assert exc_info.value.status_code == 200
        assert exc_info.value.response_body == ["oops"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"choices": "not a list"},
        {"choices": ["plain string choice"]},
        {"choices": [{"message": "plain string message"}]},
        {"choices": [{"message": {"content": [{"type": "text", "text": "hi"}]}}]},
    ])
    async def test_unexpected_choice_shape_is_service_error(self, service, body):
        with patch.object(service.client, 'post', new_callable=AsyncMock) as mock_post:
            mock_post.return_value = httpx.Response(200, json=body)

            with pytest.raises(LLMServiceError) as exc_info:
                await service.complete_text("s", "u")

        assert exc_info.value.message == "LLM API returned an unexpected response"
        assert exc_info.value.response_body == body

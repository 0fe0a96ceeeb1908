"""LLM API service client - OpenAI-compatible chat completions"""
import httpx
from typing import Dict, Any, Optional, List
from config.settings import settings
import logging


class LLMServiceError(Exception):
    """Upstream chat completion call failed"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: str = "",
        response_body: Optional[Any] = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.response_body = response_body


def _extract_error(response: httpx.Response) -> tuple:
    """Pull (message, code, body) out of an upstream error response"""
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return (text or f"HTTP {response.status_code}", "", text or None)

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        message = error.get("message") or f"HTTP {response.status_code}"
        code = error.get("code") or error.get("type") or ""
        return (message, str(code), body)
    if isinstance(error, str):
        return (error, "", body)
    return (f"HTTP {response.status_code}", "", body)


class LLMService:
    """Thin async client for a chat completion API

    The API key is supplied per instance; callers create one service per
    request with the caller's credential and close it afterwards.
    """

    def __init__(
        self,
        api_key: str,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        """
        Args:
            api_key: Bearer credential for the upstream API
            api_url: API base URL (OpenAI-compatible)
            model: Model name
            timeout: Request timeout in seconds, None to wait indefinitely
        """
        self.api_url = (api_url or settings.llm_api_url).rstrip("/")
        self.model = model or settings.llm_model
        self.logger = logging.getLogger(__name__)

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

        self.client = httpx.AsyncClient(
            headers=headers,
            timeout=timeout if timeout is not None else settings.llm_timeout
        )

    async def close(self):
        await self.client.aclose()

    async def chat_completion(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 1000,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Call the chat completion endpoint

        Args:
            messages: Conversation, e.g. [{"role": "user", "content": "..."}]
            temperature: Sampling temperature (0-2)
            max_tokens: Maximum tokens to generate
            **kwargs: Extra API parameters

        Returns:
            Parsed JSON response

        Raises:
            LLMServiceError: On HTTP error status or transport failure
        """
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs
        }
        url = f"{self.api_url}/chat/completions"

        self.logger.debug(f"Calling LLM | model={self.model} | url={url} | messages={len(messages)}")

        try:
            response = await self.client.post(url, json=payload)
        except httpx.HTTPError as e:
            self.logger.error(f"LLM API request error: {type(e).__name__}: {e}")
            raise LLMServiceError(str(e) or type(e).__name__) from e

        self.logger.debug(f"Response status: {response.status_code}")

        if response.is_error:
            message, code, body = _extract_error(response)
            self.logger.error(f"LLM API request failed: {response.status_code} | {message}")
            raise LLMServiceError(
                message,
                status_code=response.status_code,
                error_code=code,
                response_body=body
            )

        try:
            result = response.json()
        except ValueError as e:
            raise LLMServiceError(
                "LLM API returned a non-JSON response",
                status_code=response.status_code,
                response_body=response.text[:500]
            ) from e

        if not isinstance(result, dict):
            self.logger.error(f"LLM API returned {type(result).__name__} instead of an object")
            raise LLMServiceError(
                "LLM API returned an unexpected response",
                status_code=response.status_code,
                response_body=result
            )
        return result

    async def complete_text(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 1000
    ) -> str:
        """
        Run a system+user completion and return the first choice's text

        Returns:
            Message content, or "" when the response has no content
        """
        result = await self.chat_completion(
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            temperature=temperature,
            max_tokens=max_tokens
        )

        choices = result.get("choices") or []
        if not isinstance(choices, list):
            raise LLMServiceError("LLM API returned an unexpected response", response_body=result)
        if not choices:
            self.logger.warning(f"LLM response has no choices | response_keys={list(result.keys())}")
            return ""

        choice = choices[0]
        message = choice.get("message") if isinstance(choice, dict) else None
        content = message.get("content") if isinstance(message, dict) else None

        # content must be a plain string or null; content-part lists are not supported
        if not isinstance(choice, dict) or not isinstance(message, (dict, type(None))) \
                or not isinstance(content, (str, type(None))):
            self.logger.error("LLM response choice has an unexpected shape")
            raise LLMServiceError("LLM API returned an unexpected response", response_body=result)

        content = content or ""
        self.logger.info(f"LLM response received | content_length={len(content)} chars")
        return content

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

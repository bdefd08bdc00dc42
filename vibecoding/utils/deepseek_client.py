from typing import Optional, Dict, List, Any, AsyncGenerator
import asyncio
import json
import random
import httpx
from vibecoding.core.config import settings
from vibecoding.core.exceptions import ConfigurationError, LLMAPIError, LLMResponseError
from vibecoding.core.logging_config import logger

RETRYABLE_STATUS_CODES = [429, 500, 502, 503, 504]

# Returned by parse_sse_line for the terminating "data: [DONE]" line
STREAM_DONE = object()


def parse_sse_line(line: str):
    """
    Extract the text delta from one OpenAI-style SSE line.

    Returns:
        The delta text, STREAM_DONE for the terminator, or None for
        keep-alives, empty deltas and undecodable payloads
    """
    if not line.startswith("data:"):
        return None
    data = line[5:].strip()
    if data == "[DONE]":
        return STREAM_DONE
    try:
        payload = json.loads(data)
    except json.JSONDecodeError:
        logger.debug(f"Skipping undecodable stream line: {data[:100]}")
        return None
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices") or []
    if not choices:
        return None
    delta = choices[0].get("delta") or {}
    return delta.get("content") or None


class DeepSeekClient:
    """DeepSeek (OpenAI-compatible) chat completions client for streaming and non-streaming requests"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        max_retries: Optional[int] = None,
        retry_base_delay: Optional[float] = None,
    ):
        self.api_key = (api_key if api_key is not None else settings.DEEPSEEK_API_KEY).strip()
        self.base_url = (base_url or settings.DEEPSEEK_API_URL).strip().rstrip("/")
        self.model = (model or settings.DEEPSEEK_MODEL).strip()
        self.max_retries = settings.LLM_MAX_RETRIES if max_retries is None else max_retries
        self.retry_base_delay = settings.LLM_RETRY_BASE_DELAY if retry_base_delay is None else retry_base_delay
        self.retry_max_delay = settings.LLM_RETRY_MAX_DELAY
        self._transport = transport
        self.timeout = httpx.Timeout(
            connect=float(settings.LLM_CONNECT_TIMEOUT),
            read=float(settings.LLM_REQUEST_TIMEOUT),
            write=float(settings.LLM_REQUEST_TIMEOUT),
            pool=float(settings.LLM_REQUEST_TIMEOUT)
        )

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/v1/chat/completions"

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise ConfigurationError("DEEPSEEK_API_KEY")
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def _payload(
        self,
        messages: List[Dict[str, str]],
        stream: bool,
        max_tokens: Optional[int],
        temperature: Optional[float]
    ) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": messages,
            "stream": stream,
            "temperature": settings.LLM_TEMPERATURE if temperature is None else temperature,
            "max_tokens": max_tokens or settings.LLM_CHAT_MAX_TOKENS,
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def _is_retryable_error(self, error: Exception) -> bool:
        """Check if an error is retryable (rate limit, server error, network issues)"""
        if isinstance(error, (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError)):
            logger.warning(f"HTTPX network error detected (retryable): {type(error).__name__}")
            return True
        if isinstance(error, LLMAPIError):
            return error.status in RETRYABLE_STATUS_CODES
        return False

    def _calculate_retry_delay(self, attempt: int) -> float:
        """Calculate delay with exponential backoff and jitter"""
        delay = min(self.retry_base_delay * (2 ** attempt), self.retry_max_delay)
        # Add jitter (0-25% of delay)
        jitter = delay * random.uniform(0, 0.25)
        return delay + jitter

    async def chat(
        self,
        messages: List[Dict[str, str]],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None
    ) -> Dict[str, Any]:
        """
        Non-streaming chat completion

        Args:
            messages: OpenAI-style [{"role": ..., "content": ...}] list
            max_tokens: Maximum tokens to generate
            temperature: Temperature for generation

        Returns:
            Dict with content, model, token usage and response id
        """
        headers = self._headers()
        payload = self._payload(messages, False, max_tokens, temperature)
        logger.info(f"DeepSeek API: model={self.model}, max_tokens={payload['max_tokens']}, messages={len(messages)}")

        for attempt in range(self.max_retries + 1):
            try:
                async with self._client() as client:
                    response = await client.post(self.completions_url, headers=headers, json=payload)
                if response.status_code >= 400:
                    raise LLMAPIError(response.status_code, response.text)

                data = response.json()
                choices = data.get("choices") or []
                if not choices:
                    raise LLMResponseError("API response does not contain choices")

                content = ((choices[0].get("message") or {}).get("content") or "").strip()
                usage = data.get("usage") or {}
                result = {
                    "content": content,
                    "model": data.get("model", self.model),
                    "input_tokens": usage.get("prompt_tokens", 0),
                    "output_tokens": usage.get("completion_tokens", 0),
                    "total_tokens": usage.get("total_tokens", 0),
                    "id": data.get("id"),
                }
                logger.info(f"DeepSeek API response: id={result['id']}, tokens={result['total_tokens']}, content_len={len(content)}")
                return result

            except Exception as e:
                error_type = type(e).__name__
                if self._is_retryable_error(e) and attempt < self.max_retries:
                    delay = self._calculate_retry_delay(attempt)
                    logger.warning(
                        f"DeepSeek API error [{error_type}] (attempt {attempt + 1}/{self.max_retries + 1}), retrying in {delay:.1f}s...",
                        extra={
                            "event_type": "llm_api_retry",
                            "error_type": error_type,
                            "attempt": attempt + 1,
                            "retry_delay": delay
                        }
                    )
                    await asyncio.sleep(delay)
                else:
                    logger.error(
                        f"DeepSeek API error (non-retryable or max retries exceeded): {error_type}: {e}",
                        extra={
                            "event_type": "llm_api_error",
                            "error_type": error_type,
                            "attempt": attempt + 1
                        }
                    )
                    raise

    async def chat_stream(
        self,
        messages: List[Dict[str, str]],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None
    ) -> AsyncGenerator[str, None]:
        """
        Streaming chat completion

        Yields:
            Text deltas as they arrive
        """
        headers = self._headers()
        payload = self._payload(messages, True, max_tokens, temperature)
        logger.info(f"DeepSeek Streaming: model={self.model}, max_tokens={payload['max_tokens']}, messages={len(messages)}")

        for attempt in range(self.max_retries + 1):
            has_yielded = False
            try:
                async with self._client() as client:
                    async with client.stream("POST", self.completions_url, headers=headers, json=payload) as response:
                        if response.status_code >= 400:
                            body = (await response.aread()).decode("utf-8", errors="replace")
                            raise LLMAPIError(response.status_code, body)

                        async for line in response.aiter_lines():
                            delta = parse_sse_line(line)
                            if delta is STREAM_DONE:
                                return
                            if delta:
                                has_yielded = True
                                yield delta
                return

            except Exception as e:
                error_type = type(e).__name__
                # Only retry if we haven't started yielding yet (can't recover mid-stream)
                if not has_yielded and self._is_retryable_error(e) and attempt < self.max_retries:
                    delay = self._calculate_retry_delay(attempt)
                    logger.warning(
                        f"DeepSeek Streaming error [{error_type}] (attempt {attempt + 1}/{self.max_retries + 1}), retrying in {delay:.1f}s...",
                        extra={
                            "event_type": "llm_stream_retry",
                            "error_type": error_type,
                            "attempt": attempt + 1,
                            "retry_delay": delay
                        }
                    )
                    await asyncio.sleep(delay)
                else:
                    logger.error(
                        f"DeepSeek Streaming error (non-retryable): {error_type}: {e}",
                        extra={
                            "event_type": "llm_stream_error",
                            "error_type": error_type,
                            "has_yielded": has_yielded,
                            "attempt": attempt + 1
                        }
                    )
                    raise


# Create singleton instance
deepseek_client = DeepSeekClient()

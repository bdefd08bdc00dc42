"""
Unit Tests for the chat API endpoints
"""
import json
import pytest
from httpx import AsyncClient

from vibecoding.core.exceptions import LLMAPIError


def data_lines(text: str):
    return [line[len('data: '):] for line in text.split('\n') if line.startswith('data: ')]


class TestChatStream:
    """Test POST /chat/stream"""

    @pytest.mark.asyncio
    async def test_streams_content(self, client: AsyncClient, mock_llm, conversation_id):
        mock_llm.set_response('Hello there, how can I help?', chunk_size=6)

        response = await client.post('/api/v1/chat/stream', json={
            'conversationId': conversation_id,
            'messages': [{'role': 'user', 'content': 'hi'}]
        })

        assert response.status_code == 200
        lines = data_lines(response.text)
        assert lines[-1] == '[DONE]'
        chunks = [json.loads(line)['content'] for line in lines[:-1]]
        assert ''.join(chunks) == 'Hello there, how can I help?'
        assert mock_llm.last_messages == [{'role': 'user', 'content': 'hi'}]

    @pytest.mark.asyncio
    async def test_error_event(self, client: AsyncClient, mock_llm, conversation_id):
        mock_llm.set_error(LLMAPIError(503, 'overloaded'))

        response = await client.post('/api/v1/chat/stream', json={
            'conversationId': conversation_id,
            'messages': [{'role': 'user', 'content': 'hi'}]
        })

        lines = data_lines(response.text)
        assert 'overloaded' in json.loads(lines[0])['error']
        assert lines[-1] == '[DONE]'

    @pytest.mark.asyncio
    async def test_empty_messages(self, client: AsyncClient, conversation_id):
        response = await client.post('/api/v1/chat/stream', json={
            'conversationId': conversation_id,
            'messages': []
        })

        assert response.status_code == 400
        assert response.json()['error']['code'] == 'VALIDATION_ERROR'

    @pytest.mark.asyncio
    async def test_invalid_role(self, client: AsyncClient, conversation_id):
        response = await client.post('/api/v1/chat/stream', json={
            'conversationId': conversation_id,
            'messages': [{'role': 'robot', 'content': 'hi'}]
        })
        assert response.status_code == 422


class TestChatTitle:
    """Test POST /chat/title"""

    @pytest.mark.asyncio
    async def test_title(self, client: AsyncClient, mock_llm):
        mock_llm.set_response('"Snake Game"')

        response = await client.post('/api/v1/chat/title', json={'message': 'write a snake game'})

        assert response.status_code == 200
        assert response.json() == {'title': 'Snake Game'}

    @pytest.mark.asyncio
    async def test_upstream_failure(self, client: AsyncClient, mock_llm):
        mock_llm.set_error(LLMAPIError(500, 'boom'))

        response = await client.post('/api/v1/chat/title', json={'message': 'hello'})

        assert response.status_code == 502
        assert response.json()['error']['code'] == 'LLM_API_ERROR'

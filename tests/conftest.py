"""
VibeCoding - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator
import pytest
from httpx import AsyncClient, ASGITransport
from faker import Faker

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DEEPSEEK_API_KEY'] = 'test-api-key'
os.environ['LOG_FILE'] = ''

from vibecoding.main import app
from vibecoding.api.dependencies import get_code_generator, get_file_store, get_llm_client
from vibecoding.services.code_generator import CodeGenerator
from vibecoding.services.file_store import GeneratedCodeStore

from mocks.mock_deepseek import MockDeepSeekClient

fake = Faker()


@pytest.fixture
def mock_llm() -> MockDeepSeekClient:
    """Fresh mock DeepSeek client per test"""
    return MockDeepSeekClient()


@pytest.fixture
def file_store() -> GeneratedCodeStore:
    """Empty generated-code store per test"""
    return GeneratedCodeStore()


@pytest.fixture
def conversation_id() -> str:
    return fake.uuid4()


@pytest.fixture
async def client(mock_llm: MockDeepSeekClient, file_store: GeneratedCodeStore) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with the LLM client and store overridden"""
    app.dependency_overrides[get_llm_client] = lambda: mock_llm
    app.dependency_overrides[get_code_generator] = lambda: CodeGenerator(client=mock_llm)
    app.dependency_overrides[get_file_store] = lambda: file_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()

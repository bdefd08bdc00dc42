"""
FastAPI dependencies shared by the v1 endpoints.

Tests swap these through app.dependency_overrides.
"""

from vibecoding.services.code_generator import CodeGenerator, code_generator
from vibecoding.services.file_store import GeneratedCodeStore, generated_code_store
from vibecoding.utils.deepseek_client import DeepSeekClient, deepseek_client


def get_llm_client() -> DeepSeekClient:
    return deepseek_client


def get_code_generator() -> CodeGenerator:
    return code_generator


def get_file_store() -> GeneratedCodeStore:
    return generated_code_store

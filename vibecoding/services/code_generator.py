"""
Code Generator - turns a user request into a multi-file project

Two modes:
- generate_stream(): the model writes FILE/LANGUAGE/CONTENT/ENDFILE blocks,
  files are yielded one by one while the response is still streaming
- generate(): the model answers with a single JSON document
  {"files": [...], "structure": [...]}
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, AsyncGenerator, Dict, List, Optional, Sequence

from vibecoding.core.config import settings
from vibecoding.core.exceptions import CodeGenerationError, LLMResponseError
from vibecoding.core.logging_config import logger
from vibecoding.utils.deepseek_client import DeepSeekClient, deepseek_client
from vibecoding.utils.file_extensions import detect_language_from_path, ensure_file_extension
from vibecoding.utils.stream_parser import CodeFile, ParserEvent, StreamingFileBlockParser


STREAM_SYSTEM_PROMPT = """You are a professional code generation assistant. Generate a complete code project for the user's request.

Requirements:
1. Return the project one file at a time, each file in exactly this format:
   FILE:<file path>
   LANGUAGE:<language>
   CONTENT:
   <file content, may span many lines>
   ENDFILE

2. Use / as the path separator, e.g. src/index.js, package.json
3. Multi-file projects must include the configuration files they need (package.json, README.md, ...)
4. Code must be complete and runnable
5. When asked to change existing code, modify the existing project
6. Emit each file as soon as it is finished, do not wait until all files are written
7. Follow the format strictly and add no extra commentary

Example:
FILE:package.json
LANGUAGE:json
CONTENT:
{
  "name": "my-project",
  "version": "1.0.0"
}
ENDFILE
FILE:src/index.js
LANGUAGE:javascript
CONTENT:
console.log("Hello");
ENDFILE"""

JSON_SYSTEM_PROMPT = """You are a professional code generation assistant. Generate a complete code project for the user's request.

Requirements:
1. Answer in JSON with a "files" array
2. Every file has: path, content, language (javascript, typescript, python, ...)
3. Use / as the path separator, e.g. src/index.js, package.json
4. Multi-file projects must include the configuration files they need (package.json, README.md, ...)
5. Code must be complete and runnable
6. When asked to change existing code, modify the existing project

Format:
{
  "files": [
    {"path": "src/index.js", "content": "...", "language": "javascript"}
  ],
  "structure": ["src/", "src/index.js", "package.json"]
}"""

FENCED_JSON_PATTERN = re.compile(r'```(?:json)?\s*([\s\S]*?)\s*```')


@dataclass
class GeneratedProject:
    """Result of one-shot generation"""
    files: List[CodeFile] = field(default_factory=list)
    structure: List[str] = field(default_factory=list)


def build_code_messages(
    user_request: str,
    existing_code: Optional[Sequence[CodeFile]] = None,
    system_prompt: str = STREAM_SYSTEM_PROMPT
) -> List[Dict[str, str]]:
    """System prompt, optional existing-project outline, then the request"""
    messages = [{"role": "system", "content": system_prompt}]

    if existing_code:
        outline = [{"path": f.path, "language": f.language} for f in existing_code]
        messages.append({
            "role": "assistant",
            "content": f"Existing project structure:\n{json.dumps(outline, indent=2)}",
        })

    messages.append({"role": "user", "content": user_request})
    return messages


def parse_generated_project(content: str) -> GeneratedProject:
    """
    Parse the JSON answer of one-shot generation.

    The JSON may be wrapped in a markdown code fence. Each file gets a
    language (declared, else inferred from its path) and an extension
    consistent with it.

    Raises:
        CodeGenerationError: content is not JSON or has no files array
    """
    json_content = content
    fenced = FENCED_JSON_PATTERN.search(content)
    if fenced:
        json_content = fenced.group(1)

    try:
        parsed = json.loads(json_content)
    except json.JSONDecodeError as e:
        raise CodeGenerationError(str(e)) from e

    if not isinstance(parsed, dict) or not isinstance(parsed.get("files"), list):
        raise CodeGenerationError("Invalid response format: missing files array")

    files: List[CodeFile] = []
    for index, raw in enumerate(parsed["files"]):
        if not isinstance(raw, dict):
            raise CodeGenerationError(f"file entry {index + 1} is not an object")
        path = str(raw.get("path") or "")
        if not path:
            raise CodeGenerationError(f"file entry {index + 1} has no path")
        language = raw.get("language") or detect_language_from_path(path)
        files.append(CodeFile(
            path=ensure_file_extension(path, language),
            content=raw.get("content") or "",
            language=language,
        ))

    structure = parsed.get("structure")
    if not isinstance(structure, list):
        structure = [f.path for f in files]

    return GeneratedProject(files=files, structure=[str(s) for s in structure])


class CodeGenerator:
    """Project generation on top of the DeepSeek client"""

    def __init__(self, client: Optional[DeepSeekClient] = None):
        self.client = client or deepseek_client

    async def generate_stream(
        self,
        user_request: str,
        existing_code: Optional[Sequence[CodeFile]] = None
    ) -> AsyncGenerator[ParserEvent, None]:
        """
        Stream a project generation.

        Yields:
            ProgressEvent when a file starts, FileCompleteEvent when it is
            closed, DoneEvent once the response has ended
        """
        messages = build_code_messages(user_request, existing_code)
        logger.info(
            f"[CodeGenerator] Streaming generation started "
            f"(existing files: {len(existing_code) if existing_code else 0})"
        )

        parser = StreamingFileBlockParser()
        fragments = self.client.chat_stream(messages, max_tokens=settings.LLM_CODE_MAX_TOKENS)
        async for event in parser.parse(fragments):
            yield event

        logger.info(f"[CodeGenerator] Streaming generation finished: {parser.snapshot.file_count} files")

    async def generate(
        self,
        user_request: str,
        existing_code: Optional[Sequence[CodeFile]] = None
    ) -> GeneratedProject:
        """One-shot generation returning every file at once"""
        messages = build_code_messages(user_request, existing_code, system_prompt=JSON_SYSTEM_PROMPT)
        response: Dict[str, Any] = await self.client.chat(messages, max_tokens=settings.LLM_CODE_MAX_TOKENS)

        content = response.get("content", "")
        if not content:
            raise LLMResponseError("API response content is empty")

        project = parse_generated_project(content)
        logger.info(f"[CodeGenerator] Generated {len(project.files)} files")
        return project


code_generator = CodeGenerator()

"""
Vibe-coding Endpoints
Streaming project generation, generated-file operations, and HTML preview
"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, StreamingResponse
from typing import AsyncGenerator
import json

from vibecoding.api.dependencies import get_code_generator, get_file_store
from vibecoding.core.exceptions import ConversationNotFoundError, PreviewNotAvailableError
from vibecoding.core.logging_config import logger, set_conversation_id
from vibecoding.schemas.vibecoding import (
    CodeFileSchema,
    ConversationFilesResponse,
    FileOperationResponse,
    GenerateCodeRequest,
    GenerateCodeResponse,
    StoredFileSchema,
    UpdateFileRequest,
)
from vibecoding.services.code_generator import CodeGenerator
from vibecoding.services.file_store import GeneratedCodeStore
from vibecoding.utils.html_inliner import build_preview
from vibecoding.utils.stream_parser import DoneEvent, FileCompleteEvent, ProgressEvent


router = APIRouter(prefix="/vibecoding", tags=["Vibe Coding"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def sse_event(payload: dict) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


SSE_DONE = "data: [DONE]\n\n"


@router.post("/generate-stream")
async def generate_code_stream(
    request: GenerateCodeRequest,
    generator: CodeGenerator = Depends(get_code_generator),
    store: GeneratedCodeStore = Depends(get_file_store)
):
    """
    Stream a project generation as Server-Sent Events

    Each completed file is saved before its event is sent, so a client
    that reloads the conversation sees everything it was already shown.
    """
    set_conversation_id(request.conversation_id)
    existing_code = store.get_code_files(request.conversation_id)

    async def event_generator() -> AsyncGenerator[str, None]:
        try:
            logger.log_generation_event(request.conversation_id, "started", existing_files=len(existing_code))

            async for event in generator.generate_stream(request.user_request, existing_code):
                if isinstance(event, ProgressEvent):
                    yield sse_event({"type": "progress", "data": {"file": event.path, "status": "generating"}})
                elif isinstance(event, FileCompleteEvent):
                    store.upsert(request.conversation_id, event.file)
                    yield sse_event({"type": "file", "file": event.file.to_dict()})
                elif isinstance(event, DoneEvent):
                    logger.log_generation_event(request.conversation_id, "completed", file_count=event.file_count)
                    yield sse_event({"type": "done", "fileCount": event.file_count})

        except Exception as e:
            logger.log_error_with_context(e, "generate_code_stream", conversation_id=request.conversation_id)
            yield sse_event({"type": "error", "error": str(e)})

        yield SSE_DONE

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS
    )


@router.post("/generate", response_model=GenerateCodeResponse)
async def generate_code(
    request: GenerateCodeRequest,
    generator: CodeGenerator = Depends(get_code_generator),
    store: GeneratedCodeStore = Depends(get_file_store)
):
    """One-shot generation: the whole project in a single JSON response"""
    set_conversation_id(request.conversation_id)
    existing_code = store.get_code_files(request.conversation_id)

    project = await generator.generate(request.user_request, existing_code)
    for file in project.files:
        store.upsert(request.conversation_id, file)

    logger.log_generation_event(request.conversation_id, "completed", file_count=len(project.files), mode="json")
    return GenerateCodeResponse(
        files=[CodeFileSchema(**f.to_dict()) for f in project.files],
        structure=project.structure
    )


@router.get("/{conversation_id}", response_model=ConversationFilesResponse, response_model_by_alias=True)
async def get_generated_code(
    conversation_id: str,
    store: GeneratedCodeStore = Depends(get_file_store)
):
    """All generated files of a conversation, ordered by path"""
    files = [
        StoredFileSchema(path=f.path, content=f.content, language=f.language, updated_at=f.updated_at)
        for f in store.list_files(conversation_id)
    ]
    return ConversationFilesResponse(files=files)


@router.put("/{conversation_id}/file", response_model=FileOperationResponse)
async def update_generated_file(
    conversation_id: str,
    request: UpdateFileRequest,
    store: GeneratedCodeStore = Depends(get_file_store)
):
    """Save an edited file back to the store"""
    store.update_content(conversation_id, request.file_path, request.content)
    logger.info(f"[VibeCoding] Updated {request.file_path} in {conversation_id}")
    return FileOperationResponse(success=True)


@router.get("/{conversation_id}/preview", response_class=HTMLResponse)
async def preview_project(
    conversation_id: str,
    store: GeneratedCodeStore = Depends(get_file_store)
):
    """Self-contained HTML document with the project's CSS and JS inlined"""
    document = build_preview(store.get_code_files(conversation_id))
    if document is None:
        raise PreviewNotAvailableError(conversation_id)

    if document.unresolved:
        logger.info(
            f"[VibeCoding] Preview of {conversation_id} left {len(document.unresolved)} references unresolved"
        )
    return HTMLResponse(content=document.html)


@router.delete("/{conversation_id}", response_model=FileOperationResponse)
async def delete_generated_code(
    conversation_id: str,
    store: GeneratedCodeStore = Depends(get_file_store)
):
    """Drop all generated files of a conversation"""
    removed = store.delete_conversation(conversation_id)
    if not removed:
        raise ConversationNotFoundError(conversation_id)
    logger.info(f"[VibeCoding] Deleted {removed} files of {conversation_id}")
    return FileOperationResponse(success=True)

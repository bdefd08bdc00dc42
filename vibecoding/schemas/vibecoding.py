"""
Pydantic schemas for the vibe-coding and chat endpoints
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Literal
from datetime import datetime


class CodeFileSchema(BaseModel):
    """Generated file schema"""
    path: str = Field(..., min_length=1, description="'/'-separated path, unique per conversation")
    content: str = Field(default="", description="File content")
    language: Optional[str] = Field(None, description="Language identifier")


class StoredFileSchema(CodeFileSchema):
    """Generated file as persisted in the store"""
    model_config = ConfigDict(populate_by_name=True)

    updated_at: datetime = Field(..., alias="updatedAt", description="Last write time")


class GenerateCodeRequest(BaseModel):
    """Request for (streaming or one-shot) project generation"""
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: str = Field(..., min_length=1, alias="conversationId", description="Conversation ID")
    user_request: str = Field(..., min_length=1, alias="userRequest", description="What to build or change")


class GenerateCodeResponse(BaseModel):
    """One-shot generation result"""
    files: List[CodeFileSchema] = Field(default_factory=list)
    structure: List[str] = Field(default_factory=list, description="Project layout as listed by the model")


class ConversationFilesResponse(BaseModel):
    """Generated code of one conversation"""
    files: List[StoredFileSchema] = Field(default_factory=list)


class UpdateFileRequest(BaseModel):
    """Editor save"""
    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(..., min_length=1, alias="filePath", description="Path of the file to update")
    content: str = Field(..., description="New file content")


class FileOperationResponse(BaseModel):
    """Generic file operation response"""
    success: bool = Field(..., description="Whether operation was successful")


class ChatMessage(BaseModel):
    """Single chat message"""
    role: Literal["user", "assistant", "system"] = Field(..., description="Message author")
    content: str = Field(..., description="Message text")


class ChatStreamRequest(BaseModel):
    """Request for plain chat streaming"""
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: str = Field(..., min_length=1, alias="conversationId", description="Conversation ID")
    messages: List[ChatMessage] = Field(..., description="Conversation so far")


class TitleRequest(BaseModel):
    """Request for a conversation title"""
    message: str = Field(..., min_length=1, description="First user message")


class TitleResponse(BaseModel):
    """Generated conversation title"""
    title: str

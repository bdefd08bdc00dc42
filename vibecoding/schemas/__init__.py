# Pydantic schemas
from vibecoding.schemas.vibecoding import (
    CodeFileSchema,
    StoredFileSchema,
    GenerateCodeRequest,
    GenerateCodeResponse,
    ConversationFilesResponse,
    UpdateFileRequest,
    FileOperationResponse,
    ChatMessage,
    ChatStreamRequest,
    TitleRequest,
    TitleResponse,
)

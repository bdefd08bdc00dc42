"""
Custom Exceptions for VibeCoding
================================

Raised by the LLM client, the generation services and the generated-code
store. The API layer maps every VibeCodingError to a JSON error body.

Usage:
    from vibecoding.core.exceptions import ConversationNotFoundError

    if not files:
        raise ConversationNotFoundError(conversation_id)

Note: the streaming file-block parser never raises. Malformed input is
reported as ParseIssue diagnostics (see vibecoding.utils.stream_parser).
"""

from typing import Optional, Any, Dict


class VibeCodingError(Exception):
    """Base exception for all VibeCoding errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(VibeCodingError):
    """A required setting is missing"""

    def __init__(self, setting_name: str):
        super().__init__(
            f"{setting_name} is not set",
            code="CONFIGURATION_ERROR",
            details={"setting": setting_name}
        )


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(VibeCodingError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(VibeCodingError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class ConversationNotFoundError(ResourceNotFoundError):
    """Conversation has no generated code"""

    def __init__(self, conversation_id: str):
        super().__init__("Conversation", conversation_id)


class GeneratedFileNotFoundError(ResourceNotFoundError):
    """File not found in a conversation's generated code"""

    def __init__(self, file_path: str, conversation_id: str = ""):
        super().__init__("File", file_path)
        self.details["conversation_id"] = conversation_id


class PreviewNotAvailableError(ResourceNotFoundError):
    """Project has no HTML entry file to preview"""

    def __init__(self, conversation_id: str):
        super().__init__("Preview", conversation_id)
        self.message = f"No HTML file to preview in conversation '{conversation_id}'"


# ============================================
# LLM Errors (502-type)
# ============================================

class LLMError(VibeCodingError):
    """Upstream LLM service error"""

    status_code = 502

    def __init__(self, message: str, code: str = "LLM_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class LLMAPIError(LLMError):
    """LLM API returned a non-success status"""

    def __init__(self, status: int, body: str = ""):
        super().__init__(
            f"DeepSeek API error: {status} {body}".strip(),
            code="LLM_API_ERROR",
            details={"status": status, "body": body[:500]}
        )
        self.status = status


class LLMResponseError(LLMError):
    """LLM response is missing the expected content"""

    def __init__(self, message: str = "API response content is empty"):
        super().__init__(message, code="LLM_RESPONSE_ERROR")


class CodeGenerationError(LLMError):
    """Generated project could not be parsed"""

    def __init__(self, message: str):
        super().__init__(
            f"Failed to parse code generation response: {message}",
            code="CODE_GENERATION_FAILED"
        )

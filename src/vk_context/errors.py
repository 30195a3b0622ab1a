"""
vk-context error types.
"""

from typing import Any, Optional


class VKContextError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class PayloadIncomplete(VKContextError):
    """Full-only data was requested from a stub message view."""

    def __init__(self, message: str = "The message payload is not fully loaded"):
        super().__init__("payload_is_not_full", message)


class NotAChat(VKContextError):
    def __init__(self, message: str = "This method is only available in chat"):
        super().__init__("is_not_chat", message)


class RemoteOperationFailed(VKContextError):
    def __init__(self, code: Any, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class UploadError(VKContextError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("upload_error", message, details)

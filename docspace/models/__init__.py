"""Pydantic models for data validation and serialization."""

from .ai import (
    AiModelConfig,
    AiPromptTemplate,
    AiSettings,
    AiSettingsView,
    BatchResult,
    BatchTransformRequest,
    TransformErrorCode,
    TransformRequest,
    TransformResult,
)
from .auth import JWTPayload, TokenResponse
from .document import Document, DocumentCreate, DocumentSummary, DocumentUpdate
from .folder import Folder, FolderCreate, FolderTreeNode
from .upload import UploadFolder, UploadFolderList, UploadRequest, UploadResponse
from .user import ProfileUpdate, RoleUpdate, User, UserCreate, UserProfile, UserRole

__all__ = [
    "Folder",
    "FolderCreate",
    "FolderTreeNode",
    "Document",
    "DocumentCreate",
    "DocumentUpdate",
    "DocumentSummary",
    "AiModelConfig",
    "AiPromptTemplate",
    "AiSettings",
    "AiSettingsView",
    "TransformErrorCode",
    "TransformRequest",
    "TransformResult",
    "BatchTransformRequest",
    "BatchResult",
    "User",
    "UserRole",
    "UserProfile",
    "ProfileUpdate",
    "UserCreate",
    "RoleUpdate",
    "UploadRequest",
    "UploadResponse",
    "UploadFolder",
    "UploadFolderList",
    "TokenResponse",
    "JWTPayload",
]

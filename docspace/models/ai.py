"""Pydantic models for AI model configs, prompts and transformation results."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AiModelConfig(BaseModel):
    """An OpenAI-compatible endpoint the user has configured."""

    id: str = Field(..., min_length=1, description="Config identifier")
    name: str = Field(..., min_length=1, description="Display name")
    api_key: str = Field("", description="Secret API key (never returned to clients)")
    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the chat completions API",
    )
    model: str = Field(default="gpt-4o", min_length=1, description="Model identifier")

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")


class AiPromptTemplate(BaseModel):
    """A named system instruction."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    content: str = Field(..., description="Instruction text sent as the system prompt")


class AiSettings(BaseModel):
    """Per-account AI configuration, stored in the user's metadata."""

    configs: List[AiModelConfig] = Field(default_factory=list)
    prompts: List[AiPromptTemplate] = Field(default_factory=list)

    def find_config(self, config_id: str) -> Optional[AiModelConfig]:
        return next((c for c in self.configs if c.id == config_id), None)

    def find_prompt(self, prompt_id: str) -> Optional[AiPromptTemplate]:
        return next((p for p in self.prompts if p.id == prompt_id), None)


class AiModelConfigView(BaseModel):
    """Client-facing config: the key is replaced by a flag."""

    id: str
    name: str
    base_url: str
    model: str
    api_key_set: bool = False


class AiSettingsView(BaseModel):
    """Response for GET /api/me/ai-settings."""

    configs: List[AiModelConfigView] = Field(default_factory=list)
    prompts: List[AiPromptTemplate] = Field(default_factory=list)

    @classmethod
    def from_settings(cls, settings: AiSettings) -> "AiSettingsView":
        return cls(
            configs=[
                AiModelConfigView(
                    id=c.id,
                    name=c.name,
                    base_url=c.base_url,
                    model=c.model,
                    api_key_set=bool(c.api_key),
                )
                for c in settings.configs
            ],
            prompts=list(settings.prompts),
        )


class TransformErrorCode(str, Enum):
    """Distinct failure modes of a single-document transformation."""

    DOCUMENT_NOT_FOUND = "document_not_found"
    CONFIG_NOT_FOUND = "config_not_found"
    PROMPT_NOT_FOUND = "prompt_not_found"
    MODEL_HTTP_ERROR = "model_http_error"
    MODEL_BAD_RESPONSE = "model_bad_response"
    MODEL_UNREACHABLE = "model_unreachable"
    STORAGE_ERROR = "storage_error"


class TransformResult(BaseModel):
    """Outcome of transforming one document into a new one."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    document_id: Optional[str] = Field(None, description="ID of the newly created document")
    title: Optional[str] = None
    error: Optional[TransformErrorCode] = None
    message: str = ""

    @classmethod
    def success(cls, document_id: str, title: str) -> "TransformResult":
        return cls(ok=True, document_id=document_id, title=title, message="Document created")

    @classmethod
    def failure(cls, error: TransformErrorCode, message: str) -> "TransformResult":
        return cls(ok=False, error=error, message=message)


class TransformRequest(BaseModel):
    """Request body for POST /api/documents/{id}/transform."""

    config_id: str = Field(..., min_length=1)
    prompt_id: str = Field(..., min_length=1)


class BatchTransformRequest(BaseModel):
    """Request body for POST /api/batch/transform."""

    document_ids: List[str] = Field(..., min_length=1)
    config_id: str = Field(..., min_length=1)
    prompt_id: str = Field(..., min_length=1)


class BatchResult(BaseModel):
    """Aggregate counts of a sequential batch run."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(..., ge=0)
    success: int = Field(0, ge=0)
    fail: int = Field(0, ge=0)


__all__ = [
    "AiModelConfig",
    "AiPromptTemplate",
    "AiSettings",
    "AiModelConfigView",
    "AiSettingsView",
    "TransformErrorCode",
    "TransformResult",
    "TransformRequest",
    "BatchTransformRequest",
    "BatchResult",
]

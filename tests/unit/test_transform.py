from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from docspace.models.ai import AiModelConfig, AiPromptTemplate, AiSettings, TransformErrorCode
from docspace.workspace.interfaces import (
    ModelHTTPError,
    ModelInvoker,
    ModelResponseError,
    ModelUnavailableError,
)
from docspace.workspace.transform import DocumentTransformer, derived_title

FIXED_NOW = datetime(2025, 3, 14, 9, 26)


@pytest.fixture
def configured(memory_backend):
    memory_backend.ai_settings = AiSettings(
        configs=[
            AiModelConfig(
                id="gpt",
                name="GPT-4o",
                api_key="sk-test",
                base_url="https://api.example.com/v1/",
                model="gpt-4o",
            )
        ],
        prompts=[AiPromptTemplate(id="sum", name="Summarize", content="Summarize this.")],
    )
    return memory_backend


def _transformer(backend, invoker):
    return DocumentTransformer(backend, invoker, backend, clock=lambda: FIXED_NOW)


def test_derived_title_format() -> None:
    assert derived_title("Draft", "GPT-4o", FIXED_NOW) == "Draft - GPT-4o - 2025-03-14 09:26"


@pytest.mark.asyncio
async def test_success_creates_new_document_next_to_source(configured) -> None:
    source = configured.seed_document("Draft", folder_id="f1", content="Long text")
    invoker = AsyncMock(spec=ModelInvoker)
    invoker.invoke.return_value = "Short text"

    result = await _transformer(configured, invoker).transform(source.id, "gpt", "sum")

    assert result.ok
    assert result.title == "Draft - GPT-4o - 2025-03-14 09:26"
    created = configured.documents[result.document_id]
    assert created.folder_id == "f1"
    assert created.content == "Short text"
    assert configured.documents[source.id].content == "Long text"
    invoker.invoke.assert_awaited_once_with(
        "https://api.example.com/v1", "sk-test", "gpt-4o", "Summarize this.", "Long text"
    )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "document_exists, config_id, prompt_id, expected",
    [
        (False, "gpt", "sum", TransformErrorCode.DOCUMENT_NOT_FOUND),
        (True, "missing", "sum", TransformErrorCode.CONFIG_NOT_FOUND),
        (True, "gpt", "missing", TransformErrorCode.PROMPT_NOT_FOUND),
    ],
)
async def test_lookup_failures_have_distinct_codes(
    configured, document_exists, config_id, prompt_id, expected
) -> None:
    document_id = configured.seed_document("Doc").id if document_exists else "nope"
    invoker = AsyncMock(spec=ModelInvoker)

    result = await _transformer(configured, invoker).transform(document_id, config_id, prompt_id)

    assert not result.ok
    assert result.error is expected
    invoker.invoke.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, expected",
    [
        (ModelHTTPError(401, "bad key"), TransformErrorCode.MODEL_HTTP_ERROR),
        (ModelResponseError("no choices"), TransformErrorCode.MODEL_BAD_RESPONSE),
        (ModelUnavailableError("timed out"), TransformErrorCode.MODEL_UNREACHABLE),
    ],
)
async def test_model_failures_create_nothing(configured, error, expected) -> None:
    source = configured.seed_document("Doc")
    invoker = AsyncMock(spec=ModelInvoker)
    invoker.invoke.side_effect = error

    result = await _transformer(configured, invoker).transform(source.id, "gpt", "sum")

    assert result.error is expected
    assert list(configured.documents) == [source.id]


@pytest.mark.asyncio
async def test_storage_failure_is_reported(configured) -> None:
    source = configured.seed_document("Doc")
    configured.fail["create_document"] = RuntimeError("disk full")
    invoker = AsyncMock(spec=ModelInvoker)
    invoker.invoke.return_value = "output"

    result = await _transformer(configured, invoker).transform(source.id, "gpt", "sum")

    assert result.error is TransformErrorCode.STORAGE_ERROR
    assert "disk full" in result.message

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import AsyncOpenAI, OpenAI
from openai.types.chat import ChatCompletion
from openai.types.chat.chat_completion import ChatCompletionMessage, Choice

from utils.openai_utils import request_chat_completion


# Helper to create a mock ChatCompletion response
def create_mock_completion(content: str | None) -> ChatCompletion:
    return ChatCompletion(
        id="chatcmpl-mock",
        choices=[
            Choice(
                finish_reason="stop",
                index=0,
                message=ChatCompletionMessage(content=content, role="assistant"),
            )
        ],
        created=1677652288,
        model="gpt-mock",
        object="chat.completion",
    )


def make_client(create_method: AsyncMock) -> MagicMock:
    mock_client = MagicMock(spec=AsyncOpenAI)
    mock_client.chat = MagicMock()
    mock_client.chat.completions = MagicMock()
    mock_client.chat.completions.create = create_method
    return mock_client


@pytest.mark.asyncio
async def test_request_chat_completion_success(caplog):
    """Successful call returns the first choice's text and logs latency."""
    create = AsyncMock(return_value=create_mock_completion('{"suggestedPrice": 10, "reasoning": "ok"}'))
    client = make_client(create)
    messages = [{"role": "user", "content": "Price this"}]

    with caplog.at_level(logging.DEBUG):
        content = await request_chat_completion(
            client,
            model="gpt-test",
            messages=messages,
            logger=logging.getLogger("test_logger"),
            temperature=0.2,
        )

    create.assert_called_once_with(model="gpt-test", messages=messages, temperature=0.2)
    assert content == '{"suggestedPrice": 10, "reasoning": "ok"}'
    assert "OpenAI completions.create call succeeded" in caplog.text
    assert "model=gpt-test" in caplog.text


@pytest.mark.asyncio
async def test_request_chat_completion_does_not_retry():
    """A failure propagates after exactly one attempt."""
    persistent_error = TimeoutError("API timed out")
    create = AsyncMock(side_effect=persistent_error)
    client = make_client(create)

    with pytest.raises(TimeoutError) as excinfo:
        await request_chat_completion(client, model="gpt-fail", messages=[{"role": "user", "content": "x"}])

    assert excinfo.value is persistent_error
    assert create.call_count == 1


@pytest.mark.asyncio
async def test_request_chat_completion_empty_content():
    client = make_client(AsyncMock(return_value=create_mock_completion(None)))
    with pytest.raises(ValueError, match="no content"):
        await request_chat_completion(client, model="gpt-empty", messages=[])


@pytest.mark.asyncio
async def test_request_chat_completion_invalid_client():
    """Passing invalid client types raises appropriate errors."""
    messages = [{"role": "user", "content": "Invalid client test"}]

    with pytest.raises(RuntimeError, match="OpenAI client is not initialised."):
        await request_chat_completion(None, model="gpt", messages=messages)  # type: ignore[arg-type]

    sync_client = OpenAI(api_key="sk-test")
    with pytest.raises(TypeError, match="Sync OpenAI client provided"):
        await request_chat_completion(sync_client, model="gpt", messages=messages)

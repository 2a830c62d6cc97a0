import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from openai import AsyncOpenAI, OpenAI
from openai.types.chat import ChatCompletionMessageParam

__all__ = ["request_chat_completion"]


async def request_chat_completion(
    client: AsyncOpenAI | OpenAI,
    *,
    model: str,
    messages: Iterable[dict[str, Any]],
    logger: logging.Logger | None = None,
    **kwargs,
) -> str:
    """Invoke the OpenAI chat completion endpoint once and return the text.

    Parameters
    ----------
    client:
        An initialised ``openai.AsyncOpenAI`` client instance.
    model:
        The model name to call (e.g. ``"gpt-4o-mini"``).
    messages:
        The messages for the chat completion endpoint.
    logger:
        Optional logger for diagnostics; if omitted a module-level logger is used.
    **kwargs:
        Additional keyword arguments forwarded to ``client.chat.completions.create``
        (``temperature``, ``response_format`` ...).

    Returns
    -------
    str
        Content of the first choice.

    Raises
    ------
    RuntimeError
        If no client is configured.
    TypeError
        If a synchronous client is passed.
    ValueError
        If the completion carries no content.

    There are no retries here: callers decide whether a failed call is
    worth repeating.
    """
    if client is None:
        raise RuntimeError("OpenAI client is not initialised.")
    if not isinstance(client, AsyncOpenAI):
        raise TypeError("Sync OpenAI client provided to async request_chat_completion.")

    logger = logger or logging.getLogger(__name__)
    typed_messages: Iterable[ChatCompletionMessageParam] = messages  # type: ignore[assignment]

    start_ts = asyncio.get_running_loop().time()
    completion = await client.chat.completions.create(
        model=model,
        messages=typed_messages,
        **kwargs,
    )
    latency = asyncio.get_running_loop().time() - start_ts
    logger.debug(
        "OpenAI completions.create call succeeded | model=%s | latency=%.2fs",
        model,
        latency,
    )

    if not completion.choices or not completion.choices[0].message.content:
        raise ValueError("OpenAI completion returned no content.")
    return completion.choices[0].message.content

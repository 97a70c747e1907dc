from types import SimpleNamespace
from unittest.mock import patch

import pytest

from config import settings
from services import openai_service
from services.openai_service import (
    GroundedResponse,
    describe_image,
    run_completion,
    run_grounded_completion,
)


@pytest.fixture
def general(fake_client):
    with patch.object(openai_service, "get_openai_client", return_value=fake_client):
        yield fake_client


@pytest.fixture
def grounded(fake_client):
    with patch.object(openai_service, "get_perplexity_client", return_value=fake_client):
        yield fake_client


def test_clients_are_process_wide_singletons():
    assert openai_service.get_openai_client() is openai_service.get_openai_client()
    assert openai_service.get_perplexity_client() is openai_service.get_perplexity_client()
    assert str(openai_service.get_perplexity_client().base_url).startswith(settings.PERPLEXITY_BASE_URL)


@pytest.mark.asyncio
async def test_run_completion_returns_text(general, make_completion):
    general.chat.completions.create.return_value = make_completion('{"overall_score": 0.1}')

    assert await run_completion("prompt") == '{"overall_score": 0.1}'

    kwargs = general.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == settings.OPENAI_TEXT_MODEL
    assert kwargs["temperature"] == settings.OPENAI_TEMPERATURE
    assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]
    assert "web_search_options" not in kwargs


@pytest.mark.asyncio
async def test_run_completion_with_search(general, make_completion):
    general.chat.completions.create.return_value = make_completion("# Title")

    await run_completion("prompt", use_search=True)

    kwargs = general.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == settings.OPENAI_SEARCH_MODEL
    assert kwargs["web_search_options"] == {}
    assert "temperature" not in kwargs


@pytest.mark.asyncio
async def test_run_completion_failure_is_none(general, make_completion):
    general.chat.completions.create.side_effect = RuntimeError("503 from provider")
    assert await run_completion("prompt") is None


@pytest.mark.asyncio
async def test_run_completion_empty_is_none(general, make_completion):
    general.chat.completions.create.return_value = make_completion("   ")
    assert await run_completion("prompt") is None


@pytest.mark.asyncio
async def test_grounded_completion_returns_citations(grounded, make_completion):
    grounded.chat.completions.create.return_value = make_completion(
        '{"article": {}}', citations=["https://a", "https://b"]
    )

    response = await run_grounded_completion("prompt")

    assert response == GroundedResponse(text='{"article": {}}', citations=["https://a", "https://b"])
    assert grounded.chat.completions.create.call_args.kwargs["model"] == settings.PERPLEXITY_MODEL


@pytest.mark.asyncio
async def test_grounded_completion_reads_search_results(grounded, make_completion):
    grounded.chat.completions.create.return_value = make_completion(
        "{}", search_results=[{"url": "https://a", "title": "A"}, SimpleNamespace(url="https://b")]
    )

    response = await run_grounded_completion("prompt")

    assert response.citations == ["https://a", "https://b"]


@pytest.mark.asyncio
async def test_grounded_completion_without_citations(grounded, make_completion):
    grounded.chat.completions.create.return_value = make_completion("{}")
    response = await run_grounded_completion("prompt")
    assert response.citations == []


@pytest.mark.asyncio
async def test_grounded_completion_failure_is_none(grounded, make_completion):
    grounded.chat.completions.create.side_effect = ConnectionError("boom")
    assert await run_grounded_completion("prompt") is None


@pytest.mark.asyncio
async def test_describe_image_sends_image_part(general, make_completion):
    general.chat.completions.create.return_value = make_completion(" A crowded council chamber. ")

    description = await describe_image("http://x/1.png", "Describe")

    assert description == "A crowded council chamber."
    content = general.chat.completions.create.call_args.kwargs["messages"][0]["content"]
    assert content[1] == {"type": "image_url", "image_url": {"url": "http://x/1.png"}}


@pytest.mark.asyncio
async def test_describe_image_failure_is_none(general, make_completion):
    general.chat.completions.create.side_effect = RuntimeError("bad image")
    assert await describe_image("http://x/1.png", "Describe") is None

"""
Shared fixtures: fake provider completions shaped like openai responses.
"""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest


def _completion(content, **extra):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)], **extra)


@pytest.fixture
def make_completion():
    """Builds objects shaped like openai's ChatCompletion, extra fields set as attributes."""
    return _completion


@pytest.fixture
def fake_client():
    """AsyncOpenAI stand-in; set fake_client.chat.completions.create.return_value."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


@pytest.fixture
def article_html():
    return """<html>
<head>
<title>Council Approves New Budget</title>
<meta property="og:url" content="https://www.daily-herald.co.uk/news/budget">
<script>alert('x')</script>
</head>
<body onload="track()"><h1>Council Approves New Budget</h1><p>The council voted 7-2.</p></body>
</html>"""

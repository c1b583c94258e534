from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest


def chat_response(content: str) -> SimpleNamespace:
    """Shape of an openai chat completion, as far as the flows read it."""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )


@pytest.fixture
def client():
    """OpenAI client double; set chat replies with ``client.reply(...)``."""
    mock = MagicMock()

    def reply(*contents: str):
        mock.chat.completions.create.side_effect = [chat_response(c) for c in contents]

    mock.reply = reply
    return mock


def sent_messages(client, call: int = 0) -> list[dict]:
    return client.chat.completions.create.call_args_list[call].kwargs["messages"]

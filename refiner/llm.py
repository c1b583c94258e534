"""OpenAI access: client construction and the call shapes the flows need."""

import openai

from refiner.config import OPENAI_API_KEY


def get_client(api_key: str | None = None) -> openai.OpenAI:
    key = (api_key or OPENAI_API_KEY or "").strip()
    if not key:
        raise RuntimeError("OPENAI_API_KEY not set")
    return openai.OpenAI(api_key=key)


def complete(
    client: openai.OpenAI,
    *,
    model: str,
    temperature: float,
    user: str,
    system: str = "",
) -> str:
    """Single chat completion; returns the stripped message text."""
    messages = []
    if system.strip():
        messages.append({"role": "system", "content": system.strip()})
    messages.append({"role": "user", "content": user.strip()})

    response = client.chat.completions.create(
        model=model,
        messages=messages,
        temperature=temperature,
    )
    return (response.choices[0].message.content or "").strip()


def complete_with_web_search(
    client: openai.OpenAI,
    *,
    model: str,
    temperature: float,
    system: str,
    user: str,
) -> str:
    """Responses API call with the hosted web_search tool enabled."""
    response = client.responses.create(
        model=model,
        temperature=temperature,
        tools=[{"type": "web_search"}],
        input=[
            {"role": "system", "content": system.strip()},
            {"role": "user", "content": user.strip()},
        ],
    )
    return _response_text(response)


def _response_text(response) -> str:
    direct = (getattr(response, "output_text", "") or "").strip()
    if direct:
        return direct

    texts = []
    for item in getattr(response, "output", None) or []:
        for part in getattr(item, "content", None) or []:
            text = getattr(part, "text", None)
            if isinstance(text, str) and text.strip():
                texts.append(text)
    return "\n".join(texts).strip()

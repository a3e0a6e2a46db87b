"""
Generation bridge: forward one prompt to the local completion service.

Flow:
1. POST {"model", "prompt", "stream": false} to <base_url>/api/generate
2. Wait for the whole answer (no token streaming, no timeout of our own)
3. Return the "response" text or raise GenerationError
"""

from typing import Any, Dict, Optional

import httpx

from bridge.core.errors import GenerationError

GENERATE_PATH = "/api/generate"


def build_payload(prompt: str, model_identifier: str) -> Dict[str, Any]:
    return {"model": model_identifier, "prompt": prompt, "stream": False}


def extract_response(data: Any) -> str:
    """Pull the generated text out of the service's JSON body."""
    if not isinstance(data, dict):
        raise GenerationError(f"Unexpected response format: {type(data).__name__}")

    # Service reported a failure of its own (unknown model etc.)
    if data.get("error"):
        raise GenerationError(f"Generation service error: {data['error']}")

    text = data.get("response")
    if not isinstance(text, str):
        raise GenerationError("Generation service returned no response text")
    return text


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return response.reason_phrase


async def generate(
    prompt: str,
    model_identifier: str,
    base_url: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """
    Send a prompt to the local generation service and wait for the full text.

    Args:
        prompt: Text forwarded as-is
        model_identifier: Model the service should run ("llama3:latest")
        base_url: Where the service listens ("http://localhost:11434")
        transport: Optional httpx transport (tests plug a MockTransport in here)

    Returns:
        The generated text

    Raises:
        GenerationError: service unreachable, non-2xx status, malformed body,
            or the service reported an error
    """
    url = base_url.rstrip("/") + GENERATE_PATH

    # timeout=None: waiting is bounded by the caller, not by this bridge
    async with httpx.AsyncClient(timeout=None, transport=transport) as client:
        try:
            response = await client.post(
                url, json=build_payload(prompt, model_identifier)
            )
        except httpx.HTTPError as exc:
            raise GenerationError(f"Generation service unreachable: {exc}") from exc

    if response.is_error:
        raise GenerationError(
            f"Generation service failed with status {response.status_code}: "
            f"{_error_detail(response)}"
        )

    try:
        data = response.json()
    except ValueError as exc:
        raise GenerationError("Generation service sent a non-JSON body") from exc

    return extract_response(data)

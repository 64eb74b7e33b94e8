"""
Langdock Agent that answers a single prompt

This module defines a LangdockAgent class that sends one user message to the
Langdock Agent chat-completion API and turns whatever comes back (an answer,
an error or nothing at all) into the text the A2A agent replies with.
"""

import logging
import uuid
from typing import Any

import httpx

logger = logging.getLogger(__name__)

LANGDOCK_COMPLETIONS_URL = "https://api.langdock.com/agent/v1/chat/completions"

AGENT_NAME = "A2A Approver"
AGENT_INSTRUCTIONS = "You are an Agent who tells the user that the A2A Implementation is great."
AGENT_MODEL = "gpt-5-mini-eu"

ERROR_PREFIX = "Langdock API error: "
NO_RESPONSE_TEXT = "No response from Langdock API"


class LangdockAgent:
    """
    A thin client for the Langdock Agent completion endpoint.

    This class handles:
    - Building the request payload with a fixed agent persona
    - Sending the request with the caller's API key as bearer token
    - Mapping error and empty responses onto reply text

    Attributes:
        endpoint (str): The chat-completion URL requests are posted to
        transport (httpx.AsyncBaseTransport | None): Optional transport handed to
            httpx, used to swap the network out in tests
    """

    def __init__(
        self,
        endpoint: str = LANGDOCK_COMPLETIONS_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint = endpoint
        self.transport = transport

    def build_payload(self, user_message: str) -> dict[str, Any]:
        """
        Build the JSON body for a single, non-streaming completion request.

        Args:
            user_message (str): The text to send as the user's message

        Returns:
            dict[str, Any]: The request body expected by the Langdock Agent API
        """
        return {
            "agent": {
                "name": AGENT_NAME,
                "instructions": AGENT_INSTRUCTIONS,
                "capabilities": {"webSearch": True},
                "model": AGENT_MODEL,
            },
            "messages": [
                {
                    "id": str(uuid.uuid4()),
                    "role": "user",
                    "parts": [{"type": "text", "text": user_message}],
                }
            ],
            "stream": False,
        }

    async def run_conversation(self, user_message: str, api_key: str) -> str:
        """
        Send a user message to Langdock and return the reply text.

        Exactly one request is made. Failures never raise; they come back as
        text prefixed with ``Langdock API error: `` so the caller can publish
        them like any other answer.

        Args:
            user_message (str): The message to send to the Langdock agent
            api_key (str): The caller's Langdock API key

        Returns:
            str: The first assistant message, an error description, or the
                 no-response fallback

        Example:
            reply = await agent.run_conversation("What is A2A?", api_key)
        """
        # No timeout: a slow upstream only holds this request's task
        try:
            # Header values travel as latin-1, the charset Starlette decoded them with
            headers = {
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}".encode("latin-1"),
            }
            async with httpx.AsyncClient(transport=self.transport, timeout=None) as client:
                response = await client.post(
                    self.endpoint,
                    json=self.build_payload(user_message),
                    headers=headers,
                )
        except (httpx.HTTPError, UnicodeEncodeError) as transport_error:
            logger.warning("Langdock request failed: %s", transport_error)
            return f"{ERROR_PREFIX}{str(transport_error) or type(transport_error).__name__}"

        data = _parse_body(response)

        error = data.get("error")
        if not response.is_success or error:
            detail = error or response.reason_phrase
            logger.warning("Langdock API returned %s: %s", response.status_code, detail)
            return f"{ERROR_PREFIX}{detail}"

        content = _first_assistant_content(data.get("messages"))
        return NO_RESPONSE_TEXT if content is None else content


def _parse_body(response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON object body; anything else counts as an empty body."""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _first_assistant_content(messages: Any) -> str | None:
    if not isinstance(messages, list):
        return None
    for message in messages:
        if isinstance(message, dict) and message.get("role") == "assistant":
            content = message.get("content")
            return None if content is None else str(content)
    return None

"""
Langdock Agent executors

This module provides the agent executors behind the A2A server. Each incoming
A2A message produces exactly one agent message on the event queue; returning
from ``execute`` tells the request handler the work is finished.
"""

import logging

from a2a.server.agent_execution import AgentExecutor
from a2a.server.agent_execution.context import RequestContext
from a2a.server.events.event_queue import EventQueue
from a2a.types import Message, TextPart
from a2a.utils import new_agent_text_message

from langdock_agent.agent import LangdockAgent
from langdock_agent.request_context import current_credential

logger = logging.getLogger(__name__)

MISSING_API_KEY_TEXT = 'Error: X-API-Key header is required'
DEFAULT_USER_TEXT = 'Hello'
CANNED_REPLY_TEXT = 'Hello from the Langdock A2A Agent!'


def extract_user_text(message: Message | None) -> str:
    """
    Return the text of the first text part of a message.

    Args:
        message (Message | None): The incoming A2A message

    Returns:
        str: The text, or "Hello" when the message carries no text part
    """
    if message is not None:
        for part in message.parts:
            if isinstance(part.root, TextPart):
                return part.root.text
    return DEFAULT_USER_TEXT


async def publish_reply(event_queue: EventQueue, text: str, context_id: str | None) -> None:
    """Publish a single agent text message tagged with the request's context id."""
    await event_queue.enqueue_event(new_agent_text_message(text, context_id=context_id))


class LangdockAgentExecutor(AgentExecutor):
    """
    Answers A2A messages with the Langdock Agent API.

    The caller's API key is read from the request-scoped credential set by
    the HTTP middleware; requests without one get an error message instead
    of an upstream call.
    """

    def __init__(self, agent: LangdockAgent | None = None):
        """
        Initialize the Langdock Agent Executor.

        Args:
            agent (LangdockAgent | None): The client used for the upstream call.
                A default client is created when omitted.

        Example:
            executor = LangdockAgentExecutor()
        """
        self._agent = agent or LangdockAgent()

    async def execute(self, context: RequestContext, event_queue: EventQueue) -> None:
        """
        Execute the agent for the given request context.

        Args:
            context (RequestContext): The A2A request context holding the user message
            event_queue (EventQueue): The event queue the reply is published on
        """
        # Read the API key the middleware attached to this request
        api_key = current_credential()

        # Without a key there is nothing to call upstream with; reply with the error
        if not api_key:
            logger.warning('Rejecting request for context %s: no API key', context.context_id)
            await publish_reply(event_queue, MISSING_API_KEY_TEXT, context.context_id)
            return

        # Retrieve the user's question from the A2A message parts
        user_text = extract_user_text(context.message)

        # Ask Langdock; failures come back as error text, never as exceptions
        response_text = await self._agent.run_conversation(user_text, api_key)

        # Publish the single reply; returning afterwards finishes the request
        await publish_reply(event_queue, response_text, context.context_id)

    async def cancel(self, context: RequestContext, event_queue: EventQueue) -> None:
        """Nothing to cancel: the executor keeps no state between calls."""


class CannedAgentExecutor(AgentExecutor):
    """Replies with a fixed greeting; needs no credential and calls nothing upstream."""

    def __init__(self, reply_text: str = CANNED_REPLY_TEXT):
        self._reply_text = reply_text

    async def execute(self, context: RequestContext, event_queue: EventQueue) -> None:
        await publish_reply(event_queue, self._reply_text, context.context_id)

    async def cancel(self, context: RequestContext, event_queue: EventQueue) -> None:
        pass


def create_agent_executor(variant: str = 'langdock') -> AgentExecutor:
    """
    Factory function to create the executor for a server variant.

    Args:
        variant (str): "langdock" for the credential-enforcing executor backed
            by the Langdock API, "canned" for the fixed-reply executor

    Returns:
        AgentExecutor: A new executor instance ready for processing requests

    Raises:
        ValueError: If the variant is unknown

    Example:
        executor = create_agent_executor("canned")
    """
    if variant == 'langdock':
        return LangdockAgentExecutor()
    if variant == 'canned':
        return CannedAgentExecutor()
    raise ValueError(f'Unknown agent variant: {variant!r}')

"""
Langdock A2A Agent Server

This module creates and runs an A2A (Agent-to-Agent) protocol-compliant server
that forwards incoming questions to the Langdock Agent API. Callers pass their
Langdock API key in the X-API-Key header; the agent card advertises that
requirement as an API key security scheme.

Architecture:
- A2A Protocol: agent card discovery and JSON-RPC message handling
- Starlette: hosts the A2A routes, the health check and the request middleware
- Uvicorn: ASGI server listening on port 3333
- InMemoryTaskStore: task bookkeeping required by the request handler
"""

import logging
import sys

import uvicorn

from a2a.server.agent_execution import AgentExecutor
from a2a.server.apps import A2AStarletteApplication
from a2a.server.request_handlers import DefaultRequestHandler
from a2a.server.tasks import InMemoryTaskStore
from a2a.types import (
    AgentCapabilities,
    AgentCard,
    AgentSkill,
    APIKeySecurityScheme,
    In,
    SecurityScheme,
)

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route

from langdock_agent.agent_executor import LangdockAgentExecutor, create_agent_executor
from langdock_agent.middleware import API_KEY_HEADER, RequestMiddleware
from langdock_agent.settings import HOST, PORT, load_settings

logger = logging.getLogger(__name__)

AGENT_NAME = 'Langdock A2A Agent'

# ============================================================================
# Define Agent Skills
# ============================================================================
skills = [
    AgentSkill(
        id='Ask Langdock Agent',
        name='Ask Langdock Agent',
        description='Ask the Langdock Agent a question.',
        tags=['prompt'],
    ),
]


# ============================================================================
# Create Agent Card
# ============================================================================
# The card is served at /.well-known/agent-card.json. In the secured variant
# it declares the X-API-Key header as an API key security scheme.
def build_agent_card(agent_url: str, secured: bool = True) -> AgentCard:
    """
    Build the agent card served at /.well-known/agent-card.json.

    Args:
        agent_url (str): The externally reachable base URL of this agent
        secured (bool): Whether to declare the X-API-Key security scheme

    Returns:
        AgentCard: The card describing this agent to other agents
    """
    # Only the Langdock variant asks callers for an API key
    security_kwargs = {}
    if secured:
        security_kwargs = {
            'security_schemes': {
                'apiKeyAuth': SecurityScheme(
                    root=APIKeySecurityScheme(name=API_KEY_HEADER, in_=In.header)
                ),
            },
            'security': [{'apiKeyAuth': []}],
        }

    return AgentCard(
        name=AGENT_NAME,
        description='A simple agent that can be used to test the Langdock A2A implementation.',
        protocol_version='0.3.0',
        version='0.1.0',
        url=agent_url,
        skills=skills,
        capabilities=AgentCapabilities(push_notifications=False, streaming=False),
        default_input_modes=['text'],
        default_output_modes=['text'],
        **security_kwargs,
    )


# ============================================================================
# Health Check
# ============================================================================
async def health_check(request: Request) -> PlainTextResponse:
    """Report that the agent is up."""
    return PlainTextResponse(f'{AGENT_NAME} is running!')


# ============================================================================
# Create A2A Application
# ============================================================================
def create_app(
    agent_url: str,
    agent_executor: AgentExecutor | None = None,
    secured: bool = True,
) -> Starlette:
    """
    Assemble the Starlette application serving the agent.

    Args:
        agent_url (str): Base URL advertised in the agent card
        agent_executor (AgentExecutor | None): Executor handling messages;
            defaults to the Langdock executor
        secured (bool): Whether the card declares the API key scheme

    Returns:
        Starlette: The ASGI application with A2A routes, /health and the
                   request middleware installed
    """
    agent_card = build_agent_card(agent_url, secured=secured)

    # The request handler routes A2A messages to the executor and tracks tasks in memory
    request_handler = DefaultRequestHandler(
        agent_executor=agent_executor or LangdockAgentExecutor(),
        task_store=InMemoryTaskStore(),
    )

    a2a_app = A2AStarletteApplication(agent_card=agent_card, http_handler=request_handler)

    # A2A protocol routes plus the health check
    routes = a2a_app.routes()
    routes.append(Route(path='/health', methods=['GET'], endpoint=health_check))

    # The middleware logs traffic and exposes X-API-Key to the executor
    return Starlette(routes=routes, middleware=[Middleware(RequestMiddleware)])


# ============================================================================
# Main Entry Point
# ============================================================================
def main():
    """
    Main entry point that starts the server.

    Reads AGENT_URL (required) and AGENT_VARIANT from the environment and
    serves on 0.0.0.0:3333. A missing AGENT_URL aborts before the socket is
    opened.
    """
    # Fails here, before any socket is opened, when AGENT_URL is missing
    settings = load_settings()

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )

    app = create_app(
        settings.agent_url,
        agent_executor=create_agent_executor(settings.variant),
        secured=settings.variant == 'langdock',
    )

    logger.info('🚀 Starting server on http://localhost:%s', PORT)
    logger.info('Enter the following URL in Langdock: \n\n%s\n', settings.agent_card_url)

    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == '__main__':
    main()

"""MCP Server for Image Foundry."""
import asyncio
import json
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from image_foundry.config import settings
from image_foundry.models import Session as SessionModel
from image_foundry.services import (
    OrchestrationError,
    SessionOrchestrator,
    build_orchestrator,
)


SESSION_ID_SCHEMA = {
    "type": "object",
    "properties": {
        "session_id": {
            "type": "integer",
            "description": "The session ID returned from create_session",
        },
    },
    "required": ["session_id"],
}

TOOLS = [
    Tool(
        name="create_session",
        description="Start a new image session from a short text prompt.",
        inputSchema={
            "type": "object",
            "properties": {
                "user_prompt": {
                    "type": "string",
                    "description": "What the image should show (e.g. 'a red fox in snow')",
                },
            },
            "required": ["user_prompt"],
        },
    ),
    Tool(
        name="get_session",
        description="Get the current state of an image session.",
        inputSchema=SESSION_ID_SCHEMA,
    ),
    Tool(
        name="list_sessions",
        description="List recent image sessions, newest first.",
        inputSchema={
            "type": "object",
            "properties": {
                "limit": {
                    "type": "integer",
                    "description": "Maximum number of sessions to return",
                    "default": 10,
                },
                "status": {
                    "type": "string",
                    "description": "Filter by status",
                    "enum": ["prompt", "describing", "feedback", "generating", "completed"],
                },
            },
        },
    ),
    Tool(
        name="generate_description",
        description="Expand the session prompt into a detailed AI image description for review.",
        inputSchema=SESSION_ID_SCHEMA,
    ),
    Tool(
        name="refine_description",
        description="Refine the session's description using feedback (e.g. 'make it darker').",
        inputSchema={
            "type": "object",
            "properties": {
                "session_id": SESSION_ID_SCHEMA["properties"]["session_id"],
                "user_feedback": {
                    "type": "string",
                    "description": "What to change about the description",
                },
            },
            "required": ["session_id", "user_feedback"],
        },
    ),
    Tool(
        name="generate_image",
        description="Generate the final image from the session's description.",
        inputSchema=SESSION_ID_SCHEMA,
    ),
]


def session_summary(session: SessionModel) -> dict[str, Any]:
    """JSON-friendly view of a session."""
    return {
        "session_id": session.id,
        "user_prompt": session.user_prompt,
        "status": session.status,
        "ai_description": session.ai_description,
        "user_feedback": session.user_feedback,
        "final_description": session.final_description,
        "generated_image_url": session.generated_image_url,
        "energy_saved": session.energy_saved,
        "time_saved": session.time_saved,
        "created_at": session.created_at.isoformat(),
    }


def _text(payload: Any) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(payload, indent=2))]


async def dispatch_tool(
    orchestrator: SessionOrchestrator,
    name: str,
    arguments: dict,
) -> list[TextContent]:
    """Run one tool call against the orchestrator."""
    try:
        if name == "create_session":
            user_prompt = arguments.get("user_prompt", "")
            if not user_prompt:
                return [TextContent(type="text", text="Error: user_prompt is required")]
            session = await orchestrator.create_session(user_prompt)
        elif name == "list_sessions":
            sessions = await orchestrator.list_sessions(
                limit=arguments.get("limit", 10),
                status=arguments.get("status"),
            )
            return _text({
                "count": len(sessions),
                "sessions": [
                    {
                        "session_id": s.id,
                        "user_prompt": s.user_prompt[:100] + "..." if len(s.user_prompt) > 100 else s.user_prompt,
                        "status": s.status,
                        "created_at": s.created_at.isoformat(),
                    }
                    for s in sessions
                ],
            })
        elif name in ("get_session", "generate_description", "refine_description", "generate_image"):
            session_id = arguments.get("session_id")
            if session_id is None:
                return [TextContent(type="text", text="Error: session_id is required")]
            try:
                session_id = int(session_id)
            except (TypeError, ValueError):
                return [TextContent(type="text", text="Error: session_id must be an integer")]

            if name == "get_session":
                session = await orchestrator.get_session(session_id)
            elif name == "generate_description":
                session = await orchestrator.generate_description(session_id)
            elif name == "refine_description":
                feedback = arguments.get("user_feedback", "")
                if not feedback:
                    return [TextContent(type="text", text="Error: user_feedback is required")]
                session = await orchestrator.refine_description(session_id, feedback)
            else:
                session = await orchestrator.generate_image(session_id)
        else:
            return [TextContent(type="text", text=f"Unknown tool: {name}")]
    except OrchestrationError as e:
        return [TextContent(type="text", text=f"Error: {e}")]

    return _text(session_summary(session))


def create_server(orchestrator: SessionOrchestrator) -> Server:
    """Create the MCP server bound to one orchestrator."""
    server = Server("image-foundry")

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available tools."""
        return TOOLS

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        """Handle tool calls."""
        return await dispatch_tool(orchestrator, name, arguments or {})

    return server


async def main():
    """Run the MCP server."""
    server = create_server(build_orchestrator(settings))
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()

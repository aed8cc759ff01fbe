"""
Parrot Agent HTTP service.

Exposes the Open Floor endpoint (`POST /`) backed by a ParrotAgent,
plus `/health` and `/manifest` for operators and discovery.
"""

import asyncio
from datetime import datetime, timezone

from aiohttp import web
import structlog
from openfloor import Payload

from parrot_agent.agent import ParrotAgent, create_parrot_agent
from parrot_agent.config import AgentConfig, DEFAULT_ALLOWED_ORIGIN
from parrot_agent.protocol import to_object, validate_and_parse_payload

logger = structlog.get_logger()

AGENT_NAME = "parrot-agent"


def _cors_middleware(allowed_origin: str):
    @web.middleware
    async def cors(request: web.Request, handler) -> web.StreamResponse:
        if request.method == "OPTIONS":
            response = web.Response(status=200)
        else:
            response = await handler(request)

        if request.headers.get("Origin") == allowed_origin:
            response.headers["Access-Control-Allow-Origin"] = allowed_origin
            response.headers["Access-Control-Allow-Methods"] = "POST, OPTIONS"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    return cors


@web.middleware
async def _error_middleware(request: web.Request, handler) -> web.StreamResponse:
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception as e:
        logger.exception("unhandled_error", path=request.path, error=str(e))
        return web.json_response(
            {"error": "Internal server error", "message": str(e)},
            status=500,
        )


async def create_app(
    agent: ParrotAgent,
    allowed_origin: str = DEFAULT_ALLOWED_ORIGIN,
) -> web.Application:
    """Create the aiohttp application hosting the parrot agent."""
    routes = web.RouteTableDef()

    @routes.get("/health")
    async def health(_: web.Request) -> web.Response:
        return web.json_response({
            "status": "healthy",
            "agent": AGENT_NAME,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    @routes.get("/manifest")
    async def manifest(_: web.Request) -> web.Response:
        return web.json_response(to_object(agent.manifest))

    # Failures past validation are turned into 500s by _error_middleware.
    @routes.post("/")
    async def openfloor_handler(request: web.Request) -> web.Response:
        body = await request.read()
        logger.debug("openfloor_request", size=len(body))

        validation = validate_and_parse_payload(body)
        if not validation.valid:
            logger.warning("openfloor_invalid_payload", errors=validation.errors)
            return web.json_response(
                {"error": "Invalid OpenFloor payload", "details": validation.errors},
                status=400,
            )

        in_envelope = validation.payload.openFloor
        logger.info(
            "openfloor_received",
            sender=in_envelope.sender.speakerUri,
            conversation_id=in_envelope.conversation.id,
        )

        out_envelope = agent.process_envelope(in_envelope)
        response = to_object(Payload(openFloor=out_envelope))

        logger.debug("openfloor_response", body=response)
        return web.json_response(response)

    app = web.Application(
        middlewares=[_cors_middleware(allowed_origin), _error_middleware],
    )
    app.add_routes(routes)
    return app


async def run_server(config: AgentConfig) -> None:
    """Run the aiohttp web server until cancelled."""
    agent = create_parrot_agent(
        speaker_uri=config.speaker_uri,
        service_url=config.service_url,
        name="Polly the Parrot",
        organization="OpenFloor Demo Corp",
        description="A friendly parrot that repeats everything you say!",
    )
    app = await create_app(agent, allowed_origin=config.allowed_origin)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, config.host, config.port)
    logger.info(
        "parrot_agent_starting",
        host=config.host,
        port=config.port,
        speaker_uri=config.speaker_uri,
        service_url=config.service_url,
    )
    await site.start()
    logger.info("parrot_agent_health", url=f"http://localhost:{config.port}/health")

    # Keep running forever.
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        await runner.cleanup()

import asyncio
import io
import os
from contextlib import redirect_stdout
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from mangum import Mangum
from mangum.types import LambdaContext

from matti.common import get_controllers
from matti.common.config import ServiceFactory
from matti.common.exception_handlers import register_exception_handlers
from matti.common.middlewares import SessionCleanupMiddleware, UserPopulationMiddleware

app = FastAPI(title="Matti API")

# Use FastAPI's built-in origin pattern matching for CORS
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1|192\.168\.\d+\.\d+)(:\d+)?",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(UserPopulationMiddleware)
app.add_middleware(SessionCleanupMiddleware)
register_exception_handlers(app)

for controller in get_controllers():
    app.include_router(controller().router)


@app.post("/migrate")
async def run_migrations():
    """Run database migrations"""
    from alembic import command
    from alembic.config import Config

    output = io.StringIO()
    alembic_cfg = Config(os.path.join(os.getcwd(), "alembic.ini"))
    try:
        with redirect_stdout(output):
            command.upgrade(alembic_cfg, "head")
    except Exception as e:
        logger.exception("Migration failed")
        return {"status": "error", "output": str(e)}
    return {"status": "success", "output": output.getvalue()}


asgi_handler = Mangum(app)


def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Lambda handler function"""
    headers = event.get("headers") or {}
    user_agent = headers.get("User-Agent", headers.get("user-agent", ""))

    logger_context = {
        "request_id": context.aws_request_id,
        "user_agent": user_agent,
        "x-forwarded-for": headers.get("X-Forwarded-For", ""),
        "httpMethod": event.get("httpMethod", ""),
        "path": event.get("path", ""),
    }

    with logger.contextualize(**logger_context):
        logger.info("Request received", event=event)
        response = asgi_handler(event, context)
        logger.info("Response generated", status_code=response.get("statusCode"))
        return response


def follow_up_sweep_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Scheduled Lambda entry point that consumes due follow-ups and archives idle conversations."""
    with logger.contextualize(request_id=context.aws_request_id, job="follow_up_sweep"):
        result = asyncio.run(ServiceFactory.get_follow_up_service().run_follow_up_sweep())
        return result.model_dump()

import logging
import traceback

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.route import api_router as MainRouter
from app.client.db.redis import build_redis_client
from app.client.llm.factory import build_provider
from app.config.config import get_settings
from app.db.session import build_engine, build_session_factory, init_db
from app.errors import ChatError, InputValidationError
from app.service.cache.reply_cache import ReplyCache
from app.service.chat.chat import ChatService
from app.service.conversation.store import ConversationStore

settings = get_settings()

logging.basicConfig(level=settings.log_level.upper(), format="[%(asctime)s] %(levelname)s %(name)s - %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="spur_support_chat", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router=MainRouter, prefix="/api")


def _error_body(message: str, exc: BaseException) -> dict:
    body = {"error": message}
    if not get_settings().is_production:
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return body


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    error = InputValidationError("Invalid input")
    return JSONResponse(
        status_code=error.status_code,
        content={"error": error.message, "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(ChatError)
async def chat_error_handler(_request: Request, exc: ChatError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed: %s", exc.message, exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc))
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", exc_info=exc)
    message = str(exc) or "An error occurred. Please try again later."
    return JSONResponse(status_code=500, content=_error_body(message, exc))


@app.on_event("startup")
def startup() -> None:
    engine = build_engine(settings.database_url)
    init_db(engine)
    logger.info("Database initialized: %s", engine.url)

    redis_client = build_redis_client(settings)
    app.state.engine = engine
    app.state.redis = redis_client
    app.state.chat_service = ChatService(
        store=ConversationStore(build_session_factory(engine)),
        cache=ReplyCache(redis_client),
        provider=build_provider(settings),
    )


@app.on_event("shutdown")
def shutdown() -> None:
    redis_client = getattr(app.state, "redis", None)
    if redis_client is not None:
        redis_client.close()
    engine = getattr(app.state, "engine", None)
    if engine is not None:
        engine.dispose()


def run() -> None:
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()

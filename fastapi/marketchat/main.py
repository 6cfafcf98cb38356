from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from marketchat.config import get_settings
from marketchat.database.connection import close_mongo_connection, connect_to_mongo, get_database
from marketchat.repositories.message_repository import MessageRepository
from marketchat.routers.messages import router as messages_router
from marketchat.utils.logging_config import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):

    settings = get_settings()
    configure_logging(settings.log_level)
    await connect_to_mongo()
    try:
        await MessageRepository(get_database()).ensure_indexes()
        yield
    finally:
        await close_mongo_connection()


app = FastAPI(title="Marketplace messaging", lifespan=lifespan)


app.include_router(messages_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on {} {}", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"}},
    )


@app.get("/")
async def root():

    db = get_database()
    collections = await db.list_collection_names()
    return {"message": "Connected to MongoDB!", "collections": collections}

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.logger import Logger
from app.services.response_parser import response_parser_service
from app.api import api_router

logger = Logger("Main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"🚀 Starting response parser API (cache size {response_parser_service.cache_size})...")
    yield
    # Shutdown
    stats = response_parser_service.get_stats()
    logger.info(f"🛑 Shutting down. Cache hits={stats['hits']} misses={stats['misses']}")
    response_parser_service.clear()


app = FastAPI(title="Response Parser", lifespan=lifespan)

if settings.cors_origins_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

if settings.API_ENABLED:
    app.include_router(api_router)


@app.get("/")
async def root():
    return {"service": "response-parser", "api_enabled": settings.API_ENABLED}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.API_PORT)

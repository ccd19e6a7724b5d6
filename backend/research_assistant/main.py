from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, PlainTextResponse

from research_assistant import config
from research_assistant.api import chat, health, sessions
from research_assistant.logger import get_logger

logger = get_logger("API")


def create_app() -> FastAPI:
    app = FastAPI(
        title="AI Research Assistant",
        version="0.1.0",
        description="Chat sessions with persistent history, answered by a hosted language model.",
    )

    @app.middleware("http")
    async def internal_error_guard(request: Request, call_next):
        # Tracebacks go to the log only; clients get a bare 500
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return PlainTextResponse("Internal server error", status_code=500)

    # Added last so it wraps the error guard and 500s carry CORS headers too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", include_in_schema=False)
    def index() -> FileResponse:
        return FileResponse(config.STATIC_DIR / "index.html", media_type="text/html")

    api_prefix = "/api"
    app.include_router(health.router, prefix=api_prefix)
    app.include_router(sessions.router, prefix=api_prefix)
    app.include_router(chat.router, prefix=api_prefix)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("research_assistant.main:app", host="0.0.0.0", port=8000, reload=True)

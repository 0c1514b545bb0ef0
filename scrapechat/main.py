from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scrapechat.api.routes import chat, scrape
from scrapechat.config import settings
from scrapechat.services import logger as log_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    log_service.log_event(event_type="startup", message="ScrapeChat started")
    yield


app = FastAPI(
    title="ScrapeChat",
    description="Chat-driven web scraping with AI analysis",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    log_service.logger.warning(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


# Routes
app.include_router(chat.router)
app.include_router(scrape.router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "service": "scrapechat"}

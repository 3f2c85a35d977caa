import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .routers import playbooks as playbooks_router
from .middleware.ratelimit import RateLimitMiddleware
from .middleware.logging import LoggingMiddleware
from .services.content_cache import ContentCache
from .services.llm_client import LLMClient


app = FastAPI(title="launchloom", version=playbooks_router.APP_VERSION)

# Configure CORS - localhost for development, production domains for production
app_env = os.getenv("APP_ENV")
is_dev = app_env is None or app_env.lower() in {"dev", "development"}

if is_dev:
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Length", "Content-Type", "Content-Disposition"],
        max_age=86400,
    )
else:
    allowed = [
        "https://launchloom.app",
        "https://www.launchloom.app",
    ]
    preview = os.getenv("PREVIEW_ORIGIN")  # e.g., your Vercel preview URL
    if preview:
        allowed.append(preview)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Length", "Content-Type", "Content-Disposition"],
        max_age=86400,
    )

app.add_middleware(RateLimitMiddleware)
app.add_middleware(LoggingMiddleware)

app.include_router(playbooks_router.router)

# Built at import so TestClient works without lifespan events; tests replace
# these on app.state.
app.state.llm_client = LLMClient.from_env()
app.state.content_cache = ContentCache()


def _describe_validation_error(err: dict) -> str:
    loc = [str(part) for part in err.get("loc", ()) if part != "body"]
    field = ".".join(loc) or "body"
    return f"{field}: {err.get('msg', 'invalid value')}"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(_describe_validation_error(err) for err in exc.errors())
    return JSONResponse({"error": "Missing or invalid fields", "details": details}, status_code=400)


@app.get("/__health")
def health():
    return {"ok": True}


@app.get("/")
def root():
    return {"message": "launchloom API is running. See /api/health and /docs."}


from fastapi import FastAPI, Request, Response, Header, Depends, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, HTMLResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from .catalog import load_catalog
from .config import settings
from .controller import RecommendationController
from .errors import MissingCredentialError, MissingFieldsError, RecommenderError
from .gemini_client import GeminiClient
from .logger import logger
from .prompts import build_prompt
from .render import render_page
from .schemas import ErrorResponse, RecommendRequest, RecommendResponse, SelectRequest, SubmitRequest
from .sessions import SESSION_COOKIE, SessionStore

app = FastAPI(title="book-llm-recommender", version="1.0.0")

# Prometheus metrics – add middleware BEFORE app starts
try:
    from prometheus_fastapi_instrumentator import Instrumentator
    if not getattr(app.state, "metrics_instrumented", False):
        Instrumentator().instrument(app).expose(app, endpoint="/metrics")
        app.state.metrics_instrumented = True
except Exception as e:
    logger.warning(f"Metrics disabled: {e}")

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.RATE_LIMIT_ENABLED,
)
app.state.limiter = limiter

sessions = SessionStore(
    load_catalog(settings),
    ttl_seconds=settings.SESSION_TTL_SECONDS,
    max_sessions=settings.MAX_SESSIONS,
)
app.state.sessions = sessions


def get_gemini_client() -> GeminiClient:
    """Credential and provider settings are threaded in here, per request."""
    return GeminiClient.from_settings(settings)


def require_api_token(authorization: str = Header(default="")):
    """
    Enforce Bearer token only if API_TOKEN is set.
    - 401 if header missing
    - 403 if token wrong
    """
    expected = settings.API_TOKEN
    if not expected:
        return  # auth disabled if no token set

    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")

    token = authorization.split(" ", 1)[1].strip()
    if token != expected:
        raise HTTPException(status_code=403, detail="Invalid token")


@app.exception_handler(RateLimitExceeded)
def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(status_code=429, content={"error": "Rate limit exceeded. Please try again later."})

@app.exception_handler(StarletteHTTPException)
def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Covers the router's own 404/405 as well as explicit HTTPExceptions
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(RequestValidationError)
def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})

@app.exception_handler(RecommenderError)
def recommender_error_handler(request: Request, exc: RecommenderError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def _session(request: Request, response: Response) -> RecommendationController:
    """Look up the caller's controller, issuing a fresh cookie for new sessions."""
    session_id, controller = sessions.get_or_create(request.cookies.get(SESSION_COOKIE))
    if session_id != request.cookies.get(SESSION_COOKIE):
        response.set_cookie(
            SESSION_COOKIE,
            session_id,
            max_age=settings.SESSION_TTL_SECONDS,
            httponly=True,
            samesite="lax",
        )
    return controller

def _view(request: Request) -> RecommendationController:
    """Read-only lookup; callers without a live session see a blank, unstored one."""
    return sessions.get(request.cookies.get(SESSION_COOKIE)) or RecommendationController(sessions.catalog)

def _session_payload(controller: RecommendationController) -> dict:
    payload = controller.state.model_dump(mode="json")
    payload["available_moods"] = controller.available_moods
    payload["can_submit"] = controller.can_submit
    return payload


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}

@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    return render_page(_view(request))

@app.get("/session")
async def get_session(request: Request):
    return _session_payload(_view(request))

@app.post("/session/select")
async def select_option(sel: SelectRequest, request: Request, response: Response):
    controller = _session(request, response)
    controller.select(sel.field, sel.value)
    return _session_payload(controller)

@app.post("/session/submit")
@limiter.limit(settings.RATE_LIMIT)
async def submit_selection(
    request: Request,
    response: Response,
    req: SubmitRequest | None = None,
    client: GeminiClient = Depends(get_gemini_client),
):
    controller = _session(request, response)
    state = await controller.submit(client, prompt=req.prompt if req else None)
    if state.error:
        logger.info(f"Session submission failed: {state.error}")
    else:
        logger.info(f"Session now holds {len(state.results)} recommendations")
    return _session_payload(controller)

@app.delete("/session")
async def end_session(request: Request, response: Response):
    sessions.end(request.cookies.get(SESSION_COOKIE))
    response.delete_cookie(SESSION_COOKIE)
    return {"status": "cleared"}


@app.post(
    "/recommend",
    response_model=RecommendResponse,
    responses={400: {"model": ErrorResponse}, 405: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    dependencies=[Depends(require_api_token)],
)
@limiter.limit(settings.RATE_LIMIT)
async def recommend(
    req: RecommendRequest,
    request: Request,
    client: GeminiClient = Depends(get_gemini_client),
):
    if req.missing_fields():
        raise MissingFieldsError()
    if not client.api_key:
        raise MissingCredentialError()

    prompt = build_prompt(req.genre, req.mood, req.level, req.prompt)
    try:
        text = await client.recommend(prompt)
    except RecommenderError:
        raise
    except Exception:
        logger.exception("Relay failed while calling Gemini")
        return JSONResponse(status_code=500, content={"error": "Server error"})

    logger.info(f"Responding with {len(text)} characters for {req.genre}/{req.mood}/{req.level}")
    return RecommendResponse(text=text)

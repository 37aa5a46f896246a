from fastapi import FastAPI
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from formflow.api.routes import router
from formflow.api.form_routes import router as form_router
from formflow.api.admin_routes import router as admin_router
from formflow.core.errors import NotFound, StoreUnavailable
from formflow.observability.logging import log
from formflow.settings import settings
from formflow.store.kv import RedisStore

app = FastAPI(title="FormFlow Actions API")

# Action clients (wallets, unfurlers) call from arbitrary origins.
origins = [x.strip() for x in settings.CORS_ORIGINS.split(",") if x.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["Content-Type"],
)

app.include_router(router)
app.include_router(form_router)
app.include_router(admin_router)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/health/store")
def health_store():
    RedisStore().ping()
    return {"status": "ok", "store": "reachable"}


# ---------------------------------------------------------------------------
# Failures carry a message only, never an action list, so clients cannot
# continue from a step the server did not actually resolve.
# ---------------------------------------------------------------------------
@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    log("action_failed", path=request.url.path, reason="not_found", error=str(exc))
    return JSONResponse(status_code=404, content={"message": str(exc)})


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    log(
        "action_failed",
        path=request.url.path,
        reason="store_unavailable",
        operation=exc.operation,
        errorType=type(exc.cause).__name__ if exc.cause else "",
    )
    return JSONResponse(
        status_code=503,
        content={"message": "Session store unavailable, please retry shortly"},
        headers={"Retry-After": "5"},
    )

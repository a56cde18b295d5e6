# logit/main.py
import os
import time
import logging
import uuid
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from logit.errors import LogitError, WorkoutValidationError
from logit.routers.auth import router as auth_router
from logit.routers.workouts import router as workouts_router
from logit.routers.exercises import router as exercises_router
from logit.routers.dashboard import router as dashboard_router
from logit.db import SessionLocal  # for healthz DB check

log = logging.getLogger("uvicorn")

app = FastAPI(
    title="Logit API",
    openapi_tags=[
        {"name": "auth", "description": "Registration, login & profile"},
        {"name": "workouts", "description": "Workout logs, suggestions & comparisons"},
        {"name": "exercises", "description": "Per-exercise history"},
        {"name": "dashboard", "description": "Training overview"},
    ],
)


# CORS (relax for local dev; tighten origins in prod via env)
ALLOW_ORIGINS = os.getenv("ALLOW_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = req_id
    log.info("rid=%s %s %s -> %s in %.1fms",
             req_id, request.method, request.url.path, response.status_code, duration_ms)
    return response

@app.exception_handler(LogitError)
async def logit_error_handler(request: Request, exc: LogitError):
    if exc.status_code >= 500:
        log.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError):
    log.debug("invalid request on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": WorkoutValidationError.default_message})

@app.get("/")
def root():
    return {"ok": True, "name": "Logit API"}

@app.get("/ping")
def ping():
    return {"pong": True}

@app.get("/healthz")
def healthz():
    # Quick DB sanity check
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        return {"status": "ok"}
    except Exception as e:
        return {"status": "degraded", "error": str(e)}

@app.get("/version")
def version():
    return {"version": os.getenv("API_VERSION", "dev")}

# Routers
app.include_router(auth_router)
app.include_router(workouts_router)
app.include_router(exercises_router)
app.include_router(dashboard_router)

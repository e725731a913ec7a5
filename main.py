import os
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import database
from auth import authenticate_admin, create_access_token
from dependencies import StoreDep
from resources import routers
from schemas import LoginRequest, Token
import uploads

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# ==================
# FastAPI app config
# ==================
app = FastAPI(title="Portfolio API")


# Registered before CORS so that CORS wraps it and 500s still carry the
# allow-origin header.
@app.middleware("http")
async def catch_unhandled_errors(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for prefix, router in routers.items():
    app.include_router(router, prefix=prefix)
app.include_router(uploads.router, prefix="/uploads")


# ==============
# Error handlers
# ==============
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message.removeprefix("Value error, ")})


# ======
# Routes
# ======
@app.get("/")
def root():
    return {"status": "ok", "service": "portfolio-api"}


@app.get("/test")
def test_database():
    """Quick DB connectivity check"""
    response = {"backend": "running", "database": "not-available", "collections": []}
    if database.store is None:
        return response
    try:
        response["collections"] = database.store.ping()[:10]
        response["database"] = "connected"
    except Exception as e:
        logger.warning("Database check failed: %s", e)
        response["database"] = "error"
    return response


# Auth
@app.post("/auth/login", response_model=Token)
def login(data: LoginRequest, store: StoreDep):
    admin = authenticate_admin(store, data.email, data.password)
    if not admin:
        logger.warning("Failed login for %s", data.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    token = create_access_token({"sub": admin["email"], "role": "admin"})
    return Token(access_token=token)


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)

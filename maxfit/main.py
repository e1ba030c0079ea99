from contextlib import asynccontextmanager
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from maxfit import config, db
from maxfit.routes import assistant, auth, call_history, dashboard, users

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Starting MaxFit API...")
    db.ensure_indexes()
    yield
    logger.info("🔌 Closing MongoDB client")
    db.client.close()


app = FastAPI(title="MaxFit API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(f"Validation Error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def universal_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on path %s:\n%s", request.url.path, traceback.format_exc())
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/", tags=["Health Check"])
async def health_check():
    try:
        db.ping()
        return {"status": "healthy", "service": "MaxFit API", "database": "connected"}
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        return {"status": "unhealthy", "service": "MaxFit API", "database": "disconnected"}


app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(call_history.router, prefix="/api", tags=["Call History"])
app.include_router(assistant.router, prefix="/api/assistant", tags=["AI Assistant"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException

from pool_api.config import CORS_ORIGINS
from pool_api.database import create_db_and_tables
from pool_api.logging_config import setup_logging
from pool_api.routers import games, guesses, pools, users


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    create_db_and_tables()
    logger.info("Pool API started")
    yield


app = FastAPI(title="Pool API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Errors are rendered as {"message": ...}
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.debug("Rejected {} {}: {}", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={"message": "Validation error.", "issues": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


# Include routers
app.include_router(pools.router)
app.include_router(guesses.router)
app.include_router(games.router)
app.include_router(users.router)


@app.get("/")
def home():
    return {"status": "ok"}

# app/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.errors import AdvisorPrepError
from app.services import init_db
from app.api.routes import router as api_router

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("advisor-prep")


app = FastAPI(title="Business Advisor Prep API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)


@app.exception_handler(AdvisorPrepError)
async def advisor_prep_error_handler(request: Request, exc: AdvisorPrepError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request body",
            "retryable": False,
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.on_event("startup")
def on_startup() -> None:
    init_db()
    logger.info("Database ready, model=%s", settings.llm_model)


@app.get("/")
def root():
    return {"message": "Business Advisor Prep API is running"}


app.include_router(api_router, prefix="/api")

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from expense_analyzer.db.core import ArgumentError
from expense_analyzer.logging_config import setup_logging, get_logger
from expense_analyzer.routers.accounts import router as accounts_router
from expense_analyzer.routers.categories import router as categories_router
from expense_analyzer.routers.expenses import router as expenses_router
from expense_analyzer.routers.income import router as income_router
from expense_analyzer.routers.tags import router as tags_router
from expense_analyzer.routers.transfers import router as transfers_router
from expense_analyzer.versioning import SUPPORTED_VERSIONS, SUPPORTED_VERSIONS_HEADER

setup_logging()
logger = get_logger(__name__)

app = FastAPI(title="ExpenseAnalyzer API")

app.include_router(accounts_router)
app.include_router(categories_router)
app.include_router(tags_router)
app.include_router(expenses_router)
app.include_router(income_router)
app.include_router(transfers_router)


@app.middleware("http")
async def add_supported_versions_header(request: Request, call_next):
    response = await call_next(request)
    response.headers[SUPPORTED_VERSIONS_HEADER] = ", ".join(SUPPORTED_VERSIONS)
    return response


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    # Unique clash, unknown foreign key, or delete of a row still referenced
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": "The request conflicts with existing data"},
    )


@app.exception_handler(ArgumentError)
async def argument_error_handler(request: Request, exc: ArgumentError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.get("/")
def read_root():
    return "Server is running."

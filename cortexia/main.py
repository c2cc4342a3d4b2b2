import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cortexia import __version__
from cortexia.config import CORS_ORIGINS, LOG_LEVEL
from cortexia.database import init_db
from cortexia.routes.auth_routes import router as auth_router
from cortexia.routes.task_routes import router as task_router
from cortexia.routes.habit_routes import router as habit_router
from cortexia.routes.goal_routes import router as goal_router
from cortexia.routes.finance_routes import router as finance_router
from cortexia.routes.time_routes import router as time_router
from cortexia.routes.study_routes import router as study_router
from cortexia.routes.journal_routes import router as journal_router
from cortexia.routes.settings_routes import router as settings_router
from cortexia.routes.ai_routes import router as ai_router
from cortexia.routes.quick_add_routes import router as quick_add_router
from cortexia.routes.insights_routes import router as insights_router
from cortexia.routes.data_routes import router as data_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="CorteXia", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"error": "Validation error", "details": exc.errors()}),
    )


@app.get("/api/v1/health-check")
async def health():
    return {"status": "ok", "message": "Backend is alive!"}


for router in (
    auth_router,
    task_router,
    habit_router,
    goal_router,
    finance_router,
    time_router,
    study_router,
    journal_router,
    settings_router,
    ai_router,
    quick_add_router,
    insights_router,
    data_router,
):
    app.include_router(router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("cortexia.main:app", host="0.0.0.0", port=8000, reload=True)

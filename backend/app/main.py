from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api import recordings, transcriptions, users
from app.core.config import get_settings
from app.core.logger import get_logger
from app.db.base import engine, Base

logger = get_logger(__name__)
settings = get_settings()

# Create DB tables
Base.metadata.create_all(bind=engine)

app = FastAPI(title="Recordscribe API", version="1.0.0")


app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(users.router)
app.include_router(recordings.router)
app.include_router(transcriptions.router)

settings.UPLOAD_ROOT.mkdir(parents=True, exist_ok=True)
app.mount(
    settings.PUBLIC_UPLOAD_PREFIX,
    StaticFiles(directory=settings.UPLOAD_ROOT, check_dir=False),
    name="uploads",
)


@app.get("/health")
def health_check():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)

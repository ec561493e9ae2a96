"""
jwt provider host. Serves the jwt_hashed_token resource lifecycle over HTTP and keeps
resource state in SQLite.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from jwt_provider.audit import router as audit_router
from jwt_provider.config import HOST, LOG_LEVEL, PORT, PROVIDER_VERSION
from jwt_provider.database import init_db
from jwt_provider.errors import ProviderError
from jwt_provider.resources import router as resources_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create state tables on startup."""
    init_db()
    yield


app = FastAPI(title="JWT Provider", version=PROVIDER_VERSION, lifespan=lifespan)
app.include_router(resources_router, tags=["resources"])
app.include_router(audit_router, tags=["audit"])


@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "jwt_provider"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "jwt_provider.main:app",
        host=HOST,
        port=PORT,
        log_level=LOG_LEVEL,
    )

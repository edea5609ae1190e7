from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rollout.errors import DecodeError, InvalidFeatureName, InvalidPercentage, InvalidTeamID, StoreError
from rollout.logging_config import setup_logging
from rollout.metrics import setup_metrics
from rollout.routers.flags import router as flags_router
from rollout.routers.health import router as health_router

setup_logging()

app = FastAPI(title="Feature Rollout Service", version="0.1.0")

# CORS (adjust as needed)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(DecodeError)
async def decode_error_handler(request: Request, exc: DecodeError):
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(InvalidFeatureName)
@app.exception_handler(InvalidPercentage)
@app.exception_handler(InvalidTeamID)
async def precondition_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# Routers
app.include_router(health_router, prefix="")
app.include_router(flags_router, prefix="")

# Metrics endpoint
setup_metrics(app)

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from rollout.dependencies import get_store
from rollout.errors import StoreError
from rollout.store import RedisStore

router = APIRouter(tags=["health"])


@router.get("/healthz")
def health(store: RedisStore = Depends(get_store)):
    try:
        store.ping()
    except StoreError as e:
        return JSONResponse(status_code=503, content={"status": "unavailable", "detail": str(e)})
    return {"status": "ok"}

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/status")
async def get_status(request: Request):
    """Liveness of both stores."""
    state = request.app.state
    return {"redis": await state.cache.is_alive(), "db": await state.db.is_alive()}


@router.get("/stats")
async def get_stats(request: Request):
    db = request.app.state.db
    return {"users": await db.nb_users(), "files": await db.nb_files()}

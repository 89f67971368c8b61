from typing import Dict

from fastapi import APIRouter

from syncup import db

router = APIRouter()


@router.get("/health")
async def health() -> Dict[str, str]:
    pool_status = db.get_pool_stats()["status"]
    database = "connected" if pool_status == "active" else "disconnected"
    return {"status": "ok", "database": database}

from fastapi import APIRouter

from httptoolkit.api.routes import files, payloads

api_router = APIRouter()
api_router.include_router(files.router, tags=["files"])
api_router.include_router(payloads.router, tags=["json"])

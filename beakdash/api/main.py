from fastapi import APIRouter

from beakdash.api.routes import connections, datasets, utils

api_router = APIRouter()
api_router.include_router(connections.router)
api_router.include_router(datasets.router)
api_router.include_router(utils.router)

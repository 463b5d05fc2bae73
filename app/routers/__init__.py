from fastapi import APIRouter

from . import (
    categories,
    files,
    health,
    pages,
    portfolio,
)


def get_api_router() -> APIRouter:
    router = APIRouter()
    router.include_router(health.router)
    router.include_router(categories.router)
    router.include_router(portfolio.router)
    router.include_router(files.router)
    return router


def get_page_router(include_debug: bool = False) -> APIRouter:
    router = APIRouter()
    router.include_router(pages.router)
    if include_debug:
        router.include_router(pages.debug_router)
    return router

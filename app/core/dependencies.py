from fastapi import Depends, Request

from app.core.config import Settings
from app.core.db import ConnectionPool
from app.repositories import CategoryRepository, PortfolioRepository
from app.services import PageComposer


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_pool(request: Request) -> ConnectionPool:
    return request.app.state.pool


def get_page_composer(settings: Settings = Depends(get_settings)) -> PageComposer:
    return PageComposer(settings.app.public_dir)


def get_category_repository(pool: ConnectionPool = Depends(get_pool)) -> CategoryRepository:
    return CategoryRepository(pool)


def get_portfolio_repository(pool: ConnectionPool = Depends(get_pool)) -> PortfolioRepository:
    return PortfolioRepository(pool)

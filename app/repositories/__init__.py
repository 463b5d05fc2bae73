from .category_repository import CategoryRepository
from .portfolio_repository import PortfolioRepository

__all__ = [
    "CategoryRepository",
    "PortfolioRepository",
]

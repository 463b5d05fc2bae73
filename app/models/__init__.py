from .base import Base
from .category import Category
from .portfolio import PortfolioItem

__all__ = [
    "Base",
    "Category",
    "PortfolioItem",
]

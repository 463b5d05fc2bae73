from .category import CategoryCreate, CategoryRead, CategoryUpdate
from .common import ErrorResponse, HealthStatus, MessageResponse, PageDiagnostics, UploadResult
from .portfolio import PortfolioCreate, PortfolioRead, PortfolioUpdate

__all__ = [
    "CategoryCreate",
    "CategoryRead",
    "CategoryUpdate",
    "ErrorResponse",
    "HealthStatus",
    "MessageResponse",
    "PageDiagnostics",
    "PortfolioCreate",
    "PortfolioRead",
    "PortfolioUpdate",
    "UploadResult",
]

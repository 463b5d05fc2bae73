from .page_service import PageComposer

__all__ = [
    "PageComposer",
]

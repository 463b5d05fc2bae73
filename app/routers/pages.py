from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from app.core.dependencies import get_page_composer
from app.schemas import PageDiagnostics
from app.services import PageComposer

router = APIRouter(include_in_schema=False)
debug_router = APIRouter(include_in_schema=False)


@router.get("/", response_class=HTMLResponse)
def index(composer: PageComposer = Depends(get_page_composer)):
    return HTMLResponse(composer.render())


@debug_router.get("/__diag", response_model=PageDiagnostics)
def diagnostics(composer: PageComposer = Depends(get_page_composer)):
    return composer.diagnostics()


@debug_router.get("/__rendered", response_class=HTMLResponse)
def rendered(composer: PageComposer = Depends(get_page_composer)):
    return HTMLResponse(composer.render())

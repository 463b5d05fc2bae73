from fastapi import APIRouter, Depends, Response, status

from app.core.dependencies import get_portfolio_repository
from app.repositories import PortfolioRepository
from app.schemas import MessageResponse, PortfolioCreate, PortfolioRead, PortfolioUpdate

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


@router.get("", response_model=list[PortfolioRead])
def list_portfolio(repository: PortfolioRepository = Depends(get_portfolio_repository)):
    return [PortfolioRead.model_validate(row) for row in repository.list()]


@router.get("/{identifier}", response_model=PortfolioRead, responses={404: {"model": MessageResponse}})
def get_portfolio_item(identifier: str, repository: PortfolioRepository = Depends(get_portfolio_repository)):
    """Fetch one item by numeric id or by slug."""
    return PortfolioRead.model_validate(repository.get(identifier))


@router.post(
    "",
    response_model=PortfolioRead,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": MessageResponse}},
)
def create_portfolio_item(
    payload: PortfolioCreate,
    repository: PortfolioRepository = Depends(get_portfolio_repository),
):
    return PortfolioRead.model_validate(repository.create(payload.model_dump()))


@router.put("/{item_id}", response_model=PortfolioRead, responses={404: {"model": MessageResponse}})
def update_portfolio_item(
    item_id: int,
    payload: PortfolioUpdate,
    repository: PortfolioRepository = Depends(get_portfolio_repository),
):
    return PortfolioRead.model_validate(repository.update(item_id, payload.model_dump()))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT, responses={404: {"model": MessageResponse}})
def delete_portfolio_item(item_id: int, repository: PortfolioRepository = Depends(get_portfolio_repository)):
    repository.delete(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

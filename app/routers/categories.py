from fastapi import APIRouter, Depends, Response, status

from app.core.dependencies import get_category_repository
from app.repositories import CategoryRepository
from app.schemas import CategoryCreate, CategoryRead, CategoryUpdate, MessageResponse

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryRead])
def list_categories(repository: CategoryRepository = Depends(get_category_repository)):
    return [CategoryRead.model_validate(row) for row in repository.list()]


@router.get("/{category_id}", response_model=CategoryRead, responses={404: {"model": MessageResponse}})
def get_category(category_id: int, repository: CategoryRepository = Depends(get_category_repository)):
    return CategoryRead.model_validate(repository.get(category_id))


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": MessageResponse}},
)
def create_category(payload: CategoryCreate, repository: CategoryRepository = Depends(get_category_repository)):
    return CategoryRead.model_validate(repository.create(payload.model_dump()))


@router.put("/{category_id}", response_model=CategoryRead, responses={404: {"model": MessageResponse}})
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    repository: CategoryRepository = Depends(get_category_repository),
):
    return CategoryRead.model_validate(repository.update(category_id, payload.model_dump()))


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT, responses={404: {"model": MessageResponse}})
def delete_category(category_id: int, repository: CategoryRepository = Depends(get_category_repository)):
    repository.delete(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

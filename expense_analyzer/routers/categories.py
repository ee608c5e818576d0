from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID, uuid4

from expense_analyzer.crud.base import Repository
from expense_analyzer.db.core import CategoryDB, get_db
from expense_analyzer.logging_config import get_logger
from expense_analyzer.models import category as category_models
from expense_analyzer.routers.common import bad_request, not_found, require_name, set_location
from expense_analyzer.versioning import require_api_version

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/v{version}/categories",
    tags=["categories"],
    dependencies=[Depends(require_api_version("1.0"))],
)


def get_category_repository(db: Session = Depends(get_db)) -> Repository[CategoryDB]:
    return Repository(db, CategoryDB)


@router.get("/", response_model=List[category_models.CategoryResponse])
def read_categories(repo: Repository[CategoryDB] = Depends(get_category_repository)):
    """
    Retrieve all categories, ordered by name.
    """
    return repo.get_queryable().order_by(CategoryDB.name).all()

@router.get("/{category_id}", response_model=category_models.CategoryResponse)
def read_category(category_id: UUID, repo: Repository[CategoryDB] = Depends(get_category_repository)):
    db_category = repo.get_by_id(category_id)
    if db_category is None:
        raise not_found("Category not found")
    return db_category

@router.post("/", response_model=category_models.CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    category: category_models.CategoryCreate,
    response: Response,
    repo: Repository[CategoryDB] = Depends(get_category_repository)
):
    name = require_name(category.name)
    if repo.exists(CategoryDB.name == name):
        raise bad_request(f"Category with name '{name}' already exists")

    db_category = CategoryDB(id=uuid4(), name=name)
    repo.insert(db_category)
    repo.save_changes()
    logger.info(f"Created category {db_category.id} ({name})")

    set_location(response, "categories", db_category.id)
    return db_category

@router.put("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_category(
    category_id: UUID,
    category: category_models.CategoryUpdate,
    repo: Repository[CategoryDB] = Depends(get_category_repository)
):
    db_category = repo.get_by_id(category_id)
    if db_category is None:
        raise not_found("Category not found")

    name = require_name(category.name)
    if repo.exists(CategoryDB.name == name, CategoryDB.id != category_id):
        raise bad_request(f"Category with name '{name}' already exists")

    db_category.name = name
    repo.update(db_category)
    repo.save_changes()

@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: UUID, repo: Repository[CategoryDB] = Depends(get_category_repository)):
    """
    Delete a category. Refused with 409 while income or expenses use it.
    """
    db_category = repo.get_by_id(category_id)
    if db_category is None:
        raise not_found("Category not found")

    repo.delete(db_category)
    repo.save_changes()
    logger.info(f"Deleted category {category_id}")

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID, uuid4

from expense_analyzer.crud.base import Repository
from expense_analyzer.db.core import TagDB, get_db
from expense_analyzer.models import tag as tag_models
from expense_analyzer.routers.common import bad_request, not_found, require_name, set_location
from expense_analyzer.versioning import require_api_version

router = APIRouter(
    prefix="/api/v{version}/tags",
    tags=["tags"],
    dependencies=[Depends(require_api_version("1.0"))],
)


def get_tag_repository(db: Session = Depends(get_db)) -> Repository[TagDB]:
    return Repository(db, TagDB)


@router.get("/", response_model=List[tag_models.TagResponse])
def read_tags(skip: int = 0, limit: int = 100, repo: Repository[TagDB] = Depends(get_tag_repository)):
    """
    Retrieve tags, ordered by name.
    """
    return repo.get_queryable().order_by(TagDB.name).offset(skip).limit(limit).all()

@router.get("/{tag_id}", response_model=tag_models.TagResponse)
def read_tag(tag_id: UUID, repo: Repository[TagDB] = Depends(get_tag_repository)):
    db_tag = repo.get_by_id(tag_id)
    if db_tag is None:
        raise not_found("Tag not found")
    return db_tag

@router.post("/", response_model=tag_models.TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(
    tag: tag_models.TagCreate,
    response: Response,
    repo: Repository[TagDB] = Depends(get_tag_repository)
):
    name = require_name(tag.name)
    if repo.exists(TagDB.name == name):
        raise bad_request(f"Tag with name '{name}' already exists")

    db_tag = TagDB(id=uuid4(), name=name)
    repo.insert(db_tag)
    repo.save_changes()

    set_location(response, "tags", db_tag.id)
    return db_tag

@router.put("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_tag(
    tag_id: UUID,
    tag: tag_models.TagUpdate,
    repo: Repository[TagDB] = Depends(get_tag_repository)
):
    db_tag = repo.get_by_id(tag_id)
    if db_tag is None:
        raise not_found("Tag not found")

    name = require_name(tag.name)
    if repo.exists(TagDB.name == name, TagDB.id != tag_id):
        raise bad_request(f"Tag with name '{name}' already exists")

    db_tag.name = name
    repo.update(db_tag)
    repo.save_changes()

@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tag(tag_id: UUID, repo: Repository[TagDB] = Depends(get_tag_repository)):
    """
    Delete a tag. Its links to expenses are removed with it.
    """
    db_tag = repo.get_by_id(tag_id)
    if db_tag is None:
        raise not_found("Tag not found")

    repo.delete(db_tag)
    repo.save_changes()

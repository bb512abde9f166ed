from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlmodel import Session

from app.db.session import get_session
from app.dependencies.auth import get_current_user
from app.services import worklog_service as store

router = APIRouter(prefix="/tags", tags=["Tags"])


class TagCount(BaseModel):
    tag: str
    count: int


class TagRename(BaseModel):
    old_tag: str = Field(..., min_length=1)
    new_tag: str = Field(..., min_length=1)


@router.get("", response_model=List[TagCount])
def get_all_tags(
    db: Session = Depends(get_session),
    current_user: str = Depends(get_current_user),
):
    return store.tag_counts(db, UUID(current_user))


@router.put("/rename")
def rename_tag(
    body: TagRename,
    db: Session = Depends(get_session),
    current_user: str = Depends(get_current_user),
):
    old_tag, new_tag = body.old_tag.strip(), body.new_tag.strip()
    if not old_tag or not new_tag:
        raise HTTPException(status_code=400, detail="Old and new tags are required")
    updated = store.rename_tag(db, UUID(current_user), old_tag, new_tag)
    return {"message": "Tag renamed", "updated": updated}


@router.delete("/{tag}")
def delete_tag(
    tag: str,
    db: Session = Depends(get_session),
    current_user: str = Depends(get_current_user),
):
    updated = store.delete_tag(db, UUID(current_user), tag)
    return {"message": "Tag deleted", "updated": updated}

# clubhouse/api/v1/endpoints/blog.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from clubhouse import crud
from clubhouse.api import deps
from clubhouse.schemas.blog import BlogPost, BlogPostSave, BlogTag
from clubhouse.schemas.user import UserProfile
from clubhouse.store import DocumentStore

router = APIRouter(prefix="/blog", tags=["Blog"])


@router.get("", response_model=List[BlogPost])
def list_posts(
    tag: Optional[BlogTag] = Query(None),
    year: Optional[int] = Query(None, ge=1970),
    month: Optional[int] = Query(None, ge=1, le=12),
    limit: Optional[int] = Query(None, ge=1, le=500),
    store: DocumentStore = Depends(deps.get_store),
):
    """Public blog listing, newest first."""
    return crud.blog_post.list_posts(
        store, tag=tag, year=year, month=month, limit=limit
    )


@router.get("/{slug}", response_model=BlogPost)
def read_post(slug: str, store: DocumentStore = Depends(deps.get_store)):
    return crud.blog_post.get_by_slug(store, slug)


@router.post("", response_model=BlogPost, status_code=status.HTTP_201_CREATED)
def create_post(
    post_in: BlogPostSave,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    """
    Publish a post. Its slug is derived from the title and must be unique;
    with `createEvent` the linked calendar event is created alongside it.
    """
    return crud.blog_post.create(store, author=member, post_in=post_in)


@router.put("/posts/{postId}", response_model=BlogPost)
def update_post(
    postId: str,
    post_in: BlogPostSave,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.blog_post.update(
        store, editor=member, post_id=postId, post_in=post_in
    )


@router.delete("/posts/{postId}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    postId: str,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    crud.blog_post.remove(store, editor=member, post_id=postId)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

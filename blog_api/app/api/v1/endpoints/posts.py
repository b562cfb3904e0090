"""
Post endpoints for API v1.

These routes expose a CRUD API over the posts collection.  Handlers
only translate between HTTP and ``PostService``; errors raised by the
service are turned into JSON responses by the handlers in
``core.errors``.
"""

from fastapi import APIRouter, Depends, Request, Response, status

from blog_api.app.schemas.post import PostCreate, PostList, PostRead, PostUpdate
from blog_api.app.services.post_service import PostService

router = APIRouter()


def get_post_service(request: Request) -> PostService:
    """Build a service on the store held by the running application."""
    return PostService(request.app.state.store)


@router.get("", response_model=PostList)
async def list_posts(service: PostService = Depends(get_post_service)) -> PostList:
    """Return every stored post, newest first."""
    return await service.list_posts()


@router.get("/{post_id}", response_model=PostRead)
async def get_post(post_id: str, service: PostService = Depends(get_post_service)) -> PostRead:
    return await service.get_post(post_id)


@router.post("", response_model=PostRead, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_in: PostCreate,
    service: PostService = Depends(get_post_service),
) -> PostRead:
    return await service.create_post(post_in)


@router.put("/{post_id}", response_model=PostRead)
async def update_post(
    post_id: str,
    post_in: PostUpdate,
    service: PostService = Depends(get_post_service),
) -> PostRead:
    """Update the fields sent in the body and return the updated post."""
    return await service.update_post(post_id, post_in)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: str, service: PostService = Depends(get_post_service)) -> Response:
    """Delete a post.  Responds 204 whether or not the post existed."""
    await service.delete_post(post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Persistence service routes.

Mounted on the NiceGUI app (which is a FastAPI app) under the configured
API prefix:

    GET    /health
    POST   /signup
    POST   /stories
    GET    /stories
    GET    /stories/{story_id}
    DELETE /stories/{story_id}

Every story route requires `Authorization: Bearer <access token>`. Errors
are returned as {"error": message} with the matching status code.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, Body, Header
from fastapi.responses import JSONResponse

from storyloom.errors import UserInputError
from storyloom.models import Story
from storyloom.storage.protocol import IdentityProvider
from storyloom.storage.repository import StoryRepository

logger = logging.getLogger(__name__)

NO_TOKEN = "Unauthorized - no token provided"
UNAUTHORIZED = "Unauthorized"
SIGNUP_FIELDS_REQUIRED = "Email, password, and name are required"
INVALID_STORY = "Invalid story document"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Token part of an `Authorization: Bearer <token>` header."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


def create_api_router(repository: StoryRepository, identity: Optional[IdentityProvider]) -> APIRouter:
    """
    Build the persistence routes.

    Args:
        repository: story storage
        identity: token verification and account creation; when None every
            authenticated route answers 401
    """
    router = APIRouter()

    def authenticate(authorization: Optional[str]) -> Tuple[Optional[Dict[str, Any]], Optional[JSONResponse]]:
        token = bearer_token(authorization)
        if not token:
            return None, error_response(401, NO_TOKEN)
        user = identity.get_user(token) if identity else None
        if not user:
            return None, error_response(401, UNAUTHORIZED)
        return user, None

    @router.get("/health")
    def health():
        return {"status": "ok"}

    @router.post("/signup")
    def signup(body: Any = Body(...)):
        if not isinstance(body, dict):
            return error_response(400, SIGNUP_FIELDS_REQUIRED)
        email = body.get("email")
        password = body.get("password")
        name = body.get("name")
        if not email or not password or not name:
            return error_response(400, SIGNUP_FIELDS_REQUIRED)
        try:
            if identity is None:
                raise RuntimeError("identity provider not configured")
            user = identity.create_user(email, password, name)
        except UserInputError as e:
            logger.info(f"Signup rejected for {email}: {e}")
            return error_response(400, e.message)
        except Exception as e:
            logger.exception(f"Signup exception: {e}")
            return error_response(500, "Internal server error during signup")
        return {"user": user}

    @router.post("/stories")
    def save_story(body: Any = Body(...), authorization: Optional[str] = Header(None)):
        user, denied = authenticate(authorization)
        if denied:
            return denied
        if not isinstance(body, dict):
            return error_response(400, INVALID_STORY)
        try:
            story = Story.from_dict(body)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.info(f"Rejected malformed story from {user['id']}: {e}")
            return error_response(400, INVALID_STORY)
        try:
            repository.save(user["id"], story)
        except Exception as e:
            logger.exception(f"Save story exception: {e}")
            return error_response(500, "Internal server error while saving story")
        return {"success": True}

    @router.get("/stories")
    def list_stories(authorization: Optional[str] = Header(None)):
        user, denied = authenticate(authorization)
        if denied:
            return denied
        try:
            stories = repository.list(user["id"])
        except Exception as e:
            logger.exception(f"Get stories exception: {e}")
            return error_response(500, "Internal server error while fetching stories")
        return {"stories": [meta.to_dict() for meta in stories]}

    @router.get("/stories/{story_id}")
    def get_story(story_id: str, authorization: Optional[str] = Header(None)):
        user, denied = authenticate(authorization)
        if denied:
            return denied
        try:
            story = repository.get(user["id"], story_id)
        except Exception as e:
            logger.exception(f"Get story exception: {e}")
            return error_response(500, "Internal server error while fetching story")
        if story is None:
            return error_response(404, "Story not found")
        return {"story": story.to_dict()}

    @router.delete("/stories/{story_id}")
    def delete_story(story_id: str, authorization: Optional[str] = Header(None)):
        user, denied = authenticate(authorization)
        if denied:
            return denied
        try:
            repository.delete(user["id"], story_id)
        except Exception as e:
            logger.exception(f"Delete story exception: {e}")
            return error_response(500, "Internal server error while deleting story")
        return {"success": True}

    return router

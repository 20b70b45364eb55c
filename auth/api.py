"""HTTP routes for authentication."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from auth.resolver import SessionResolver
from auth.types import MeResponse


def create_auth_router(
    resolver: SessionResolver,
    cookie_name: str = "session_token",
) -> APIRouter:
    """Create auth router with injected resolver."""
    router = APIRouter(tags=["auth"])

    @router.get("/me")
    async def get_current_user(request: Request):
        """Who is the caller?

        Always 200. Body is {"user": null} for anonymous callers,
        including when the session lookup itself failed.
        """
        token = request.cookies.get(cookie_name)
        identity = resolver.resolve(token)
        body = MeResponse(user=identity)
        return JSONResponse(
            status_code=200,
            content=body.model_dump(mode="json", by_alias=True),
        )

    return router

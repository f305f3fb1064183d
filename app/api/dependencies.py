from fastapi import Depends, Header, Request

from app.api.rate_limiter import RateLimitExceededError
from app.api.services import AppServices
from app.auth.exceptions import AuthError

BEARER_PREFIX = "Bearer "


def get_services(request: Request) -> AppServices:
    services: AppServices = request.app.state.services
    return services


def current_user(
    authorization: str | None = Header(default=None),
    services: AppServices = Depends(get_services),
) -> str:
    """Resolve the caller's user id from the bearer credential."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthError("No authorization header")
    token = authorization[len(BEARER_PREFIX):].strip()
    return services.auth_verifier.verify(token)


def rate_limited_user(
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> str:
    if not services.rate_limiter.allow(user_id):
        raise RateLimitExceededError(f"Rate limit exceeded for user {user_id}")
    return user_id

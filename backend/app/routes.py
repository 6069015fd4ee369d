# backend/app/routes.py

from fastapi import APIRouter, Depends, Request, Query
from fastapi.responses import JSONResponse
import hmac
import hashlib
from typing import Iterable, Optional
from config import Settings
from .schemas import ErrorResponse, LandingViewResult
from services.landing_resolver import FailureKind, LandingFailure, UserLandingResolver
import logging

router = APIRouter()
logger = logging.getLogger(__name__)

FAILURE_STATUS = {
    FailureKind.MISSING_PARAMETER: 400,
    FailureKind.CUSTOMER_NOT_FOUND: 404,
    FailureKind.FAVORITE_NOT_FOUND: 404,
    FailureKind.PRODUCT_NOT_FOUND: 404,
    FailureKind.STORE_FAILURE: 500,
    FailureKind.REMOTE_FETCH_FAILURE: 502,
}


def verify_app_proxy_signature(params: Iterable[tuple[str, str]], secret: str) -> bool:
    """
    Verify the `signature` Shopify appends to app proxy requests.

    Every other query parameter is rendered as key=value (repeated keys joined
    with ","), sorted by key, concatenated with no separator and signed with
    the app's API secret as a hex HMAC-SHA256.
    """
    provided = None
    grouped: dict[str, list[str]] = {}
    for key, value in params:
        if key == "signature":
            provided = value
            continue
        grouped.setdefault(key, []).append(value)

    if not provided or not secret:
        return False

    message = "".join(f"{key}={','.join(values)}" for key, values in sorted(grouped.items()))
    computed = hmac.new(
        key=secret.encode('utf-8'),
        msg=message.encode('utf-8'),
        digestmod=hashlib.sha256
    ).hexdigest()
    return hmac.compare_digest(computed, provided)


def get_resolver(request: Request) -> UserLandingResolver:
    return request.app.state.resolver


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def failure_response(failure: LandingFailure) -> JSONResponse:
    return error_response(FAILURE_STATUS[failure.kind], failure.message)


@router.get(
    "/users",
    response_model=LandingViewResult,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def get_user_landing(
    request: Request,
    user_id: Optional[str] = Query(None),
    settings: Settings = Depends(get_app_settings),
    resolver: UserLandingResolver = Depends(get_resolver),
):
    """
    App proxy endpoint backing the user landing page.
    Configure the proxy in the Shopify admin to point at this route; the
    Liquid template calls it with ?user_id=<shopify customer id>.
    """
    if settings.VERIFY_APP_PROXY_SIGNATURE:
        if not verify_app_proxy_signature(request.query_params.multi_items(), settings.SHOPIFY_API_SECRET):
            logger.warning(f"[AppProxy] rejected request with bad signature path={request.url.path}")
            return error_response(401, "Invalid app proxy signature")

    if not user_id or not user_id.strip():
        return error_response(400, "Missing user_id query parameter")

    outcome = await resolver.resolve(user_id)
    if isinstance(outcome, LandingFailure):
        logger.info(
            f"[AppProxy] /users user_id={user_id} -> {outcome.kind.value} "
            f"(stage={outcome.stage.value if outcome.stage else None})"
        )
        return failure_response(outcome)

    return JSONResponse(status_code=200, content=outcome.model_dump(by_alias=True))

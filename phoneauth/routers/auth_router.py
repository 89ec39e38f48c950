# phoneauth/routers/auth_router.py
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response

from ..application.services import Authenticated, Authenticator, Failed, Redirect
from ..exceptions import APIException, MissingSuccessRedirect, create_success_response
from ..schemas import AuthStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_authenticator(request: Request) -> Authenticator:
    return request.app.state.authenticator


def to_redirect_response(redirect: Redirect) -> Response:
    response = RedirectResponse(url=redirect.target, status_code=303)
    if redirect.cookie:
        response.headers.append("set-cookie", redirect.cookie)
    return response


@router.post("/login")
async def login(request: Request):
    """Submit a phone number (sends a code) or a phone number plus code (signs in)"""
    authenticator = get_authenticator(request)
    form = await request.form()
    try:
        result = await run_in_threadpool(
            authenticator.authenticate,
            "phone",
            request,
            dict(form),
            success_redirect=request.app.state.success_redirect,
            failure_redirect=request.app.state.failure_redirect,
        )
    except MissingSuccessRedirect as e:
        logger.error(f"Login route misconfigured: {e.message}")
        raise APIException(status_code=500, detail="Authentication is not configured")

    if isinstance(result, Redirect):
        return to_redirect_response(result)
    if isinstance(result, Failed):
        headers = {"set-cookie": result.cookie} if result.cookie else None
        raise APIException(status_code=401, detail=result.message, headers=headers)
    if isinstance(result, Authenticated):
        return JSONResponse(content=create_success_response({"user": result.principal}))
    raise TypeError(f"Unexpected authentication result: {result!r}")


@router.get("/status")
def status(request: Request):
    """Report whether the session is signed in and surface the login flashes"""
    authenticator = get_authenticator(request)
    principal = authenticator.is_authenticated(request)
    flashes = authenticator.read_flashes(request)
    data = AuthStatus(
        authenticated=principal is not None,
        user=principal,
        pending_phone=flashes.pending_phone,
        error=flashes.error,
    )
    response = JSONResponse(content=create_success_response(data.model_dump()))
    response.headers.append("set-cookie", flashes.cookie)
    return response


@router.post("/logout")
def logout(request: Request):
    return to_redirect_response(get_authenticator(request).logout(request, redirect_to="/"))

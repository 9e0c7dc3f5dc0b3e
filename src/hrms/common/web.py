from __future__ import annotations

import logging
from functools import wraps

from flask import flash, redirect, render_template, request, session, url_for

from ..core.context import RequestContext
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, PersistenceError
from .security import CSRF_SESSION_KEY, validate_csrf_token

logger = logging.getLogger(__name__)


def current_context() -> RequestContext:
    role = session.get("role")
    try:
        role = Role(role) if role else None
    except ValueError:
        role = None
    user_id = session.get("user_id")
    return RequestContext(
        user_id=int(user_id) if user_id is not None else None,
        role=role,
        csrf_token=session.get(CSRF_SESSION_KEY),
    )


def render_forbidden():
    current_user = {"name": session.get("name"), "role": session.get("role")}
    return render_template("403.html", current_user=current_user), 403


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            flash("Please log in to continue.", "warning")
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapper


def role_required(role: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return redirect(url_for("login"))
            if session.get("role") != role.value:
                logger.warning("Role %s required, user %s has %s", role.value, session.get("user_id"), session.get("role"))
                return render_forbidden()
            return view(*args, **kwargs)

        return wrapper

    return decorator


def csrf_protect(view):
    """Reject state-changing requests whose token does not match the session."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if request.method == "POST":
            try:
                validate_csrf_token(current_context().csrf_token, request.form.get("csrf_token"))
            except AuthorizationError:
                logger.warning("CSRF token mismatch for user %s on %s", session.get("user_id"), request.path)
                return render_template("400.html", message="Invalid request. Please reload the page and try again."), 400
        return view(*args, **kwargs)

    return wrapper


def no_cache_headers() -> dict:
    return {
        "Cache-Control": "no-cache, no-store, max-age=0",
        "Pragma": "no-cache",
    }


GENERIC_ERROR_MESSAGE = "Something went wrong while saving your request. Please try again."


def flash_error(error: Exception) -> None:
    """Map one error to exactly one user-facing message.

    Call from inside an ``except`` block so unexpected errors keep their traceback in the log.
    """
    if not isinstance(error, DomainError):
        logger.exception("Unexpected error on %s", request.path)
        flash(GENERIC_ERROR_MESSAGE, "danger")
    elif isinstance(error, PersistenceError):
        flash(GENERIC_ERROR_MESSAGE, "danger")
    else:
        category = "danger" if isinstance(error, AuthorizationError) else "warning"
        flash(str(error), category)

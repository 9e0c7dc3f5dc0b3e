from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.security import issue_csrf_token
from ..common.web import csrf_protect
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, PersistenceError
from ..container import Container

logger = logging.getLogger(__name__)


def landing_endpoint(role: str | None) -> str:
    return "hr_timesheets" if role == Role.HR.value else "timesheet"


def register(app: Flask, container: Container) -> None:
    app.jinja_env.globals["csrf_token"] = lambda: issue_csrf_token(session)

    @app.route("/", methods=["GET", "POST"], endpoint="login")
    @csrf_protect
    def login():
        if "user_id" in session:
            return redirect(url_for(landing_endpoint(session.get("role"))))

        if request.method == "POST":
            login_key = request.form.get("login_key", "")
            password = request.form.get("password", "")

            try:
                s_user = container.auth_service.authenticate(login_key, password)

                session.clear()
                session["user_id"] = s_user.user_id
                session["username"] = s_user.username
                session["name"] = s_user.display_name
                session["role"] = s_user.role.value
                issue_csrf_token(session)

                flash("Login successful!", "success")
                return redirect(url_for(landing_endpoint(s_user.role.value)))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except PersistenceError:
                flash("Unable to log in right now. Please try again.", "danger")
            except Exception:
                logger.exception("Unexpected error during login")
                flash("Unable to log in right now. Please try again.", "danger")

        return render_template("login.html")

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        flash("You have been logged out.", "info")
        return redirect(url_for("login"))

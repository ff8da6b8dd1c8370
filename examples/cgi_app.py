"""
=============================================================================
EXAMPLE: SESSION-BACKED CGI SITE
=============================================================================

A small site with public pages, a login form, a protected dashboard and
logout, served as a CGI program.

    GET  /                    public, HTML
    GET  /about               public, text
    GET  /redirect            307 → /about
    GET  /user/:username      path binder + ?foo= query parameter
    GET  /auth/login          form with CSRF token and flash error
    POST /auth/login          check credentials, new session id, 303 → /dashboard
    GET  /auth/logout         delete the session, 302 → /auth/login
    GET  /dashboard           login required

=============================================================================
TRYING IT WITHOUT A WEB SERVER
=============================================================================

    REQUEST_METHOD=GET PATH_INFO=/user/alice QUERY_STRING=foo=bar \\
        python examples/cgi_app.py

    Status: 200 OK
    Content-Type: text/plain; charset=utf-8
    Content-Length: 27

    User Path: alice
    foo = bar

Or through the package entry point:

    python -m flightdeck examples.cgi_app:app --list-routes

Demo login: alice@example.com / wonderland

=============================================================================
"""

import hashlib
import html
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from flightdeck import (
    AppConfig,
    Application,
    HTTPStatus,
    csrf_protect,
    require_login,
    session_flights,
)


def hash_password(password: str) -> str:
    """Demo only. Use a real password hash (argon2, bcrypt) in production."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


@dataclass
class SiteState:
    # email → (user id, username, password hash)
    users: Dict[str, Tuple[int, str, str]] = field(default_factory=lambda: {
        "alice@example.com": (9876, "alice", hash_password("wonderland")),
    })

    def authenticate(self, email: str, password: str) -> Optional[Tuple[int, str]]:
        record = self.users.get(email)
        if record is None or record[2] != hash_password(password):
            return None
        return record[0], record[1]


app = Application(AppConfig.from_env(), state=SiteState())
load, save = session_flights()


@app.get("/", name="home")
def home(request, response, context):
    response.html(
        "<h1>Welcome</h1>"
        '<p><a href="/about">About</a> · <a href="/dashboard">Dashboard</a></p>'
    )


@app.get("/about")
def about(request, response, context):
    response.write("About Page\n")


@app.get("/redirect")
def redirect_to_about(request, response, context):
    response.redirect("/about")


@app.get("/user/:username", name="user")
def user_page(request, response, context):
    response.write(f"User Path: {request.path_params['username']}\n")
    foo = request.query_params.get("foo")
    if foo is not None:
        response.write(f"foo = {foo}\n")


# ─────────────────────────────────────────────────────────────────────────
# AUTH
# ─────────────────────────────────────────────────────────────────────────

auth = app.group("/auth", pre=[load], post=[save])


@auth.get("/login", pre=[csrf_protect])
def login_form(request, response, context):
    session = context.get_session()
    data = session.get_data()

    if data.is_authenticated:
        response.redirect("/dashboard", HTTPStatus.FOUND)
        return

    error = data.get_error("form")
    if error is not None:
        data.clear_errors()
        session.mark_modified()

    error_html = f'<p class="error">{html.escape(error)}</p>' if error else ""
    response.html(
        "<h1>Log in</h1>"
        f"{error_html}"
        '<form method="post" action="/auth/login">'
        f'<input type="hidden" name="csrf_token" value="{html.escape(data.csrf_token)}">'
        '<input name="email" type="email">'
        '<input name="password" type="password">'
        "<button>Log in</button>"
        "</form>"
    )


@auth.post("/login", pre=[csrf_protect])
def login_submit(request, response, context):
    session = context.get_session()
    data = session.get_data()

    email = request.form.get("email", "").strip()
    password = request.form.get("password", "")

    user = context.state.authenticate(email, password) if email and password else None
    if user is None:
        data.set_error("form", "Invalid email or password")
        session.mark_modified()
        response.redirect("/auth/login", HTTPStatus.SEE_OTHER)
        return

    # Fresh id and CSRF token after login.
    session = context.rotate_session()
    data = session.get_data()
    data.user_id, data.username = user
    response.redirect("/dashboard", HTTPStatus.SEE_OTHER)


@auth.get("/logout")
def logout(request, response, context):
    context.get_session().mark_deleted()
    response.redirect("/auth/login", HTTPStatus.FOUND)


@app.get("/dashboard", pre=[load, require_login("/auth/login")], post=[save])
def dashboard(request, response, context):
    data = context.get_session().get_data()
    response.html(
        f"<h1>Dashboard</h1><p>Signed in as {html.escape(data.username or '')}</p>"
        '<p><a href="/auth/logout">Log out</a></p>'
    )


if __name__ == "__main__":
    app.run()

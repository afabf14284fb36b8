"""Login/register portal with view toggling through UI.get()."""

from sculptor.engine import Sculptor

BUTTON = {
    "width": "100%",
    "padding": "12px",
    "color": "#fff",
    "border": "none",
    "borderRadius": "4px",
    "cursor": "pointer",
}


def _shared_styles(app: Sculptor) -> None:
    app.shared_class(
        "auth-container",
        {
            "width": "350px",
            "padding": "30px",
            "margin": "100px auto",
            "borderRadius": "8px",
            "boxShadow": "0 10px 25px rgba(0,0,0,0.1)",
            "backgroundColor": "#fff",
            "fontFamily": "Segoe UI, Tahoma, Geneva, Verdana, sans-serif",
        },
    )
    app.shared_class(
        "form-input",
        {
            "width": "100%",
            "padding": "12px",
            "margin": "8px 0",
            "border": "1px solid #ccc",
            "borderRadius": "4px",
            "boxSizing": "border-box",
        },
    )
    app.shared_class(
        "toggle-link",
        {
            "color": "#007bff",
            "cursor": "pointer",
            "textAlign": "center",
            "marginTop": "15px",
            "fontSize": "14px",
        },
    )


def _input(app: Sculptor, placeholder: str, kind: str = "text"):
    return (
        app.input()
        .set_attribute("type", kind)
        .set_attribute("placeholder", placeholder)
        .add_class("form-input")
    )


def _toggle(show: str, hide: str) -> str:
    return (
        f"UI.get('{show}').style.display = 'block';"
        f" UI.get('{hide}').style.display = 'none';"
    )


def build(app: Sculptor):
    _shared_styles(app)
    app.state("attempts", 0)

    login = app.div().ref("login").add_class("auth-container")
    login.append(
        app.h2().set_text("Welcome Back"),
        _input(app, "Email", "email"),
        _input(app, "Password", "password"),
        app.button()
        .set_text("Login")
        .scoped_class({**BUTTON, "backgroundColor": "#28a745"})
        .on_click("State.attempts = State.attempts + 1; alert('Attempting Login...');"),
        app.p().bind_text("attempts", "`Attempts: ${val}`"),
        app.div()
        .set_text("Need an account? Register here.")
        .add_class("toggle-link")
        .on_click(_toggle("register", "login")),
    )

    register = (
        app.div()
        .ref("register")
        .add_class("auth-container")
        .set_inline_style({"display": "none"})
    )
    register.append(
        app.h2().set_text("Create Account"),
        _input(app, "Full Name"),
        _input(app, "Email", "email"),
        _input(app, "Password", "password"),
        app.button()
        .set_text("Sign Up")
        .scoped_class({**BUTTON, "backgroundColor": "#007bff"})
        .on_click("() => alert('Account Created Successfully!')"),
        app.div()
        .set_text("Already have an account? Login.")
        .add_class("toggle-link")
        .on_click(_toggle("login", "register")),
    )

    app.oncreate("console.log('Auth UI Initialized.')")
    app.oncreate("() => console.log('Second initialization check.')")
    return [login, register]

"""The demo site: route table, not-found page, and error page.

Each route maps a URL to a fixed (or path-captured) context and a
template. Two routes fail on purpose to exercise the error page.

Run::

    python -m vitrine 3000
"""

from dataclasses import dataclass

from vitrine.app import App
from vitrine.config import AppConfig
from vitrine.errors import AuthenticationError, RequiredFieldError, error_code
from vitrine.http.request import Request
from vitrine.templating.returns import Template

ALTERNATE_LAYOUT = "alternate.html"
PARTIALS_LAYOUT = "layout-partials.html"


@dataclass(frozen=True, slots=True)
class Product:
    name: str
    price: float
    description: str


PRODUCTS: tuple[Product, ...] = (
    Product("Product 1", 19.99, "Description for Product 1"),
    Product("Product 2", 29.99, "Description for Product 2"),
    Product("Product 3", 39.99, "Description for Product 3"),
)

LIST_ITEMS: tuple[str, ...] = ("Item 1", "Item 2", "Item 3", "Item 4")


def create_app(config: AppConfig | None = None) -> App:
    """Build the demo app with every route registered in match order."""
    app = App(config)

    @app.route("/simple")
    def simple():
        return Template(
            "simple.html",
            layout=False,
            value1="Example Value 1",
            value2="Example Value 2",
        )

    @app.route("/")
    def home():
        return Template("home.html", title="Home Page")

    @app.route("/saymyname/{fname}/{lname}")
    def say_my_name(fname: str, lname: str):
        return Template("say-name.html", fname=fname, lname=lname)

    @app.route("/saymyname2/{fname}/{lname}")
    def say_my_name_alternate(fname: str, lname: str):
        return Template("say-name.html", layout=ALTERNATE_LAYOUT, fname=fname, lname=lname)

    @app.route("/partials-example")
    def partials_example():
        return Template("say-name.html", layout=PARTIALS_LAYOUT, fname="John", lname="Doe")

    # {% for %} over a list of strings
    @app.route("/list")
    def item_list():
        return Template("list.html", items=list(LIST_ITEMS))

    # {% for %} over records, prices through format_currency_brl
    @app.route("/products")
    def products():
        return Template("products.html", products=list(PRODUCTS))

    @app.route("/products-partials")
    def products_partials():
        return Template("products-partials.html", layout=PARTIALS_LAYOUT, products=list(PRODUCTS))

    @app.route("/profile")
    def profile():
        return Template("profile.html", isLoggedIn=True, username="JaneDoe", isAdmin=False)

    @app.route("/unless-example")
    def unless_example():
        return Template("unless-example.html", isLoggedIn=False, username="Guest")

    @app.route("/error-a")
    def error_a():
        raise AuthenticationError("User or password does not match")

    @app.route("/error-b")
    def error_b():
        raise RequiredFieldError("A required field is missing")

    @app.error(404)
    def not_found():
        return Template("not-found.html")

    # The failure is already logged with its traceback; only the code is shown.
    @app.error(500)
    def server_error(request: Request, exc: Exception):
        return Template("error.html", code=error_code(exc)), 500

    return app


app = create_app()

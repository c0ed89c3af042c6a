"""
Frontend HTML routes.

Serves the Jinja2 page shells.  The pages carry no data themselves; the
browser script (static/js/app.js) fills them from the JSON API.

Routes:
    GET /         → index.html   (landing page with live total)
    GET /explore  → explore.html (search, filter dropdowns, pagination)
    GET /add      → add.html     (creation form)
"""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from utils.query import MAX_PAGE_SIZE

router = APIRouter(tags=["frontend"])

# Templates instance is set by create_app() after mounting.
_templates: Jinja2Templates | None = None

# Cards per page on the explore view
EXPLORE_PAGE_SIZE = 12


def set_templates(t: Jinja2Templates) -> None:
    global _templates
    _templates = t


def _tmpl() -> Jinja2Templates:
    if _templates is None:
        raise RuntimeError("Templates not initialised, call set_templates() first")
    return _templates


def _page(request: Request, name: str, active: str, **context) -> HTMLResponse:
    return _tmpl().TemplateResponse(
        request,
        name,
        {"active": active, "api_base": "/api", **context},
    )


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def index(request: Request) -> HTMLResponse:
    """Landing page."""
    return _page(request, "index.html", "home")


@router.get("/explore", response_class=HTMLResponse, include_in_schema=False)
def explore(request: Request) -> HTMLResponse:
    """Browse view; initial filter values may come from the query string."""
    params = request.query_params
    initial = {
        "search": params.get("search", ""),
        "industry": params.get("industry", ""),
        "valueChainStep": params.get("valueChainStep", ""),
        "department": params.get("department", ""),
    }
    return _page(
        request, "explore.html", "explore",
        initial=initial,
        page_size=min(EXPLORE_PAGE_SIZE, MAX_PAGE_SIZE),
    )


@router.get("/add", response_class=HTMLResponse, include_in_schema=False)
def add(request: Request) -> HTMLResponse:
    """New use case form."""
    return _page(request, "add.html", "add")

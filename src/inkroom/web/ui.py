"""Page routes for the drawing board front end."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any
from urllib.parse import quote

from litestar import Response, get
from litestar.connection import Request  # noqa: TC002
from litestar.exceptions import NotFoundException
from litestar.params import Dependency
from litestar.response import File, Redirect

from inkroom.auth.guards import current_username

ROOM_PAGE = "room.html"
INDEX_PAGE = "index.html"

# Provided by the plugin; None when the front end is not bundled.
StaticDir = Annotated[Path | None, Dependency(skip_validation=True)]


def _page(static_dir: Path | None, name: str) -> File:
    if static_dir is None or not (static_dir / name).is_file():
        msg = f"Page {name!r} is not available"
        raise NotFoundException(msg)
    return File(path=static_dir / name, content_disposition_type="inline")


@get("/", include_in_schema=False)
async def index_page(static_dir: StaticDir) -> File:
    """Serve the lobby page."""
    return _page(static_dir, INDEX_PAGE)


@get("/room/{room_id:str}", include_in_schema=False)
async def room_page(request: Request[Any, Any, Any], room_id: str, static_dir: StaticDir) -> Response:
    """Serve the room page to logged-in visitors.

    Anyone else is sent back to the lobby with the room preselected and a
    login prompt.
    """
    if current_username(request) is None:
        return Redirect(path=f"/?room={quote(room_id, safe='')}&needLogin=1")
    return _page(static_dir, ROOM_PAGE)

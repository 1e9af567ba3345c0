"""Browser paths served by the single-page client.

Any GET outside ``/api`` lands here; every other unmatched request gets a
plain 404. The path is matched against
``CLIENT_ROUTES`` in order (first match wins) so the server can answer with
the right status: unknown paths resolve to ``NotFound`` and get a 404 even
though the client shell is still returned.
"""

from dataclasses import dataclass, field
from pathlib import Path

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import FileResponse, JSONResponse

from lawoffice.core import config

router = APIRouter(include_in_schema=False)

NOT_FOUND_VIEW = 'NotFound'
# Other methods are routed here too so unmatched requests get 404, not 405.
FALLBACK_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE']


@dataclass(frozen=True)
class ClientRoute:
    pattern: str
    view: str
    defaults: dict[str, str] = field(default_factory=dict)

    @property
    def segments(self) -> list[str]:
        return _split(self.pattern)


@dataclass(frozen=True)
class ViewMatch:
    view: str
    params: dict[str, str]

    @property
    def found(self) -> bool:
        return self.view != NOT_FOUND_VIEW


CLIENT_ROUTES = (
    ClientRoute('/', 'HomePage'),
    ClientRoute('/escritorio', 'OfficePage'),
    ClientRoute('/advogado', 'LawyerPage'),
    ClientRoute('/areas-atuacao', 'PracticeAreasPage'),
    ClientRoute('/artigos', 'ArticlesPage'),
    ClientRoute('/contato', 'ContactPage'),
    ClientRoute('/dashboard/pages/editor/home', 'PageEditorPage', {'page': 'home'}),
    ClientRoute('/dashboard/pages/editor/office', 'PageEditorPage', {'page': 'office'}),
    ClientRoute('/dashboard/pages/editor/lawyer', 'PageEditorPage', {'page': 'lawyer'}),
    ClientRoute('/dashboard/pages/editor/practice-areas', 'PageEditorPage', {'page': 'practice-areas'}),
    ClientRoute('/dashboard/articles/new', 'ArticleEditorPage'),
    ClientRoute('/dashboard/articles/:id/edit', 'ArticleEditorPage'),
    ClientRoute('/dashboard/articles', 'ArticlesListPage'),
    ClientRoute('/dashboard', 'DashboardPage'),
)


def _split(path: str) -> list[str]:
    return [segment for segment in path.split('/') if segment]


def _match(route: ClientRoute, segments: list[str]) -> dict[str, str] | None:
    pattern = route.segments
    if len(pattern) != len(segments):
        return None

    params = dict(route.defaults)
    for expected, actual in zip(pattern, segments):
        if expected.startswith(':'):
            params[expected[1:]] = actual
        elif expected != actual:
            return None
    return params


def resolve_view(path: str) -> ViewMatch:
    segments = _split(path.split('?', 1)[0])
    for route in CLIENT_ROUTES:
        params = _match(route, segments)
        if params is not None:
            return ViewMatch(view=route.view, params=params)
    return ViewMatch(view=NOT_FOUND_VIEW, params={})


def _static_file(dist_dir: Path, path: str) -> Path | None:
    candidate = (dist_dir / path).resolve()
    if not path or not candidate.is_relative_to(dist_dir.resolve()):
        return None
    return candidate if candidate.is_file() else None


@router.api_route('/{full_path:path}', methods=FALLBACK_METHODS)
def client_fallback(full_path: str, request: Request):
    if request.method != 'GET' or full_path == 'api' or full_path.startswith('api/'):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Not found')

    match = resolve_view('/' + full_path)
    status_code = status.HTTP_200_OK if match.found else status.HTTP_404_NOT_FOUND

    if config.FRONTEND_DIST_DIR:
        dist_dir = Path(config.FRONTEND_DIST_DIR)
        asset = _static_file(dist_dir, full_path)
        if asset is not None:
            return FileResponse(asset)
        index = dist_dir / 'index.html'
        if index.is_file():
            return FileResponse(index, status_code=status_code)

    return JSONResponse({'view': match.view, 'params': match.params}, status_code=status_code)

"""HTTP application: the resource controller, its middleware and model."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from werkzeug.exceptions import HTTPException, NotFound
from werkzeug.routing import Map, Rule
from werkzeug.wrappers import Request, Response

from rootservice.manager import Manager

WSGIApp = Callable[[dict, Callable[..., Any]], Iterable[bytes]]

BLOCKED_ORIGIN = "www.some-evil-place.com"
RESOURCE_PATH = "/root/v1/resource"

GENERIC_HELLO = (
    "Hello, this is a generic hello message from the SayHello controller"
)
ANOTHER_HELLO = "Hi there, this is another hello from the SayHello Controller"

_HTML = "text/html; charset=utf-8"


class Model:
    """Database access for the resource controller."""

    def __init__(self) -> None:
        self.msg = ""
        self.connection: dict[str, Any] | None = None
        self.schema: str | None = None

    def connect(
        self,
        db_name: str,
        db_host: str,
        db_port: int,
        db_user: str,
        db_password: str,
    ) -> bool:
        """Record the connection parameters; True on success."""
        self.connection = {
            "database_name": db_name,
            "host": db_host,
            "port": db_port,
            "user": db_user,
            "password": db_password,
        }
        self.msg = f"connected to {db_name} at {db_host}:{db_port}"
        return True

    def init_schema(self, content: str) -> bool:
        """Keep the schema described by ``content``; True on success."""
        self.schema = content
        return True

    def destroy(self) -> None:
        """Release the model's connection and schema."""
        self.connection = None
        self.schema = None
        self.msg = ""


class SecurityMiddleware:
    """Rejects requests from a blocked origin and adds CORS headers."""

    def __init__(self, app: WSGIApp) -> None:
        self.app = app

    def __call__(self, environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        origin = environ.get("HTTP_ORIGIN", "")
        if BLOCKED_ORIGIN in origin:
            return NotFound()(environ, start_response)

        def with_cors(status, headers, exc_info=None):
            headers = list(headers) + [
                ("Access-Control-Allow-Origin", "*"),
                ("Access-Control-Allow-Credentials", "true"),
            ]
            return start_response(status, headers, exc_info)

        return self.app(environ, with_cors)


class AuthFilter:
    """Turns any failure of the wrapped application into a 401 response."""

    def __init__(self, app: WSGIApp) -> None:
        self.app = app

    @staticmethod
    def _error_response() -> Response:
        response = Response(b"", status=401, content_type="application/json")
        response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    def __call__(self, environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        captured: dict[str, Any] = {}
        parts: list[bytes] = []

        def capture(status, headers, exc_info=None):
            captured["status"] = status
            captured["headers"] = list(headers)
            return parts.append

        try:
            body = self.app(environ, capture)
            try:
                parts.extend(body)
            finally:
                close = getattr(body, "close", None)
                if close is not None:
                    close()
            if "status" not in captured:
                raise RuntimeError("application did not start a response")
        except Exception:
            return self._error_response()(environ, start_response)

        start_response(captured["status"], captured["headers"])
        return parts


class ResourceController:
    """Serves ``/root/v1/resource`` for GET, POST, PUT and DELETE."""

    def __init__(self) -> None:
        self.objects: Manager[object] = Manager(object)
        self.model = Model()
        self._routes = Map(
            [
                Rule(RESOURCE_PATH, endpoint="get", methods=["GET"]),
                Rule(RESOURCE_PATH, endpoint="post", methods=["POST"]),
                Rule(RESOURCE_PATH, endpoint="put", methods=["PUT"]),
                Rule(RESOURCE_PATH, endpoint="delete", methods=["DELETE"]),
            ]
        )
        self._handlers: dict[str, Callable[[Request], Response]] = {
            "get": self._get,
            "post": self._post,
            "put": self._put,
            "delete": self._delete,
        }

    def _get(self, request: Request) -> Response:
        return Response(GENERIC_HELLO, content_type=_HTML)

    def _post(self, request: Request) -> Response:
        return Response(ANOTHER_HELLO, content_type=_HTML)

    def _put(self, request: Request) -> Response:
        return Response(GENERIC_HELLO, content_type=_HTML)

    def _delete(self, request: Request) -> Response:
        return Response(ANOTHER_HELLO, content_type=_HTML)

    def __call__(self, environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        request = Request(environ)
        adapter = self._routes.bind_to_environ(environ)
        try:
            endpoint, _ = adapter.match()
            response = self._handlers[endpoint](request)
        except HTTPException as exc:
            return exc(environ, start_response)
        return response(environ, start_response)


def create_app() -> WSGIApp:
    """The full application: controller behind the auth filter and middleware."""
    return SecurityMiddleware(AuthFilter(ResourceController()))
"""Path deriver — turn route file names into HTTP methods and URL paths.

File naming convention (extension stripped)::

    get.py                   -> GET  <dir path>
    get-users.py             -> GET  /users
    post-login.py            -> POST /login
    get-[id].py              -> GET  /:id
    get-[userId]-posts.py    -> GET  /:userId/posts
    get-[userId]-[postId].py -> GET  /:userId/:postId

The directory path accumulated from ancestor folders is joined in front of
the fragment, and the configured prefix is prepended to the result:
``users/posts/get-[id].py`` with prefix ``/api`` -> ``GET /api/users/posts/:id``.
"""

import re
from dataclasses import dataclass

from autoroute._errors import RouteNameError
from autoroute._types import HttpMethod, RouteKey, RoutePath

# HTTP method tokens recognised as file name prefixes, in match order
HTTP_METHODS: tuple[HttpMethod, ...] = (
    "get",
    "post",
    "put",
    "delete",
    "patch",
    "head",
    "options",
)

# Source extensions the scanner treats as route modules
ROUTE_SUFFIXES: tuple[str, ...] = (".py", ".pyw")

_PARAM_RE = re.compile(r"\[(\w+)\]")
_EMPTY_PARAM = "[]"
_SLASHES_RE = re.compile(r"/+")


@dataclass(frozen=True, slots=True)
class DerivedRoute:
    """Method and path resolved from a single route file.

    Attributes:
        method: Lower-case HTTP method token (``get``, ``post``...).
        path: Final route path including the prefix.

    """

    method: HttpMethod
    path: RoutePath

    @property
    def key(self) -> RouteKey:
        """Canonical ``METHOD PATH`` identity used for duplicate detection."""
        return route_key(self.method, self.path)


def strip_suffix(file_name: str) -> str:
    """Remove a recognised route extension from *file_name*."""
    for suffix in ROUTE_SUFFIXES:
        if file_name.endswith(suffix):
            return file_name[: -len(suffix)]
    return file_name


def is_route_file(file_name: str) -> bool:
    """Return True if *file_name* carries a recognised route extension."""
    return file_name.endswith(ROUTE_SUFFIXES)


def is_method_name(name: str) -> bool:
    """Return True if *name* equals an HTTP method token (case-insensitive)."""
    return name.lower() in HTTP_METHODS


def parse_route_filename(file_name: str) -> tuple[HttpMethod, str]:
    """Split a route file name into its HTTP method and raw fragment.

    ``get.py`` is a method-only file and yields an empty fragment.

    Raises:
        RouteNameError: If the name does not start with a method token
            followed by ``-``, or contains an empty ``[]`` parameter.

    """
    stem = strip_suffix(file_name)

    if stem in HTTP_METHODS:
        return stem, ""

    method = next((m for m in HTTP_METHODS if stem.startswith(m + "-")), None)
    if method is None:
        msg = (
            "File name must be a valid HTTP method or start with method- "
            f"({'|'.join(HTTP_METHODS)})"
        )
        raise RouteNameError(msg)

    if _EMPTY_PARAM in stem:
        msg = "Empty parameters not allowed [], use [id] instead of []"
        raise RouteNameError(msg)

    return method, stem[len(method) + 1 :]


def convert_params(fragment: str) -> str:
    """Rewrite bracket parameters into ``:name`` path segments.

    ``[id]`` -> ``:id``, ``[userId]-posts`` -> ``:userId/posts``,
    ``[userId]-[postId]`` -> ``:userId/:postId``.  Plain dashes between
    literals are kept (``user-profile`` stays ``user-profile``).

    """
    return _PARAM_RE.sub(r":\1", fragment).replace("-:", "/:")


def join_route_path(base_path: str, fragment: str) -> RoutePath:
    """Join the directory path and a converted fragment into a clean path.

    Collapses repeated slashes, guarantees one leading slash, and strips a
    trailing slash unless the path is the root ``/``.

    """
    full_path = f"{base_path}/{fragment}" if fragment else base_path
    full_path = _SLASHES_RE.sub("/", full_path)
    if not full_path.startswith("/"):
        full_path = "/" + full_path
    if len(full_path) > 1 and full_path.endswith("/"):
        full_path = full_path[:-1]
    return full_path


def apply_prefix(prefix: str, full_path: RoutePath) -> RoutePath:
    """Prepend *prefix* to *full_path*.

    A method-only file at the scan root has the path ``/`` and registers at
    the bare prefix (``/api``), or at ``/`` when there is no prefix.

    """
    if full_path == "/":
        return prefix or "/"
    return prefix + full_path


def route_key(method: HttpMethod, path: RoutePath) -> RouteKey:
    """Build the ``METHOD PATH`` key for *method* and *path*."""
    return f"{method.upper()} {path}"


def derive_route(file_name: str, base_path: str, prefix: str) -> DerivedRoute:
    """Resolve *file_name* inside *base_path* to its method and final path.

    Raises:
        RouteNameError: If the file name breaks the naming grammar.

    """
    method, fragment = parse_route_filename(file_name)
    full_path = join_route_path(base_path, convert_params(fragment))
    return DerivedRoute(method=method, path=apply_prefix(prefix, full_path))

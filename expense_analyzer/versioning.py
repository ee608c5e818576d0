"""
API version resolution.

A request may name its version in the URL segment (``/api/v1/...``), the
``X-Api-Version`` header or the ``api-version`` query parameter. All supplied
values must agree; when none is supplied the default version applies.
"""
import re
from typing import Callable, List, Optional

from fastapi import HTTPException, Request, status

SUPPORTED_VERSIONS = ("1.0", "2.0")
DEFAULT_VERSION = "1.0"
VERSION_HEADER = "X-Api-Version"
VERSION_QUERY_PARAM = "api-version"
SUPPORTED_VERSIONS_HEADER = "api-supported-versions"

_VERSION_PATTERN = re.compile(r"^v?(\d+)(?:\.(\d+))?$")


def normalize_version(raw: str) -> str:
    """
    Normalize a version string to ``major.minor``.

    ``"1"``, ``"1.0"`` and ``"v1"`` all become ``"1.0"``.

    Raises:
        ValueError: if the value is not a version number
    """
    match = _VERSION_PATTERN.match(raw.strip())
    if not match:
        raise ValueError(f"'{raw}' is not a valid API version")
    major, minor = match.group(1), match.group(2) or "0"
    return f"{int(major)}.{int(minor)}"


def _requested_versions(request: Request) -> List[str]:
    raw_values: List[Optional[str]] = [
        request.path_params.get("version"),
        request.headers.get(VERSION_HEADER),
        request.query_params.get(VERSION_QUERY_PARAM),
    ]
    versions = []
    for raw in raw_values:
        if raw is None or not raw.strip():
            continue
        try:
            versions.append(normalize_version(raw))
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return versions


def resolve_api_version(request: Request) -> str:
    """Return the single API version requested, or the default one."""
    versions = set(_requested_versions(request))
    if len(versions) > 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Ambiguous API version: {', '.join(sorted(versions))}",
        )
    return versions.pop() if versions else DEFAULT_VERSION


def require_api_version(*versions: str) -> Callable[[Request], str]:
    """
    Build a router dependency that only admits the given versions.

    Usage:
        APIRouter(prefix="/api/v{version}/income", dependencies=[Depends(require_api_version("1.0"))])
    """
    allowed = {normalize_version(v) for v in versions}

    def dependency(request: Request) -> str:
        version = resolve_api_version(request)
        if version not in allowed:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unsupported API version '{version}'",
            )
        request.state.api_version = version
        return version

    return dependency

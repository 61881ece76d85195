from __future__ import annotations

import logging
import mimetypes
import os
from pathlib import Path

from starlette.responses import FileResponse

from httptoolkit.core.errors import StaticFileNotFoundError

log = logging.getLogger(__name__)

DIRECTORY_MODE = 0o755


def create_directory_if_not_exist(path: str | os.PathLike[str]) -> None:
    """Create ``path`` and any missing parents; a no-op when it already exists."""
    if not os.path.exists(path):
        os.makedirs(path, mode=DIRECTORY_MODE, exist_ok=True)
        log.debug("Created directory %s", path)


def resolve_static_path(directory: str | os.PathLike[str], file: str) -> Path:
    root = Path(directory).resolve()
    target = (root / file).resolve()
    if root != target and root not in target.parents:
        log.warning("Refusing static file outside %s: %s", root, file)
        raise StaticFileNotFoundError("file not found")
    if not target.is_file():
        raise StaticFileNotFoundError("file not found")
    return target


def download_static_file(
    directory: str | os.PathLike[str],
    file: str,
    display_name: str,
) -> FileResponse:
    """Serve ``directory/file`` as an attachment so browsers download it instead of displaying it."""
    path = resolve_static_path(directory, file)
    media_type, _ = mimetypes.guess_type(display_name)
    if media_type is None:
        media_type, _ = mimetypes.guess_type(path.name)

    return FileResponse(
        path,
        media_type=media_type or "application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{display_name}"'},
    )

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import FileResponse, Response

from httptoolkit.api.deps import get_app_settings, get_tools
from httptoolkit.core.config import Settings
from httptoolkit.schemas.envelope import ResponseEnvelope
from httptoolkit.tools import Tools

router = APIRouter(prefix="")


@router.post("/files/upload")
async def upload_files(
    request: Request,
    rename: bool | None = Query(default=None),
    tools: Tools = Depends(get_tools),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    rename_files = settings.rename_uploads if rename is None else rename
    uploaded = await tools.upload_files(request, settings.upload_dir, rename_files)
    envelope = ResponseEnvelope(message=f"{len(uploaded)} file(s) uploaded", data=uploaded)
    return tools.write_json(status.HTTP_201_CREATED, envelope.to_payload())


@router.post("/files/upload-one")
async def upload_one_file(
    request: Request,
    rename: bool | None = Query(default=None),
    tools: Tools = Depends(get_tools),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    rename_files = settings.rename_uploads if rename is None else rename
    uploaded = await tools.upload_one_file(request, settings.upload_dir, rename_files)
    envelope = ResponseEnvelope(message="file uploaded", data=uploaded)
    return tools.write_json(status.HTTP_201_CREATED, envelope.to_payload())


@router.get("/files/{file_name}/download")
def download_file(
    file_name: str,
    display_name: str | None = Query(default=None, alias="displayName"),
    tools: Tools = Depends(get_tools),
    settings: Settings = Depends(get_app_settings),
) -> FileResponse:
    return tools.download_static_file(settings.upload_dir, file_name, display_name or file_name)

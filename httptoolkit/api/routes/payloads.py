from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import Response

from httptoolkit.api.deps import get_tools
from httptoolkit.schemas.envelope import ResponseEnvelope
from httptoolkit.schemas.payloads import EchoPayload, SlugRequest, SlugResponse
from httptoolkit.tools import Tools

router = APIRouter(prefix="")


@router.post("/json/echo")
async def echo(request: Request, tools: Tools = Depends(get_tools)) -> Response:
    payload = await tools.read_json(request, EchoPayload)
    envelope = ResponseEnvelope(message="received", data=payload)
    return tools.write_json(status.HTTP_200_OK, envelope.to_payload(), headers={"X-Echo": "1"})


@router.post("/slugs")
async def create_slug(request: Request, tools: Tools = Depends(get_tools)) -> Response:
    payload = await tools.read_json(request, SlugRequest)
    slug = SlugResponse(slug=tools.create_slug(payload.text))
    return tools.write_json(status.HTTP_200_OK, ResponseEnvelope(data=slug).to_payload())

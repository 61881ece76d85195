from pydantic import BaseModel, Field


class EchoPayload(BaseModel):
    foo: str = ""


class SlugRequest(BaseModel):
    text: str = ""


class SlugResponse(BaseModel):
    slug: str = Field(min_length=1)

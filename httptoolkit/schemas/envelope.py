from typing import Any

from pydantic import BaseModel


class ResponseEnvelope(BaseModel):
    """Uniform ``{error, message, data}`` body for success and failure responses."""

    error: bool = False
    message: str = ""
    data: Any | None = None

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump(mode="json", by_alias=True)
        if self.data is None:
            payload.pop("data")
        return payload

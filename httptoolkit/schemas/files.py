from pydantic import BaseModel, ConfigDict, Field


class UploadedFile(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    new_file_name: str = Field(alias="newFileName")
    original_file_name: str = Field(alias="originalFileName")
    file_size: int = Field(alias="fileSize", ge=0)

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from s3direct.types import Acl


class PresignPostRequest(BaseModel):
    filename: str = Field(min_length=1)
    content_length: int = Field(gt=0)
    content_type: str = Field(default="binary/octet-stream", min_length=1)
    dest_dir: str = ""
    key: str | None = Field(default=None, min_length=1)
    acl: Acl | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    @field_validator("dest_dir")
    @classmethod
    def strip_dest_dir(cls, value: str) -> str:
        return value.strip().strip("/")


class PresignPostResponse(BaseModel):
    url: str
    fields: dict[str, str]
    object_url: str
    expires_at: datetime
    upload_method: str = "POST"

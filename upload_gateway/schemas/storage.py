from datetime import datetime

from pydantic import BaseModel, Field


class SignUploadRequest(BaseModel):
    filename: str = Field(min_length=1)
    contentType: str | None = None


class SignUploadResponse(BaseModel):
    uploadUrl: str
    key: str
    expiresIn: int


class UploadProxyResponse(BaseModel):
    ok: bool = True
    key: str


class StoredObjectOut(BaseModel):
    key: str
    size: int
    lastModified: datetime | None
    publicUrl: str | None


class ListObjectsResponse(BaseModel):
    items: list[StoredObjectOut]
    truncated: bool = False
    nextContinuationToken: str | None = None

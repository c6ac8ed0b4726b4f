from pydantic import BaseModel


class UploadResult(BaseModel):
    url: str
    image_id: int | None = None


class MultiUploadResult(BaseModel):
    files: list[UploadResult]

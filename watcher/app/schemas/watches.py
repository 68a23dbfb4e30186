from pydantic import BaseModel


class ActiveWatchesResponse(BaseModel):
    count: int
    keys: list[str]
    allow_duplicates: bool

from pydantic import BaseModel


class TableResponse(BaseModel):
    id: int
    number: int
    capacity: int

    class Config:
        from_attributes = True

from pydantic import BaseModel


class TurnResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True

from sqlmodel import SQLModel, Field
from typing import Optional


class CityName(SQLModel, table=True):
    __tablename__ = "new_exchCityNames"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(default="")

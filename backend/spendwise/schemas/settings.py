from pydantic import BaseModel, Field


class SettingsUpdate(BaseModel):
    theme: str | None = None
    language: str | None = None
    currency: str | None = Field(None, min_length=3, max_length=3)
    notifications: bool | None = None


class SettingsResponse(BaseModel):
    theme: str
    language: str
    currency: str
    notifications: bool

    class Config:
        from_attributes = True


class CurrencyResponse(BaseModel):
    code: str
    name: str
    symbol: str
    rate: float

    class Config:
        from_attributes = True

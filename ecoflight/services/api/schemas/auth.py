from pydantic import BaseModel

class LoginIn(BaseModel):
    email: str | None = None
    password: str | None = None
    club_id: str | None = None

class LoginOut(BaseModel):
    success: bool
    token: str
    user: dict

class TokenRelayIn(BaseModel):
    token: str | None = None
    club_id: str | None = None
    reason: str | None = None

class TokenRelayOut(BaseModel):
    success: bool
    reason: str

class MeOut(BaseModel):
    id: str
    email: str | None
    club_id: str | int
    club_name: str | None

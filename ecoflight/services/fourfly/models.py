from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ClubScope:
    """Authenticated user + club, passed explicitly to every data call."""
    user_id: str
    club_id: Any
    access_token: str
    email: str | None = None
    club_name: str | None = None

    def to_public_dict(self) -> dict[str, Any]:
        return {
            "id": self.user_id,
            "email": self.email,
            "club_id": self.club_id,
            "club_name": self.club_name,
        }


@dataclass(frozen=True)
class SignInResult:
    access_token: str
    user: dict

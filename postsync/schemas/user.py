"""User API schemas (JSONPlaceholder wire shape)."""

from pydantic import BaseModel, ConfigDict, Field

from postsync.domain.entities.user import User


class CompanyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    catch_phrase: str = Field(default="", alias="catchPhrase")
    bs: str = ""


class GeoResponse(BaseModel):
    lat: str = ""
    lng: str = ""


class AddressResponse(BaseModel):
    street: str = ""
    suite: str = ""
    city: str = ""
    zipcode: str = ""
    geo: GeoResponse = Field(default_factory=GeoResponse)


class UserResponse(BaseModel):
    """User as returned by the service."""

    id: int
    name: str
    email: str
    username: str = ""
    phone: str = ""
    website: str = ""
    company: CompanyResponse | None = None
    address: AddressResponse | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls.model_validate(user.to_payload())

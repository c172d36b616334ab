"""User domain entity (the owner of posts).

Read-only here: users are fetched and cached, never mutated. Nested company
and address records mirror the remote's wire shape.
"""

from dataclasses import dataclass
from typing import Any

from postsync.domain.entities.post import Identifier


@dataclass(frozen=True)
class Company:
    name: str
    catch_phrase: str = ""
    bs: str = ""


@dataclass(frozen=True)
class Address:
    """Postal address; geo coordinates are kept as the strings the remote sends."""

    street: str = ""
    suite: str = ""
    city: str = ""
    zipcode: str = ""
    lat: str = ""
    lng: str = ""


@dataclass(frozen=True)
class User:
    """Domain entity for a user."""

    id: Identifier
    name: str
    email: str
    username: str = ""
    phone: str = ""
    website: str = ""
    company: Company | None = None
    address: Address | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "User":
        """Build a User from the remote wire shape.

        Only id, name and email are required; company and address are
        optional nested objects (catchPhrase and geo.lat/lng in camelCase).

        Raises:
            KeyError: If a required field is missing.
        """
        company = data.get("company")
        address = data.get("address")
        geo = (address or {}).get("geo") or {}
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            email=str(data["email"]),
            username=str(data.get("username", "")),
            phone=str(data.get("phone", "")),
            website=str(data.get("website", "")),
            company=Company(
                name=str(company.get("name", "")),
                catch_phrase=str(company.get("catchPhrase", "")),
                bs=str(company.get("bs", "")),
            )
            if company
            else None,
            address=Address(
                street=str(address.get("street", "")),
                suite=str(address.get("suite", "")),
                city=str(address.get("city", "")),
                zipcode=str(address.get("zipcode", "")),
                lat=str(geo.get("lat", "")),
                lng=str(geo.get("lng", "")),
            )
            if address
            else None,
        )

    def to_payload(self) -> dict[str, Any]:
        """Wire payload (inverse of from_payload)."""
        payload: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "username": self.username,
            "phone": self.phone,
            "website": self.website,
        }
        if self.company is not None:
            payload["company"] = {
                "name": self.company.name,
                "catchPhrase": self.company.catch_phrase,
                "bs": self.company.bs,
            }
        if self.address is not None:
            payload["address"] = {
                "street": self.address.street,
                "suite": self.address.suite,
                "city": self.address.city,
                "zipcode": self.address.zipcode,
                "geo": {"lat": self.address.lat, "lng": self.address.lng},
            }
        return payload

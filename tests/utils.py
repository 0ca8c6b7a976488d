from dataclasses import dataclass, field
from typing import Any

from dynawire.core.codec.registry import CapabilityRegistry, encodable, decodable

registry = CapabilityRegistry()


@encodable(registry=registry)
@dataclass
class User:
    email: str | None = None
    name: Any = None
    age: Any = None
    admin: bool | None = None


@encodable(registry=registry)
@dataclass
class Name:
    first: str
    last: str


@encodable(registry=registry)
@dataclass
class Profile:
    email: str
    name: Name


@decodable(Profile, registry=registry)
def decode_profile(mapping):
    return Profile(email=mapping["email"], name=Name(**mapping["name"]))


@encodable(only=["items"], registry=registry)
@dataclass
class Nested:
    items: list = field(default_factory=list)
    secret: Any = None


class Point:
    """Implements the structural Encodable/Decodable protocols, no registration."""

    def __init__(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def to_mapping(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_mapping(cls, mapping) -> "Point":
        return cls(mapping["x"], mapping["y"])

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Point) and (self.x, self.y) == (other.x, other.y)


def make_user(**overrides: Any) -> User:
    data = {
        "email": "foo@bar.com",
        "name": {"first": "bob", "last": "bubba"},
        "age": 23,
        "admin": False,
    }
    data.update(overrides)
    return User(**data)

"""
Example 03: Mapping Back and Error Handling

This example maps a DTO back onto the model using the same annotations,
and shows how a failing property is reported.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Annotated

from attr_mapper import Map, MapperConfig, MappingEngine, MappingException, PropertyConverter


class NameConverter(PropertyConverter[tuple[str, str], str]):
    def convert_to(self, source):
        return f"{source[0]} {source[1]}"

    def convert_from(self, destination):
        first, _, last = destination.partition(" ")
        return first, last


@dataclass
class User:
    id: int = 0
    first_name: str = ""
    last_name: str = ""
    birth_date: date | None = None
    email: str = ""


@dataclass
class CreateUserDto:
    given_name: Annotated[str, Map("first_name")] = ""
    family_name: Annotated[str, Map("last_name")] = ""
    email: str = ""
    date_of_birth: Annotated[str, Map("birth_date")] = ""


@dataclass
class UserDto:
    id: str = ""
    full_name: Annotated[str, Map("first_name, last_name", NameConverter)] = ""
    email_address: Annotated[str, Map("email")] = ""


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    engine = MappingEngine(MapperConfig(strict=False))

    print("=== Source-Driven Mapping ===\n")

    create = CreateUserDto("Alice", "Johnson", "alice.johnson@example.com", "1988-03-10")
    user = engine.map_one(create, User)
    print(f"Created: {user}\n")

    dto = UserDto(id="7", full_name="Jane Smith", email_address="jane@example.com")
    user = engine.map_one(dto, User)
    print(f"From DTO: {user}\n")

    print("=== Error Handling ===\n")
    try:
        engine.map_one(UserDto(id="seven"), User)
    except MappingException as e:
        print(f"Mapping error on {e.property_name!r}: {e}")

    print(f"\nCached plans: {engine.cache.keys}")


if __name__ == "__main__":
    main()

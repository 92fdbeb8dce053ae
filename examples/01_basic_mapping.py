"""
Example 01: Convention Mapping

This example maps between classes whose property names match, including
a projection into a plain dict.
"""

from dataclasses import dataclass
from decimal import Decimal

from attr_mapper import map_many, map_one


@dataclass
class User:
    id: int = 0
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    is_active: bool = False
    salary: Decimal = Decimal("0")


@dataclass
class SimpleUserDto:
    id: int = 0
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    is_active: bool = False


def main():
    users = [
        User(1, "John", "Doe", "john.doe@example.com", True, Decimal("75000.50")),
        User(2, "Jane", "Smith", "jane.smith@example.com", False, Decimal("92000.75")),
    ]

    print("=== Convention Mapping ===\n")

    dto = map_one(users[0], SimpleUserDto)
    print(f"map_one result: {dto}\n")

    dtos = map_many(users, SimpleUserDto)
    print(f"map_many result ({len(dtos)} items):")
    for item in dtos:
        print(f"  - {item.first_name} {item.last_name} <{item.email}>")

    # A None source maps to None
    print(f"\nmap_one(None): {map_one(None, SimpleUserDto)}")

    # object or dict targets project every non-None property
    print(f"dict projection: {map_one(users[1], dict)}")


if __name__ == "__main__":
    main()

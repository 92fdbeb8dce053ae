"""
Example 02: Annotations and Converters

This example renames properties, combines two properties into one with a
converter, masks a value with a one-way converter and ignores a property.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Annotated

from attr_mapper import Map, MapIgnore, OneWayConverter, PropertyConverter, map_one


class NameConverter(PropertyConverter[tuple[str, str], str]):
    def convert_to(self, source):
        return f"{source[0]} {source[1]}"

    def convert_from(self, destination):
        first, _, last = destination.partition(" ")
        return first, last


class AgeConverter(PropertyConverter[date, int]):
    def convert_to(self, source):
        today = date.today()
        return today.year - source.year - ((today.month, today.day) < (source.month, source.day))

    def convert_from(self, destination):
        today = date.today()
        return date(today.year - destination, today.month, min(today.day, 28))


class EmailMaskConverter(OneWayConverter[str, str]):
    def convert_to(self, source):
        local, _, domain = source.partition("@")
        masked = f"{local[0]}***{local[-1]}" if len(local) > 2 else "***"
        return f"{masked}@{domain}"


class SalaryFormatter(PropertyConverter[Decimal, str]):
    def convert_to(self, source):
        return f"${source:,.2f}"

    def convert_from(self, destination):
        return Decimal(destination.replace("$", "").replace(",", ""))


@dataclass
class User:
    id: int = 0
    first_name: str = ""
    last_name: str = ""
    birth_date: date | None = None
    email: str = ""
    salary: Decimal = Decimal("0")
    password_hash: str = ""


@dataclass
class UserDto:
    id: int = 0
    full_name: Annotated[str, Map("first_name, last_name", NameConverter)] = ""
    email_address: Annotated[str, Map("email")] = ""
    age: Annotated[int, Map("birth_date", AgeConverter)] = 0
    formatted_salary: Annotated[str, Map("salary", SalaryFormatter)] = ""
    internal_notes: Annotated[str | None, MapIgnore] = None


@dataclass
class UserSummaryDto:
    id: int = 0
    display_name: Annotated[str, Map("first_name, last_name", NameConverter)] = ""
    masked_email: Annotated[str, Map("email", EmailMaskConverter)] = ""


def main():
    user = User(
        id=1,
        first_name="Jane",
        last_name="Smith",
        birth_date=date(1985, 8, 22),
        email="jane.smith@example.com",
        salary=Decimal("92000.75"),
        password_hash="secret",
    )

    print("=== Annotations and Converters ===\n")

    dto = map_one(user, UserDto)
    print(f"Full name:        {dto.full_name}")
    print(f"Age:              {dto.age}")
    print(f"Email address:    {dto.email_address}")
    print(f"Formatted salary: {dto.formatted_salary}")
    print(f"Internal notes:   {dto.internal_notes}\n")

    summary = map_one(user, UserSummaryDto)
    print(f"Summary: {summary.display_name} <{summary.masked_email}>")


if __name__ == "__main__":
    main()

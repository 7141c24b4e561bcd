from __future__ import annotations

from dataclasses import dataclass, field

from .config import DecoderConfig
from .message import decode_nested, parse_message
from .proto_wire import BytesLike, Field, UnknownFieldError

# Example record shapes, laid out like the classic address book message:
#
# message PhoneNumber {
#   1: number (string)
#   2: type   (string)
# }
# message Person {
#   1: name  (string)
#   2: id    (varint)
#   3: phone (repeated PhoneNumber)
# }


@dataclass
class PhoneNumber:
    number: str = ""
    type: str = ""

    def add_field(self, field: Field) -> None:
        if field.number == 1:
            self.number = field.value.as_string()
        elif field.number == 2:
            self.type = field.value.as_string()
        else:
            raise UnknownFieldError(field.number, "PhoneNumber")


@dataclass
class Person:
    name: str = ""
    id: int = 0
    phones: list[PhoneNumber] = field(default_factory=list)

    def add_field(self, field: Field) -> None:
        if field.number == 1:
            self.name = field.value.as_string()
        elif field.number == 2:
            self.id = field.value.as_u64()
        elif field.number == 3:
            self.phones.append(decode_nested(field, PhoneNumber))
        else:
            raise UnknownFieldError(field.number, "Person")


def parse_person(data: BytesLike, *, config: DecoderConfig | None = None) -> Person:
    return parse_message(data, Person, config=config)

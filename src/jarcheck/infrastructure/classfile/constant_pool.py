"""Class file constant pool."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, cast

from jarcheck.domain.exceptions.classfile import MalformedClassError

if TYPE_CHECKING:
    from jarcheck.infrastructure.classfile.stream import ByteReader


class ConstantTag(IntEnum):
    """Constant pool entry tags (JVMS 4.4)."""

    UTF8 = 1
    INTEGER = 3
    FLOAT = 4
    LONG = 5
    DOUBLE = 6
    CLASS = 7
    STRING = 8
    FIELDREF = 9
    METHODREF = 10
    INTERFACE_METHODREF = 11
    NAME_AND_TYPE = 12
    METHOD_HANDLE = 15
    METHOD_TYPE = 16
    DYNAMIC = 17
    INVOKE_DYNAMIC = 18
    MODULE = 19
    PACKAGE = 20


# Payload size of every tag except UTF8 (length-prefixed)
_PAYLOAD_SIZES: dict[ConstantTag, int] = {
    ConstantTag.INTEGER: 4,
    ConstantTag.FLOAT: 4,
    ConstantTag.LONG: 8,
    ConstantTag.DOUBLE: 8,
    ConstantTag.CLASS: 2,
    ConstantTag.STRING: 2,
    ConstantTag.FIELDREF: 4,
    ConstantTag.METHODREF: 4,
    ConstantTag.INTERFACE_METHODREF: 4,
    ConstantTag.NAME_AND_TYPE: 4,
    ConstantTag.METHOD_HANDLE: 3,
    ConstantTag.METHOD_TYPE: 2,
    ConstantTag.DYNAMIC: 4,
    ConstantTag.INVOKE_DYNAMIC: 4,
    ConstantTag.MODULE: 2,
    ConstantTag.PACKAGE: 2,
}

# Tags whose entry occupies two pool slots
_WIDE_TAGS = frozenset({ConstantTag.LONG, ConstantTag.DOUBLE})

# Tags whose payload is a sequence of u2 pool indexes
_INDEX_TAGS = frozenset(
    {
        ConstantTag.CLASS,
        ConstantTag.STRING,
        ConstantTag.FIELDREF,
        ConstantTag.METHODREF,
        ConstantTag.INTERFACE_METHODREF,
        ConstantTag.NAME_AND_TYPE,
        ConstantTag.METHOD_TYPE,
        ConstantTag.MODULE,
        ConstantTag.PACKAGE,
    }
)

METHOD_REF_TAGS = (ConstantTag.METHODREF, ConstantTag.INTERFACE_METHODREF)
_MEMBER_TAGS = (ConstantTag.FIELDREF, *METHOD_REF_TAGS)


@dataclass(frozen=True, slots=True)
class Constant:
    """One decoded pool entry.

    Attributes:
        tag: Entry kind
        value: str for UTF8, tuple of pool indexes for reference kinds,
            raw payload bytes otherwise
    """

    tag: ConstantTag
    value: str | tuple[int, ...] | bytes


@dataclass(frozen=True, slots=True)
class MemberRef:
    """Resolved Fieldref / Methodref / InterfaceMethodref.

    Attributes:
        owner: Internal name of the declaring class (may be an array descriptor)
        name: Member name
        descriptor: Field or method descriptor
    """

    owner: str
    name: str
    descriptor: str


def decode_modified_utf8(raw: bytes) -> str:
    """Decode JVM modified UTF-8.

    NUL is encoded as C0 80 and supplementary characters as surrogate
    pairs; lone surrogates are kept as-is.
    """
    try:
        text = raw.replace(b"\xc0\x80", b"\x00").decode("utf-8", "surrogatepass")
        # Round-trip through UTF-16 to join surrogate pairs
        return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")
    except UnicodeError as e:
        raise MalformedClassError(f"invalid modified UTF-8 constant: {e}") from e


class ConstantPool:
    """Indexed constant pool with typed accessors.

    Index 0 and the slot after every LONG/DOUBLE are unusable.
    All lookups validate index and tag: FAIL-FIRST with MalformedClassError.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: list[Constant | None]) -> None:
        self._entries = entries

    def __len__(self) -> int:
        """Declared pool count (highest index + 1)."""
        return len(self._entries)

    @classmethod
    def parse(cls, reader: ByteReader) -> ConstantPool:
        """Read constant_pool_count and all entries.

        Args:
            reader: Positioned right after the class file version

        Returns:
            Parsed pool

        Raises:
            MalformedClassError: On unknown tags or truncated data
        """
        count = reader.u2()
        if count == 0:
            raise MalformedClassError("constant_pool_count must be >= 1")

        entries: list[Constant | None] = [None] * count
        index = 1
        while index < count:
            offset = reader.offset
            raw_tag = reader.u1()
            try:
                tag = ConstantTag(raw_tag)
            except ValueError as e:
                raise MalformedClassError(
                    f"unknown constant tag {raw_tag} at #{index} (offset {offset})"
                ) from e

            entries[index] = Constant(tag, _read_payload(reader, tag))

            if tag in _WIDE_TAGS:
                if index + 1 >= count:
                    raise MalformedClassError(f"{tag.name} constant #{index} overflows the pool")
                index += 2
            else:
                index += 1

        return cls(entries)

    def get(self, index: int, *tags: ConstantTag) -> Constant:
        """Entry at index, checked against the expected tags.

        Raises:
            MalformedClassError: If index is unusable or the tag does not match
        """
        if not 0 < index < len(self._entries):
            raise MalformedClassError(
                f"constant pool index {index} out of range 1..{len(self._entries) - 1}"
            )
        entry = self._entries[index]
        if entry is None:
            raise MalformedClassError(f"constant pool index {index} is an unusable slot")
        if tags and entry.tag not in tags:
            expected = "/".join(t.name for t in tags)
            raise MalformedClassError(f"constant #{index} is {entry.tag.name}, expected {expected}")
        return entry

    def utf8(self, index: int) -> str:
        # UTF8 payloads are always decoded to str by _read_payload
        return cast(str, self.get(index, ConstantTag.UTF8).value)

    def class_name(self, index: int) -> str:
        """Internal name (com/acme/Foo or array descriptor) of a CLASS entry."""
        (name_index,) = self._indexes(index, ConstantTag.CLASS)
        return self.utf8(name_index)

    def member_ref(self, index: int, *tags: ConstantTag) -> MemberRef:
        """Resolve a Fieldref/Methodref/InterfaceMethodref entry.

        tags narrows the accepted kinds; all three are accepted if empty.
        """
        class_index, nat_index = self._indexes(index, *(tags or _MEMBER_TAGS))
        name_index, descriptor_index = self._indexes(nat_index, ConstantTag.NAME_AND_TYPE)
        return MemberRef(
            owner=self.class_name(class_index),
            name=self.utf8(name_index),
            descriptor=self.utf8(descriptor_index),
        )

    def _indexes(self, index: int, *tags: ConstantTag) -> tuple[int, ...]:
        # Callers pass only _INDEX_TAGS, whose payloads are index tuples
        return cast(tuple[int, ...], self.get(index, *tags).value)


def _read_payload(reader: ByteReader, tag: ConstantTag) -> str | tuple[int, ...] | bytes:
    """Read one entry payload after its tag byte."""
    match tag:
        case ConstantTag.UTF8:
            return decode_modified_utf8(reader.read(reader.u2()))
        case ConstantTag.METHOD_HANDLE:
            # reference_kind u1, reference_index u2
            return (reader.u1(), reader.u2())
        case ConstantTag.DYNAMIC | ConstantTag.INVOKE_DYNAMIC:
            # bootstrap_method_attr_index is not a pool index, keep raw
            return reader.read(_PAYLOAD_SIZES[tag])
        case _ if tag in _INDEX_TAGS:
            return tuple(reader.u2() for _ in range(_PAYLOAD_SIZES[tag] // 2))
        case _:
            return reader.read(_PAYLOAD_SIZES[tag])

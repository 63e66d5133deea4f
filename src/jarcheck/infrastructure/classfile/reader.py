"""Class file structure reader (JVMS chapter 4)."""

from __future__ import annotations

from dataclasses import dataclass

from jarcheck.domain.exceptions.classfile import MalformedClassError
from jarcheck.infrastructure.classfile.constant_pool import ConstantPool
from jarcheck.infrastructure.classfile.stream import ByteReader

CLASS_MAGIC = 0xCAFEBABE
CODE_ATTRIBUTE = "Code"


@dataclass(frozen=True, slots=True)
class MemberInfo:
    """Field or method declaration.

    Attributes:
        access_flags: Raw access flags
        name: Member name
        descriptor: Field or method descriptor
        code: Bytecode of the Code attribute (methods with a body only)
    """

    access_flags: int
    name: str
    descriptor: str
    code: bytes | None = None


@dataclass(frozen=True, slots=True)
class ClassFile:
    """Parsed compiled class.

    Names are dotted (com.acme.Foo).

    Attributes:
        major_version: Class file major version (52 = Java 8)
        minor_version: Class file minor version
        access_flags: Raw class access flags
        name: Declared class name
        super_name: Superclass, None only for java.lang.Object
        interfaces: Directly implemented interfaces
        fields: Field declarations
        methods: Method declarations
        constant_pool: Pool the method bodies refer into
    """

    major_version: int
    minor_version: int
    access_flags: int
    name: str
    super_name: str | None
    interfaces: tuple[str, ...]
    fields: tuple[MemberInfo, ...]
    methods: tuple[MemberInfo, ...]
    constant_pool: ConstantPool

    @property
    def method_bodies(self) -> tuple[bytes, ...]:
        """Code arrays of methods that have one (not abstract/native)."""
        return tuple(m.code for m in self.methods if m.code is not None)


def read_class(data: bytes) -> ClassFile:
    """Parse class file bytes.

    Args:
        data: Contents of a .class file

    Returns:
        Parsed ClassFile

    Raises:
        TypeError: If data is None
        MalformedClassError: If data is not a well-formed class file
    """
    if data is None:
        raise TypeError("data must not be None")

    reader = ByteReader(data)

    magic = reader.u4()
    if magic != CLASS_MAGIC:
        raise MalformedClassError(f"bad magic 0x{magic:08X}")

    minor_version = reader.u2()
    major_version = reader.u2()
    pool = ConstantPool.parse(reader)

    access_flags = reader.u2()
    name = _dotted(pool.class_name(reader.u2()))
    super_index = reader.u2()
    super_name = _dotted(pool.class_name(super_index)) if super_index else None
    interfaces = tuple(_dotted(pool.class_name(reader.u2())) for _ in range(reader.u2()))

    fields = tuple(_read_member(reader, pool, with_code=False) for _ in range(reader.u2()))
    methods = tuple(_read_member(reader, pool, with_code=True) for _ in range(reader.u2()))

    # Class-level attributes carry no instruction references
    for _ in range(reader.u2()):
        _read_attribute(reader, pool)

    if reader.remaining:
        raise MalformedClassError(f"{reader.remaining} trailing bytes after class structure")

    return ClassFile(
        major_version=major_version,
        minor_version=minor_version,
        access_flags=access_flags,
        name=name,
        super_name=super_name,
        interfaces=interfaces,
        fields=fields,
        methods=methods,
        constant_pool=pool,
    )


def _dotted(internal_name: str) -> str:
    return internal_name.replace("/", ".")


def _read_member(reader: ByteReader, pool: ConstantPool, *, with_code: bool) -> MemberInfo:
    """Read field_info / method_info, keeping the Code attribute of methods."""
    access_flags = reader.u2()
    name = pool.utf8(reader.u2())
    descriptor = pool.utf8(reader.u2())

    code: bytes | None = None
    for _ in range(reader.u2()):
        attr_name, body = _read_attribute(reader, pool)
        if with_code and attr_name == CODE_ATTRIBUTE:
            if code is not None:
                raise MalformedClassError(f"method {name}{descriptor} has two Code attributes")
            code = _code_array(body, name)

    return MemberInfo(access_flags=access_flags, name=name, descriptor=descriptor, code=code)


def _read_attribute(reader: ByteReader, pool: ConstantPool) -> tuple[str, bytes]:
    name = pool.utf8(reader.u2())
    body = reader.read(reader.u4())
    return name, body


def _code_array(body: bytes, method_name: str) -> bytes:
    """Extract the bytecode from a Code attribute body.

    Exception table and nested attributes are not needed for references.
    """
    code_reader = ByteReader(body)
    code_reader.skip(4)  # max_stack, max_locals
    code_length = code_reader.u4()
    if code_length == 0:
        raise MalformedClassError(f"method {method_name} has empty Code attribute")
    return code_reader.read(code_length)

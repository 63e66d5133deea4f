"""Type name normalization."""


def normalize_type_name(name: str) -> str:
    """Canonical dotted form used as a graph key.

    Converts internal separators (/) to dots, strips array markers ([)
    and unwraps an object descriptor (Lcom/acme/Foo;). Array-of-X is
    always reduced to X.

    Args:
        name: Dotted name, internal name or field descriptor

    Returns:
        Dotted type name, e.g. "com.acme.Foo"

    Raises:
        ValueError: If name is empty or only array markers
    """
    if not name:
        raise ValueError("type name must not be empty")

    element = name.lstrip("[")
    # ';' is illegal in class names, so L...; is always a descriptor wrapper
    if len(element) > 2 and element.startswith("L") and element.endswith(";"):
        element = element[1:-1]

    if not element:
        raise ValueError(f"type name has no element type: {name!r}")

    return element.replace("/", ".")


def class_entry_path(type_name: str) -> str:
    """Archive entry path for a dotted type name: com/acme/Foo.class."""
    if not type_name:
        raise ValueError("type name must not be empty")
    return type_name.replace(".", "/") + ".class"

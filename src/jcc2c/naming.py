"""Map JaCoCo VM names onto Cobertura names and source file paths."""

from __future__ import annotations

DEFAULT_SOURCE_EXTENSION = "java"


def guess_filename(class_name: str, extension: str = DEFAULT_SOURCE_EXTENSION) -> str:
    """Return the source file of a class, e.g. ``com/acme/Foo$Inner`` -> ``com/acme/Foo.java``."""
    outer, _, _ = class_name.partition("$")
    return f"{outer}.{extension}"


def dotted_name(vm_name: str) -> str:
    """Return ``com/acme/util`` as ``com.acme.util``."""
    return vm_name.replace("/", ".")


def basename(path: str) -> str:
    return path.rsplit("/", maxsplit=1)[-1]

"""Qualified object names, engine-level defaults and name comparison."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


@dataclass(frozen=True)
class Identifier:
    """A four-part qualified name: server, database, schema and local name.

    Components are optional from the left only. Once a component is present,
    every component to its right must be present too, so ``Identifier(None,
    "db", None, "t")`` is rejected.
    """

    server: str | None = None
    database: str | None = None
    schema: str | None = None
    local_name: str = ""

    def __post_init__(self) -> None:
        if _is_blank(self.local_name):
            raise ValueError("An identifier requires a non-empty local name.")
        seen_present = False
        for label, part in zip(("server", "database", "schema"), (self.server, self.database, self.schema)):
            if part is not None and _is_blank(part):
                raise ValueError(f"Identifier {label} must not be blank when provided.")
            if part is not None:
                seen_present = True
            elif seen_present:
                raise ValueError(
                    f"Identifier {label} is missing while a component to its left is present; "
                    "components may only be omitted from the left."
                )

    @classmethod
    def create_qualified(cls, *parts: str | None) -> Identifier:
        """Build an identifier from right-aligned parts.

        The last part is the local name, the one before it the schema, and so
        on. Leading ``None`` parts are skipped.

        >>> str(Identifier.create_qualified("dbo", "users"))
        'dbo.users'
        >>> str(Identifier.create_qualified(None, None, "users"))
        'users'
        """
        if not parts or len(parts) > 4:
            raise ValueError(f"Expected between 1 and 4 name parts, got {len(parts)}.")
        padded = (None,) * (4 - len(parts)) + tuple(parts)
        server, database, schema, local_name = padded
        if local_name is None:
            raise ValueError("An identifier requires a non-empty local name.")
        return cls(server=server, database=database, schema=schema, local_name=local_name)

    @property
    def parts(self) -> tuple[str | None, str | None, str | None, str]:
        return (self.server, self.database, self.schema, self.local_name)

    @property
    def is_fully_qualified(self) -> bool:
        return self.server is not None

    def with_local_name(self, local_name: str) -> Identifier:
        """Return a sibling identifier sharing this identifier's qualification."""
        return Identifier(self.server, self.database, self.schema, local_name)

    def __str__(self) -> str:
        return ".".join(part for part in self.parts if part is not None)


def _gap_free_suffix(parts: Iterable[str | None]) -> tuple[str | None, ...]:
    """Keep the longest run of populated parts ending at the local name."""
    result: list[str | None] = []
    broken = False
    for part in reversed(list(parts)):
        if part is None:
            broken = True
        result.append(None if broken else part)
    return tuple(reversed(result))


@dataclass(frozen=True)
class IdentifierDefaults:
    """The server, database and schema a connection implicitly operates in."""

    server: str | None = None
    database: str | None = None
    schema: str | None = None

    def qualify(self, identifier: Identifier) -> Identifier:
        """Complete *identifier* with these defaults.

        Components already present on the identifier are kept. Qualifying an
        already qualified identifier yields an equal identifier.
        """
        if identifier is None:
            raise ValueError("Cannot qualify a missing identifier.")
        parts = (
            identifier.server or self.server,
            identifier.database or self.database,
            identifier.schema or self.schema,
            identifier.local_name,
        )
        return Identifier.create_qualified(*_gap_free_suffix(parts))


class IdentifierComparer:
    """Compares identifiers using ordinal or ordinal-ignore-case rules.

    When *defaults* are given, partial identifiers are completed against them
    before comparison. Without defaults a partial identifier only equals
    another identifier with exactly the same populated components.
    """

    def __init__(self, *, ignore_case: bool = False, defaults: IdentifierDefaults | None = None) -> None:
        self.ignore_case = ignore_case
        self.defaults = defaults

    def normalize(self, value: str | None) -> str | None:
        if value is None:
            return None
        return value.casefold() if self.ignore_case else value

    def key(self, identifier: Identifier) -> tuple[str | None, ...]:
        """Return a hashable key such that equal identifiers share a key."""
        if identifier is None:
            raise ValueError("Cannot compute a key for a missing identifier.")
        if self.defaults is not None:
            identifier = self.defaults.qualify(identifier)
        return tuple(self.normalize(part) for part in identifier.parts)

    def equals(self, left: Identifier | None, right: Identifier | None) -> bool:
        if left is None or right is None:
            return left is right
        return self.key(left) == self.key(right)

    def name_key(self, name: str) -> str:
        """Key for a bare local name such as a column or constraint name."""
        if _is_blank(name):
            raise ValueError("Cannot compute a key for a missing or blank name.")
        return self.normalize(name)  # type: ignore[return-value]

    def with_defaults(self, defaults: IdentifierDefaults | None) -> IdentifierComparer:
        return IdentifierComparer(ignore_case=self.ignore_case, defaults=defaults)

    def __repr__(self) -> str:
        return f"IdentifierComparer(ignore_case={self.ignore_case}, defaults={self.defaults!r})"


ORDINAL = IdentifierComparer()
ORDINAL_IGNORE_CASE = IdentifierComparer(ignore_case=True)


class NameLookup(Generic[T]):
    """Read-only name -> object map honouring a comparer's case policy.

    Catalog queries report member columns and constraints by bare name; this
    maps those names back to the objects assembled for the same table.
    """

    def __init__(self, items: Iterable[T], name_of: Callable[[T], str | None], comparer: IdentifierComparer) -> None:
        self._comparer = comparer
        self._items: dict[Hashable, T] = {}
        for item in items:
            name = name_of(item)
            if not _is_blank(name):
                self._items[comparer.name_key(name)] = item

    def get(self, name: str | None) -> T | None:
        if _is_blank(name):
            return None
        return self._items.get(self._comparer.name_key(name))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and not _is_blank(name) and self._comparer.name_key(name) in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items.values())

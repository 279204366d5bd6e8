"""Identifier resolution strategies.

A strategy turns a user-supplied name into an ordered list of candidate names
to try against a catalog. Strategies never touch the catalog themselves; the
providers try each candidate in turn and stop at the first one that exists.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from schematic_core.identifier import Identifier


def _dedupe(candidates: list[Identifier]) -> list[Identifier]:
    seen: set[Identifier] = set()
    result: list[Identifier] = []
    for candidate in candidates:
        if candidate not in seen:
            seen.add(candidate)
            result.append(candidate)
    return result


class IdentifierResolutionStrategy(ABC):
    """Produces the ordered candidates used to resolve an identifier."""

    @abstractmethod
    def get_resolution_order(self, identifier: Identifier) -> list[Identifier]:
        """Return candidate names, most likely match first."""


class DefaultIdentifierResolutionStrategy(IdentifierResolutionStrategy):
    """Tries the identifier exactly as given."""

    def get_resolution_order(self, identifier: Identifier) -> list[Identifier]:
        if identifier is None:
            raise ValueError("Cannot resolve a missing identifier.")
        return [identifier]


class _CaseFoldingResolutionStrategy(IdentifierResolutionStrategy):
    """Tries the exact name, then variants with schema and local name folded.

    Engines that fold unquoted identifiers store them in a single case, so a
    name typed in the "wrong" case usually refers to the folded object.
    """

    fold: Callable[[str], str]

    def get_resolution_order(self, identifier: Identifier) -> list[Identifier]:
        if identifier is None:
            raise ValueError("Cannot resolve a missing identifier.")

        fold = type(self).fold
        folded_local = fold(identifier.local_name)
        folded_schema = fold(identifier.schema) if identifier.schema is not None else None

        candidates = [
            identifier,
            Identifier(identifier.server, identifier.database, identifier.schema, folded_local),
            Identifier(identifier.server, identifier.database, folded_schema, identifier.local_name),
            Identifier(identifier.server, identifier.database, folded_schema, folded_local),
        ]
        return _dedupe(candidates)


class OracleIdentifierResolutionStrategy(_CaseFoldingResolutionStrategy):
    """Oracle stores unquoted identifiers in upper case."""

    fold = str.upper


class PostgreSqlIdentifierResolutionStrategy(_CaseFoldingResolutionStrategy):
    """PostgreSQL stores unquoted identifiers in lower case."""

    fold = str.lower

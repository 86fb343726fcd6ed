"""
Ordered, immutable collections of metadata facts.
"""
from typing import Iterable, Iterator, List

from .facts import FactKind, MetadataFact


class MetadataCollection:
    """
    The facts declared on one class or one method, in declaration order.

    Queries never mutate the collection; they return a new sub-collection.
    """

    def __init__(self, facts: Iterable[MetadataFact] = ()):
        self._facts = tuple(facts)

    @classmethod
    def from_list(cls, facts: Iterable[MetadataFact]) -> "MetadataCollection":
        return cls(facts)

    def __iter__(self) -> Iterator[MetadataFact]:
        return iter(self._facts)

    def __len__(self) -> int:
        return len(self._facts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MetadataCollection):
            return NotImplemented
        return self._facts == other._facts

    def __repr__(self) -> str:
        return f"MetadataCollection({list(self._facts)!r})"

    def as_list(self) -> List[MetadataFact]:
        return list(self._facts)

    def is_empty(self) -> bool:
        return not self._facts

    def is_not_empty(self) -> bool:
        return bool(self._facts)

    def merge_with(self, other: "MetadataCollection") -> "MetadataCollection":
        """
        Combine two collections.

        Args:
            other: Collection whose facts are appended after this one's

        Returns:
            A new collection holding this collection's facts followed by ``other``'s
        """
        return MetadataCollection(self._facts + other._facts)

    def filter(self, *kinds: FactKind) -> "MetadataCollection":
        """Return the facts whose kind is one of ``kinds``, keeping their order."""
        return MetadataCollection(fact for fact in self._facts if fact.kind in kinds)

    def first(self) -> MetadataFact:
        return self._facts[0]

    def is_covers(self) -> "MetadataCollection":
        return self.filter(FactKind.COVERS)

    def is_covers_class(self) -> "MetadataCollection":
        return self.filter(FactKind.COVERS_CLASS)

    def is_covers_method(self) -> "MetadataCollection":
        return self.filter(FactKind.COVERS_METHOD)

    def is_covers_function(self) -> "MetadataCollection":
        return self.filter(FactKind.COVERS_FUNCTION)

    def is_covers_nothing(self) -> "MetadataCollection":
        return self.filter(FactKind.COVERS_NOTHING)

    def is_covers_default_class(self) -> "MetadataCollection":
        return self.filter(FactKind.COVERS_DEFAULT_CLASS)

    def is_uses(self) -> "MetadataCollection":
        return self.filter(FactKind.USES)

    def is_uses_class(self) -> "MetadataCollection":
        return self.filter(FactKind.USES_CLASS)

    def is_uses_method(self) -> "MetadataCollection":
        return self.filter(FactKind.USES_METHOD)

    def is_uses_function(self) -> "MetadataCollection":
        return self.filter(FactKind.USES_FUNCTION)

    def is_uses_default_class(self) -> "MetadataCollection":
        return self.filter(FactKind.USES_DEFAULT_CLASS)

    def is_group(self) -> "MetadataCollection":
        return self.filter(FactKind.GROUP)

    def is_test(self) -> "MetadataCollection":
        return self.filter(FactKind.TEST)

    def is_before(self) -> "MetadataCollection":
        return self.filter(FactKind.BEFORE)

    def is_after(self) -> "MetadataCollection":
        return self.filter(FactKind.AFTER)

    def is_before_class(self) -> "MetadataCollection":
        return self.filter(FactKind.BEFORE_CLASS)

    def is_after_class(self) -> "MetadataCollection":
        return self.filter(FactKind.AFTER_CLASS)

    def is_pre_condition(self) -> "MetadataCollection":
        return self.filter(FactKind.PRE_CONDITION)

    def is_post_condition(self) -> "MetadataCollection":
        return self.filter(FactKind.POST_CONDITION)

    def is_backup_globals(self) -> "MetadataCollection":
        return self.filter(FactKind.BACKUP_GLOBALS)

    def is_backup_static_properties(self) -> "MetadataCollection":
        return self.filter(FactKind.BACKUP_STATIC_PROPERTIES)

    def is_preserve_global_state(self) -> "MetadataCollection":
        return self.filter(FactKind.PRESERVE_GLOBAL_STATE)

    def is_requires(self) -> "MetadataCollection":
        return self.filter(FactKind.REQUIRES)

    def is_depends(self) -> "MetadataCollection":
        return self.filter(FactKind.DEPENDS)

"""Category strategies for SchemaDraft."""

from schemadraft.core.types import LocalType
from schemadraft.strategies.base import CategoryStrategy
from schemadraft.strategies.many_to_any import ManyToAnyStrategy
from schemadraft.strategies.many_to_many import ManyToManyStrategy
from schemadraft.strategies.many_to_one import FileStrategy, ManyToOneStrategy
from schemadraft.strategies.one_to_many import OneToManyStrategy
from schemadraft.strategies.standard import PresentationStrategy, StandardStrategy

STRATEGIES: dict[LocalType, type[CategoryStrategy]] = {
    LocalType.STANDARD: StandardStrategy,
    LocalType.PRESENTATION: PresentationStrategy,
    LocalType.FILE: FileStrategy,
    LocalType.M2O: ManyToOneStrategy,
    LocalType.O2M: OneToManyStrategy,
    LocalType.M2M: ManyToManyStrategy,
    LocalType.FILES: ManyToManyStrategy,
    LocalType.TRANSLATIONS: ManyToManyStrategy,
    LocalType.M2A: ManyToAnyStrategy,
}

__all__ = [
    "STRATEGIES",
    "CategoryStrategy",
    "StandardStrategy",
    "PresentationStrategy",
    "FileStrategy",
    "ManyToOneStrategy",
    "OneToManyStrategy",
    "ManyToManyStrategy",
    "ManyToAnyStrategy",
]

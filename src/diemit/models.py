from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Final, TypeAlias

MAX_LEVEL_ATTRIBUTE: Final[str] = "maxLevel"
FACTORY_NAME_ATTRIBUTE: Final[str] = "factoryName"

ComponentTypeName: TypeAlias = str
"""Name of a DI component type, for example ``"RootComponent"``."""

LevelMap: TypeAlias = Mapping[ComponentTypeName, int]
"""Component type name mapped to its distance from the provider's own component."""


@dataclass(frozen=True, slots=True)
class ProcessedProperty:
    """Describe one dependency a provider exposes and the component it is read from."""

    name: str
    """Attribute name on both the dependency protocol and the source component."""

    type_name: str
    """Rendered type annotation of the property."""

    source_component_type: ComponentTypeName
    """Component type that owns the value."""


class AuxiliarySourceType(Enum):
    """Select the indirection used to reach a property of a pluginized component."""

    PLUGIN_EXTENSION = "plugin_extension"
    """Read the property from the component's plugin extension."""

    NON_CORE_COMPONENT = "non_core_component"
    """Read the property from the component's non-core component."""


@dataclass(frozen=True, slots=True)
class PluginizedProcessedProperty:
    """Describe a processed property that may come from a pluginized component."""

    data: ProcessedProperty
    auxiliary_source_name: str | None = None
    """Type name of the plugin extension or non-core component, if any."""
    auxiliary_source_type: AuxiliarySourceType | None = None


@dataclass(frozen=True, slots=True)
class ProcessedDependencyProvider:
    """Describe an analysed dependency provider ready for code emission.

    ``level_map`` holds every component type the provider reads from and how
    many ancestors away from the provider's own component it sits; ``0`` is the
    component itself. Sequences are normalized to tuples and the level map to a
    read-only mapping so instances stay immutable and property signatures are
    hashable.
    """

    dependency_name: str
    """Name of the dependency protocol the provider satisfies."""

    path: tuple[ComponentTypeName, ...]
    """Component path from the root component to the consumer."""

    level_map: LevelMap = field(default_factory=dict)
    processed_properties: tuple[ProcessedProperty, ...] = ()
    is_empty_dependency: bool = False
    """Whether the provider requires nothing and needs no generated code."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))
        object.__setattr__(self, "level_map", MappingProxyType(dict(self.level_map)))
        object.__setattr__(self, "processed_properties", tuple(self.processed_properties))

    @property
    def path_string(self) -> str:
        """Return the registration path, for example ``^->RootComponent->LoggedInComponent``."""
        return "->".join(("^", *self.path))


@dataclass(frozen=True, slots=True)
class PluginizedProcessedDependencyProvider:
    """Wrap provider data with the pluginized property signature used for grouping."""

    data: ProcessedDependencyProvider
    processed_properties: tuple[PluginizedProcessedProperty, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "processed_properties", tuple(self.processed_properties))


@dataclass(frozen=True, slots=True)
class SerializedProvider:
    """Emitted text and metadata handed to the aggregation stage."""

    content: str = ""
    """Shared declaration or factory source text; empty when nothing is generated."""

    registration: str = ""
    """Registration statement; empty for shared declarations."""

    attributes: Mapping[str, str] = field(default_factory=dict)
    """Metadata keyed by ``maxLevel`` and ``factoryName``."""

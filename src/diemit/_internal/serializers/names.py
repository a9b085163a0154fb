from __future__ import annotations

from dataclasses import dataclass

from diemit._internal.text import component_parameter_name, narrowed, short_digest
from diemit.models import ProcessedDependencyProvider
from diemit.options import EmitOptions


@dataclass(frozen=True, slots=True)
class ProviderClassName:
    """Name of a group's shared provider class.

    Computed once per group and handed to every serializer that needs to agree
    on it: the class declaration, factory names and factory bodies.
    """

    value: str

    def __str__(self) -> str:
        return self.value


class DependencyProviderClassNameSerializer:
    """Derive the shared class name of a provider group from its representative."""

    def __init__(
        self,
        *,
        provider: ProcessedDependencyProvider,
        group_index: int,
        options: EmitOptions,
    ) -> None:
        self._provider = provider
        self._group_index = group_index
        self._options = options

    def serialize(self) -> str:
        return self.class_name().value

    def class_name(self) -> ProviderClassName:
        signature = ";".join(
            f"{item.name}:{item.type_name}@{item.source_component_type}"
            for item in self._provider.processed_properties
        )
        digest = short_digest(
            "|".join(
                (
                    self._provider.dependency_name,
                    self._provider.path_string,
                    signature,
                    str(self._group_index),
                ),
            ),
            length=self._options.digest_length,
        )
        return ProviderClassName(f"{self._provider.dependency_name}{digest}Provider")


class DependencyProviderParamsSerializer:
    """Render the keyword arguments that hand source components to a provider class.

    Components are listed in sorted type-name order. Level ``0`` passes the
    consumer's own component; level ``n`` walks ``n`` parents up with the
    ``parent<n>`` helper of the generated module.
    """

    def __init__(self, *, provider: ProcessedDependencyProvider, options: EmitOptions) -> None:
        self._provider = provider
        self._options = options

    def serialize(self) -> str:
        arguments = []
        for component_type in sorted(self._provider.level_map):
            level = self._provider.level_map[component_type]
            lookup = "component" if level == 0 else f"parent{level}(component)"
            value = narrowed(lookup, type_name=component_type, cast_mode=self._options.cast_mode)
            arguments.append(f"{component_parameter_name(component_type)}={value}")
        return ", ".join(arguments)


class DependencyProviderFuncNameSerializer:
    """Derive a factory function name from the group's class name and a provider's params.

    Providers of one group whose params render identically get the same name.
    """

    def __init__(
        self,
        *,
        class_name: ProviderClassName,
        params: str,
        options: EmitOptions,
    ) -> None:
        self._class_name = class_name
        self._params = params
        self._options = options

    def serialize(self) -> str:
        digest = short_digest(
            f"{self._class_name.value}{self._params}",
            length=self._options.digest_length,
        )
        return f"factory{digest}"

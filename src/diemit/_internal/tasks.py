from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Hashable, Iterable, Sequence
from enum import Enum
from typing import ClassVar, Generic, TypeVar

from diemit._internal.grouping import ProviderGroup, group_providers
from diemit._internal.serializers.attributes import calculate_attributes
from diemit._internal.serializers.declarations import (
    DependencyProviderBaseInitSerializer,
    DependencyProviderClassSerializer,
    PluginizedPropertiesSerializer,
    PropertiesSerializer,
    SourceComponentsSerializer,
)
from diemit._internal.serializers.factories import (
    DependencyProviderFuncSerializer,
    DependencyProviderRegistrationSerializer,
)
from diemit._internal.serializers.names import (
    DependencyProviderClassNameSerializer,
    DependencyProviderFuncNameSerializer,
    DependencyProviderParamsSerializer,
    ProviderClassName,
)
from diemit._internal.serializers.protocol import SerializerProtocol
from diemit.models import (
    PluginizedProcessedDependencyProvider,
    ProcessedDependencyProvider,
    SerializedProvider,
)
from diemit.options import DEFAULT_OPTIONS, EmitOptions

logger = logging.getLogger(__name__)

ProviderT = TypeVar("ProviderT")


class TaskId(Enum):
    """Identify the serializer tasks of the code emission stage."""

    DEPENDENCY_PROVIDER_SERIALIZER = "dependency_provider_serializer"
    PLUGINIZED_DEPENDENCY_PROVIDER_SERIALIZER = "pluginized_dependency_provider_serializer"


class _ProviderSerializerTask(ABC, Generic[ProviderT]):
    """Group providers by property signature and serialize every group.

    Inputs are captured at construction and never mutated, so ``execute`` can
    run repeatedly, or from several threads at once, with identical results.
    """

    task_id: ClassVar[TaskId]

    def __init__(
        self,
        providers: Iterable[ProviderT],
        *,
        options: EmitOptions | None = None,
    ) -> None:
        self._providers = tuple(providers)
        self._options = DEFAULT_OPTIONS if options is None else options

    def execute(self) -> list[SerializedProvider]:
        """Serialize the providers into emittable records.

        Records are ordered group by group in first-seen signature order: the
        group's shared class, unless its representative is an empty dependency,
        followed by one record per member in input order.
        """
        groups = group_providers(self._providers, signature=self._signature)
        result: list[SerializedProvider] = []
        for group_index, group in enumerate(groups):
            result.extend(self._serialize_group(group=group, group_index=group_index))
        self._log_strategy(groups=groups, result=result)
        return result

    @abstractmethod
    def _signature(self, provider: ProviderT) -> Sequence[Hashable]: ...

    @abstractmethod
    def _data(self, provider: ProviderT) -> ProcessedDependencyProvider: ...

    @abstractmethod
    def _properties_serializer(self, provider: ProviderT) -> SerializerProtocol: ...

    def _serialize_group(
        self,
        *,
        group: ProviderGroup[ProviderT],
        group_index: int,
    ) -> list[SerializedProvider]:
        representative = self._data(group.representative)
        class_name = DependencyProviderClassNameSerializer(
            provider=representative,
            group_index=group_index,
            options=self._options,
        ).class_name()
        logger.debug(
            "Serializing provider group %d: class=%s member_count=%d empty_dependency=%s",
            group_index,
            class_name,
            len(group.members),
            representative.is_empty_dependency,
        )

        result: list[SerializedProvider] = []
        if not representative.is_empty_dependency:
            declaration = self._serialize_class(
                provider=group.representative,
                class_name=class_name,
            )
            result.append(SerializedProvider(content=declaration))
        result.extend(
            self._serialize_member(provider=self._data(member), class_name=class_name)
            for member in group.members
        )
        return result

    def _serialize_class(self, *, provider: ProviderT, class_name: ProviderClassName) -> str:
        data = self._data(provider)
        return DependencyProviderClassSerializer(
            provider=data,
            class_name=class_name,
            properties_serializer=self._properties_serializer(provider),
            source_components_serializer=SourceComponentsSerializer(
                component_types=sorted(data.level_map),
            ),
            init_serializer=DependencyProviderBaseInitSerializer(provider=data),
        ).serialize()

    def _serialize_member(
        self,
        *,
        provider: ProcessedDependencyProvider,
        class_name: ProviderClassName,
    ) -> SerializedProvider:
        params = DependencyProviderParamsSerializer(
            provider=provider,
            options=self._options,
        ).serialize()
        func_name = DependencyProviderFuncNameSerializer(
            class_name=class_name,
            params=params,
            options=self._options,
        ).serialize()

        content = ""
        if not provider.is_empty_dependency:
            content = DependencyProviderFuncSerializer(
                provider=provider,
                class_name=class_name,
                func_name=func_name,
                params=params,
            ).serialize()
        registration = DependencyProviderRegistrationSerializer(
            provider=provider,
            func_name=func_name,
            options=self._options,
        ).serialize()
        return SerializedProvider(
            content=content,
            registration=registration,
            attributes=calculate_attributes(provider=provider, factory_name=func_name),
        )

    def _log_strategy(
        self,
        *,
        groups: Sequence[ProviderGroup[ProviderT]],
        result: Sequence[SerializedProvider],
    ) -> None:
        empty_dependency_count = sum(
            1 for provider in self._providers if self._data(provider).is_empty_dependency
        )
        logger.info(
            (
                "Provider serialization strategy: task=%s provider_count=%d group_count=%d "
                "shared_declaration_count=%d empty_dependency_count=%d record_count=%d"
            ),
            self.task_id.value,
            len(self._providers),
            len(groups),
            len(result) - len(self._providers),
            empty_dependency_count,
            len(result),
        )


class DependencyProviderSerializerTask(_ProviderSerializerTask[ProcessedDependencyProvider]):
    """Serialize non-pluginized providers, grouped by their processed properties."""

    task_id = TaskId.DEPENDENCY_PROVIDER_SERIALIZER

    def _signature(self, provider: ProcessedDependencyProvider) -> Sequence[Hashable]:
        return provider.processed_properties

    def _data(self, provider: ProcessedDependencyProvider) -> ProcessedDependencyProvider:
        return provider

    def _properties_serializer(self, provider: ProcessedDependencyProvider) -> SerializerProtocol:
        return PropertiesSerializer(properties=provider.processed_properties)


class PluginizedDependencyProviderSerializerTask(
    _ProviderSerializerTask[PluginizedProcessedDependencyProvider],
):
    """Serialize pluginized providers, grouped by their pluginized processed properties."""

    task_id = TaskId.PLUGINIZED_DEPENDENCY_PROVIDER_SERIALIZER

    def _signature(self, provider: PluginizedProcessedDependencyProvider) -> Sequence[Hashable]:
        return provider.processed_properties

    def _data(self, provider: PluginizedProcessedDependencyProvider) -> ProcessedDependencyProvider:
        return provider.data

    def _properties_serializer(
        self,
        provider: PluginizedProcessedDependencyProvider,
    ) -> SerializerProtocol:
        return PluginizedPropertiesSerializer(
            properties=provider.processed_properties,
            options=self._options,
        )


def serialize_providers(
    providers: Iterable[ProcessedDependencyProvider],
    *,
    options: EmitOptions | None = None,
) -> list[SerializedProvider]:
    """Serialize non-pluginized providers.

    Args:
        providers: Providers in emission order.
        options: Emission options; defaults apply when omitted.

    """
    return DependencyProviderSerializerTask(providers, options=options).execute()


def serialize_pluginized_providers(
    providers: Iterable[PluginizedProcessedDependencyProvider],
    *,
    options: EmitOptions | None = None,
) -> list[SerializedProvider]:
    """Serialize pluginized providers.

    Args:
        providers: Providers in emission order.
        options: Emission options; defaults apply when omitted.

    """
    return PluginizedDependencyProviderSerializerTask(providers, options=options).execute()

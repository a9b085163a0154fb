from __future__ import annotations

from collections.abc import Sequence

from diemit._internal.serializers.names import ProviderClassName
from diemit._internal.serializers.protocol import SerializerProtocol
from diemit._internal.templates.snippets import SnippetEnvironment
from diemit._internal.templates.templates import (
    INIT_METHOD_TEMPLATE,
    PROPERTY_TEMPLATE,
    PROVIDER_CLASS_TEMPLATE,
    SLOTS_TEMPLATE,
)
from diemit._internal.text import (
    component_attribute_name,
    component_parameter_name,
    indent_block,
    narrowed,
    string_literal,
)
from diemit.models import (
    PluginizedProcessedProperty,
    ProcessedDependencyProvider,
    ProcessedProperty,
)
from diemit.options import EmitOptions

_env = SnippetEnvironment()
_class_snippet = _env.compile(PROVIDER_CLASS_TEMPLATE)
_slots_snippet = _env.compile(SLOTS_TEMPLATE)
_init_snippet = _env.compile(INIT_METHOD_TEMPLATE)
_property_snippet = _env.compile(PROPERTY_TEMPLATE)


def _render_property(*, item: ProcessedProperty, value_expression: str) -> str:
    return _property_snippet.render(
        name=item.name,
        type_name=item.type_name,
        value_expression=value_expression,
    )


class PropertiesSerializer:
    """Render read-only properties that forward to the stored source components."""

    def __init__(self, *, properties: Sequence[ProcessedProperty]) -> None:
        self._properties = tuple(properties)

    def serialize(self) -> str:
        return "\n\n".join(
            _render_property(
                item=item,
                value_expression=(
                    f"self.{component_attribute_name(item.source_component_type)}.{item.name}"
                ),
            )
            for item in self._properties
        )


class PluginizedPropertiesSerializer:
    """Render properties that may be read through a plugin extension or non-core component."""

    def __init__(
        self,
        *,
        properties: Sequence[PluginizedProcessedProperty],
        options: EmitOptions,
    ) -> None:
        self._properties = tuple(properties)
        self._options = options

    def serialize(self) -> str:
        return "\n\n".join(
            _render_property(item=item.data, value_expression=self._value_expression(item))
            for item in self._properties
        )

    def _value_expression(self, item: PluginizedProcessedProperty) -> str:
        source = f"self.{component_attribute_name(item.data.source_component_type)}"
        if item.auxiliary_source_type is not None:
            source = f"{source}.{item.auxiliary_source_type.value}"
            if item.auxiliary_source_name is not None:
                source = narrowed(
                    source,
                    type_name=item.auxiliary_source_name,
                    cast_mode=self._options.cast_mode,
                )
        return f"{source}.{item.data.name}"


class SourceComponentsSerializer:
    """Render the ``__slots__`` that hold a provider's source components."""

    def __init__(self, *, component_types: Sequence[str]) -> None:
        self._component_types = tuple(component_types)

    def serialize(self) -> str:
        names = [
            string_literal(component_attribute_name(component_type))
            for component_type in self._component_types
        ]
        slot_names = f"{names[0]}," if len(names) == 1 else ", ".join(names)
        return _slots_snippet.render(slot_names=slot_names)


class DependencyProviderBaseInitSerializer:
    """Render ``__init__`` storing every source component of the provider."""

    def __init__(self, *, provider: ProcessedDependencyProvider) -> None:
        self._provider = provider

    def serialize(self) -> str:
        component_types = sorted(self._provider.level_map)
        parameters = ", ".join(
            f"{component_parameter_name(component_type)}: {component_type}"
            for component_type in component_types
        )
        assignments = "\n".join(
            f"self.{component_attribute_name(component_type)} = "
            f"{component_parameter_name(component_type)}"
            for component_type in component_types
        )
        return _init_snippet.render(
            parameters=parameters,
            assignments_block=indent_block(assignments) if assignments else "",
        ).strip()


class DependencyProviderClassSerializer:
    """Render the shared provider class declared once per provider group."""

    def __init__(
        self,
        *,
        provider: ProcessedDependencyProvider,
        class_name: ProviderClassName,
        properties_serializer: SerializerProtocol,
        source_components_serializer: SerializerProtocol,
        init_serializer: SerializerProtocol,
    ) -> None:
        self._provider = provider
        self._class_name = class_name
        self._properties_serializer = properties_serializer
        self._source_components_serializer = source_components_serializer
        self._init_serializer = init_serializer

    def serialize(self) -> str:
        properties = self._properties_serializer.serialize()
        return _class_snippet.render(
            class_name=self._class_name.value,
            docstring_block=indent_block(self._docstring()),
            slots_block=indent_block(self._source_components_serializer.serialize()),
            init_method_block=indent_block(self._init_serializer.serialize()),
            properties_block=indent_block(properties) if properties else "",
        ).strip()

    def _docstring(self) -> str:
        line = f"Provide {self._provider.dependency_name}"
        sources = sorted(self._provider.level_map)
        if sources:
            line = f"{line} from {', '.join(sources)}"
        return f'"""{line}."""'

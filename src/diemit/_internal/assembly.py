from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from importlib.metadata import PackageNotFoundError, version

from diemit._internal.serializers.factories import EMPTY_DEPENDENCY_FACTORY_NAME
from diemit._internal.tasks import serialize_pluginized_providers
from diemit._internal.templates.snippets import SnippetEnvironment
from diemit._internal.templates.templates import (
    EMPTY_DEPENDENCY_TEMPLATE,
    IMPORTS_TEMPLATE,
    MODULE_TEMPLATE,
    PARENT_HELPER_TEMPLATE,
    REGISTER_FUNCTION_TEMPLATE,
)
from diemit._internal.text import indent_block, string_literal
from diemit.cast_mode import CastMode
from diemit.models import (
    FACTORY_NAME_ATTRIBUTE,
    MAX_LEVEL_ATTRIBUTE,
    AuxiliarySourceType,
    PluginizedProcessedDependencyProvider,
    PluginizedProcessedProperty,
    ProcessedDependencyProvider,
    ProcessedProperty,
    SerializedProvider,
)
from diemit.options import DEFAULT_OPTIONS, EmitOptions

logger = logging.getLogger(__name__)

REGISTER_FUNCTION_NAME = "register_provider_factories"
_GENERATOR_SOURCE = "diemit._internal.assembly.ProvidersModuleAssembler.assemble"
_DECLARED_CLASS = re.compile(r"^class (?P<name>\w+):", re.MULTILINE)
_CONSTRUCTED_CLASS = re.compile(r"^    return (?P<name>\w+)\(", re.MULTILINE)


class ProvidersModuleAssembler:
    """Assemble serialized providers into one generated Python module.

    The module holds the ``parent<n>`` ancestor helpers needed by the deepest
    ``maxLevel``, the shared empty-dependency factory when any provider
    registers it, every emitted class and factory, ``__all__``, and a
    ``register_provider_factories(registry)`` function running every
    registration statement.

    Use the same ``EmitOptions`` as the tasks that produced the records so the
    registration statements and the function parameter agree on the registry
    name.
    """

    def __init__(
        self,
        *,
        options: EmitOptions | None = None,
        imports: Sequence[str] = (),
    ) -> None:
        self._options = DEFAULT_OPTIONS if options is None else options
        self._imports = tuple(imports)
        env = SnippetEnvironment()
        self._module_snippet = env.compile(MODULE_TEMPLATE)
        self._imports_snippet = env.compile(IMPORTS_TEMPLATE)
        self._parent_helper_snippet = env.compile(PARENT_HELPER_TEMPLATE)
        self._empty_dependency_snippet = env.compile(EMPTY_DEPENDENCY_TEMPLATE)
        self._register_function_snippet = env.compile(REGISTER_FUNCTION_TEMPLATE)

    def assemble(self, providers: Iterable[SerializedProvider]) -> str:
        """Render the generated module for the given records.

        Records may come from several serializer tasks. Shared declarations
        are emitted once per distinct text and factories once per factory
        name, so providers of one group sharing a construction signature
        reuse the first factory emitted for it.

        A group whose first member is an empty dependency has no shared
        declaration, yet its other members still construct the group class.
        Such classes are reported with a warning and the module fails when
        those factories are called.

        Args:
            providers: Serialized providers in emission order.

        """
        records = tuple(providers)
        contents = _content_blocks(records)
        _warn_undeclared_classes(contents)
        registrations = [record.registration for record in records if record.registration]
        max_level = max(
            (
                int(record.attributes[MAX_LEVEL_ATTRIBUTE])
                for record in records
                if MAX_LEVEL_ATTRIBUTE in record.attributes
            ),
            default=0,
        )
        uses_empty_dependency_factory = any(
            record.registration and not record.content and not record.attributes
            for record in records
        )
        factory_names = _unique_ordered(
            record.attributes[FACTORY_NAME_ATTRIBUTE]
            for record in records
            if FACTORY_NAME_ATTRIBUTE in record.attributes
        )
        if uses_empty_dependency_factory:
            factory_names.append(EMPTY_DEPENDENCY_FACTORY_NAME)
        logger.info(
            (
                "Provider module assembly: record_count=%d content_block_count=%d "
                "registration_count=%d max_level=%d uses_empty_dependency_factory=%s"
            ),
            len(records),
            len(contents),
            len(registrations),
            max_level,
            uses_empty_dependency_factory,
        )

        module = self._module_snippet.render(
            module_docstring_block=self._render_module_docstring(
                record_count=len(records),
                registration_count=len(registrations),
                max_level=max_level,
            ),
            imports_block=self._render_imports(),
            helpers_block=self._render_helpers(
                max_level=max_level,
                uses_empty_dependency_factory=uses_empty_dependency_factory,
            ),
            providers_block="\n\n\n".join(contents),
            all_block=self._render_all(factory_names=factory_names),
            register_function_block=self._render_register_function(registrations=registrations),
        )
        return f"{module.strip()}\n"

    def _render_module_docstring(
        self,
        *,
        record_count: int,
        registration_count: int,
        max_level: int,
    ) -> str:
        lines = [
            "Generated DI provider module.",
            "",
            f"Generated by: {_GENERATOR_SOURCE}",
            f"diemit version used for generation: {self._resolve_diemit_version()}",
            "",
            "Generation summary:",
            f"- serialized record count: {record_count}",
            f"- registration count: {registration_count}",
            f"- deepest ancestor level: {max_level}",
            f"- registry name: {self._options.registry_name}",
            f"- cast mode: {self._options.cast_mode.value}",
        ]
        escaped = [line.replace("\\", "\\\\").replace('"""', r"\"\"\"") for line in lines]
        return "\n".join(['"""', *escaped, '"""'])

    def _render_imports(self) -> str:
        return self._imports_snippet.render(
            uses_cast=self._options.cast_mode is CastMode.CAST,
            extra_imports_block="\n".join(self._imports),
        ).strip()

    def _render_helpers(self, *, max_level: int, uses_empty_dependency_factory: bool) -> str:
        blocks = [
            self._parent_helper_snippet.render(level=level, parent_chain=".parent" * level)
            for level in range(1, max_level + 1)
        ]
        if uses_empty_dependency_factory:
            blocks.append(
                self._empty_dependency_snippet.render(func_name=EMPTY_DEPENDENCY_FACTORY_NAME),
            )
        return "\n\n\n".join(blocks)

    def _render_all(self, *, factory_names: list[str]) -> str:
        names = [*factory_names, REGISTER_FUNCTION_NAME]
        lines = ["__all__ = [", *(f"    {string_literal(name)}," for name in names), "]"]
        return "\n".join(lines)

    def _render_register_function(self, *, registrations: list[str]) -> str:
        return self._register_function_snippet.render(
            registry_name=self._options.registry_name,
            registrations_block=indent_block("\n".join(registrations)) if registrations else "",
        ).strip()

    def _resolve_diemit_version(self) -> str:
        try:
            return version("diemit")
        except PackageNotFoundError:
            return "unknown"


def _content_blocks(records: Sequence[SerializedProvider]) -> list[str]:
    # Factory blocks of one name differ only in their path comment; keep the first.
    seen: set[str] = set()
    blocks: list[str] = []
    for record in records:
        if not record.content:
            continue
        key = record.attributes.get(FACTORY_NAME_ATTRIBUTE, record.content)
        if key in seen:
            continue
        seen.add(key)
        blocks.append(record.content)
    return blocks


def _warn_undeclared_classes(contents: Sequence[str]) -> None:
    declared: set[str] = set()
    constructed: list[str] = []
    for block in contents:
        declared.update(match.group("name") for match in _DECLARED_CLASS.finditer(block))
        constructed.extend(match.group("name") for match in _CONSTRUCTED_CLASS.finditer(block))
    for class_name in _unique_ordered(constructed):
        if class_name in declared:
            continue
        logger.warning(
            (
                "Provider factories construct undeclared class %s: its group's first member "
                "is an empty dependency, so no shared declaration was emitted"
            ),
            class_name,
        )


def _unique_ordered(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    unique_values: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        unique_values.append(value)
    return unique_values


def main() -> None:
    """Render and print a generated provider module for development inspection.

    Serializes a small pluginized component tree and prints the assembled
    module to stdout. It is intended for local tooling, debugging, and
    template iteration.
    """
    score_stream = ProcessedProperty(
        name="score_stream",
        type_name="ScoreStream",
        source_component_type="RootComponent",
    )
    theme = ProcessedProperty(
        name="theme",
        type_name="Theme",
        source_component_type="LoggedInComponent",
    )
    providers = [
        PluginizedProcessedDependencyProvider(
            data=ProcessedDependencyProvider(
                dependency_name="EmptyDependency",
                path=("RootComponent",),
                is_empty_dependency=True,
            ),
        ),
        PluginizedProcessedDependencyProvider(
            data=ProcessedDependencyProvider(
                dependency_name="GameDependency",
                path=("RootComponent", "LoggedInComponent", "GameComponent"),
                level_map={"LoggedInComponent": 1, "RootComponent": 2},
                processed_properties=(score_stream, theme),
            ),
            processed_properties=(
                PluginizedProcessedProperty(data=score_stream),
                PluginizedProcessedProperty(
                    data=theme,
                    auxiliary_source_name="LoggedInPluginExtension",
                    auxiliary_source_type=AuxiliarySourceType.PLUGIN_EXTENSION,
                ),
            ),
        ),
    ]
    rendered_module = ProvidersModuleAssembler().assemble(serialize_pluginized_providers(providers))
    print(rendered_module)  # noqa: T201


if __name__ == "__main__":
    main()

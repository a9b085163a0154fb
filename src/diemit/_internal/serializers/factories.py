from __future__ import annotations

from typing import Final

from diemit._internal.serializers.names import ProviderClassName
from diemit._internal.templates.snippets import SnippetEnvironment
from diemit._internal.templates.templates import FACTORY_FUNCTION_TEMPLATE, REGISTRATION_TEMPLATE
from diemit._internal.text import string_literal
from diemit.models import ProcessedDependencyProvider
from diemit.options import EmitOptions

EMPTY_DEPENDENCY_FACTORY_NAME: Final[str] = "factory_empty_dependency_provider"
"""Factory shared by every empty-dependency provider; emitted once by the module assembler."""

_env = SnippetEnvironment()
_factory_snippet = _env.compile(FACTORY_FUNCTION_TEMPLATE)
_registration_snippet = _env.compile(REGISTRATION_TEMPLATE)


class DependencyProviderFuncSerializer:
    """Render the factory function that builds a provider for one consumer path."""

    def __init__(
        self,
        *,
        provider: ProcessedDependencyProvider,
        class_name: ProviderClassName,
        func_name: str,
        params: str,
    ) -> None:
        self._provider = provider
        self._class_name = class_name
        self._func_name = func_name
        self._params = params

    def serialize(self) -> str:
        return _factory_snippet.render(
            path_string=self._provider.path_string,
            func_name=self._func_name,
            class_name=self._class_name.value,
            params=self._params,
        )


class DependencyProviderRegistrationSerializer:
    """Render the statement registering a provider factory under its component path.

    Empty-dependency providers have no factory of their own and register the
    shared ``factory_empty_dependency_provider`` instead.
    """

    def __init__(
        self,
        *,
        provider: ProcessedDependencyProvider,
        func_name: str,
        options: EmitOptions,
    ) -> None:
        self._provider = provider
        self._func_name = func_name
        self._options = options

    def serialize(self) -> str:
        func_name = (
            EMPTY_DEPENDENCY_FACTORY_NAME if self._provider.is_empty_dependency else self._func_name
        )
        return _registration_snippet.render(
            registry_name=self._options.registry_name,
            path_literal=string_literal(self._provider.path_string),
            func_name=func_name,
        )

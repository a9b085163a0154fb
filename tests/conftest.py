"""Shared pytest fixtures for diemit tests."""

import pytest

from diemit.models import (
    AuxiliarySourceType,
    PluginizedProcessedDependencyProvider,
    PluginizedProcessedProperty,
    ProcessedDependencyProvider,
    ProcessedProperty,
)
from diemit.options import EmitOptions


@pytest.fixture()
def options() -> EmitOptions:
    """Default emission options."""
    return EmitOptions()


@pytest.fixture()
def score_stream() -> ProcessedProperty:
    """Property read from the root component."""
    return ProcessedProperty(
        name="score_stream",
        type_name="ScoreStream",
        source_component_type="RootComponent",
    )


@pytest.fixture()
def theme() -> ProcessedProperty:
    """Property read from the logged-in component."""
    return ProcessedProperty(
        name="theme",
        type_name="Theme",
        source_component_type="LoggedInComponent",
    )


@pytest.fixture()
def empty_provider() -> ProcessedDependencyProvider:
    """Provider of the root component that requires nothing."""
    return ProcessedDependencyProvider(
        dependency_name="EmptyDependency",
        path=("RootComponent",),
        is_empty_dependency=True,
    )


@pytest.fixture()
def game_provider(
    score_stream: ProcessedProperty,
    theme: ProcessedProperty,
) -> ProcessedDependencyProvider:
    """Provider of a component two levels below the root."""
    return ProcessedDependencyProvider(
        dependency_name="GameDependency",
        path=("RootComponent", "LoggedInComponent", "GameComponent"),
        level_map={"LoggedInComponent": 1, "RootComponent": 2},
        processed_properties=(score_stream, theme),
    )


@pytest.fixture()
def pluginized_game_provider(
    game_provider: ProcessedDependencyProvider,
    score_stream: ProcessedProperty,
    theme: ProcessedProperty,
) -> PluginizedProcessedDependencyProvider:
    """Pluginized game provider reading the theme through a plugin extension."""
    return PluginizedProcessedDependencyProvider(
        data=game_provider,
        processed_properties=(
            PluginizedProcessedProperty(data=score_stream),
            PluginizedProcessedProperty(
                data=theme,
                auxiliary_source_name="LoggedInPluginExtension",
                auxiliary_source_type=AuxiliarySourceType.PLUGIN_EXTENSION,
            ),
        ),
    )

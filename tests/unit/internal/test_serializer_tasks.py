from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor

import pytest

from diemit._internal.serializers.factories import EMPTY_DEPENDENCY_FACTORY_NAME
from diemit._internal.tasks import (
    DependencyProviderSerializerTask,
    PluginizedDependencyProviderSerializerTask,
    TaskId,
    serialize_pluginized_providers,
    serialize_providers,
)
from diemit.cast_mode import CastMode
from diemit.models import (
    PluginizedProcessedDependencyProvider,
    PluginizedProcessedProperty,
    ProcessedDependencyProvider,
    ProcessedProperty,
)
from diemit.options import EmitOptions


def _pluginized(provider: ProcessedDependencyProvider) -> PluginizedProcessedDependencyProvider:
    return PluginizedProcessedDependencyProvider(
        data=provider,
        processed_properties=tuple(
            PluginizedProcessedProperty(data=item) for item in provider.processed_properties
        ),
    )


def test_single_empty_dependency_emits_registration_only(
    empty_provider: ProcessedDependencyProvider,
) -> None:
    records = serialize_pluginized_providers([_pluginized(empty_provider)])

    assert len(records) == 1
    assert records[0].content == ""
    assert records[0].attributes == {}
    assert records[0].registration == (
        f'registry.register_provider_factory("^->RootComponent", {EMPTY_DEPENDENCY_FACTORY_NAME})'
    )


def test_providers_with_identical_properties_share_one_declaration(
    score_stream: ProcessedProperty,
) -> None:
    near = ProcessedDependencyProvider(
        dependency_name="ScoreDependency",
        path=("RootComponent",),
        level_map={"RootComponent": 0},
        processed_properties=(score_stream,),
    )
    far = ProcessedDependencyProvider(
        dependency_name="ScoreDependency",
        path=("RootComponent", "LoggedInComponent", "GameComponent", "ScoreSheetComponent"),
        level_map={"RootComponent": 3},
        processed_properties=(score_stream,),
    )

    records = serialize_pluginized_providers([_pluginized(near), _pluginized(far)])

    assert len(records) == 3
    shared, first, second = records
    assert shared.content.startswith("class ScoreDependency")
    assert shared.registration == ""
    assert shared.attributes == {}
    assert "maxLevel" not in first.attributes
    assert second.attributes["maxLevel"] == "3"
    assert first.content.startswith("# ^->RootComponent\n")
    assert second.content.startswith(
        "# ^->RootComponent->LoggedInComponent->GameComponent->ScoreSheetComponent\n",
    )
    assert first.attributes["factoryName"] != second.attributes["factoryName"]


def test_groups_follow_first_appearance_order(
    game_provider: ProcessedDependencyProvider,
    empty_provider: ProcessedDependencyProvider,
    score_stream: ProcessedProperty,
) -> None:
    score_provider = ProcessedDependencyProvider(
        dependency_name="ScoreDependency",
        path=("RootComponent", "ScoreComponent"),
        level_map={"RootComponent": 1},
        processed_properties=(score_stream,),
    )

    records = serialize_providers([game_provider, empty_provider, score_provider])

    assert len(records) == 5
    assert records[0].content.startswith("class GameDependency")
    assert records[1].registration.endswith(f'{records[1].attributes["factoryName"]})')
    assert records[2].content == ""
    assert EMPTY_DEPENDENCY_FACTORY_NAME in records[2].registration
    assert records[3].content.startswith("class ScoreDependency")
    assert records[4].attributes == {
        "maxLevel": "1",
        "factoryName": records[4].attributes["factoryName"],
    }


def test_empty_dependency_group_shares_nothing_with_later_members(
    empty_provider: ProcessedDependencyProvider,
) -> None:
    other = ProcessedDependencyProvider(
        dependency_name="EmptyDependency",
        path=("RootComponent", "LoggedInComponent"),
        is_empty_dependency=True,
    )

    records = serialize_providers([empty_provider, other])

    assert [record.content for record in records] == ["", ""]
    assert [record.attributes for record in records] == [{}, {}]
    assert records[1].registration == (
        "registry.register_provider_factory("
        f'"^->RootComponent->LoggedInComponent", {EMPTY_DEPENDENCY_FACTORY_NAME})'
    )


def test_shared_declaration_follows_first_member_of_group(
    game_provider: ProcessedDependencyProvider,
) -> None:
    empty_with_properties = ProcessedDependencyProvider(
        dependency_name="GameDependency",
        path=("RootComponent", "LoggedInComponent", "ReplayComponent"),
        level_map=game_provider.level_map,
        processed_properties=game_provider.processed_properties,
        is_empty_dependency=True,
    )

    records = serialize_providers([empty_with_properties, game_provider])

    assert len(records) == 2
    assert records[0].content == ""
    assert records[1].content.startswith("# ^->RootComponent->LoggedInComponent->GameComponent")


def test_pluginized_members_construct_the_shared_class(
    pluginized_game_provider: PluginizedProcessedDependencyProvider,
) -> None:
    shared, member = serialize_pluginized_providers([pluginized_game_provider])

    class_name = re.match(r"class (\w+):", shared.content)
    assert class_name is not None
    assert f"return {class_name.group(1)}(" in member.content
    assert 'cast("LoggedInPluginExtension", self._logged_in_component.plugin_extension)' in (
        shared.content
    )
    assert member.attributes == {
        "maxLevel": "2",
        "factoryName": member.attributes["factoryName"],
    }
    assert re.fullmatch(r"factory[0-9a-f]{20}", member.attributes["factoryName"])


def test_every_emitted_block_is_valid_python(
    pluginized_game_provider: PluginizedProcessedDependencyProvider,
    empty_provider: ProcessedDependencyProvider,
) -> None:
    records = serialize_pluginized_providers([_pluginized(empty_provider), pluginized_game_provider])

    for record in records:
        if record.content:
            compile(f"from __future__ import annotations\n{record.content}\n", "<record>", "exec")
        if record.registration:
            compile(record.registration, "<registration>", "exec")


def test_options_flow_into_every_record(
    pluginized_game_provider: PluginizedProcessedDependencyProvider,
) -> None:
    options = EmitOptions(registry_name="providers", digest_length=8, cast_mode=CastMode.NONE)

    shared, member = serialize_pluginized_providers([pluginized_game_provider], options=options)

    assert re.match(r"class GameDependency[0-9a-f]{8}Provider:", shared.content)
    assert "cast(" not in shared.content
    assert "cast(" not in member.content
    assert member.registration.startswith("providers.register_provider_factory(")
    assert re.fullmatch(r"factory[0-9a-f]{8}", member.attributes["factoryName"])


def test_empty_input_yields_no_records() -> None:
    assert serialize_providers([]) == []
    assert serialize_pluginized_providers([]) == []


def test_tasks_expose_their_identifiers(
    game_provider: ProcessedDependencyProvider,
    pluginized_game_provider: PluginizedProcessedDependencyProvider,
) -> None:
    assert (
        DependencyProviderSerializerTask([game_provider]).task_id
        is TaskId.DEPENDENCY_PROVIDER_SERIALIZER
    )
    assert (
        PluginizedDependencyProviderSerializerTask([pluginized_game_provider]).task_id
        is TaskId.PLUGINIZED_DEPENDENCY_PROVIDER_SERIALIZER
    )


def test_plain_and_pluginized_tasks_agree_without_auxiliary_sources(
    game_provider: ProcessedDependencyProvider,
) -> None:
    assert serialize_providers([game_provider]) == serialize_pluginized_providers(
        [_pluginized(game_provider)],
    )


def test_execute_is_repeatable_and_thread_safe(
    pluginized_game_provider: PluginizedProcessedDependencyProvider,
    empty_provider: ProcessedDependencyProvider,
) -> None:
    task = PluginizedDependencyProviderSerializerTask(
        [_pluginized(empty_provider), pluginized_game_provider],
    )
    expected = task.execute()

    with ThreadPoolExecutor(max_workers=4) as executor:
        results = list(executor.map(lambda _: task.execute(), range(16)))

    assert all(result == expected for result in results)


def test_execute_logs_serialization_strategy(
    caplog: pytest.LogCaptureFixture,
    game_provider: ProcessedDependencyProvider,
    empty_provider: ProcessedDependencyProvider,
) -> None:
    caplog.set_level(logging.INFO, logger="diemit._internal.tasks")

    serialize_providers([game_provider, empty_provider])

    messages = [
        record.getMessage()
        for record in caplog.records
        if record.name == "diemit._internal.tasks" and record.levelno == logging.INFO
    ]
    assert messages == [
        "Provider serialization strategy: task=dependency_provider_serializer "
        "provider_count=2 group_count=2 shared_declaration_count=1 "
        "empty_dependency_count=1 record_count=3",
    ]


def test_execute_logs_each_group_with_its_class_name(
    caplog: pytest.LogCaptureFixture,
    game_provider: ProcessedDependencyProvider,
) -> None:
    caplog.set_level(logging.DEBUG, logger="diemit._internal.tasks")

    shared, _ = serialize_providers([game_provider])

    class_name = re.match(r"class (\w+):", shared.content)
    assert class_name is not None
    assert [
        record.getMessage()
        for record in caplog.records
        if record.name == "diemit._internal.tasks" and record.levelno == logging.DEBUG
    ] == [
        f"Serializing provider group 0: class={class_name.group(1)} member_count=1 "
        "empty_dependency=False",
    ]

from diemit._internal.assembly import ProvidersModuleAssembler
from diemit._internal.grouping import ProviderGroup, group_providers
from diemit._internal.tasks import (
    DependencyProviderSerializerTask,
    PluginizedDependencyProviderSerializerTask,
    TaskId,
    serialize_pluginized_providers,
    serialize_providers,
)
from diemit.cast_mode import CastMode
from diemit.exceptions import (
    DIEmitEmptyProviderGroupError,
    DIEmitError,
    DIEmitInvalidOptionsError,
    DIEmitTemplateError,
)
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
from diemit.options import EmitOptions

__all__ = [
    "FACTORY_NAME_ATTRIBUTE",
    "MAX_LEVEL_ATTRIBUTE",
    "AuxiliarySourceType",
    "CastMode",
    "DIEmitEmptyProviderGroupError",
    "DIEmitError",
    "DIEmitInvalidOptionsError",
    "DIEmitTemplateError",
    "DependencyProviderSerializerTask",
    "EmitOptions",
    "PluginizedDependencyProviderSerializerTask",
    "PluginizedProcessedDependencyProvider",
    "PluginizedProcessedProperty",
    "ProcessedDependencyProvider",
    "ProcessedProperty",
    "ProviderGroup",
    "ProvidersModuleAssembler",
    "SerializedProvider",
    "TaskId",
    "group_providers",
    "serialize_pluginized_providers",
    "serialize_providers",
]

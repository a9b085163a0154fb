from __future__ import annotations

from diemit.models import FACTORY_NAME_ATTRIBUTE, MAX_LEVEL_ATTRIBUTE, ProcessedDependencyProvider


def calculate_attributes(
    *,
    provider: ProcessedDependencyProvider,
    factory_name: str,
) -> dict[str, str]:
    """Return the metadata the aggregation stage needs for one provider.

    Empty-dependency providers carry no metadata. Otherwise ``factoryName`` is
    always present and ``maxLevel`` only when some source component is an
    ancestor of the consumer (deepest level above zero).

    Args:
        provider: Provider the metadata describes.
        factory_name: Name of the provider's factory function.

    """
    if provider.is_empty_dependency:
        return {}

    attributes: dict[str, str] = {}
    max_level = max(provider.level_map.values(), default=0)
    if max_level > 0:
        attributes[MAX_LEVEL_ATTRIBUTE] = str(max_level)
    attributes[FACTORY_NAME_ATTRIBUTE] = factory_name
    return attributes

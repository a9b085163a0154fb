from textwrap import dedent

PROVIDER_CLASS_TEMPLATE = dedent(
    """
    class {{ class_name }}:
    {% if docstring_block %}
    {{ docstring_block }}

    {% endif %}
    {{ slots_block }}

    {{ init_method_block }}
    {% if properties_block %}

    {{ properties_block }}
    {% endif %}
    """,
).strip()

SLOTS_TEMPLATE = "__slots__ = ({{ slot_names }})"

INIT_METHOD_TEMPLATE = dedent(
    """
    def __init__(self{% if parameters %}, {{ parameters }}{% endif %}) -> None:
    {% if assignments_block %}
    {{ assignments_block }}
    {% else %}
        pass
    {% endif %}
    """,
).strip()

PROPERTY_TEMPLATE = dedent(
    """
    @property
    def {{ name }}(self) -> {{ type_name }}:
        return {{ value_expression }}
    """,
).strip()

FACTORY_FUNCTION_TEMPLATE = dedent(
    """
    # {{ path_string }}
    def {{ func_name }}(component: Any) -> Any:
        return {{ class_name }}({{ params }})
    """,
).strip()

REGISTRATION_TEMPLATE = (
    "{{ registry_name }}.register_provider_factory({{ path_literal }}, {{ func_name }})"
)

MODULE_TEMPLATE = dedent(
    """
    {{ module_docstring_block }}

    {{ imports_block }}
    {% if helpers_block %}


    {{ helpers_block }}
    {% endif %}
    {% if providers_block %}


    {{ providers_block }}
    {% endif %}


    {{ all_block }}


    {{ register_function_block }}
    """,
).strip()

IMPORTS_TEMPLATE = dedent(
    """
    from __future__ import annotations

    from typing import Any{% if uses_cast %}, cast{% endif %}
    {% if extra_imports_block %}

    {{ extra_imports_block }}
    {% endif %}
    """,
).strip()

PARENT_HELPER_TEMPLATE = dedent(
    """
    def parent{{ level }}(component: Any) -> Any:
        return component{{ parent_chain }}
    """,
).strip()

EMPTY_DEPENDENCY_TEMPLATE = dedent(
    """
    class EmptyDependencyProvider:
        __slots__ = ("component",)

        def __init__(self, component: Any) -> None:
            self.component = component


    def {{ func_name }}(component: Any) -> Any:
        return EmptyDependencyProvider(component)
    """,
).strip()

REGISTER_FUNCTION_TEMPLATE = dedent(
    """
    def register_provider_factories({{ registry_name }}: Any) -> None:
    {% if registrations_block %}
    {{ registrations_block }}
    {% else %}
        return None
    {% endif %}
    """,
).strip()

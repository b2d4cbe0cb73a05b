"""
Построители элементов API для тестов.
"""

from apidiff.core.models import Accessibility, Element, ElementKind, Parameter
from apidiff.utils.naming import namespace_of, simple_name


def make_type(full_name, kind="class", accessibility="public", signature=None,
              interfaces=(), attributes=()):
    kind = ElementKind.parse(kind)
    name = simple_name(full_name)
    return Element(
        name=name,
        full_name=full_name,
        kind=kind,
        accessibility=Accessibility.parse(accessibility),
        signature=signature if signature is not None else f"{kind.value} {name}",
        namespace=namespace_of(full_name),
        custom_attribute_names=tuple(attributes),
        interfaces=tuple(interfaces),
    )


def make_member(container, name, signature, kind="method", accessibility="public",
                attributes=(), parameters=None):
    return Element(
        name=name,
        full_name=f"{container}.{name}",
        kind=ElementKind.parse(kind),
        accessibility=Accessibility.parse(accessibility),
        signature=signature,
        declaring_container=container,
        namespace=namespace_of(container),
        custom_attribute_names=tuple(attributes),
        parameters=tuple(parameters) if parameters is not None else None,
    )


def make_method(container, name, signature, **kwargs):
    return make_member(container, name, signature, kind="method", **kwargs)


def make_property(container, name, signature, **kwargs):
    return make_member(container, name, signature, kind="property", **kwargs)


def param(name, type_, optional=False, default=None):
    return Parameter(name=name, type=type_, is_optional=optional, default=default)

"""
Загрузка снимков публичного API из JSON.

Снимок — результат шага извлечения: плоский список элементов
(типы и члены). Поддерживаются два вида документа:
- объект {"component": ..., "version": ..., "elements": [...]};
- просто список элементов.

Все ошибки элементов собираются за один проход и выдаются
одним SnapshotError.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..core.exceptions import SnapshotError
from ..core.models import Accessibility, Element, ElementKind, Parameter
from ..utils.naming import namespace_of, simple_name

logger = logging.getLogger("apidiff.snapshot")


@dataclass(frozen=True)
class ApiSnapshot:
    """Загруженный снимок: метаданные компонента и элементы в порядке файла."""
    elements: Tuple[Element, ...]
    component: Optional[str] = None
    version: Optional[str] = None
    source: Optional[str] = None

    @property
    def label(self) -> str:
        name = self.component or (Path(self.source).stem if self.source else "snapshot")
        return f"{name} {self.version}" if self.version else name

    def __len__(self) -> int:
        return len(self.elements)


# ==========
# РАЗБОР ЭЛЕМЕНТОВ
# ==========

def _string_list(value: Any, where: str, errors: List[str]) -> Tuple[str, ...]:
    if value is None:
        return tuple()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        errors.append(f"{where}: ожидается список строк")
        return tuple()
    return tuple(value)


def _parameters(value: Any, where: str, errors: List[str]) -> Optional[Tuple[Parameter, ...]]:
    if value is None:
        return None
    if not isinstance(value, list):
        errors.append(f"{where}: ожидается список параметров")
        return None

    params: List[Parameter] = []
    for i, raw in enumerate(value):
        if not isinstance(raw, dict) or not isinstance(raw.get("type"), str) or not raw.get("type"):
            errors.append(f"{where}[{i}]: у параметра должен быть строковый 'type'")
            continue
        default = raw.get("defaultValue")
        params.append(Parameter(
            name=str(raw.get("name") or ""),
            type=raw["type"],
            is_optional=bool(raw.get("isOptional", default is not None)),
            default=None if default is None else str(default),
        ))
    return tuple(params)


def element_from_dict(data: Any, where: str, errors: List[str]) -> Optional[Element]:
    """
    Строит Element из словаря с ключами в camelCase.
    Проблемы дописываются в errors; при проблемах возвращает None.
    """
    if not isinstance(data, dict):
        errors.append(f"{where}: ожидается объект")
        return None

    before = len(errors)

    full_name = data.get("fullName")
    if not isinstance(full_name, str) or not full_name.strip():
        errors.append(f"{where}: отсутствует 'fullName'")
        full_name = ""

    name = data.get("name")
    if name is None:
        name = simple_name(full_name)
    elif not isinstance(name, str) or not name.strip():
        errors.append(f"{where}: пустое 'name'")

    kind: Optional[ElementKind] = None
    try:
        kind = ElementKind.parse(data.get("kind"))
    except ValueError as e:
        errors.append(f"{where}: {e}")

    accessibility = Accessibility.PUBLIC
    if data.get("accessibility") is not None:
        try:
            accessibility = Accessibility.parse(data.get("accessibility"))
        except ValueError as e:
            errors.append(f"{where}: {e}")

    signature = data.get("signature", "")
    if not isinstance(signature, str):
        errors.append(f"{where}: 'signature' должна быть строкой")
        signature = ""

    container = data.get("declaringContainer")
    if kind is not None and kind.is_member and (not isinstance(container, str) or not container.strip()):
        errors.append(f"{where}: у члена '{full_name}' нет 'declaringContainer'")

    attributes = _string_list(data.get("customAttributeNames"), f"{where}.customAttributeNames", errors)
    interfaces = _string_list(data.get("interfaces"), f"{where}.interfaces", errors)
    parameters = _parameters(data.get("parameters"), f"{where}.parameters", errors)

    if len(errors) > before or kind is None:
        return None

    namespace = data.get("namespace")
    if not isinstance(namespace, str):
        namespace = namespace_of(container if kind.is_member else full_name)

    return Element(
        name=name,
        full_name=full_name,
        kind=kind,
        accessibility=accessibility,
        signature=signature,
        declaring_container=container if kind.is_member else None,
        namespace=namespace,
        custom_attribute_names=attributes,
        parameters=parameters,
        interfaces=interfaces if kind.is_type else tuple(),
    )


def snapshot_from_data(data: Any, source: Optional[str] = None) -> ApiSnapshot:
    """
    Строит снимок из разобранного JSON.

    Raises:
        SnapshotError: со списком всех проблем документа
    """
    meta: Dict[str, Any] = {}
    if isinstance(data, dict):
        raw_elements = data.get("elements")
        meta = data
    else:
        raw_elements = data

    if not isinstance(raw_elements, list):
        raise SnapshotError("Снимок должен содержать список 'elements'", file_path=source)

    errors: List[str] = []
    elements: List[Element] = []
    for i, raw in enumerate(raw_elements):
        el = element_from_dict(raw, f"elements[{i}]", errors)
        if el is not None:
            elements.append(el)

    if errors:
        raise SnapshotError(
            f"Снимок содержит некорректных записей: {len(errors)}",
            file_path=source,
            errors=errors,
        )

    component = meta.get("component")
    version = meta.get("version")
    return ApiSnapshot(
        elements=tuple(elements),
        component=str(component) if component is not None else None,
        version=str(version) if version is not None else None,
        source=source,
    )


def load_snapshot(path: Union[str, Path]) -> ApiSnapshot:
    """
    Читает снимок из JSON-файла.

    Raises:
        FileNotFoundError: файла нет
        SnapshotError: некорректный JSON или некорректные элементы
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Файл снимка не найден: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SnapshotError(
            f"Некорректный JSON: {e.msg} (строка {e.lineno})",
            file_path=str(path),
        ) from e

    snapshot = snapshot_from_data(data, source=str(path))
    logger.info("Снимок %s: элементов %d", snapshot.label, len(snapshot))
    return snapshot


__all__ = ["ApiSnapshot", "element_from_dict", "snapshot_from_data", "load_snapshot"]

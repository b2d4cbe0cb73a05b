import json

import pytest

from apidiff.config.models import ComparisonConfiguration
from builders import make_method, make_type


@pytest.fixture
def default_config():
    return ComparisonConfiguration.create_default()


@pytest.fixture
def config_factory():
    """Конфигурация с заменёнными секциями mappings / exclusions / rules."""
    def _make(mappings=None, exclusions=None, rules=None, **kwargs):
        base = ComparisonConfiguration.create_default()
        return ComparisonConfiguration(
            mappings=mappings or base.mappings,
            exclusions=exclusions or base.exclusions,
            breaking_change_rules=rules or base.breaking_change_rules,
            **kwargs,
        )
    return _make


@pytest.fixture
def widget_api():
    """Тип Contoso.Widget с двумя методами."""
    return [
        make_type("Contoso.Widget"),
        make_method("Contoso.Widget", "Render", "void Render(int width)"),
        make_method("Contoso.Widget", "Reset", "void Reset()"),
    ]


@pytest.fixture
def write_json(tmp_path):
    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


from __future__ import annotations

from pathlib import Path

import pytest
from starlette.testclient import TestClient

from vetify_changelog.config.config import Settings, get_settings
from vetify_changelog.main import app


SAMPLE_CHANGELOG = """# Changelog

Todos los cambios notables se documentan en este archivo.

## [Sin Publicar]

### Agregado

- Reporte de errores desde el panel

## [1.1.0] - 2024-02-01

### Added

- Sistema de Invitaciones
  - Invitaciones por correo
- Página de Actualizaciones | Historial de versiones | Fechas en español

### Fixed

- Filtros de inventario

## [1.0.1] - 2024-01-20

Solo notas internas, sin categorías.

## [1.0.0] - 2024-01-15

### Seguridad

- Validación de pertenencia a la clínica
"""


@pytest.fixture
def sample_changelog() -> str:
    return SAMPLE_CHANGELOG


@pytest.fixture
def changelog_file(tmp_path: Path) -> Path:
    path = tmp_path / "CHANGELOG.md"
    path.write_text(SAMPLE_CHANGELOG, encoding="utf-8")
    return path


@pytest.fixture
def client(changelog_file: Path):
    settings = Settings(changelog_path=str(changelog_file))
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

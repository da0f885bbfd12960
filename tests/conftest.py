from pathlib import Path
import pytest

from field_sanitizer.sanitize.registry import default_registry

@pytest.fixture(scope="session")
def project_root() -> Path:
    return Path(__file__).resolve().parents[1]

@pytest.fixture(scope="session")
def cfg_path(project_root: Path) -> Path:
    return project_root / "config" / "sanitization.toml"

@pytest.fixture(scope="session")
def cfg(cfg_path: Path):
    from field_sanitizer.config_model.model import load_config
    return load_config(str(cfg_path))

@pytest.fixture(autouse=True)
def _clean_default_registry():
    # custom rules are process-wide; never let one test see another's
    default_registry.reset()
    yield
    default_registry.reset()

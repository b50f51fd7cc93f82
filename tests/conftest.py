import pytest

from sqlstyle.loaders.config_loader import build_config
from sqlstyle.models.config import LinterConfig
from sqlstyle.services.engine import LintEngine
from sqlstyle.services.fixer import FixService


@pytest.fixture
def default_config() -> LinterConfig:
    return build_config()


@pytest.fixture
def engine(default_config: LinterConfig) -> LintEngine:
    return LintEngine(config=default_config)


@pytest.fixture
def fixer(default_config: LinterConfig) -> FixService:
    return FixService(config=default_config)

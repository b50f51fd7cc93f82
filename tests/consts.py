"""Shared test path constants."""

from pathlib import Path
from typing import Final

TESTS_DIR: Final[Path] = Path(__file__).resolve().parent
PROJECT_ROOT: Final[Path] = TESTS_DIR.parent
TEST_DATA_DIR: Final[Path] = TESTS_DIR / "data"
GOOD_JOIN_FILE: Final[Path] = TEST_DATA_DIR / "good_join_with_cte.sql"
GOOD_TABLE_FILE: Final[Path] = TEST_DATA_DIR / "good_create_table.sql"
BAD_SELECT_FILE: Final[Path] = TEST_DATA_DIR / "bad_select.sql"
BAD_TABLE_FILE: Final[Path] = TEST_DATA_DIR / "bad_create_table.sql"
EXAMPLES_DIR: Final[Path] = PROJECT_ROOT / "examples"

"""
Lookup of per-question fixture files.

Fixtures live in one directory and follow a naming convention:
qNinM.txt (stdin for run M of question N), qNoutM.txt (expected output),
qNinM.sh / qNoutM.sh (scripts run before / after the program) and
qNrubric.txt (grading area). A missing file means the feature is absent.
"""

from pathlib import Path
from typing import Optional

from .config import (
    INPUT_FILE_TEMPLATE,
    INPUT_SCRIPT_TEMPLATE,
    OUTPUT_FILE_TEMPLATE,
    OUTPUT_SCRIPT_TEMPLATE,
    RUBRIC_FILE_TEMPLATE,
)


class QuestionFixtures:
    """
    Reads question fixtures from a directory.
    """

    def __init__(self, fixtures_dir: Path) -> None:
        self.fixtures_dir = fixtures_dir

    def input_text(self, question: int, case: int) -> Optional[str]:
        return self._read(INPUT_FILE_TEMPLATE.format(question=question, case=case))

    def expected_output(self, question: int, case: int) -> Optional[str]:
        return self._read(OUTPUT_FILE_TEMPLATE.format(question=question, case=case))

    def rubric(self, question: int) -> Optional[str]:
        return self._read(RUBRIC_FILE_TEMPLATE.format(question=question))

    def input_script(self, question: int, case: int) -> Optional[Path]:
        return self._find(INPUT_SCRIPT_TEMPLATE.format(question=question, case=case))

    def output_script(self, question: int, case: int) -> Optional[Path]:
        return self._find(OUTPUT_SCRIPT_TEMPLATE.format(question=question, case=case))

    def _find(self, filename: str) -> Optional[Path]:
        path = self.fixtures_dir / filename
        return path if path.is_file() else None

    def _read(self, filename: str) -> Optional[str]:
        path = self._find(filename)
        if path is None:
            return None
        return path.read_text(encoding="utf-8", errors="replace")

"""
Java lab submission handling.

A JavaLab is created from the name of an exported NetBeans project archive
(e.g. RuskLabOne.zip). It extracts the archive, merges the student's question
sources into a shared template project so every lab is built with the same
build files, runs Ant, and removes what it created afterwards.
"""

import logging
import re
import shutil
import subprocess
import zipfile
from pathlib import Path

from .config import (
    ARCHIVE_SUFFIX,
    BUILD_FILENAME,
    DIST_DIRNAME,
    LAB_NAME_PATTERN,
    QUESTION_PACKAGE_TEMPLATE,
    QUESTION_SOURCE_TEMPLATE,
)
from .config_loader import GraderConfig
from .errors import BuildError, CleanupError, LabNameError, SubmissionNotFoundError
from .models import LabSubmission

logger = logging.getLogger(__name__)


def parse_submission(zip_path: Path, template_root: Path) -> LabSubmission:
    """
    Derive the lab name and working paths from a submission archive name.

    Args:
        zip_path: Path to the archive, named <Student>Lab<Name>.zip or <Student>Midterm<Name>.zip.
        template_root: Directory holding one template project per lab name.

    Returns:
        LabSubmission with all derived paths.

    Raises:
        LabNameError: If the name contains neither "Lab" nor "Midterm".
    """
    folder_name = zip_path.name
    if folder_name.endswith(ARCHIVE_SUFFIX):
        folder_name = folder_name[: -len(ARCHIVE_SUFFIX)]

    match = re.search(LAB_NAME_PATTERN, folder_name)
    if not match:
        raise LabNameError(
            f'Invalid submission name "{zip_path.name}": it must be of format "<Student>Lab<Name>.zip" '
            '(or "<Student>Midterm.zip") where the text before "Lab" is the student name and the text '
            'from "Lab" on is the lab name (ex. RuskLabOne.zip)'
        )

    lab_name = match.group(0)
    extract_path = zip_path.parent / folder_name

    return LabSubmission(
        zip_path=zip_path,
        folder_name=folder_name,
        student_name=folder_name[: match.start()],
        lab_name=lab_name,
        extract_path=extract_path,
        lab_folder=extract_path / lab_name,
        template_folder=template_root / lab_name,
    )


class JavaLab:
    """
    A student's Java lab, from archive to built template project.
    """

    def __init__(self, submission: LabSubmission, config: GraderConfig) -> None:
        self.submission = submission
        self.config = config

    @classmethod
    def from_zip(cls, zip_path: Path, config: GraderConfig) -> "JavaLab":
        """
        Create a lab from a submission archive.

        Raises:
            SubmissionNotFoundError: If the archive doesn't exist.
            LabNameError: If the archive name is malformed.
        """
        if not zip_path.is_file():
            raise SubmissionNotFoundError(f"File {zip_path} does not exist")
        return cls(parse_submission(zip_path, config.template_root), config)

    @property
    def lab_source_dir(self) -> Path:
        return self.submission.lab_folder / self.config.source_subdir

    @property
    def template_source_dir(self) -> Path:
        return self.submission.template_folder / self.config.source_subdir

    @property
    def jar_path(self) -> Path:
        return self.submission.template_folder / DIST_DIRNAME / f"{self.submission.lab_name}.jar"

    @property
    def build_file(self) -> Path:
        return self.submission.template_folder / BUILD_FILENAME

    def question_file(self, question: int) -> Path:
        """Main source file of a question (QuestionN.java)."""
        return self.lab_source_dir / QUESTION_SOURCE_TEMPLATE.format(question=question)

    def question_package_dir(self, question: int) -> Path:
        """Package directory with the question's helper classes (qN/)."""
        return self.lab_source_dir / QUESTION_PACKAGE_TEMPLATE.format(question=question)

    def question_class(self, question: int) -> str:
        """Fully qualified main class of a question."""
        return f"{self.config.source_package}.Question{question}"

    def build(self) -> None:
        """
        Unzip the submission, merge it into the template project and run Ant.

        Raises:
            BuildError: If any of the three steps fails.
        """
        self._extract()
        self._copy_to_template()
        self._run_ant()

    def _extract(self) -> None:
        logger.info("Unzipping %s to %s", self.submission.zip_path, self.submission.extract_path)
        try:
            self.submission.extract_path.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(self.submission.zip_path, "r") as zip_ref:
                zip_ref.extractall(self.submission.extract_path)
        except (zipfile.BadZipFile, OSError) as e:
            raise BuildError(f"Failed to extract {self.submission.zip_path}: {e}") from e

    def _copy_to_template(self) -> None:
        logger.info("Copying lab files to template project")
        if not self.lab_source_dir.is_dir():
            raise BuildError(f"Lab source directory not found: {self.lab_source_dir}")
        try:
            shutil.copytree(self.lab_source_dir, self.template_source_dir, dirs_exist_ok=True)
        except (shutil.Error, OSError) as e:
            raise BuildError(f"Failed to copy {self.lab_source_dir} to {self.template_source_dir}: {e}") from e

    def _run_ant(self) -> None:
        logger.info("Building project")
        cmd = [*self.config.ant_command, "-f", str(self.build_file)]
        try:
            process = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise BuildError(f"Could not run {cmd[0]}: {e}") from e

        if process.returncode != 0:
            logger.error("%s", process.stdout)
            raise BuildError(f"Build failed with exit code {process.returncode}")
        logger.debug("%s", process.stdout)

    def clean_up(self) -> None:
        """
        Delete the extracted submission and the question sources merged into the template.

        Raises:
            CleanupError: If a directory exists but cannot be removed.
        """
        logger.info("Cleaning up created directories")
        _remove_tree(self.submission.extract_path)

        logger.info("Cleaning up Lab Template")
        _remove_tree(self.template_source_dir)


def _remove_tree(path: Path) -> None:
    if not path.exists():
        return
    try:
        shutil.rmtree(path)
    except OSError as e:
        raise CleanupError(f"Failed to remove {path}: {e}") from e

"""
Markdown grading report generation.

Runs every question of a built lab against its fixtures and writes the
sources, inputs, expected and actual outputs and a grading area for each
question into output/<Student><Lab>.md.
"""

import logging
from pathlib import Path
from typing import TextIO

from .config import TO_GRADE
from .errors import ReportError
from .fixtures import QuestionFixtures
from .lab import JavaLab
from .runner import run_script, run_with_input

logger = logging.getLogger(__name__)


def indent(text: str) -> str:
    """
    Prefix every line of text with a tab so Markdown renders it as a code block.
    """
    return "\n".join(f"\t{line}" for line in text.split("\n"))


def run_and_report(lab: JavaLab) -> Path:
    """
    Run each question of a built lab and write the grading report.

    Questions are numbered from 1 and processed until QuestionN.java is
    missing from the submission.

    Args:
        lab: A lab whose template project has been built.

    Returns:
        Path to the written Markdown report.

    Raises:
        ReportError: If the report or a source file cannot be read or written.
    """
    config = lab.config
    report_path = config.output_dir / f"{lab.submission.folder_name}.md"

    try:
        config.output_dir.mkdir(parents=True, exist_ok=True)
        with open(report_path, "w", encoding="utf-8") as report:
            _write_report(lab, QuestionFixtures(config.fixtures_dir), report)
    except OSError as e:
        raise ReportError(f"Failed to write report {report_path}: {e}") from e

    logger.info("Report written to %s", report_path)
    return report_path


def _write_report(lab: JavaLab, fixtures: QuestionFixtures, report: TextIO) -> None:
    question = 1
    while True:
        question_file = lab.question_file(question)
        if not question_file.is_file():
            break

        logger.info("Running Question %d", question)
        report.write(f"# Question {question}\n")
        write_source(report, question_file.name, question_file.read_text(encoding="utf-8", errors="replace"))

        for helper in _helper_sources(lab.question_package_dir(question)):
            write_source(report, helper.name, helper.read_text(encoding="utf-8", errors="replace"))

        run_question(lab, fixtures, question, report)
        question += 1

    report.write("\n\n# Summary\n")
    report.write(f"\n Total Points: {TO_GRADE}\n")


def write_source(report: TextIO, filename: str, source: str) -> None:
    report.write(f"## {filename} Source Code\n")
    report.write("\n")
    report.write(indent(source))
    report.write("\n")


def run_question(lab: JavaLab, fixtures: QuestionFixtures, question: int, report: TextIO) -> None:
    """
    Run one question against each of its input cases and write the results.

    Case 0 always runs, with no stdin if q<N>in0.txt is absent. Later cases
    run only while their input file exists.
    """
    config = lab.config
    command = [
        *config.java_command,
        "-Djava.security.manager",
        f"-Djava.security.policy={config.security_policy}",
        "-cp",
        str(lab.jar_path),
        lab.question_class(question),
    ]

    case = 0
    while True:
        input_script = fixtures.input_script(question, case)
        if input_script is not None:
            result = run_script(input_script, cwd=config.fixtures_dir, timeout=config.command_timeout_seconds)
            if result.output.strip():
                report.write(f"\n## Input File #{case}\n")
                report.write(indent(result.output))

        input_text = fixtures.input_text(question, case)
        if input_text is None and case > 0:
            break

        if input_text is not None:
            report.write(f"\n## Stdin Buffer #{case}\n")
            report.write(indent(input_text))

        result = run_with_input(
            command,
            input_text=input_text,
            timeout=config.command_timeout_seconds,
            input_delay=config.input_delay_seconds,
            max_chars=config.max_output_chars,
        )

        expected = fixtures.expected_output(question, case)
        if expected is not None:
            report.write(f"\n## Expected Execution Output #{case}\n")
            report.write(indent(expected))

        report.write(f"\n## Actual Execution Output #{case}\n")
        report.write(indent(result.output))
        report.write("\n\n\n")

        output_script = fixtures.output_script(question, case)
        if output_script is not None:
            result = run_script(output_script, cwd=config.fixtures_dir, timeout=config.command_timeout_seconds)
            if result.output.strip():
                report.write(f"\n## Output File #{case}\n")
                report.write(indent(result.output))
                report.write("\n\n\n")

        report.flush()
        case += 1

    rubric = fixtures.rubric(question)
    if rubric is not None:
        report.write(rubric)
        report.write("\n")
    else:
        report.write(f"\nPoints: {TO_GRADE}\n")
        report.write(f"\nFeedback: {TO_GRADE}\n\n")


def _helper_sources(package_dir: Path) -> list[Path]:
    if not package_dir.is_dir():
        return []
    helpers = []
    for path in sorted(package_dir.iterdir()):
        if not path.is_file():
            continue
        logger.debug("Found file %s", path.name)
        if path.suffix == ".java":
            helpers.append(path)
    return helpers

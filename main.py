"""
Lab Grader: build and run a student's Java lab, then write a grading report

Usage:
  main.py <zipfile> [--config=PATH] [--no-open] [--verbose]
  main.py (-h | --help)

Arguments:
  <zipfile>      Submission archive named <Student>Lab<Name>.zip (ex. RuskLabOne.zip).

Options:
  --config=PATH  Path to YAML configuration file (grader_config.yml if present).
  --no-open      Do not open the report in the editor when done.
  --verbose      Print debug output.
  -h --help      Show this screen.
"""

from docopt import docopt
import logging
import subprocess
import sys
from pathlib import Path
from typing import Optional

from labgrader.config import DEFAULT_CONFIG_PATH
from labgrader.config_loader import GraderConfig, load_config
from labgrader.errors import GraderError
from labgrader.lab import JavaLab
from labgrader.report import run_and_report

logger = logging.getLogger("labgrader")


def setup_logging(verbose: bool = False) -> None:
    """
    Configure root logging for the command line run.

    Args:
        verbose: Log DEBUG messages when True, INFO otherwise.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(name)s: %(asctime)s %(levelname)s %(message)s",
        datefmt="%Y/%m/%d %H:%M:%S",
    )
    logging.getLogger().setLevel(logging.DEBUG if verbose else logging.INFO)


def resolve_config(config_path: Optional[Path]) -> GraderConfig:
    """
    Load the configuration, falling back to defaults when none is given and
    the default file is absent.

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist.
    """
    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return GraderConfig()
        config_path = DEFAULT_CONFIG_PATH
    return load_config(config_path)


def open_report(editor: str | None, report_path: Path) -> None:
    """
    Open the finished report in the grader's editor.

    Args:
        editor: Editor command, or None to skip.
        report_path: Report to open.
    """
    if not editor:
        return
    try:
        subprocess.run([editor, str(report_path)], check=False)
    except OSError as e:
        logger.warning("Could not open %s with %s: %s", report_path, editor, e)


def grade_submission(zip_path: Path, config: GraderConfig) -> Path:
    """
    Build a submission, write its report and clean up.

    Cleanup after any failure (including an interrupt) is best effort;
    cleanup after a successful run must succeed.

    Args:
        zip_path: Path to the submission archive.
        config: Grader configuration.

    Returns:
        Path to the written report.

    Raises:
        GraderError: On any fatal failure.
    """
    lab = JavaLab.from_zip(zip_path, config)
    print(f"Processing {zip_path}")

    try:
        lab.build()
        report_path = run_and_report(lab)
    except BaseException:
        try:
            lab.clean_up()
        except GraderError as cleanup_error:
            logger.warning("%s", cleanup_error)
        raise

    lab.clean_up()
    return report_path


def main() -> int:
    """
    Main CLI entrypoint.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    arguments = docopt(__doc__)
    setup_logging(arguments["--verbose"])

    config_path = Path(arguments["--config"]) if arguments["--config"] else None
    try:
        config = resolve_config(config_path)
    except Exception as e:
        logger.error("Error loading config: %s", e)
        return 1

    if arguments["--verbose"]:
        config.verbose = True
    setup_logging(config.verbose)
    logger.info("Loading java sec policy %s", config.security_policy)

    try:
        report_path = grade_submission(Path(arguments["<zipfile>"]), config)
    except GraderError as e:
        logger.error("Fatal Error: %s", e)
        return 1
    except KeyboardInterrupt:
        print("\nGrading interrupted by user.")
        return 1
    except Exception as e:
        logger.error("Fatal Error: %s", e)
        if config.verbose:
            import traceback
            traceback.print_exc()
        return 1

    print(f"Report: {report_path}")

    if not arguments["--no-open"]:
        open_report(config.editor, report_path)

    return 0


if __name__ == "__main__":
    sys.exit(main())

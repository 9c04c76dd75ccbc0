"""
Configuration constants for the Lab Grader system.
"""

from pathlib import Path


# Execution configuration
COMMAND_TIMEOUT_SECONDS: float = 20
INPUT_DELAY_SECONDS: float = 0.2
MAX_OUTPUT_CHARS: int = 5000

# External tools
JAVA_COMMAND: list[str] = ["java"]
ANT_COMMAND: list[str] = ["ant"]
EDITOR_COMMAND: str = "mate"

# Java project layout
SOURCE_PACKAGE: str = "edu.carrollcc.cis132"
BUILD_FILENAME: str = "build.xml"
DIST_DIRNAME: str = "dist"

# Submission naming
# Matches: "RuskLabOne" -> "LabOne", "RuskMidterm" -> "Midterm"
LAB_NAME_PATTERN: str = r"(Lab.*?)$|(Midterm.*?)$"
ARCHIVE_SUFFIX: str = ".zip"

# Question fixture files, read from the fixtures directory
QUESTION_SOURCE_TEMPLATE: str = "Question{question}.java"
QUESTION_PACKAGE_TEMPLATE: str = "q{question}"
INPUT_FILE_TEMPLATE: str = "q{question}in{case}.txt"
OUTPUT_FILE_TEMPLATE: str = "q{question}out{case}.txt"
INPUT_SCRIPT_TEMPLATE: str = "q{question}in{case}.sh"
OUTPUT_SCRIPT_TEMPLATE: str = "q{question}out{case}.sh"
RUBRIC_FILE_TEMPLATE: str = "q{question}rubric.txt"

# Report placeholders
TO_GRADE: str = "TOGRADE"
EXECUTION_FAILED_NOTE: str = "\nExecution failed."

# Default paths (can be overridden via config file)
DEFAULT_CONFIG_PATH: Path = Path("grader_config.yml")
DEFAULT_TEMPLATE_ROOT: Path = Path("LabTemplate")
DEFAULT_FIXTURES_DIR: Path = Path(".")
DEFAULT_OUTPUT_DIR: Path = Path("output")
DEFAULT_SECURITY_POLICY: Path = Path("secpolicy")

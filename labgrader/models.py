"""
Pydantic models for the Lab Grader system.

Defines the paths derived from a submission archive and the outcome of
running a question program or helper script.
"""

from pathlib import Path

from pydantic import BaseModel, Field


class LabSubmission(BaseModel):
    """
    A student's lab archive and every path derived from its name.

    Attributes:
        zip_path: Path to the submitted archive.
        folder_name: Archive file name without the .zip suffix (e.g. "RuskLabOne").
        student_name: Text in front of the lab name (e.g. "Rusk").
        lab_name: Lab part of the name (e.g. "LabOne" or "Midterm").
        extract_path: Directory the archive is extracted into.
        lab_folder: Project folder inside the extracted archive.
        template_folder: Template project the lab is built in.
    """

    zip_path: Path = Field(..., description="Path to the submitted archive")
    folder_name: str = Field(..., description="Archive name without .zip")
    student_name: str = Field(default="", description="Student part of the archive name")
    lab_name: str = Field(..., description="Lab part of the archive name")
    extract_path: Path = Field(..., description="Extraction directory")
    lab_folder: Path = Field(..., description="Student project folder inside the extraction")
    template_folder: Path = Field(..., description="Template project used for building")


class ExecutionResult(BaseModel):
    """
    Result from running a question program or helper script.

    Attributes:
        success: Whether the process started and exited with status 0.
        output: Combined stdout/stderr, possibly truncated.
        exit_code: Process exit code (-1 if it never started).
        timeout_exceeded: Whether the process was killed for running too long.
        truncated: Whether the output was cut to the configured size.
    """

    success: bool = Field(..., description="Whether execution succeeded")
    output: str = Field(default="", description="Combined stdout and stderr")
    exit_code: int = Field(default=-1, description="Process exit code")
    timeout_exceeded: bool = Field(default=False, description="Whether timeout was exceeded")
    truncated: bool = Field(default=False, description="Whether output was truncated")

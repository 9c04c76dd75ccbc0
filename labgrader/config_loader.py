"""
Configuration loader for the Lab Grader system.

Handles parsing and validation of YAML configuration files.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from .config import (
    ANT_COMMAND,
    COMMAND_TIMEOUT_SECONDS,
    DEFAULT_FIXTURES_DIR,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SECURITY_POLICY,
    DEFAULT_TEMPLATE_ROOT,
    EDITOR_COMMAND,
    INPUT_DELAY_SECONDS,
    JAVA_COMMAND,
    MAX_OUTPUT_CHARS,
    SOURCE_PACKAGE,
)


class GraderConfig(BaseModel):
    """
    Configuration model for the grader.
    """
    template_root: Path = Field(DEFAULT_TEMPLATE_ROOT, description="Directory holding one template project per lab")
    fixtures_dir: Path = Field(DEFAULT_FIXTURES_DIR, description="Directory with question input/output/rubric files")
    output_dir: Path = Field(DEFAULT_OUTPUT_DIR, description="Directory where Markdown reports are written")
    security_policy: Path = Field(DEFAULT_SECURITY_POLICY, description="Java security manager policy file")
    source_package: str = Field(SOURCE_PACKAGE, description="Java package containing the QuestionN classes")

    java_command: list[str] = Field(default_factory=lambda: list(JAVA_COMMAND), description="JVM launcher")
    ant_command: list[str] = Field(default_factory=lambda: list(ANT_COMMAND), description="Ant launcher")
    editor: Optional[str] = Field(EDITOR_COMMAND, description="Command used to open the finished report")

    command_timeout_seconds: float = Field(COMMAND_TIMEOUT_SECONDS, gt=0, description="Hard timeout per program run")
    input_delay_seconds: float = Field(INPUT_DELAY_SECONDS, ge=0, description="Pause after each stdin line")
    max_output_chars: int = Field(MAX_OUTPUT_CHARS, gt=0, description="Captured output is truncated to this size")
    verbose: bool = Field(False, description="Enable verbose output")

    @property
    def source_subdir(self) -> Path:
        """Source directory of the question package, relative to a project root."""
        return Path("src", *self.source_package.split("."))


def load_config(config_path: Path) -> GraderConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        GraderConfig object with loaded values.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        yaml.YAMLError: If config file is invalid YAML.
        ValidationError: If config data is invalid.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f)

    if not config_data:
        return GraderConfig()

    # Resolve paths relative to the config file location (unless absolute)
    config_dir = config_path.parent
    for path_field in ["template_root", "fixtures_dir", "output_dir", "security_policy"]:
        if path_field in config_data and config_data[path_field]:
            path = Path(config_data[path_field])
            if not path.is_absolute():
                config_data[path_field] = config_dir / path

    return GraderConfig(**config_data)

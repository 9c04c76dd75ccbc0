"""
Pytest configuration and fixtures
"""
import sys
import textwrap
import zipfile
from pathlib import Path

import pytest

from labgrader.config_loader import GraderConfig

# Stand-in for the JVM: announces the main class, then echoes stdin.
FAKE_JAVA = textwrap.dedent(
    """
    import sys
    import time

    main_class = sys.argv[-1]
    print("Running " + main_class, flush=True)
    if main_class.endswith("Question9"):
        time.sleep(30)
    for line in sys.stdin:
        print("echo: " + line.rstrip("\\n"), flush=True)
    """
)

# Stand-in for Ant: fails when the build file asks it to.
FAKE_ANT = textwrap.dedent(
    """
    import sys
    from pathlib import Path

    build_file = Path(sys.argv[sys.argv.index("-f") + 1])
    if "FAIL" in build_file.read_text():
        print("BUILD FAILED")
        sys.exit(1)
    print("BUILD SUCCESSFUL")
    """
)

SOURCE_DIR = "src/edu/carrollcc/cis132"


@pytest.fixture
def config(tmp_path: Path) -> GraderConfig:
    """Grader configuration pointing at temporary directories and fake tools."""
    tools_dir = tmp_path / "tools"
    tools_dir.mkdir()
    fake_java = tools_dir / "fake_java.py"
    fake_java.write_text(FAKE_JAVA)
    fake_ant = tools_dir / "fake_ant.py"
    fake_ant.write_text(FAKE_ANT)

    fixtures_dir = tmp_path / "fixtures"
    fixtures_dir.mkdir()

    return GraderConfig(
        template_root=tmp_path / "LabTemplate",
        fixtures_dir=fixtures_dir,
        output_dir=tmp_path / "output",
        security_policy=tmp_path / "secpolicy",
        java_command=[sys.executable, str(fake_java)],
        ant_command=[sys.executable, str(fake_ant)],
        editor=None,
        command_timeout_seconds=5,
        input_delay_seconds=0.01,
    )


def make_template(config: GraderConfig, lab_name: str = "LabOne", build_xml: str = "<project/>") -> Path:
    """Create a template project with a build file."""
    template = config.template_root / lab_name
    template.mkdir(parents=True, exist_ok=True)
    (template / "build.xml").write_text(build_xml)
    return template


def make_submission(directory: Path, archive_name: str, lab_name: str, files: dict[str, str]) -> Path:
    """
    Create a submission archive.

    Args:
        directory: Where to put the archive.
        archive_name: File name of the archive (e.g. "RuskLabOne.zip").
        lab_name: Project folder inside the archive.
        files: Mapping of paths relative to the question package to contents.
    """
    directory.mkdir(parents=True, exist_ok=True)
    zip_path = directory / archive_name
    with zipfile.ZipFile(zip_path, "w") as zip_ref:
        zip_ref.writestr(f"{lab_name}/build.xml", "<project/>")
        for name, content in files.items():
            zip_ref.writestr(f"{lab_name}/{SOURCE_DIR}/{name}", content)
    return zip_path


@pytest.fixture
def submission(tmp_path: Path, config: GraderConfig) -> Path:
    """A two-question LabOne submission with its template project."""
    make_template(config)
    return make_submission(
        tmp_path / "submissions",
        "RuskLabOne.zip",
        "LabOne",
        {
            "Question1.java": "public class Question1 {}\n",
            "q1/Helper.java": "class Helper {}\n",
            "q1/notes.txt": "not java\n",
            "Question2.java": "public class Question2 {}\n",
        },
    )

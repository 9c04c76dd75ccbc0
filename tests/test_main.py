"""
Tests for the command line entrypoint.
"""
import logging
from pathlib import Path

import pytest
import yaml

import main
from labgrader.config_loader import GraderConfig
from labgrader.errors import BuildError


def run_main(monkeypatch, *args):
    monkeypatch.setattr("sys.argv", ["main.py", *args])
    return main.main()


@pytest.fixture
def config_file(tmp_path, config):
    path = tmp_path / "test_config.yml"
    data = config.model_dump(mode="json")
    path.write_text(yaml.safe_dump(data))
    return path


def test_missing_archive(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert run_main(monkeypatch, "RuskLabOne.zip", "--no-open") == 1


def test_malformed_archive_name(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "RuskHomework.zip").write_bytes(b"")

    assert run_main(monkeypatch, "RuskHomework.zip", "--no-open") == 1


def test_explicit_missing_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert run_main(monkeypatch, "RuskLabOne.zip", "--config=missing.yml") == 1


def test_resolve_config_defaults_when_default_file_absent(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert main.resolve_config(None) == GraderConfig()


def test_resolve_config_uses_default_file_when_present(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "grader_config.yml").write_text("max_output_chars: 42\n")

    assert main.resolve_config(None).max_output_chars == 42


def test_explicit_default_config_name_must_exist(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    with pytest.raises(FileNotFoundError):
        main.resolve_config(Path("grader_config.yml"))
    assert run_main(monkeypatch, "RuskLabOne.zip", "--config=grader_config.yml") == 1


def test_grades_submission(submission, config, config_file, monkeypatch):
    opened = []
    monkeypatch.setattr(main, "open_report", lambda editor, path: opened.append(path))

    assert run_main(monkeypatch, str(submission), f"--config={config_file}") == 0

    report_path = config.output_dir / "RuskLabOne.md"
    assert report_path.is_file()
    assert "# Question 2" in report_path.read_text()
    assert opened == [report_path]
    assert not submission.with_suffix("").exists()
    assert not (config.template_root / "LabOne" / "src" / "edu" / "carrollcc" / "cis132").exists()
    assert (config.template_root / "LabOne" / "build.xml").exists()


def test_no_open(submission, config_file, monkeypatch):
    opened = []
    monkeypatch.setattr(main, "open_report", lambda editor, path: opened.append(path))

    assert run_main(monkeypatch, str(submission), f"--config={config_file}", "--no-open") == 0
    assert opened == []


def test_build_failure_cleans_up(submission, config, config_file, monkeypatch):
    (config.template_root / "LabOne" / "build.xml").write_text("FAIL")

    assert run_main(monkeypatch, str(submission), f"--config={config_file}", "--no-open") == 1
    assert not submission.with_suffix("").exists()
    assert not (config.output_dir / "RuskLabOne.md").exists()


def test_grade_submission_raises_build_error(submission, config):
    (config.template_root / "LabOne" / "build.xml").write_text("FAIL")

    with pytest.raises(BuildError):
        main.grade_submission(submission, config)


def test_open_report_without_editor(tmp_path):
    main.open_report(None, tmp_path / "report.md")


def test_open_report_missing_editor(tmp_path):
    main.open_report("definitely-not-an-editor", tmp_path / "report.md")


@pytest.fixture
def restore_log_level():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


def test_verbose_from_config_file(tmp_path, monkeypatch, restore_log_level):
    config_path = tmp_path / "verbose.yml"
    config_path.write_text("verbose: true\n")
    monkeypatch.chdir(tmp_path)

    run_main(monkeypatch, "RuskLabOne.zip", f"--config={config_path}", "--no-open")

    assert logging.getLogger().level == logging.DEBUG


def test_default_log_level(tmp_path, monkeypatch, restore_log_level):
    monkeypatch.chdir(tmp_path)

    run_main(monkeypatch, "RuskLabOne.zip", "--no-open")

    assert logging.getLogger().level == logging.INFO


def test_unwritable_report_cleans_up(submission, config, tmp_path, monkeypatch):
    blocker = tmp_path / "outfile"
    blocker.write_text("")
    config.output_dir = blocker
    config_path = tmp_path / "blocked.yml"
    config_path.write_text(yaml.safe_dump(config.model_dump(mode="json")))

    assert run_main(monkeypatch, str(submission), f"--config={config_path}", "--no-open") == 1
    assert not submission.with_suffix("").exists()
    assert not (config.template_root / "LabOne" / "src" / "edu" / "carrollcc" / "cis132").exists()


def test_interrupt_cleans_up(submission, config, monkeypatch):
    def interrupted(lab):
        raise KeyboardInterrupt

    monkeypatch.setattr(main, "run_and_report", interrupted)

    with pytest.raises(KeyboardInterrupt):
        main.grade_submission(submission, config)
    assert not submission.with_suffix("").exists()
    assert not (config.template_root / "LabOne" / "src" / "edu" / "carrollcc" / "cis132").exists()


def test_unexpected_error_is_fatal(submission, config_file, monkeypatch):
    def broken(lab):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(main, "run_and_report", broken)

    assert run_main(monkeypatch, str(submission), f"--config={config_file}", "--no-open") == 1
    assert not submission.with_suffix("").exists()

from __future__ import annotations

import io
import json
import subprocess
from pathlib import Path

import pytest

from packinit.cli._dispatcher import build_parser, discover_root_commands, main
from packinit.core.setup.installer import DependencyInstaller

from helpers.answers import PRODUCTION_ANSWERS, answers, write_answers_file


@pytest.fixture
def answers_file(tmp_path: Path):
    def _make(data) -> str:
        return str(write_answers_file(tmp_path / "answers.yml", data))

    return _make


def test_commands_are_discovered() -> None:
    commands = discover_root_commands()

    assert {"init", "show"} <= set(commands)
    for info in commands.values():
        assert callable(info["main"])
        assert callable(info["register_args"])


def test_parser_accepts_init_flags() -> None:
    args = build_parser().parse_args(
        ["init", "app", "--answers", "a.yml", "--skip-install", "--dry-run", "--force", "--json", "-v"]
    )

    assert args.project_path == "app"
    assert args.answers == "a.yml"
    assert args.skip_install and args.dry_run and args.force and args.json and args.verbose


def test_no_command_prints_help(capsys) -> None:
    assert main([]) == 0
    assert "init" in capsys.readouterr().out


def test_version_flag(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--version"])

    assert exc.value.code == 0
    assert "packinit" in capsys.readouterr().out


def test_init_with_answers_file(project: Path, answers_file, capsys) -> None:
    code = main(["init", str(project), "--answers", answers_file(answers(stylingType="SASS")), "--skip-install"])

    assert code == 0
    assert (project / "webpack.dev.js").exists()
    assert (project / ".packinit" / "configuration.yml").exists()
    out = capsys.readouterr().out
    assert "Generated webpack.dev.js" in out
    assert "sass-loader" in out


def test_init_json_dry_run(project: Path, answers_file, capsys) -> None:
    data = {**PRODUCTION_ANSWERS, "stylingType": "CSS", "extractPlugin": "main"}

    code = main(["init", str(project), "--answers", answers_file(data), "--dry-run", "--json"])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "success"
    assert payload["configName"] == "prod"
    assert payload["isProd"] is True
    assert "mini-css-extract-plugin" in payload["dependencies"]
    assert payload["install"]["dryRun"] is True
    assert payload["install"]["production"] is True
    assert payload["install"]["packageManager"] in {"npm", "yarn"}
    assert payload["install"]["command"][-len(payload["dependencies"]):] == payload["dependencies"]


def test_init_json_requires_answers(project: Path, capsys) -> None:
    assert main(["init", str(project), "--json"]) == 1
    err = json.loads(capsys.readouterr().err)
    assert "--answers" in err["message"]


def test_init_rejects_invalid_answer(project: Path, answers_file, capsys) -> None:
    code = main(["init", str(project), "--answers", answers_file(answers(stylingType="Stylus")), "--skip-install"])

    assert code == 1
    assert "Invalid input for step 'stylingType'" in capsys.readouterr().err
    assert not (project / "webpack.dev.js").exists()


def test_init_invalid_answer_json_payload(project: Path, answers_file, capsys) -> None:
    data = answers(babelConfirm="sure")

    code = main(["init", str(project), "--answers", answers_file(data), "--skip-install", "--json"])

    assert code == 1
    err = json.loads(capsys.readouterr().err)
    assert err["error"] == "InvalidAnswerError"
    assert err["context"]["question_id"] == "babelConfirm"


def test_init_respects_existing_files_unless_forced(project: Path, answers_file) -> None:
    target = project / "webpack.dev.js"
    target.write_text("// keep\n", encoding="utf-8")
    path = answers_file(answers())

    assert main(["init", str(project), "--answers", path, "--skip-install"]) == 0
    assert target.read_text(encoding="utf-8") == "// keep\n"

    assert main(["init", str(project), "--answers", path, "--skip-install", "--force"]) == 0
    assert target.read_text(encoding="utf-8").startswith("const webpack")


def test_init_install_failure_still_lists_written_files(project: Path, answers_file, monkeypatch, capsys) -> None:
    def failing_installer(root, package_manager="auto"):
        return DependencyInstaller(
            root,
            package_manager="npm",
            run_func=lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 1),
        )

    monkeypatch.setattr("packinit.core.setup.DependencyInstaller", failing_installer)

    code = main(["init", str(project), "--answers", answers_file(answers())])

    captured = capsys.readouterr()
    assert code == 1
    assert "Files written:" in captured.out
    assert "webpack.dev.js" in captured.out
    assert "Error:" in captured.err


def test_init_writes_log_file(project: Path, answers_file) -> None:
    log_file = project / "init.log"

    code = main(
        ["init", str(project), "--answers", answers_file(answers()), "--skip-install", "--log-file", str(log_file)]
    )

    assert code == 0
    assert "Init complete" in log_file.read_text(encoding="utf-8")


def test_init_reports_bad_settings(project: Path, answers_file, monkeypatch, capsys) -> None:
    monkeypatch.setenv("PACKINIT_install__package_manager", "pnpm")

    assert main(["init", str(project), "--answers", answers_file(answers()), "--skip-install"]) == 1
    assert "install.package_manager" in capsys.readouterr().err


def test_console_end_of_input_exits_130(project: Path, monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(""))

    assert main(["init", str(project), "--skip-install"]) == 130
    captured = capsys.readouterr()
    assert "INFO For more information" in captured.out
    assert "Interrupted" in captured.err


def test_show_stored_configuration(project: Path, answers_file, capsys) -> None:
    main(["init", str(project), "--answers", answers_file(answers(stylingType="CSS")), "--skip-install"])
    capsys.readouterr()

    assert main(["show", str(project)]) == 0
    out = capsys.readouterr().out
    assert "webpack.dev.js" in out
    assert "mode: development" in out

    assert main(["show", str(project), "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["configName"] == "dev"
    assert data["webpackOptions"]["plugins"] == ["new UglifyJSPlugin()"]


def test_show_without_init(project: Path, capsys) -> None:
    assert main(["show", str(project)]) == 1
    assert "No stored configuration" in capsys.readouterr().err

"""End-to-end tests: workflow graph, commands and CLI."""

import asyncio

import pytest
from pydantic_graph import End
from pydantic_settings import CliApp

from gradletiming.cli import CliState
from gradletiming.command.inspect import InspectCommand
from gradletiming.command.snippet import SnippetCommand
from gradletiming.core.config import State
from gradletiming.workflow.graph import create_workflow
from gradletiming.workflow.nodes.scan import ScanDirectory


@pytest.fixture
def state(mock_argv, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return State()


def test_workflow_ends_with_result(state, build_logs):
    workflow = create_workflow()

    async def run():
        async with workflow.iter(
            ScanDirectory(directory=build_logs), state=state
        ) as graph_run:
            async for node in graph_run:
                if isinstance(node, End):
                    return node.data
        return None

    result = asyncio.run(run())

    assert result.build_count == 3
    assert result.total_duration_ms == 465
    assert result.longest_duration_ms == 300
    assert state.runtime.inspect.status == "complete"
    assert len(state.runtime.inspect.files) == 3


def test_inspect_command_prints_report(state, build_logs, capsys):
    exit_code = asyncio.run(
        InspectCommand(directory=build_logs).run_workflow(state)
    )

    assert exit_code == 0
    assert capsys.readouterr().out.splitlines()[-4:] == [
        "Builds: 3",
        "Total: 0.465 sec",
        "Average: 155.0 ms",
        "Longest: 300 ms",
    ]


def test_subdirectory_is_not_a_build(state, build_logs, capsys):
    nested = build_logs / "archive"
    nested.mkdir()
    (nested / "old.txt").write_text("99999 ms \t :old\n")

    asyncio.run(InspectCommand(directory=build_logs).run_workflow(state))

    out = capsys.readouterr().out
    assert "Builds: 3" in out
    assert "Longest: 300 ms" in out


def test_runs_do_not_share_results(state, build_logs, tmp_path, capsys):
    empty = tmp_path / "empty"
    empty.mkdir()

    asyncio.run(InspectCommand(directory=build_logs).run_workflow(state))
    asyncio.run(InspectCommand(directory=empty).run_workflow(state))

    assert state.runtime.inspect.result.build_count == 0
    assert capsys.readouterr().out.splitlines()[-4:] == [
        "Builds: 0",
        "Total: 0.0 sec",
        "Average: N/A",
        "Longest: 0 ms",
    ]


def test_missing_directory_reports_na(state, tmp_path, capsys):
    exit_code = asyncio.run(
        InspectCommand(directory=tmp_path / "nope").run_workflow(state)
    )

    assert exit_code == 0
    assert "Average: N/A" in capsys.readouterr().out


def test_directory_from_config(state, build_logs, capsys):
    state.config.inspect.directory = build_logs

    exit_code = asyncio.run(InspectCommand().run_workflow(state))

    assert exit_code == 0
    assert "Builds: 3" in capsys.readouterr().out


def test_no_directory_given(state, capsys):
    exit_code = asyncio.run(InspectCommand().run_workflow(state))

    assert exit_code == 2
    assert "Builds:" not in capsys.readouterr().out


def test_snippet_command_stdout(state, capsys):
    state.config.snippet.dir_name = "timings"

    exit_code = asyncio.run(SnippetCommand().run_workflow(state))

    out = capsys.readouterr().out
    assert exit_code == 0
    assert 'DIR_NAME = "timings"' in out


def test_snippet_command_writes_file(state, tmp_path):
    target = tmp_path / "gradle" / "timings.gradle"

    asyncio.run(SnippetCommand(output=target).run_workflow(state))

    assert "class TimingsListener" in target.read_text()


def test_cli_inspect(mock_argv, tmp_path, monkeypatch, build_logs, capsys):
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as exc:
        CliApp.run(
            CliState, cli_args=["inspect", "--directory", str(build_logs)]
        )

    assert exc.value.code == 0
    assert "Builds: 3" in capsys.readouterr().out


def test_cli_snippet_to_file(mock_argv, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "snippet.gradle"

    with pytest.raises(SystemExit) as exc:
        CliApp.run(CliState, cli_args=["snippet", "--output", str(target)])

    assert exc.value.code == 0
    assert "gradle.addListener new TimingsListener()" in target.read_text()


def test_unlistable_directory_reports_na(state, tmp_path, capsys):
    loop = tmp_path / "loop"
    loop.symlink_to(loop)

    exit_code = asyncio.run(InspectCommand(directory=loop).run_workflow(state))

    assert exit_code == 0
    assert "Builds: 0" in capsys.readouterr().out

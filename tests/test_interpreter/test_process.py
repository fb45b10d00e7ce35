"""Tests for process orchestration."""

import os
import signal
import stat
import time

import pytest

from liteshell.ast import PipelineSpec, RedirectionSpec
from liteshell.interpreter.errors import SpawnError
from liteshell.interpreter.process import EXIT_NOT_EXECUTABLE, EXIT_NOT_FOUND, exit_status, run_pipeline

ENV = dict(os.environ)


def spec(*stages, output=None, input=None, append=False, background=False):
    return PipelineSpec(
        stages=tuple(tuple(s) for s in stages),
        redirection=RedirectionSpec(input_path=input, output_path=output, append=append),
        background=background,
    )


def open_fds() -> set[str]:
    return set(os.listdir("/proc/self/fd"))


needs_proc = pytest.mark.skipif(
    not os.path.isdir("/proc/self/fd"), reason="needs /proc/self/fd"
)


class TestSingleStage:
    """One child process."""

    @pytest.mark.asyncio
    async def test_exit_status(self, tmp_path):
        assert (await run_pipeline(spec(["true"]), str(tmp_path), ENV)).exit_code == 0
        assert (await run_pipeline(spec(["false"]), str(tmp_path), ENV)).exit_code == 1

    @pytest.mark.asyncio
    async def test_output_redirect(self, tmp_path):
        result = await run_pipeline(spec(["echo", "hello"], output="out.txt"), str(tmp_path), ENV)
        assert result.exit_code == 0
        assert (tmp_path / "out.txt").read_text() == "hello\n"

    @pytest.mark.asyncio
    async def test_output_truncates(self, tmp_path):
        (tmp_path / "out.txt").write_text("old contents that are long\n")
        await run_pipeline(spec(["echo", "new"], output="out.txt"), str(tmp_path), ENV)
        assert (tmp_path / "out.txt").read_text() == "new\n"

    @pytest.mark.asyncio
    async def test_output_appends(self, tmp_path):
        (tmp_path / "out.txt").write_text("first\n")
        await run_pipeline(
            spec(["echo", "second"], output="out.txt", append=True), str(tmp_path), ENV
        )
        assert (tmp_path / "out.txt").read_text() == "first\nsecond\n"

    @pytest.mark.asyncio
    async def test_input_redirect(self, tmp_path):
        (tmp_path / "in.txt").write_text("b\na\nc\n")
        result = await run_pipeline(
            spec(["sort"], input="in.txt", output="out.txt"), str(tmp_path), ENV
        )
        assert result.exit_code == 0
        assert (tmp_path / "out.txt").read_text() == "a\nb\nc\n"

    @pytest.mark.asyncio
    async def test_runs_in_given_directory(self, tmp_path):
        (tmp_path / "sub").mkdir()
        await run_pipeline(spec(["touch", "made-here"]), str(tmp_path / "sub"), ENV)
        assert (tmp_path / "sub" / "made-here").exists()

    @pytest.mark.asyncio
    async def test_environment_passed(self, tmp_path):
        env = dict(ENV, LITESHELL_TEST_VALUE="from-env")
        await run_pipeline(
            spec(["sh", "-c", 'echo "$LITESHELL_TEST_VALUE"'], output="out.txt"),
            str(tmp_path),
            env,
        )
        assert (tmp_path / "out.txt").read_text() == "from-env\n"

    @pytest.mark.asyncio
    async def test_killed_by_signal(self, tmp_path):
        result = await run_pipeline(spec(["sh", "-c", "kill -TERM $$"]), str(tmp_path), ENV)
        assert result.exit_code == 128 + signal.SIGTERM


class TestExecFailures:
    """Programs that cannot be run."""

    @pytest.mark.asyncio
    async def test_command_not_found(self, tmp_path):
        result = await run_pipeline(spec(["no_such_command_xyz"]), str(tmp_path), ENV)
        assert result.exit_code == EXIT_NOT_FOUND
        assert result.spawn_failed
        assert "no_such_command_xyz: command not found" in result.stderr

    @pytest.mark.asyncio
    async def test_not_executable(self, tmp_path):
        script = tmp_path / "script.sh"
        script.write_text("#!/bin/sh\necho hi\n")
        script.chmod(stat.S_IRUSR | stat.S_IWUSR)
        result = await run_pipeline(spec(["./script.sh"]), str(tmp_path), ENV)
        assert result.exit_code == EXIT_NOT_EXECUTABLE
        assert result.spawn_failed

    @pytest.mark.asyncio
    async def test_missing_stage_in_pipeline(self, tmp_path):
        result = await run_pipeline(
            spec(["echo", "hi"], ["no_such_command_xyz"], ["cat"], output="out.txt"),
            str(tmp_path),
            ENV,
        )
        # cat still ran and saw end of input
        assert result.exit_code == 0
        assert not result.spawn_failed
        assert "command not found" in result.stderr
        assert (tmp_path / "out.txt").read_text() == ""

    @pytest.mark.asyncio
    async def test_missing_last_stage(self, tmp_path):
        result = await run_pipeline(
            spec(["echo", "hi"], ["no_such_command_xyz"]), str(tmp_path), ENV
        )
        assert result.exit_code == EXIT_NOT_FOUND

    @pytest.mark.asyncio
    async def test_missing_input_file(self, tmp_path):
        with pytest.raises(SpawnError) as exc_info:
            await run_pipeline(spec(["cat"], input="missing.txt"), str(tmp_path), ENV)
        assert "missing.txt" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_unwritable_output(self, tmp_path):
        with pytest.raises(SpawnError):
            await run_pipeline(
                spec(["echo", "hi"], output="no/such/dir/out.txt"), str(tmp_path), ENV
            )

    @pytest.mark.asyncio
    async def test_missing_working_directory(self, tmp_path):
        with pytest.raises(SpawnError):
            await run_pipeline(spec(["true"]), str(tmp_path / "gone"), ENV)


class TestPipelines:
    """Several stages joined by pipes."""

    @pytest.mark.asyncio
    async def test_three_stage_pass_through(self, tmp_path):
        result = await run_pipeline(
            spec(["echo", "X"], ["cat"], ["cat"], output="out.txt"), str(tmp_path), ENV
        )
        assert result.exit_code == 0
        assert (tmp_path / "out.txt").read_text() == "X\n"

    @pytest.mark.asyncio
    async def test_data_flows_through_filters(self, tmp_path):
        (tmp_path / "in.txt").write_text("pear\napple\npear\nfig\n")
        await run_pipeline(
            spec(["cat"], ["sort"], ["uniq"], input="in.txt", output="out.txt"),
            str(tmp_path),
            ENV,
        )
        assert (tmp_path / "out.txt").read_text() == "apple\nfig\npear\n"

    @pytest.mark.asyncio
    async def test_status_of_last_stage(self, tmp_path):
        assert (await run_pipeline(spec(["true"], ["false"]), str(tmp_path), ENV)).exit_code == 1
        assert (await run_pipeline(spec(["false"], ["true"]), str(tmp_path), ENV)).exit_code == 0

    @pytest.mark.asyncio
    async def test_large_output_streams(self, tmp_path):
        # More than a pipe buffer; only works if stages run concurrently
        result = await run_pipeline(
            spec(["seq", "1", "200000"], ["cat"], ["wc", "-l"], output="out.txt"),
            str(tmp_path),
            ENV,
        )
        assert result.exit_code == 0
        assert (tmp_path / "out.txt").read_text().strip() == "200000"

    @pytest.mark.asyncio
    async def test_reader_exits_early(self, tmp_path):
        result = await run_pipeline(
            spec(["seq", "1", "1000000"], ["head", "-n", "1"], output="out.txt"),
            str(tmp_path),
            ENV,
        )
        assert result.exit_code == 0
        assert (tmp_path / "out.txt").read_text() == "1\n"


class TestDescriptors:
    """The shell must not keep any pipe or redirect descriptor open."""

    @needs_proc
    @pytest.mark.asyncio
    async def test_no_leak_after_pipeline(self, tmp_path):
        (tmp_path / "in.txt").write_text("x\n")
        before = open_fds()
        await run_pipeline(
            spec(["cat"], ["cat"], ["cat"], input="in.txt", output="out.txt"),
            str(tmp_path),
            ENV,
        )
        assert open_fds() == before

    @needs_proc
    @pytest.mark.asyncio
    async def test_no_leak_after_exec_failure(self, tmp_path):
        before = open_fds()
        await run_pipeline(
            spec(["echo"], ["no_such_command_xyz"], ["cat"], output="out.txt"),
            str(tmp_path),
            ENV,
        )
        assert open_fds() == before

    @needs_proc
    @pytest.mark.asyncio
    async def test_no_leak_after_redirect_failure(self, tmp_path):
        (tmp_path / "in.txt").write_text("x\n")
        before = open_fds()
        with pytest.raises(SpawnError):
            await run_pipeline(
                spec(["cat"], ["cat"], input="in.txt", output="no/dir/out.txt"),
                str(tmp_path),
                ENV,
            )
        assert open_fds() == before


class TestBackground:
    """Fire-and-forget execution."""

    @pytest.mark.asyncio
    async def test_returns_immediately(self, tmp_path):
        start = time.monotonic()
        result = await run_pipeline(spec(["sleep", "100"], background=True), str(tmp_path), ENV)
        elapsed = time.monotonic() - start
        try:
            assert elapsed < 5
            assert result.exit_code == 0
            assert len(result.pids) == 1
            assert result.stdout == f"[{result.pids[0]}]\n"
        finally:
            os.killpg(result.pids[0], signal.SIGKILL)

    @pytest.mark.asyncio
    async def test_pipeline_shares_process_group(self, tmp_path):
        result = await run_pipeline(
            spec(["sleep", "100"], ["cat"], background=True), str(tmp_path), ENV
        )
        try:
            assert len(result.pids) == 2
            leader = result.pids[0]
            assert os.getpgid(leader) == leader
            assert os.getpgid(result.pids[1]) == leader
            assert os.getpgid(leader) != os.getpgrp()
        finally:
            os.killpg(result.pids[0], signal.SIGKILL)

    @pytest.mark.asyncio
    async def test_background_output_redirect(self, tmp_path):
        result = await run_pipeline(
            spec(["echo", "later"], output="out.txt", background=True), str(tmp_path), ENV
        )
        assert result.pids
        deadline = time.monotonic() + 5
        while time.monotonic() < deadline:
            if (tmp_path / "out.txt").read_text() == "later\n":
                break
            time.sleep(0.05)
        assert (tmp_path / "out.txt").read_text() == "later\n"


class TestExitStatus:
    def test_normal(self):
        assert exit_status(0) == 0
        assert exit_status(3) == 3

    def test_signal(self):
        assert exit_status(-9) == 137

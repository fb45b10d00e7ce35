"""Process orchestration for liteshell.

Runs a PipelineSpec as real child processes.

Every descriptor the shell opens for a command line (redirect files and
both ends of every pipe) is registered on one ExitStack and closed in the
shell as soon as all stages have been started, or as soon as the command is
abandoned. Children are started with ``close_fds=True`` so each one holds
only its own standard streams. A write end left open anywhere would keep
the next stage waiting for input forever.
"""

from __future__ import annotations

import asyncio
import contextlib
import errno
import os
import subprocess
from typing import Optional

import structlog

from ..ast.types import PipelineSpec
from ..types import ExecResult
from .errors import SpawnError

logger = structlog.get_logger()

EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127

_EXEC_ERRORS = (FileNotFoundError, PermissionError, IsADirectoryError, NotADirectoryError)


def exit_status(returncode: int) -> int:
    """Convert a Popen return code to a shell exit status."""
    # Popen reports death by signal N as -N
    if returncode < 0:
        return 128 - returncode
    return returncode


def _open_redirect(path: str, cwd: str, flags: int) -> int:
    try:
        return os.open(os.path.join(cwd, path), flags, 0o666)
    except OSError as e:
        raise SpawnError(f"{path}: {e.strerror}") from e


def _exec_failure(argv0: str, error: OSError) -> Optional[tuple[int, str]]:
    """Classify an error raised while starting a child.

    Returns (status, message) when the program itself could not be run, or
    None when the failure was in creating the process.
    """
    if isinstance(error, FileNotFoundError):
        return EXIT_NOT_FOUND, f"{argv0}: command not found"
    if isinstance(error, _EXEC_ERRORS) or error.errno == errno.ENOEXEC:
        return EXIT_NOT_EXECUTABLE, f"{argv0}: {error.strerror}"
    return None


def _spawn(
    argv: tuple[str, ...],
    stdin: Optional[int],
    stdout: Optional[int],
    cwd: str,
    env: dict[str, str],
    process_group: Optional[int],
) -> subprocess.Popen:
    kwargs = {}
    if process_group is not None:
        kwargs["process_group"] = process_group
    return subprocess.Popen(
        list(argv),
        stdin=stdin,
        stdout=stdout,
        cwd=cwd,
        env=env,
        close_fds=True,
        **kwargs,
    )


async def wait_all(procs: list[subprocess.Popen]) -> list[int]:
    """Wait for every process, returning their exit statuses in order.

    Waits run in worker threads so the event loop stays responsive. If the
    caller is cancelled (Ctrl-C), the processes are still reaped before the
    cancellation is passed on.
    """
    if not procs:
        return []
    waiters = asyncio.gather(*(asyncio.to_thread(proc.wait) for proc in procs))
    try:
        codes = await asyncio.shield(waiters)
    except asyncio.CancelledError:
        await waiters
        raise
    return [exit_status(code) for code in codes]


async def run_pipeline(spec: PipelineSpec, cwd: str, env: dict[str, str]) -> ExecResult:
    """Start every stage of a pipeline and wait for it unless it runs in the background.

    Args:
        spec: The parsed command line.
        cwd: Working directory for the children and for relative redirect paths.
        env: Environment for the children (PATH is looked up here).

    Returns:
        ExecResult with the last stage's exit status, or the background pids.

    Raises:
        SpawnError: A redirect file, pipe or process could not be created.
    """
    stage_count = len(spec.stages)
    statuses: list[Optional[int]] = [None] * stage_count
    procs: list[Optional[subprocess.Popen]] = [None] * stage_count
    errors: list[str] = []
    process_group: Optional[int] = 0 if spec.background else None

    with contextlib.ExitStack() as fds:

        def track(fd: int) -> int:
            fds.callback(os.close, fd)
            return fd

        redirection = spec.redirection
        stdin_fd: Optional[int] = None
        stdout_fd: Optional[int] = None
        if redirection.input_path is not None:
            stdin_fd = track(_open_redirect(redirection.input_path, cwd, os.O_RDONLY))
        elif spec.background:
            stdin_fd = subprocess.DEVNULL
        if redirection.output_path is not None:
            flags = os.O_WRONLY | os.O_CREAT
            flags |= os.O_APPEND if redirection.append else os.O_TRUNC
            stdout_fd = track(_open_redirect(redirection.output_path, cwd, flags))

        pipes: list[tuple[int, int]] = []
        for _ in range(stage_count - 1):
            try:
                read_fd, write_fd = os.pipe()
            except OSError as e:
                raise SpawnError(f"pipe: {e.strerror}") from e
            pipes.append((track(read_fd), track(write_fd)))

        for i, argv in enumerate(spec.stages):
            stage_in = pipes[i - 1][0] if i > 0 else stdin_fd
            stage_out = pipes[i][1] if i < stage_count - 1 else stdout_fd
            try:
                proc = _spawn(argv, stage_in, stage_out, cwd, env, process_group)
            except OSError as e:
                failure = _exec_failure(argv[0], e)
                if failure is None or e.filename == cwd:
                    # Close our ends first so the stages already running see EOF
                    fds.close()
                    started = [p for p in procs if p is not None]
                    if not spec.background:
                        await wait_all(started)
                    logger.warning("spawn_failed", argv=list(argv), error=str(e))
                    raise SpawnError(f"{argv[0]}: {e.strerror or e}") from e
                statuses[i], message = failure
                errors.append(message)
                logger.debug("exec_failed", argv=list(argv), status=statuses[i])
                continue

            procs[i] = proc
            if spec.background and process_group == 0:
                # First stage leads the background process group
                process_group = proc.pid
            logger.debug("stage_spawned", argv=list(argv), pid=proc.pid, stage=i)

    stderr = "".join(f"liteshell: {message}\n" for message in errors)
    started = [p for p in procs if p is not None]

    if spec.background:
        pids = tuple(p.pid for p in started)
        logger.info("background_started", pids=list(pids))
        return ExecResult(
            stdout="".join(f"[{pid}]\n" for pid in pids),
            stderr=stderr,
            exit_code=0 if started else (statuses[-1] or 0),
            pids=pids,
            spawn_failed=not started,
        )

    codes = iter(await wait_all(started))
    for i, proc in enumerate(procs):
        if proc is not None:
            statuses[i] = next(codes)

    exit_code = statuses[-1] if statuses[-1] is not None else 0
    logger.debug("pipeline_finished", statuses=statuses)
    return ExecResult(
        stderr=stderr,
        exit_code=exit_code,
        spawn_failed=not started,
    )

"""Child process execution for cargo and binutils invocations.

Every external command tako runs goes through a ProcessRunner so the
build, test and dump logic can be exercised with a scripted runner.

Design:
    - SubprocessRunner streams the child's stdout line by line while a
      helper thread drains stderr, so compiler output shows up as it is
      produced and neither pipe can fill up and stall the child
    - The caller blocks until the child exits; there is no timeout
    - On KeyboardInterrupt the whole child process tree is terminated
"""

import logging
import subprocess
import sys
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import IO, List, Mapping, Optional

import psutil

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Exit status and captured output of a finished child process."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class ProcessRunner(ABC):
    """Spawns a command and waits for it to finish.

    Implementations raise OSError when the command cannot be spawned at
    all; a nonzero exit is reported through ProcessResult.returncode.
    """

    @abstractmethod
    def run(
        self,
        command: List[str],
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
        echo: bool = True,
    ) -> ProcessResult:
        """Run command to completion.

        Args:
            command: Program followed by its arguments
            env: Full environment for the child (None inherits ours)
            cwd: Working directory for the child
            echo: Whether to forward output to the console while running

        Returns:
            ProcessResult with exit code and captured output
        """


class SubprocessRunner(ProcessRunner):
    """ProcessRunner backed by subprocess.Popen."""

    def run(
        self,
        command: List[str],
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
        echo: bool = True,
    ) -> ProcessResult:
        logger.debug(f"Spawning {command} (cwd={cwd})")
        proc = subprocess.Popen(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=dict(env) if env is not None else None,
            cwd=str(cwd) if cwd is not None else None,
            text=True,
            bufsize=1,
            errors="replace",
        )

        stderr_lines: List[str] = []
        stderr_thread = threading.Thread(
            target=_drain,
            args=(proc.stderr, stderr_lines, sys.stderr if echo else None),
            daemon=True,
        )
        stderr_thread.start()

        stdout_lines: List[str] = []
        try:
            _drain(proc.stdout, stdout_lines, sys.stdout if echo else None)
            returncode = proc.wait()
        except KeyboardInterrupt:
            _terminate_tree(proc.pid)
            raise
        finally:
            stderr_thread.join()

        logger.debug(f"{command[0]} exited with code {returncode}")
        return ProcessResult(
            returncode=returncode,
            stdout="".join(stdout_lines),
            stderr="".join(stderr_lines),
        )


def _drain(stream: Optional[IO[str]], sink: List[str], echo: Optional[IO[str]]) -> None:
    if stream is None:
        return
    with stream:
        for line in stream:
            sink.append(line)
            if echo is not None:
                echo.write(line)
                echo.flush()


def _terminate_tree(pid: int) -> None:
    """Terminate a process and all of its children, children first."""
    try:
        root = psutil.Process(pid)
        processes = [root] + root.children(recursive=True)
    except psutil.NoSuchProcess:
        return

    for proc in reversed(processes):
        try:
            proc.terminate()
        except psutil.NoSuchProcess:
            pass

    _gone, alive = psutil.wait_procs(processes, timeout=3)
    for proc in alive:
        try:
            proc.kill()
            logger.warning(f"Force killed stubborn process {proc.pid}")
        except psutil.NoSuchProcess:
            pass

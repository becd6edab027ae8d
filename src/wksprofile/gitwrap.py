# src/wksprofile/gitwrap.py: Safe subprocess wrappers for Git.
# This module provides the Git Process Client used by the profile commands.
# Every call runs the system 'git' executable in an explicitly supplied
# working directory with a controlled environment, and turns failures into
# GitError. The client itself holds no mutable state: the directory to
# operate on is passed to each operation.

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .util.errors import FilesystemError, GitError
from .util.fs import make_dirs, remove_tree

logger = logging.getLogger(__name__)

# --- Core Git Execution ---

def run_git(
    args: List[str],
    cwd: Path,
    timeout: Optional[int] = None,
    check: bool = True,
    env: Optional[Dict[str, str]] = None,
    capture: bool = True,
) -> subprocess.CompletedProcess:
    """
    Runs a git command in a specified directory with error handling.

    Args:
        args: A list of arguments for the git command.
        cwd: The working directory for the command.
        timeout: Optional command timeout in seconds. None waits forever.
        check: If True, raises GitError on a non-zero exit code.
        env: Environment variables layered over the parent environment.
        capture: If False, git writes straight to the inherited stdout/stderr.

    Returns:
        The CompletedProcess object.

    Raises:
        GitError: If git is not found, the command fails, or it times out.
    """
    cwd = Path(cwd)
    if not cwd.is_dir():
        raise GitError(f"Git working directory not found: {cwd}")

    base_env = os.environ.copy()
    base_env["GIT_TERMINAL_PROMPT"] = "0"
    if env:
        base_env.update(env)

    logger.debug("running git %s in %s", args, cwd)
    try:
        return subprocess.run(
            ["git"] + args,
            cwd=cwd,
            capture_output=capture,
            text=True,
            timeout=timeout,
            check=check,
            env=base_env,
        )
    except FileNotFoundError:
        raise GitError("The 'git' command was not found. Is it installed and in your PATH?")
    except subprocess.CalledProcessError as e:
        error_message = ((e.stderr or "").strip() or (e.stdout or "").strip()
                         or f"exit status {e.returncode}")
        raise GitError(f"Git command '{' '.join(args)}' failed: {error_message}")
    except subprocess.TimeoutExpired:
        raise GitError(f"Git command '{' '.join(args)}' timed out after {timeout} seconds.")


# --- Option objects ---

@dataclass(frozen=True)
class CloneOptions:
    """What to clone: a repository URL and an optional checkout-able revision."""
    url: str
    revision: Optional[str] = None


# --- Client ---

def ssh_env(private_ssh_key_path: Optional[str]) -> Dict[str, str]:
    """Environment overrides that make git use a specific SSH private key."""
    if not private_ssh_key_path:
        return {}
    return {"GIT_SSH_COMMAND": f"ssh -i {private_ssh_key_path}"}


class GitClient:
    """Runs git operations on behalf of the profile commands."""

    def __init__(
        self,
        private_ssh_key_path: Optional[str] = None,
        timeout: Optional[int] = None,
        stream_output: bool = True,
    ):
        self._env = ssh_env(private_ssh_key_path)
        self._timeout = timeout
        self._capture = not stream_output

    def _git(self, cwd: Path, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        return run_git(
            list(args),
            cwd=cwd,
            timeout=self._timeout,
            check=check,
            env=self._env,
            capture=self._capture,
        )

    def add(self, cwd: Path, *paths: str) -> None:
        """Stages the given paths."""
        self._git(cwd, "add", "--", *paths)

    def remove_recursive(self, cwd: Path, *paths: str) -> None:
        """Removes the given paths from the index and the working tree."""
        self._git(cwd, "rm", "-r", "--", *paths)

    def commit(self, cwd: Path, message: str, user: str = "", email: str = "") -> bool:
        """
        Makes a commit if there are staged changes.

        Returns False, without committing, when nothing is staged. When user
        or email are given they are written to the repository-local config
        and passed as the commit author; otherwise git's own identity
        configuration applies.
        """
        diff = self._git(cwd, "diff", "--cached", "--quiet", check=False)
        if diff.returncode == 0:
            logger.info("Nothing to commit (the repository contained identical files), moving on")
            return False
        if diff.returncode != 1:
            stderr = (diff.stderr or "").strip() if self._capture else ""
            raise GitError(
                f"Git command 'diff --cached --quiet' failed: {stderr or f'exit status {diff.returncode}'}"
            )

        if email:
            self._git(cwd, "config", "user.email", email)
        if user:
            self._git(cwd, "config", "user.name", user)

        args = ["commit", "-m", message]
        if user or email:
            args.append(f"--author={user} <{email}>")
        else:
            logger.info("Using the default git user name and email")
        self._git(cwd, *args)
        return True

    def push(self, cwd: Path) -> None:
        """Pushes the current branch to its default upstream."""
        self._git(cwd, "push")

    def clone_in_path(self, clone_path: Path, options: CloneOptions) -> Path:
        """
        Clones options.url into clone_path, creating it if needed, and checks
        out options.revision inside the clone.

        If clone_path did not exist beforehand and any step fails, it is
        removed again before the error propagates.

        Returns:
            The clone path, for use as the working directory of later calls.
        """
        clone_path = Path(clone_path).absolute()
        created = not clone_path.exists()
        make_dirs(clone_path)
        try:
            self._git(clone_path.parent, "clone", options.url, str(clone_path))
            if options.revision:
                self._git(clone_path, "checkout", options.revision)
        except GitError:
            if created:
                logger.debug("removing partial clone at %s", clone_path)
                try:
                    remove_tree(clone_path)
                except FilesystemError as cleanup_error:
                    logger.warning("%s", cleanup_error)
            raise
        return clone_path

# src/wksprofile/profiles.py: Profile enable/disable operations.
# A profile is a Git repository copied, without its history, into
# '<store_prefix>/<host>/<repo path>' of the cluster repository. This module
# orchestrates the steps of enabling and disabling one: URL resolution and
# validation, the filesystem side effect, and the optional stage, commit and
# push of the result. Operations raise typed errors; deciding how the process
# exits is left to the CLI.

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional

from .config import GitSettings, ProfileSettings
from .gitwrap import CloneOptions, GitClient
from .giturl import profile_path, resolve_alias, validate_url
from .util.errors import ProfileExistsError, ProfileNotFoundError
from .util.fs import is_empty_dir, remove_tree
from .util.log import profile_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfileResult:
    """Outcome of an enable or disable run."""
    url: str
    path: Path
    committed: bool = False
    pushed: bool = False


@dataclass(frozen=True)
class EnabledProfile:
    host: str
    repo_path: str
    path: Path


@contextmanager
def _profile_scope(url: str) -> Iterator[None]:
    token = profile_context.set(url)
    try:
        yield
    finally:
        profile_context.reset(token)


class ProfileManager:
    """Enables and disables profiles inside one cluster repository."""

    def __init__(
        self,
        repo_dir: Path,
        settings: Optional[ProfileSettings] = None,
        git_client: Optional[GitClient] = None,
        git_settings: Optional[GitSettings] = None,
    ):
        self.repo_dir = Path(repo_dir).resolve()
        self.settings = settings or ProfileSettings()
        self.git_settings = git_settings or GitSettings()
        self.git = git_client or GitClient(
            private_ssh_key_path=self.git_settings.resolved_key_path(),
            timeout=self.git_settings.timeout_sec,
        )

    @property
    def store_root(self) -> Path:
        return self.repo_dir / self.settings.store_prefix

    def resolve(self, repository: str) -> str:
        """Applies the alias table and validates the resulting URL."""
        url = resolve_alias(repository.strip(), self.settings.aliases)
        validate_url(url, require_ssh=self.settings.require_ssh)
        return url

    def relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.repo_dir).as_posix()
        except ValueError:
            # store_prefix may point outside the repository
            return path.as_posix()

    def _commit_and_push(self, message: str) -> bool:
        logger.info("Committing the changes ...")
        committed = self.git.commit(
            self.repo_dir, message, self.git_settings.user, self.git_settings.email
        )
        logger.info("Pushing to the remote ...")
        self.git.push(self.repo_dir)
        logger.info("Pushed successfully.")
        return committed

    def enable(
        self,
        repository: str,
        revision: Optional[str] = None,
        no_commit: bool = False,
    ) -> ProfileResult:
        """
        Copies the profile repository into the cluster repository.

        The clone lands in the deterministic profile path at the requested
        revision and its .git directory is removed, so the profile becomes a
        plain file tree. Unless no_commit is set the new tree is staged,
        committed as "Enable profile: <url>" and pushed.

        Raises:
            InvalidURLError: If the repository is not an acceptable Git URL.
            ProfileExistsError: If the profile path is already populated.
            GitError: If any git invocation fails.
        """
        url = self.resolve(repository)
        revision = revision or self.settings.default_revision
        clone_path = profile_path(self.store_root, url)

        with _profile_scope(url):
            if clone_path.exists() and not is_empty_dir(clone_path):
                raise ProfileExistsError(
                    f"profile path '{self.relative(clone_path)}' already exists; disable it first"
                )

            logger.info("Cloning %s at %s into %r ...", url, revision, self.relative(clone_path))
            self.git.clone_in_path(clone_path, CloneOptions(url=url, revision=revision))

            logger.info("Removing .git directory ...")
            remove_tree(clone_path / ".git")

            if no_commit:
                return ProfileResult(url=url, path=clone_path)

            logger.info("Adding profile %s to the local repository ...", url)
            self.git.add(self.repo_dir, self.relative(clone_path))
            committed = self._commit_and_push(f"Enable profile: {url}")
            return ProfileResult(url=url, path=clone_path, committed=committed, pushed=True)

    def disable(self, repository: str, no_commit: bool = False) -> ProfileResult:
        """
        Deletes the profile tree from the cluster repository.

        Unless no_commit is set the deletion is also removed from the index,
        committed as "Disable profile: <url>" and pushed.

        Raises:
            InvalidURLError: If the repository is not an acceptable Git URL.
            ProfileNotFoundError: If the profile path does not exist.
            GitError: If any git invocation fails.
        """
        url = self.resolve(repository)
        clone_path = profile_path(self.store_root, url)

        with _profile_scope(url):
            if not os.path.lexists(clone_path):
                raise ProfileNotFoundError(
                    f"profile path '{self.relative(clone_path)}' does not exist"
                )

            logger.info("Deleting profile from path %s ...", self.relative(clone_path))
            remove_tree(clone_path)

            if no_commit:
                return ProfileResult(url=url, path=clone_path)

            logger.info("Removing profile from the local repository ...")
            self.git.remove_recursive(self.repo_dir, self.relative(clone_path))
            committed = self._commit_and_push(f"Disable profile: {url}")
            return ProfileResult(url=url, path=clone_path, committed=committed, pushed=True)

    def list_enabled(self) -> List[EnabledProfile]:
        """Lists the profile trees present under the store root."""
        root = self.store_root
        if not root.is_dir():
            return []

        found = []
        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            if current == root:
                continue
            if filenames:
                rel = current.relative_to(root).parts
                if len(rel) >= 2:
                    found.append(EnabledProfile(
                        host=rel[0],
                        repo_path="/".join(rel[1:]),
                        path=current,
                    ))
                # A profile's own sub-directories are not profiles.
                dirnames[:] = []
        return sorted(found, key=lambda p: (p.host, p.repo_path))

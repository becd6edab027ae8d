# src/wksprofile/giturl.py: Git URL classification and path resolution.
# This module understands the address forms git itself accepts (transport
# URLs such as ssh:// or https://, scp-like "user@host:path" addresses and
# plain local paths) and derives from them the deterministic location a
# profile is stored at inside the cluster repository.

import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Dict, Optional, Tuple
from urllib.parse import urlsplit

from .util.errors import InvalidURLError

TRANSPORTS = {"ssh", "git", "git+ssh", "http", "https", "ftp", "ftps", "rsync", "file"}
SSH_SCHEMES = {"ssh", "git", "git+ssh"}

_SCP_RE = re.compile(r"^(?:(?P<user>[^@/]+)@)?(?P<host>[^:/\s]+):(?P<path>[^\\].*)$")


@dataclass(frozen=True)
class GitURL:
    """A parsed Git remote address."""
    scheme: str
    host: str
    path: str
    user: Optional[str] = None
    port: Optional[int] = None

    def is_abs(self) -> bool:
        return bool(self.scheme)


def _parse_transport(raw: str) -> Optional[GitURL]:
    if "://" not in raw:
        return None
    parts = urlsplit(raw)
    if parts.scheme.lower() not in TRANSPORTS:
        return None
    try:
        port = parts.port
    except ValueError as e:
        raise InvalidURLError(f"unable to parse git URL '{raw}': {e}") from e
    return GitURL(
        scheme=parts.scheme.lower(),
        host=parts.hostname or "",
        path=parts.path,
        user=parts.username,
        port=port,
    )


def _parse_scp(raw: str) -> Optional[GitURL]:
    match = _SCP_RE.match(raw)
    if not match:
        return None
    return GitURL(
        scheme="ssh",
        host=match.group("host").lower(),
        path=match.group("path"),
        user=match.group("user"),
    )


def parse_git_url(raw: str) -> GitURL:
    """
    Parses a Git address into its components.

    Transport URLs are tried first, then scp-like addresses; anything else is
    treated as a local path with the "file" scheme and no host.

    Raises:
        InvalidURLError: If the address is empty or malformed.
    """
    if not raw or not raw.strip():
        raise InvalidURLError("unable to parse git URL: empty address")
    raw = raw.strip()
    for parser in (_parse_transport, _parse_scp):
        parsed = parser(raw)
        if parsed is not None:
            return parsed
    return GitURL(scheme="file", host="", path=raw)


def is_git_url(raw: str) -> bool:
    """Returns True if the argument is an absolute Git URL with a host."""
    try:
        parsed = parse_git_url(raw)
    except InvalidURLError:
        return False
    return parsed.is_abs() and parsed.host != ""


def is_ssh_url(raw: str) -> bool:
    try:
        return parse_git_url(raw).scheme in SSH_SCHEMES
    except InvalidURLError:
        return False


def host_and_repo_path(repo_url: str) -> Tuple[str, str]:
    """
    Returns the host name and the repository path of a Git URL.

    The path loses its leading slash and an exact trailing ".git" suffix, so
    "git@github.com:org/repo.git" and "ssh://git@github.com/org/repo" both
    yield ("github.com", "org/repo").
    """
    try:
        parsed = parse_git_url(repo_url)
    except InvalidURLError as e:
        raise InvalidURLError(f"unable to parse git URL '{repo_url}': {e}") from e

    path = parsed.path.lstrip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    return parsed.host, path.rstrip("/")


def validate_url(repo_url: str, require_ssh: bool = False) -> None:
    """Raises InvalidURLError unless repo_url is acceptable as a profile source."""
    if not repo_url:
        raise InvalidURLError("empty Git URL")
    if not is_git_url(repo_url):
        raise InvalidURLError(f"invalid Git URL: '{repo_url}'")
    if require_ssh and not is_ssh_url(repo_url):
        raise InvalidURLError(
            f"got a HTTP(S) Git URL '{repo_url}', but only SSH Git URLs are supported"
        )


def resolve_alias(repo_url: str, aliases: Dict[str, str]) -> str:
    """Maps a known repository shortcut to its canonical URL."""
    return aliases.get(repo_url, repo_url)


def profile_path(store_root: Path, repo_url: str) -> Path:
    """Returns the local directory a profile from repo_url is stored in."""
    host, repo_path = host_and_repo_path(repo_url)
    if host in (".", "..") or "/" in host or "\\" in host:
        raise InvalidURLError(f"Git URL '{repo_url}' has an invalid host '{host}'")
    parts = [p for p in PurePosixPath(repo_path).parts if p not in ("", ".", "..")]
    if not host or not parts:
        raise InvalidURLError(f"Git URL '{repo_url}' has no repository path")
    return Path(store_root, host, *parts)

# tests/unit/test_profiles.py: Unit tests for the profile enable/disable operations.

from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from wksprofile.config import GitSettings, ProfileSettings
from wksprofile.gitwrap import CloneOptions, GitClient
from wksprofile.profiles import ProfileManager
from wksprofile.util.errors import InvalidURLError, ProfileExistsError, ProfileNotFoundError

URL = "git@github.com:org/profile-x"
PROFILE_REL = "profiles/github.com/org/profile-x"


def fake_clone(clone_path: Path, options: CloneOptions) -> Path:
    (clone_path / ".git" / "refs").mkdir(parents=True)
    (clone_path / "kustomization.yaml").write_text(f"# {options.revision}\n")
    (clone_path / "base").mkdir()
    (clone_path / "base" / "app.yaml").write_text("kind: Deployment\n")
    return clone_path


@pytest.fixture
def git_client(mocker: MockerFixture):
    client = mocker.create_autospec(GitClient, instance=True)
    client.clone_in_path.side_effect = fake_clone
    client.commit.return_value = True
    return client


@pytest.fixture
def manager(tmp_path: Path, git_client) -> ProfileManager:
    return ProfileManager(tmp_path, git_client=git_client)


def test_enable_no_commit(manager: ProfileManager, git_client, tmp_path: Path):
    result = manager.enable(URL, revision="v1.0", no_commit=True)

    profile_dir = tmp_path / PROFILE_REL
    assert result.path == profile_dir
    assert result.committed is False and result.pushed is False
    assert (profile_dir / "kustomization.yaml").read_text() == "# v1.0\n"
    assert not (profile_dir / ".git").exists()

    git_client.clone_in_path.assert_called_once_with(
        profile_dir, CloneOptions(url=URL, revision="v1.0")
    )
    git_client.add.assert_not_called()
    git_client.commit.assert_not_called()
    git_client.push.assert_not_called()


def test_enable_defaults_to_master(manager: ProfileManager, git_client):
    manager.enable(URL, no_commit=True)
    _, options = git_client.clone_in_path.call_args.args
    assert options.revision == "master"


def test_enable_commits_and_pushes(manager: ProfileManager, git_client, tmp_path: Path):
    result = manager.enable(URL)

    assert result.committed is True and result.pushed is True
    git_client.add.assert_called_once_with(tmp_path, PROFILE_REL)
    git_client.commit.assert_called_once_with(tmp_path, f"Enable profile: {URL}", "", "")
    git_client.push.assert_called_once_with(tmp_path)


def test_enable_uses_configured_identity(tmp_path: Path, git_client):
    manager = ProfileManager(
        tmp_path,
        git_client=git_client,
        git_settings=GitSettings(user="CI Bot", email="ci@example.com"),
    )
    manager.enable(URL)
    git_client.commit.assert_called_once_with(
        tmp_path, f"Enable profile: {URL}", "CI Bot", "ci@example.com"
    )


def test_enable_resolves_alias(manager: ProfileManager, git_client, tmp_path: Path):
    result = manager.enable("app-dev", no_commit=True)

    assert result.url == "git@github.com:weaveworks/eks-quickstart-app-dev"
    assert result.path == tmp_path / "profiles/github.com/weaveworks/eks-quickstart-app-dev"


def test_enable_custom_store_prefix_and_aliases(tmp_path: Path, git_client):
    settings = ProfileSettings(store_prefix="addons", aliases={"base": URL})
    manager = ProfileManager(tmp_path, settings=settings, git_client=git_client)

    result = manager.enable("base", no_commit=True)
    assert result.path == tmp_path / "addons/github.com/org/profile-x"


def test_enable_rejects_non_git_url(manager: ProfileManager, git_client):
    with pytest.raises(InvalidURLError, match="invalid Git URL"):
        manager.enable("not-a-url")
    git_client.clone_in_path.assert_not_called()


def test_enable_rejects_http_url_when_ssh_required(tmp_path: Path, git_client):
    manager = ProfileManager(
        tmp_path, settings=ProfileSettings(require_ssh=True), git_client=git_client
    )
    with pytest.raises(InvalidURLError, match="only SSH Git URLs"):
        manager.enable("https://github.com/org/profile-x")
    git_client.clone_in_path.assert_not_called()


def test_enable_refuses_populated_path(manager: ProfileManager, git_client, tmp_path: Path):
    profile_dir = tmp_path / PROFILE_REL
    profile_dir.mkdir(parents=True)
    (profile_dir / "file.yaml").write_text("x")

    with pytest.raises(ProfileExistsError, match="already exists"):
        manager.enable(URL)
    git_client.clone_in_path.assert_not_called()


def test_enable_accepts_empty_existing_directory(manager: ProfileManager, git_client, tmp_path: Path):
    (tmp_path / PROFILE_REL).mkdir(parents=True)
    manager.enable(URL, no_commit=True)
    git_client.clone_in_path.assert_called_once()


def test_disable_missing_profile(manager: ProfileManager, git_client, tmp_path: Path):
    with pytest.raises(ProfileNotFoundError, match="does not exist"):
        manager.disable(URL)

    git_client.remove_recursive.assert_not_called()
    git_client.commit.assert_not_called()
    git_client.push.assert_not_called()
    assert list(tmp_path.iterdir()) == []


def test_disable_no_commit(manager: ProfileManager, git_client, tmp_path: Path):
    manager.enable(URL, no_commit=True)
    result = manager.disable(URL, no_commit=True)

    assert not (tmp_path / PROFILE_REL).exists()
    assert result.committed is False
    git_client.remove_recursive.assert_not_called()


def test_disable_commits_and_pushes(manager: ProfileManager, git_client, tmp_path: Path):
    manager.enable(URL, no_commit=True)
    result = manager.disable(URL)

    assert result.pushed is True
    git_client.remove_recursive.assert_called_once_with(tmp_path, PROFILE_REL)
    git_client.commit.assert_called_once_with(tmp_path, f"Disable profile: {URL}", "", "")
    git_client.push.assert_called_once_with(tmp_path)


def test_enable_then_disable_restores_tree(manager: ProfileManager, tmp_path: Path):
    before = sorted(p.name for p in tmp_path.iterdir())
    manager.enable(URL)
    manager.disable(URL)

    assert not (tmp_path / PROFILE_REL).exists()
    # The store root stays behind, empty apart from parent directories.
    assert not any(p.is_file() for p in (tmp_path / "profiles").rglob("*"))
    assert sorted(p.name for p in tmp_path.iterdir() if p.name != "profiles") == before


def test_enable_and_disable_accept_equivalent_urls(manager: ProfileManager, tmp_path: Path):
    manager.enable(URL + ".git", no_commit=True)
    result = manager.disable("ssh://git@github.com/org/profile-x", no_commit=True)
    assert result.path == tmp_path / PROFILE_REL


def test_list_enabled(manager: ProfileManager, tmp_path: Path):
    assert manager.list_enabled() == []

    manager.enable(URL, no_commit=True)
    manager.enable("git@gitlab.com:group/sub/profile-y", no_commit=True)

    profiles = manager.list_enabled()
    assert [(p.host, p.repo_path) for p in profiles] == [
        ("github.com", "org/profile-x"),
        ("gitlab.com", "group/sub/profile-y"),
    ]
    assert profiles[0].path == tmp_path / PROFILE_REL


def test_disable_rejects_host_outside_store(manager: ProfileManager, git_client, tmp_path: Path):
    (tmp_path / "profiles").mkdir()
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "keep.py").write_text("x")

    with pytest.raises(InvalidURLError, match="invalid host"):
        manager.disable("git@..:src", no_commit=True)

    assert (tmp_path / "src" / "keep.py").exists()
    git_client.remove_recursive.assert_not_called()


def test_enable_and_disable_ignore_host_case(manager: ProfileManager, tmp_path: Path):
    manager.enable("git@GitHub.com:org/profile-x", no_commit=True)
    result = manager.disable("ssh://git@github.com/org/profile-x", no_commit=True)
    assert result.path == tmp_path / PROFILE_REL

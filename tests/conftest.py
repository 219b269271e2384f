"""Test configuration and fixtures."""

from pathlib import Path
from typing import Generator

import pytest
from git import Actor, Repo

AUTHOR = Actor("Test User", "test@example.com")

# name -> commit date in git's raw "<epoch> <offset>" form; created out of order
# so sorting is exercised. Wall-clock times: 2023-06-01 08:00 +0000,
# 2021-01-01 12:00 +0200, 2022-03-15 09:30 -0500.
BRANCH_DATES = {
    "feature/new": "1685606400 +0000",
    "feature/old": "1609495200 +0200",
    "feature/mid": "1647354600 -0500",
}


def init_repo(path: Path) -> Repo:
    """Create a repository with one commit on master."""
    repo = Repo.init(path)
    repo.config_writer().set_value("user", "name", AUTHOR.name).release()
    repo.config_writer().set_value("user", "email", AUTHOR.email).release()

    # Pin the initial branch name regardless of init.defaultBranch
    repo.git.symbolic_ref("HEAD", "refs/heads/master")

    readme = path / "README.md"
    readme.write_text("# Test Repository")
    repo.index.add(["README.md"])
    date = "1577836800 +0000"
    repo.index.commit("Initial commit", author=AUTHOR, committer=AUTHOR, author_date=date, commit_date=date)
    return repo


def create_branch(repo: Repo, name: str, date: str) -> None:
    """Create a branch off master with one commit made at *date*."""
    repo.heads.master.checkout()
    branch = repo.create_head(name)
    branch.checkout()

    path = Path(repo.working_tree_dir)
    test_file = path / f"{name.replace('/', '_')}.txt"
    test_file.write_text(f"{name} content")
    repo.index.add([test_file.name])
    repo.index.commit(f"Add {name}", author=AUTHOR, committer=AUTHOR, author_date=date, commit_date=date)

    repo.heads.master.checkout()


@pytest.fixture
def empty_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """A repository whose only branch is master."""
    path = tmp_path / "empty"
    path.mkdir()
    init_repo(path)
    yield path


@pytest.fixture
def test_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """A repository with master and three feature branches, master checked out.

    Review order is feature/old, feature/mid, feature/new.
    """
    path = tmp_path / "local"
    path.mkdir()
    repo = init_repo(path)
    for name, date in BRANCH_DATES.items():
        create_branch(repo, name, date)
    yield path

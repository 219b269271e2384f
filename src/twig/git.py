"""Git repository operations."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

# Never offered for review, whatever the repository's default branch is.
EXCLUDED_BRANCH = "master"

SHORT_ID_LENGTH = 7


class GitError(Exception):
    """Git operation error."""


class BranchNameError(GitError):
    """A branch name could not be decoded as text."""


def git_detail(err: GitCommandError) -> str:
    """What git wrote to stderr, on one line."""
    detail = " ".join(str(err.stderr or "").split())
    detail = detail.removeprefix("stderr:").strip().strip("'")
    return detail or f"git exited with status {err.status}"


@dataclass(frozen=True)
class BranchRecord:
    """Snapshot of a local branch taken when the branches were listed."""

    name: str
    commit_id: str
    last_commit_time: datetime
    is_current: bool = False

    @property
    def short_id(self) -> str:
        """Abbreviated commit id shown in prompts."""
        return self.commit_id[:SHORT_ID_LENGTH]


def commit_wall_time(seconds: int, tz_offset: int) -> datetime:
    """Convert a commit timestamp to the committer's own wall-clock time.

    Args:
        seconds: Seconds since the epoch (UTC)
        tz_offset: GitPython-style offset, in seconds west of UTC

    Returns:
        Naive datetime in the commit's recorded timezone
    """
    utc = datetime.fromtimestamp(seconds, tz=timezone.utc).replace(tzinfo=None)
    return utc - timedelta(seconds=tz_offset)


class GitRepo:
    """Git repository operations."""

    def __init__(self, path: Optional[Path] = None) -> None:
        """Open the repository containing *path*.

        With no path, GitPython honours ``GIT_DIR`` and otherwise starts from the
        current directory. Parent directories are searched in both cases.
        """
        try:
            self.repo: Repo = Repo(path, search_parent_directories=True)
            if self.repo.bare:
                raise GitError("Cannot operate on bare repository")
        except (GitCommandError, ValueError, InvalidGitRepositoryError, NoSuchPathError) as err:
            raise GitError(f"Failed to open repository: {err}") from err

    def get_current_branch_name(self) -> str:
        """Get current branch name."""
        try:
            try:
                return self.repo.active_branch.name
            except TypeError:
                # Detached HEAD, no branch is current
                return ""
        except (GitCommandError, ValueError) as err:
            raise GitError(f"Failed to get current branch: {err}") from err

    def list_branches(self) -> list[BranchRecord]:
        """List local branches, oldest last commit first.

        The ``master`` branch is left out. Any branch that cannot be read fails the
        whole listing.

        Raises:
            GitError: If a branch or its commit cannot be resolved
            BranchNameError: If a branch name is not valid UTF-8
        """
        current = self.get_current_branch_name()
        try:
            heads = list(self.repo.heads)
        except UnicodeDecodeError as err:
            raise BranchNameError(f"Failed to decode branch names: {err}") from err
        except (GitCommandError, ValueError) as err:
            raise GitError(f"Failed to list branches: {err}") from err

        records = []
        for head in heads:
            name = head.name
            try:
                name.encode("utf-8")
            except UnicodeEncodeError as err:
                raise BranchNameError(f"Branch name is not valid UTF-8: {name!r}") from err

            if name == EXCLUDED_BRANCH:
                continue

            try:
                commit = head.commit
                records.append(
                    BranchRecord(
                        name=name,
                        commit_id=commit.hexsha,
                        last_commit_time=commit_wall_time(commit.committed_date, commit.committer_tz_offset),
                        is_current=name == current,
                    )
                )
            except (GitCommandError, ValueError) as err:
                raise GitError(f"Failed to resolve commit for branch '{name}': {err}") from err

        # sorted() is stable, ties keep enumeration order
        return sorted(records, key=lambda record: record.last_commit_time)

    def delete_branch(self, branch: BranchRecord) -> None:
        """Delete a local branch regardless of merge state."""
        try:
            self.repo.git.branch("-D", branch.name)
        except GitCommandError as err:
            raise GitError(f"Failed to delete branch '{branch.name}': {git_detail(err)}") from err

    def restore_branch(self, branch: BranchRecord) -> None:
        """Recreate a deleted branch at its recorded commit.

        Fails if a branch with that name exists again; it is never overwritten.
        """
        try:
            self.repo.git.branch(branch.name, branch.commit_id)
        except GitCommandError as err:
            raise GitError(f"Failed to restore branch '{branch.name}': {git_detail(err)}") from err

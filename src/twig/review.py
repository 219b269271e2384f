"""Interactive branch review.

Branches are offered one at a time, oldest first. Each prompt takes a single
keystroke:

    k  keep the branch
    d  delete the branch
    u  undo the last deletion, then ask about the same branch again
    q  stop reviewing
    ?  show the commands, then ask again

Only the most recent deletion can be undone.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from rich.console import Console
from rich.markup import escape

from twig.git import BranchRecord, GitRepo
from twig.terminal import KeyReader


class BranchAction(Enum):
    """What to do with the branch under review."""

    KEEP = "k"
    DELETE = "d"
    UNDO = "u"
    QUIT = "q"


HELP_KEY = "?"

HELP_LINES = (
    "k - Keep the branch",
    "d - Delete the branch",
    "u - Undo last deleted branch",
    "q - Quit",
    "? - Show this help text",
)


class InvalidInputError(Exception):
    """A key outside the command set was pressed."""

    def __init__(self, char: str) -> None:
        # repr keeps control keys such as Enter on one line
        super().__init__(f"Invalid input, don't know what to do with {char!r}")
        self.char = char


def parse_action(char: str) -> BranchAction:
    """Map a keystroke to an action.

    Raises:
        InvalidInputError: If the key is not a command
    """
    try:
        return BranchAction(char)
    except ValueError:
        raise InvalidInputError(char) from None


def format_prompt(branch: BranchRecord) -> str:
    return (
        f"'{branch.name}' ({branch.short_id}) last commit at "
        f"{branch.last_commit_time:%Y-%m-%d %H:%M:%S} (k/d/q/u/?) > "
    )


def ask_for_action(branch: BranchRecord, keys: KeyReader, console: Console) -> BranchAction:
    """Prompt for the branch until a command other than help is given."""
    while True:
        console.print(escape(format_prompt(branch)), end="")
        console.file.flush()

        char = keys.read_char()
        console.print(char, markup=False)

        if char != HELP_KEY:
            return parse_action(char)

        console.print("Here are what the commands mean")
        for line in HELP_LINES:
            console.print(escape(line))
        console.file.flush()


@dataclass
class ReviewSummary:
    """Outcome of a review session.

    Returned to callers of ``BranchReviewer.run``; the CLI reports outcomes as they
    happen and does not print it.
    """

    kept: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    restored: list[str] = field(default_factory=list)
    ignored: list[str] = field(default_factory=list)
    quit: bool = False


class BranchReviewer:
    """Walks the branch list, deleting and restoring branches as asked.

    Holds the one-slot undo buffer: the last deleted branch, or None.
    """

    def __init__(self, repo: GitRepo, keys: KeyReader, console: Console) -> None:
        self.repo = repo
        self.keys = keys
        self.console = console
        self._deleted: Optional[BranchRecord] = None

    def run(self, branches: list[BranchRecord]) -> ReviewSummary:
        """Review *branches* in order.

        Backend and input errors propagate; nothing after the failing branch is
        touched.
        """
        summary = ReviewSummary()
        if not branches:
            self.console.print("No branches found (master ignored).")
            return summary

        for branch in branches:
            if branch.is_current:
                self.console.print(f"Ignoring '{escape(branch.name)}' because it is the current branch")
                summary.ignored.append(branch.name)
                continue

            if not self._review(branch, summary):
                summary.quit = True
                break

        return summary

    def _review(self, branch: BranchRecord, summary: ReviewSummary) -> bool:
        """Settle one branch. Returns False when the user quits."""
        while True:
            action = ask_for_action(branch, self.keys, self.console)

            if action is BranchAction.QUIT:
                self.console.print("Quitting...")
                return False

            if action is BranchAction.KEEP:
                self.console.print(f"Keeping '{escape(branch.name)}'")
                summary.kept.append(branch.name)
                return True

            if action is BranchAction.DELETE:
                self.repo.delete_branch(branch)
                self.console.print(f"Deleted branch '{escape(branch.name)}', to undo select 'u'")
                # The previous occupant can no longer be restored
                self._deleted = branch
                summary.deleted.append(branch.name)
                return True

            # Undo, then ask about this branch again
            self._undo(summary)

    def _undo(self, summary: ReviewSummary) -> None:
        if self._deleted is None:
            self.console.print("No branch to undo deletion of")
            return

        branch, self._deleted = self._deleted, None
        self.repo.restore_branch(branch)
        self.console.print(f"Restored branch '{escape(branch.name)}' at {branch.short_id}")
        summary.deleted.remove(branch.name)
        summary.restored.append(branch.name)

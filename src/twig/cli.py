"""Command line interface for twig."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from twig.git import GitError, GitRepo
from twig.review import BranchReviewer, InvalidInputError
from twig.terminal import KeyReader, TerminalError

app = typer.Typer(help="Review local git branches one keystroke at a time")
console = Console(highlight=False, emoji=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, emoji=False, soft_wrap=True)


@app.command()
def review(
    path: Annotated[Optional[Path], typer.Option(help="Path to git repository (default: GIT_DIR or current directory)")] = None,
) -> None:
    """Keep, delete or restore each local branch, oldest first."""
    try:
        repo = GitRepo(path)
        with KeyReader() as keys:
            branches = repo.list_branches()
            BranchReviewer(repo, keys, console).run(branches)
    except (GitError, TerminalError, InvalidInputError) as err:
        console.file.flush()
        message = " ".join(line.strip() for line in str(err).splitlines() if line.strip())
        err_console.print(f"Error: {escape(message)}")
        raise typer.Exit(code=1) from err


if __name__ == "__main__":
    app()

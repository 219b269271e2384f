"""Interactive git branch review.

Features:
- Walk local branches one at a time, oldest last commit first
- Keep, delete or quit with a single keystroke
- Undo the most recent deletion
- The current branch and master are never offered for deletion
"""

__version__ = "0.1.0"

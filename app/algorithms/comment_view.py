import re
from collections.abc import Iterable

from app.utils.schemas import Comment, CommentView

_HAS_NUMBER = re.compile(r"\d+", re.ASCII)


def partition_comments(comments: Iterable[Comment]) -> CommentView:
    """Split history into the dashboard's two columns.

    Only the earliest comment from each user is kept (names compared
    case-insensitively, blanks skipped). Comments containing an ASCII digit go to
    ``numbered``, the rest to ``general``. Both lists come back newest first.
    """
    seen: set[str] = set()
    general: list[Comment] = []
    numbered: list[Comment] = []

    for comment in comments:
        name = comment.user_name.strip().lower()
        if not name or name in seen:
            continue
        seen.add(name)
        if _HAS_NUMBER.search(comment.text):
            numbered.append(comment)
        else:
            general.append(comment)

    general.reverse()
    numbered.reverse()
    return CommentView(general=general, numbered=numbered)

"""Errors raised by discussion actions.

Every error here is raised before any record is changed.
"""


class DiscussionMoveError(Exception):
    """Base class for rejected discussion moves."""

    code = "move_failed"
    status_code = 400
    default_message = "The discussion could not be moved"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidSessionToken(DiscussionMoveError):
    code = "invalid_session_token"
    status_code = 409
    default_message = "Session token is invalid, expired or already used"


class DiscussionNotFound(DiscussionMoveError):
    code = "discussion_not_found"
    status_code = 404
    default_message = "Discussion not found"


class TargetNotFound(DiscussionMoveError):
    code = "target_not_found"
    status_code = 404
    default_message = "Target forum does not exist"


class MoveForbidden(DiscussionMoveError):
    code = "forbidden"
    status_code = 403
    default_message = "You are not allowed to move this discussion"


class UnsupportedForumType(DiscussionMoveError):
    code = "unsupported_forum_type"
    status_code = 400
    default_message = "Discussions cannot be moved into or out of a single discussion forum"


class TargetNotVisible(DiscussionMoveError):
    code = "target_not_visible"
    status_code = 403
    default_message = "Target forum is not visible to you"

"""
Error taxonomy for the moderation service.

Every failure is scoped to the call that raised it. ``Unauthorized``,
``InvalidInput`` and ``NotFound`` always reach the caller.
``CollaboratorUnavailable`` is only recovered during author resolution.
"""


class ModerationError(Exception):
    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthorized(ModerationError):
    code = "unauthorized"


class InvalidInput(ModerationError):
    code = "invalid_input"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFound(ModerationError):
    code = "not_found"


class CollaboratorUnavailable(ModerationError):
    code = "collaborator_unavailable"


class RoleUpdateUnconfirmed(CollaboratorUnavailable):
    """The role write was sent but the stored record could not be re-read.

    Callers must reload their view of ``target_user_id`` from the role store
    instead of trusting a locally patched copy.
    """

    code = "role_update_unconfirmed"

    def __init__(self, target_user_id: str, message: str | None = None):
        super().__init__(
            message or f"Role update for {target_user_id} could not be confirmed; reload profile"
        )
        self.target_user_id = target_user_id

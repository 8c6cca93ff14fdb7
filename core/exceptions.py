"""
Domain errors for the portal.

Raised where they are detected (scoring engine, access policy, API views)
and turned into JSON responses by core.middleware.ApiErrorMiddleware.
"""


class PortalError(Exception):
    """Base class for every error the API reports to the client."""

    status_code = 500
    default_message = 'Server error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def code(self):
        return type(self).__name__

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


# ── Authorization / lookup ──────────────────────────────────────────────

class Forbidden(PortalError):
    status_code = 403
    default_message = 'Forbidden'


class NotFound(PortalError):
    status_code = 404
    default_message = 'Not found'


# ── Validation ──────────────────────────────────────────────────────────

class PortalValidationError(PortalError):
    status_code = 400
    default_message = 'Validation failed'


class InvalidPayload(PortalValidationError):
    default_message = 'Invalid JSON body'


class InvalidStatus(PortalValidationError):
    default_message = 'Invalid status'


class InvalidField(PortalValidationError):
    default_message = 'Invalid field value'


class MissingRejectionReason(PortalValidationError):
    default_message = 'A rejection reason is required when rejecting'


# ── Scoring ─────────────────────────────────────────────────────────────

class ScoringError(PortalValidationError):
    default_message = 'Invalid scoring data'


class MissingScoreContent(ScoringError):
    default_message = (
        'A station needs at least one marking scheme item or one follow-up question'
    )


class InvalidSectionName(ScoringError):
    pass


class InvalidSectionShape(ScoringError):
    pass


class MissingItemDescription(ScoringError):
    pass


class InvalidItemScore(ScoringError):
    pass


class MissingFollowUpQuestion(ScoringError):
    pass


class MissingFollowUpAnswer(ScoringError):
    pass


class InvalidFollowUpScore(ScoringError):
    pass


class TotalMarksMismatch(ScoringError):
    pass

"""
Domain errors shared by every app.
Raised by the service/engine modules and turned into JSON responses by
apps.core.decorators.json_api. Anything that is not a DomainError is an
infrastructure failure and is left to bubble up.
"""


class DomainError(Exception):
    """Base exception for all expected, user-displayable failures."""
    status_code = 400
    code = 'error'
    default_message = 'The request could not be completed.'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)

    @property
    def message(self):
        return str(self)

    def as_dict(self) -> dict:
        return {'error': self.message, 'code': self.code}


class ValidationError(DomainError):
    """Malformed input: missing fields, end before start, bad colour, bad weekday."""
    code = 'validation_error'
    default_message = 'Validation error.'

    def __init__(self, message=None, errors=None):
        super().__init__(message)
        self.errors = errors or {}

    @classmethod
    def from_form(cls, form):
        """Build from a bound, invalid Django form."""
        errors = {field: [str(e) for e in errs] for field, errs in form.errors.items()}
        return cls('Validation error', errors=errors)

    def as_dict(self) -> dict:
        data = super().as_dict()
        if self.errors:
            data['details'] = self.errors
        return data


class NotFoundError(DomainError):
    """
    Resource is absent OR belongs to another organization.
    Both cases look the same to the caller.
    """
    status_code = 404
    code = 'not_found'
    default_message = 'Not found.'


class ForbiddenError(DomainError):
    """Caller is a member of the organization but lacks the required role."""
    status_code = 403
    code = 'forbidden'
    default_message = 'You do not have permission to perform this action.'

"""
Error taxonomy for story generation.

Each error carries the HTTP status it maps to and a message that is safe
to show to the user. Internal detail goes to the logs, never into `message`.
"""


class StoryError(Exception):
    """Base class for all user-facing story generation failures."""

    status_code = 500
    default_message = "failed to generate story"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def public_message(self) -> str:
        """Message safe to return to the client."""
        return self.message


class InvalidInput(StoryError):
    """Request fields are missing, of the wrong type, or too long."""

    status_code = 400
    default_message = "fields \"concept\" and \"interest\" are required strings"


class RateLimited(StoryError):
    """Client exceeded its request quota; retry after a delay."""

    status_code = 429
    default_message = "too many requests"


class PolicyRejected(StoryError):
    """The model refused the topic. The message is the model's own reason."""

    status_code = 400
    default_message = "content not allowed for safety reasons"


class Unconfigured(StoryError):
    """The generation credential is missing from the environment."""

    status_code = 500
    default_message = "service not configured"


class UpstreamError(StoryError):
    """An upstream call failed or returned something unusable."""

    status_code = 500
    default_message = "failed to generate story"

    @property
    def public_message(self) -> str:
        # Detail stays in the logs
        return self.default_message


class NarrationFailed(StoryError):
    """Speech synthesis returned no audio."""

    status_code = 502
    default_message = "could not generate audio, please try again"


class PersistenceUnavailable(StoryError):
    """The story log store could not be reached."""

    status_code = 503
    default_message = "story storage unavailable"


class StoryNotFound(StoryError):
    """No story log exists with the requested id."""

    status_code = 404
    default_message = "story not found"

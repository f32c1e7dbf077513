"""
Error types raised by the voting core.
"""


class VotingError(Exception):
    """Base exception for voting-related errors."""

    def __init__(self, message: str, user_message: str, code: str):
        super().__init__(message)
        self.user_message = user_message
        self.code = code


class NotFoundError(VotingError):
    """Raised when a song id is not in the roster."""

    def __init__(self, song_id: str):
        super().__init__(
            f"Song not found: {song_id}",
            "Song not found.",
            "SONG_NOT_FOUND"
        )
        self.song_id = song_id


class DuplicateError(VotingError):
    """Raised when a song with the same title and artist is already in the roster."""

    def __init__(self, title: str, artist: str):
        super().__init__(
            f"Duplicate song: '{title}' by {artist}",
            f'"{title}" by {artist} is already in the voting list!',
            "DUPLICATE_SONG"
        )
        self.title = title
        self.artist = artist


class CapacityError(VotingError):
    """
    Raised when the roster is full.
    Reserved for a rejecting roster policy; the store currently evicts instead.
    """

    def __init__(self, max_songs: int):
        super().__init__(
            f"Roster full ({max_songs} songs)",
            f"The voting list is full! (max {max_songs} songs)",
            "ROSTER_FULL"
        )


class InvalidVoteError(VotingError):
    """Raised when a vote count is negative or not an integer."""

    def __init__(self, value: object):
        super().__init__(
            f"Invalid vote count: {value!r}",
            "Vote count must be a non-negative integer.",
            "INVALID_VOTE"
        )


class InvalidMessageError(VotingError):
    """Raised when a chat message is empty."""

    def __init__(self):
        super().__init__(
            "Empty chat message",
            "Message is required.",
            "INVALID_MESSAGE"
        )


class ConsumerNotificationError(VotingError):
    """
    Wraps an exception raised by an event consumer.
    Caught and logged by the notification bus, never raised to the publisher.
    """

    def __init__(self, consumer: object, event_kind: str, cause: Exception):
        name = type(consumer).__name__
        super().__init__(
            f"Consumer {name} failed on {event_kind}: {cause}",
            "Internal notification error.",
            "CONSUMER_FAILED"
        )
        self.consumer = consumer
        self.cause = cause

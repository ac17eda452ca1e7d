class MovieBrowserError(Exception):
    """Base exception for the movie browser."""

    user_message = 'Failed to load movies. Please check your API token and try again.'

    def __str__(self) -> str:
        return super().__str__() or self.user_message


class ConfigurationError(MovieBrowserError):
    """Raised when the TMDB bearer token is not configured."""

    user_message = (
        'TMDB API token not configured. '
        'Please set TMDB_TOKEN in your environment or .env file.'
    )

    def __init__(self, message: str = 'credential not configured'):
        super().__init__(message)


class RemoteError(MovieBrowserError):
    """Raised when TMDB answers with a non-2xx status."""

    def __init__(self, status: int, status_text: str = ''):
        self.status = status
        self.status_text = status_text
        super().__init__(f"TMDB API Error: {status} {status_text}".rstrip())

    @property
    def user_message(self) -> str:
        return str(self)


class TransportError(MovieBrowserError):
    """Raised on network failures or an unreadable response body."""

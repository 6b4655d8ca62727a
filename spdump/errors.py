class SpdumpError(Exception):
    """Base class for every fatal error raised by spdump."""


class ConfigError(SpdumpError):
    pass


class AuthError(SpdumpError):
    pass


class FetchError(SpdumpError):
    def __init__(self, resource: str, identifier: str, reason: str = '') -> None:
        self.resource = resource
        self.identifier = identifier
        self.reason = reason

        message = f'error making call to spotify to get {resource} information : {identifier}'
        if reason:
            message = f'{message} ({reason})'

        super().__init__(message)


class DecodeError(SpdumpError):
    pass

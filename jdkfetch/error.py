class JdkFetchError(Exception):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)


class InvalidArgumentError(JdkFetchError):
    pass


class UnsupportedPlatformError(JdkFetchError):
    pass


class NetworkError(JdkFetchError):
    def __init__(self, what, status_code=None, *args, **kwargs):
        super().__init__(what, *args, **kwargs)
        self.status_code = status_code


class NetworkTimeoutError(NetworkError):
    def __str__(self):
        return super().__str__() or "Timeout"


class AssetNotFoundError(JdkFetchError):
    def __init__(self, what, resolution=None, *args, **kwargs):
        super().__init__(what, *args, **kwargs)
        self.resolution = resolution


class ExtractionError(JdkFetchError):
    pass


def raise_error(msg, *args, **kwargs):
    exc_type = kwargs.pop("type", JdkFetchError)
    raise exc_type(msg.format(*args, **kwargs))


def raise_error_if(condition, *args, **kwargs):
    if condition:
        raise_error(*args, **kwargs)


class raise_error_on_exception(object):
    """ Re-raises any exception leaving the block as a JdkFetchError. """

    def __init__(self, message, *args, type=JdkFetchError, **kwargs):
        self.message = message
        self.args = args
        self.type = type
        self.kwargs = kwargs

    def __enter__(self):
        return self

    def __exit__(self, type, value, tb):
        if value is None or isinstance(value, (KeyboardInterrupt, JdkFetchError)):
            return False
        raise self.type(self.message.format(*self.args, reason=value, **self.kwargs)) from value

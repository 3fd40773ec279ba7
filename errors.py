class ApiError(Exception):

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ApiError):
    pass


class NotFound(ApiError):
    pass


class UnsupportedType(ApiError):
    pass


class ParseError(ApiError):
    pass

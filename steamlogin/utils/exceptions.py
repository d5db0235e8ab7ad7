import http.client as http_client


class SteamLoginException(Exception):
    def __init__(self, user_message):
        super().__init__(user_message)
        self.msg = user_message

    @staticmethod
    def error_code():
        return http_client.INTERNAL_SERVER_ERROR

class InvalidRequestException(SteamLoginException):
    @staticmethod
    def error_code():
        return http_client.BAD_REQUEST

class InvalidSteamIDException(InvalidRequestException):
    pass

class AuthenticationFailedException(SteamLoginException):
    @staticmethod
    def error_code():
        return http_client.UNAUTHORIZED

class ConfigurationException(SteamLoginException):
    """
    The deployment is misconfigured, e.g. the Web API source is selected without an API key.
    """
    @staticmethod
    def error_code():
        return http_client.INTERNAL_SERVER_ERROR

class UpstreamFetchException(SteamLoginException):
    @staticmethod
    def error_code():
        return http_client.BAD_GATEWAY

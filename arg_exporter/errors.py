class ArgExporterException(Exception):
    pass


class AuthenticationUnavailable(ArgExporterException):
    pass


class MissingAzureCredentials(AuthenticationUnavailable):
    pass


class OutputFolderError(ArgExporterException):
    pass


class QueryTransportError(ArgExporterException):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ExportWriteError(ArgExporterException):
    pass

class FontDetectorError(Exception):
    def __init__(self, code: str, message: str, status_code: int = 400, details: dict | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class InvalidInputError(FontDetectorError):
    pass


class FetchError(FontDetectorError):
    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        code: str = 'THUMBNAIL_FETCH_FAILED',
        status_code: int = 502,
    ):
        details = {'upstream_status': upstream_status} if upstream_status is not None else None
        super().__init__(code, message, status_code=status_code, details=details)
        self.upstream_status = upstream_status


class AnalysisError(FontDetectorError):
    def __init__(
        self,
        message: str = 'AI analysis failed. The model could not process the request.',
        code: str = 'ANALYSIS_FAILED',
        status_code: int = 502,
    ):
        super().__init__(code, message, status_code=status_code)


class CredentialError(AnalysisError):
    def __init__(
        self,
        message: str = 'AI analysis failed: the API key was rejected. Check the API_KEY configuration.',
    ):
        super().__init__(message, code='INVALID_API_KEY', status_code=401)

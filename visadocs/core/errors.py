"""
Application error taxonomy.

Services raise these; the handlers registered in main.py turn them into
``{"error": "..."}`` JSON bodies with the attached status code.

- UploadValidationError: wrong type / size, rejected before any processing
- TextExtractionError: file could not be turned into text
- LLMProviderError: upstream model call failed (auth, rate limit, network, timeout)
- ModelOutputError: model answered but the answer is not usable JSON
- QuotaExceededError: user has no analyses left
"""


class AppError(Exception):
    status_code = 500
    default_message = "An error occurred"

    def __init__(self, message: str = None, status_code: int = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class UploadValidationError(AppError):
    status_code = 400
    default_message = "Invalid upload"


class TextExtractionError(AppError):
    status_code = 422
    default_message = "Failed to extract text from the document"


class LLMProviderError(AppError):
    status_code = 502
    default_message = "The analysis service is currently unavailable"

    def __init__(self, message: str = None, category: str = "upstream"):
        super().__init__(message)
        self.category = category


class ModelOutputError(AppError):
    status_code = 502
    default_message = "The analysis service returned an unreadable response"


class QuotaExceededError(AppError):
    status_code = 403
    default_message = "Analysis limit reached. Contact an administrator to increase your quota."


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Already exists"


class PermissionDeniedError(AppError):
    status_code = 403
    default_message = "Access denied"

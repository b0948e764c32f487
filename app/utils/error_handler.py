"""Универсальный обработчик ошибок для FastAPI"""
import logging
from typing import Optional, Dict, Any
from functools import wraps

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError as PydanticValidationError


logger = logging.getLogger(__name__)


class APIError(Exception):
    """Базовый класс для ошибок API"""
    def __init__(self, message: str, status_code: int = 500, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(APIError):
    """Ошибка валидации данных. field - имя поля, которое не прошло проверку"""
    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        if field is not None:
            details["field"] = field
        super().__init__(message, status_code=400, details=details)

    @property
    def field(self) -> Optional[str]:
        return self.details.get("field")


class NotFoundError(APIError):
    """Ошибка "не найдено" """
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=404, details=details)


class ConflictError(APIError):
    """Запись изменилась параллельно, запрос можно повторить"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=409, details=details)


class ImportFormatError(APIError):
    """Файл импорта не соответствует формату экспорта"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


def log_error(error: Exception, request: Optional[Request] = None, context: Optional[Dict[str, Any]] = None) -> None:
    """Логирует ошибку с контекстом"""
    context = context or {}

    if request:
        context.update({
            'method': request.method,
            'url': str(request.url),
            'client_ip': request.client.host if request.client else None,
            'user_agent': request.headers.get('user-agent'),
        })

    # 4xx - warning, остальное - error
    if isinstance(error, (APIError, HTTPException)) and 400 <= error.status_code < 500:
        log_level = logging.WARNING
    else:
        log_level = logging.ERROR

    log_message = f"API Error: {str(error)}"
    if context:
        log_message += f" | Context: {context}"

    logger.log(log_level, log_message, exc_info=log_level >= logging.ERROR)


def _http_detail(error: APIError):
    if error.status_code >= 500:
        return "Internal Server Error"
    if error.details:
        return {"message": error.message, **error.details}
    return error.message


def get_error_response(error: Exception) -> JSONResponse:
    """Возвращает JSON ответ с ошибкой"""
    if isinstance(error, APIError):
        status_code = error.status_code
        detail = _http_detail(error)
    else:
        status_code = 500
        detail = "Internal Server Error"

    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "error_type": error.__class__.__name__ if isinstance(error, APIError) else "InternalError"
        }
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Глобальный обработчик исключений FastAPI"""
    log_error(exc, request)
    return get_error_response(exc)


def handle_api_errors(func):
    """Декоратор для обработки ошибок в API endpoints"""
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except APIError as e:
            log_error(e)
            raise HTTPException(
                status_code=e.status_code,
                detail=_http_detail(e)
            ) from e
        except HTTPException as e:
            log_error(e)
            raise
        except PydanticValidationError as e:
            log_error(e)
            raise HTTPException(
                status_code=400,
                detail=f"Validation error: {str(e)}"
            ) from e
        except ValueError as e:
            log_error(e)
            raise HTTPException(
                status_code=400,
                detail=str(e)
            ) from e
        except SQLAlchemyError as e:
            log_error(e)
            raise HTTPException(
                status_code=500,
                detail="Database error occurred"
            ) from e
        except Exception as e:  # noqa: BLE001
            log_error(e)
            raise HTTPException(
                status_code=500,
                detail="Internal Server Error"
            ) from e

    return wrapper


def create_error_responses() -> Dict[int, Dict[str, Any]]:
    """Создает стандартные описания ошибок для OpenAPI"""
    return {
        400: {
            "description": "Bad Request",
            "content": {
                "application/json": {
                    "example": {
                        "detail": {"message": "Weight must be between 0 and 1000 kg", "field": "weight"},
                        "error_type": "ValidationError"
                    }
                }
            }
        },
        404: {
            "description": "Not Found",
            "content": {
                "application/json": {
                    "example": {"detail": "Family member 7 not found", "error_type": "NotFoundError"}
                }
            }
        },
        500: {
            "description": "Internal Server Error",
            "content": {
                "application/json": {
                    "example": {"detail": "Internal Server Error", "error_type": "InternalError"}
                }
            }
        }
    }

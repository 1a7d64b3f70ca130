"""Mapping of structured action results onto HTTP status codes"""

from typing import Union

from fastapi import Response, status

from ..application.dtos.results import ActionResult, ErrorKind, ValidationResult

STATUS_BY_ERROR = {
    ErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.PERMISSION: status.HTTP_403_FORBIDDEN,
    ErrorKind.AUTH: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.PROVIDER: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def apply_status(
    response: Response,
    result: Union[ActionResult, ValidationResult],
    success_status: int = status.HTTP_200_OK,
) -> Union[ActionResult, ValidationResult]:
    if result.success:
        response.status_code = success_status
    else:
        response.status_code = STATUS_BY_ERROR.get(result.error, status.HTTP_400_BAD_REQUEST)
    return result

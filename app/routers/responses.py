"""Envelope helpers shared by the notice and upload routers"""
from fastapi import status
from fastapi.responses import JSONResponse
from app.core.exceptions import StorageError, ValidationError
from app.schemas.notice_schema import FieldErrorOut, SubmissionResponse

# 413 Payload Too Large
STORAGE_STATUS = {
    StorageError.SIZE_EXCEEDED: 413,
}


def envelope(model, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=model.model_dump(by_alias=True, mode="json"))


def validation_failure(e: ValidationError, response_cls=SubmissionResponse, status_code: int = 422) -> JSONResponse:
    model = response_cls(success=False, error=f"Invalid form data. {e}")
    if response_cls is SubmissionResponse:
        model.field_errors = [FieldErrorOut(**fe.to_dict()) for fe in e.field_errors]
    return envelope(model, status_code)


def storage_failure(e: StorageError, response_cls=SubmissionResponse) -> JSONResponse:
    status_code = STORAGE_STATUS.get(e.reason, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return envelope(response_cls(success=False, error=str(e)), status_code)

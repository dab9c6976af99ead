# foodshare/core/errors.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class FoodShareError(Exception):
    status_code = 500


class NotFound(FoodShareError):
    status_code = 404


class StorageError(FoodShareError):
    status_code = 500


async def _handle(request: Request, exc: FoodShareError):
    return JSONResponse({"detail": str(exc)}, status_code=exc.status_code)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFound, _handle)
    app.add_exception_handler(StorageError, _handle)

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from .. import schemas
from ..drivers.spool import OsSpoolDriver
from ..errors import SpoolError
from ..services.dispatcher import PrintDispatcher

LOGGER = logging.getLogger(__name__)

router = APIRouter()


@lru_cache(maxsize=1)
def get_dispatcher() -> PrintDispatcher:
    return PrintDispatcher()


@lru_cache(maxsize=1)
def get_spooler() -> OsSpoolDriver:
    return OsSpoolDriver()


# Plain ``def`` endpoints run in the server's thread pool, one job per worker
# thread, so a printer that never closes its socket only holds its own request.
@router.post("/print", response_model=schemas.PrintResponse, response_model_exclude_none=True)
def submit_print(payload: schemas.PrintRequest, dispatcher: PrintDispatcher = Depends(get_dispatcher)):
    result = dispatcher.dispatch(payload)
    if result.success:
        return result.to_response()
    code = status.HTTP_400_BAD_REQUEST if result.invalid_request else status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(status_code=code, content=result.to_response())


@router.get("/printers", response_model=schemas.PrintersResponse)
def list_printers(spooler: OsSpoolDriver = Depends(get_spooler)):
    try:
        printers = spooler.list_printers()
    except SpoolError as exc:
        LOGGER.warning("Printer listing failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": str(exc)},
        )
    try:
        default = spooler.default_printer()
    except SpoolError as exc:
        LOGGER.info("No default printer reported: %s", exc)
        default = None
    return schemas.PrintersResponse(printers=printers, default=default)

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PrintRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # left untyped so an unknown value is reported as UnsupportedMode
    mode: Optional[Any] = None
    printerName: Optional[str] = None
    printerIp: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("printerIp", "printerAddress"),
    )
    fileUrl: Optional[str] = None
    fileBase64: Optional[str] = None
    raw: Optional[str] = None


class PrintResponse(BaseModel):
    success: bool
    mode: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    kind: Optional[str] = None


class PrintersResponse(BaseModel):
    success: bool = True
    printers: list[Any]
    default: Optional[str] = None

from fastapi import APIRouter
from loguru import logger

from fitcalc.api.schemas import SheetBikesResult, SheetValuesSchema
from fitcalc.core.utils import normalize_sheet_rows

router = APIRouter()


@router.post("/sheet", response_model=SheetBikesResult)
def bikes_from_sheet(sheet: SheetValuesSchema):
    """
    Convert raw spreadsheet values (first row is the header) into bike records
    that can be fed straight into the xy-position comparison.
    """
    bikes = normalize_sheet_rows(sheet.values)
    logger.info("Normalised {} bike rows", len(bikes))
    return SheetBikesResult(data=bikes)

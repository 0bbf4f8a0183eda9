import os
import time
import uuid
import logging
import numbers
from datetime import date, datetime, timedelta, time as time_of_day
from typing import Any, Iterable, List, Optional, Sequence

import pandas as pd
from pydantic import BaseModel

import config
from utils.result import Result
from workbook_reader import WorkbookReader, sheet_name_matcher

logger = logging.getLogger(__name__)

# Serials count from this date, and the format also counts a 1900-02-29 that never existed
EXCEL_EPOCH = date(1900, 1, 1)

RANGE_MARKER = "～"
SUMMARY_TEMPLATE = "【通勤】＠{rate}円×{count}日（{month}/{days}）"


class LogContext:
    """Context manager for tracking and logging pipeline steps"""
    def __init__(self, operation_name: str, **kwargs):
        self.operation_name = operation_name
        self.start_time = None
        self.request_id = kwargs.pop('request_id', str(uuid.uuid4())[:8])
        self.extra = kwargs

    def __enter__(self):
        self.start_time = time.time()
        logger.info(f"Starting {self.operation_name}", extra={"request_id": self.request_id, **self.extra})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time
        if exc_type:
            logger.error(
                f"Failed {self.operation_name} in {duration:.2f}s: {exc_val}",
                extra={"request_id": self.request_id, "duration": duration, **self.extra}
            )
        else:
            logger.info(
                f"Completed {self.operation_name} in {duration:.2f}s",
                extra={"request_id": self.request_id, "duration": duration, **self.extra}
            )


class SummaryRequest(BaseModel):
    """
    Request for a commute expense summary.

    Attributes:
        file_path: Path to the attendance workbook; the configured default is used when omitted
        round_trip_fare: Round-trip fare per commute day; the configured fare is used when omitted
    """
    file_path: Optional[str] = None
    round_trip_fare: Optional[int] = None


class SummaryResponse(BaseModel):
    """
    Response schema for a generated commute expense summary.

    Attributes:
        success: Whether the summary was generated
        status_code: HTTP status code of the response
        status: HTTP status description
        summary: Reimbursement text, e.g. "【通勤】＠716円×4日（4/1～3,5）"
        sheet_name: Work table sheet the days were read from
        month: Target month (1-12)
        commute_days: Days of month the user commuted, ascending
        total_days: Number of commute days
        round_trip_fare: Fare applied per commute day
        total_fare: round_trip_fare × total_days
        error: Error message if unsuccessful
    """
    success: bool
    status_code: Optional[int] = 200
    status: Optional[str] = "OK"
    summary: Optional[str] = None
    sheet_name: Optional[str] = None
    month: Optional[int] = None
    commute_days: Optional[List[int]] = None
    total_days: Optional[int] = None
    round_trip_fare: Optional[int] = None
    total_fare: Optional[int] = None
    error: Optional[str] = None


def excel_serial_to_date(serial: float) -> date:
    """
    Convert an Excel date serial number to a calendar date.

    The result is 1900-01-01 plus (serial - 2) days: one day because the
    count starts at 1, and one for the non-existent 1900-02-29 that Excel
    counts. Any time-of-day fraction is dropped.

    Examples:
        >>> excel_serial_to_date(60)
        datetime.date(1900, 2, 28)
        >>> excel_serial_to_date(45383)
        datetime.date(2024, 4, 1)
    """
    return EXCEL_EPOCH + timedelta(days=int(serial) - 2)


def _is_truthy(value: Any) -> bool:
    # NaN and NaT are truthy to Python but mean "empty cell" here
    if value is None or pd.isna(value):
        return False
    # An h:mm cell holding 0 reads back as midnight, which Python treats as true
    if isinstance(value, time_of_day):
        return value != time_of_day(0)
    return bool(value)


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, numbers.Number):
        return excel_serial_to_date(value)
    raise ValueError(f"Unsupported date cell value: {value!r}")


def extract_commute_dates(
    rows: Iterable[Sequence[Any]],
    home_work_note: str = config.HOME_WORK_NOTE,
) -> List[date]:
    """
    Pick the days the user was in the office out of the attendance rows.

    A row counts when it has a date, has work hours logged and is not
    noted as home work. Row order is kept, so a chronological sheet gives
    ascending dates.

    Args:
        rows: Attendance row tuples (date in column A, hours in F, note in O)
        home_work_note: Note text that marks a day worked from home

    Returns:
        List of commute dates; empty when no row qualifies
    """
    commute_dates = []
    for row in rows:
        date_cell = row[config.DATE_COLUMN]
        work_hours = row[config.WORK_HOURS_COLUMN]
        note = row[config.NOTE_COLUMN]

        if _is_truthy(date_cell) and _is_truthy(work_hours) and note != home_work_note:
            commute_dates.append(_to_date(date_cell))

    return commute_dates


def group_consecutive_days(days: Sequence[int]) -> List[List[int]]:
    """
    Split days of month into maximal runs of consecutive days.

    Examples:
        >>> group_consecutive_days([1, 2, 3, 5, 6, 8])
        [[1, 2, 3], [5, 6], [8]]
    """
    groups: List[List[int]] = []
    for day in days:
        if groups and day == groups[-1][-1] + 1:
            groups[-1].append(day)
        else:
            groups.append([day])
    return groups


def render_day_group(group: Sequence[int]) -> str:
    """Render a run of three or more days as "first～last", shorter runs as a comma list."""
    if len(group) >= 3:
        return f"{group[0]}{RANGE_MARKER}{group[-1]}"
    return ",".join(str(day) for day in group)


def format_commute_summary(commute_dates: Sequence[date], round_trip_fare: int = config.ROUND_TRIP_FARE) -> str:
    """
    Build the reimbursement summary text for one month of commute dates.

    Args:
        commute_dates: Ascending commute dates, all in the same month
        round_trip_fare: Fare for one office round trip

    Returns:
        Summary such as "【通勤】＠716円×4日（4/1～3,5）"

    Raises:
        ValueError: If commute_dates is empty
    """
    if not commute_dates:
        raise ValueError("Cannot build a commute summary without commute dates")

    target_month = commute_dates[0].month
    groups = group_consecutive_days([commute_date.day for commute_date in commute_dates])
    rendered_days = ",".join(render_day_group(group) for group in groups)

    return SUMMARY_TEMPLATE.format(
        rate=round_trip_fare,
        count=len(commute_dates),
        month=target_month,
        days=rendered_days,
    )


class SummaryGenerator:
    """
    Turns an attendance workbook into a commute expense summary.

    Steps:
    - Validate that the workbook exists
    - Locate the work table sheet by name
    - Read the attendance block and pick the commute days
    - Format the reimbursement text
    """

    @staticmethod
    def generate_summary(request: SummaryRequest) -> Result[SummaryResponse]:
        """
        Generate the commute summary for the workbook named in ``request``.

        Any unexpected error is logged here and returned as a 500 Result;
        nothing is retried.

        Args:
            request: SummaryRequest with the workbook path and optional fare

        Returns:
            Result[SummaryResponse]: the summary, or the reason it could not be made
        """
        file_path = request.file_path or str(config.DEFAULT_WORKBOOK)
        round_trip_fare = request.round_trip_fare if request.round_trip_fare is not None else config.ROUND_TRIP_FARE
        log_context = {
            "request_id": str(uuid.uuid4())[:8],
            "file_path": file_path,
            "round_trip_fare": round_trip_fare,
        }

        logger.info("Generating commute summary", extra=log_context)

        try:
            if not os.path.exists(file_path):
                logger.error("Workbook not found", extra=log_context)
                return Result.not_found(f"Workbook does not exist at path: {file_path}")

            with WorkbookReader(file_path) as reader:
                with LogContext("sheet lookup", **log_context):
                    sheet_name = reader.find_sheet(sheet_name_matcher(config.WORK_TABLE_SHEET_PATTERN))

                if sheet_name is None:
                    logger.warning("Work table sheet not found", extra=log_context)
                    return Result.sheet_not_found(config.WORK_TABLE_SHEET_PATTERN)
                log_context["sheet_name"] = sheet_name

                with LogContext("attendance range read", **log_context):
                    rows = reader.read_range(sheet_name, config.ATTENDANCE_RANGE)

            with LogContext("commute day extraction", **log_context):
                commute_dates = extract_commute_dates(rows, config.HOME_WORK_NOTE)

            if not commute_dates:
                logger.warning("No commute days in work table", extra=log_context)
                return Result.no_commute_days(f"No commute days found in sheet '{sheet_name}'")

            summary = format_commute_summary(commute_dates, round_trip_fare)
            logger.info(f"Generated summary: {summary}", extra=log_context)

            response = SummaryResponse(
                success=True,
                summary=summary,
                sheet_name=sheet_name,
                month=commute_dates[0].month,
                commute_days=[commute_date.day for commute_date in commute_dates],
                total_days=len(commute_dates),
                round_trip_fare=round_trip_fare,
                total_fare=round_trip_fare * len(commute_dates),
            )
            return Result.ok(response)

        except Exception as e:
            logger.exception("Unexpected error while generating commute summary", extra={**log_context, "error": str(e)})
            return Result.server_error(f"Summary generation error: {e}")

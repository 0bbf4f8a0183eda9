from typing import Generic, TypeVar, Optional, Any, Dict, Union
from http import HTTPStatus

T = TypeVar('T')  # Generic type variable


class Result(Generic[T]):
    """
    Outcome of a summary-generation step.

    A Result either carries the step's data or an error message together
    with the HTTP status the API layer should answer with.

    Attributes:
        success (bool): Indicates if the step succeeded
        data (Optional[T]): The produced value (only present when success is True)
        error (Optional[str]): Error message (only present when success is False)
        status_code (HTTPStatus): HTTP status code (default: 200 for success, 400 for failure)
    """
    def __init__(
        self,
        success: bool,
        data: Optional[T] = None,
        error: Optional[str] = None,
        status_code: Optional[Union[int, HTTPStatus]] = None
    ):
        self.success = success
        self.data = data
        self.error = error

        if status_code is None:
            self.status_code = HTTPStatus.OK if success else HTTPStatus.BAD_REQUEST
        elif isinstance(status_code, int):
            self.status_code = HTTPStatus(status_code)
        else:
            self.status_code = status_code

    @classmethod
    def ok(cls, data: T, status_code: Optional[Union[int, HTTPStatus]] = HTTPStatus.OK) -> "Result[T]":
        """Create a successful Result wrapping ``data``."""
        return cls(success=True, data=data, status_code=status_code)

    @classmethod
    def not_found(cls, error: str = "Workbook not found") -> "Result[T]":
        """
        Create a failed Result with NOT_FOUND status code.

        Args:
            error (str, optional): The error message. Defaults to "Workbook not found".

        Returns:
            Result[T]: A failed Result with 404 status code
        """
        return cls(success=False, error=error, status_code=HTTPStatus.NOT_FOUND)

    @classmethod
    def sheet_not_found(cls, pattern: str) -> "Result[T]":
        """
        Create a failed Result for a workbook without a work table sheet.

        Args:
            pattern (str): The sheet name pattern that nothing matched

        Returns:
            Result[T]: A failed Result with 404 status code
        """
        return cls(
            success=False,
            error=f"No worksheet matching '{pattern}' found in workbook",
            status_code=HTTPStatus.NOT_FOUND
        )

    @classmethod
    def no_commute_days(cls, error: str = "No commute days found in work table") -> "Result[T]":
        """
        Create a failed Result for a work table without any office day.

        Returns:
            Result[T]: A failed Result with 422 status code
        """
        return cls(success=False, error=error, status_code=HTTPStatus.UNPROCESSABLE_ENTITY)

    @classmethod
    def server_error(cls, error: str = "Internal server error") -> "Result[T]":
        """Create a failed Result with INTERNAL_SERVER_ERROR status code."""
        return cls(success=False, error=error, status_code=HTTPStatus.INTERNAL_SERVER_ERROR)

    def is_success(self) -> bool:
        return self.success

    def is_failure(self) -> bool:
        return not self.success

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert Result to a dictionary suitable for API error responses.

        Returns:
            Dict[str, Any]: Dictionary containing status, status_code, data/error
        """
        response = {
            "success": self.success,
            "status_code": self.status_code.value,
            "status": self.status_code.phrase
        }

        if self.is_success():
            response["data"] = self.data
        else:
            response["error"] = self.error

        return response

    def __str__(self) -> str:
        status_info = f"{self.status_code.value} {self.status_code.phrase}"
        if self.is_success():
            data_repr = str(self.data)
            # Truncate long data representations
            if len(data_repr) > 100:
                data_repr = f"{data_repr[:97]}..."
            return f"Success ({status_info}): {data_repr}"
        return f"Failure ({status_info}): {self.error}"

    def __repr__(self) -> str:
        return f"Result(success={self.success}, status_code={self.status_code!r}, data={self.data!r}, error={self.error!r})"

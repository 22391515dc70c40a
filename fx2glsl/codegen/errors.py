"""
Exceptions and error handling for the GLSL code generator.

The code generator trusts its input: any malformed call from the IR producer
is a contract violation that aborts the compilation unit immediately.
"""

import os
from typing import NoReturn

from loguru import logger

from fx2glsl.codegen.models import Location


class CodegenError(Exception):
    """Exception raised when the IR producer violates a code generator contract.

    Examples:
        >>> raise CodegenError("Unsupported binary operator: question")
        CodegenError: Unsupported binary operator: question
    """

    def __init__(self, message: str, location: Location | None = None):
        """Initialize the exception with a message and optional source location.

        Args:
            message: The error message
            location: Optional location in the effect source
        """
        self.message = message
        self.location = location

        location_info = ""
        if location is not None and location.source:
            location_info = f" in {os.path.basename(location.source)}"
        if location is not None and location.line:
            location_info += f" at line {location.line}"

        super().__init__(f"{message}{location_info}")


def require(condition: bool, message: str, location: Location | None = None) -> None:
    """Abort compilation unless a producer contract holds.

    Args:
        condition: The contract to check
        message: Description of the violated contract
        location: Optional location in the effect source

    Raises:
        CodegenError: If the condition is false
    """
    if not condition:
        fail(message, location)


def fail(message: str, location: Location | None = None) -> NoReturn:
    """Abort compilation because a producer contract was violated.

    Args:
        message: Description of the violated contract
        location: Optional location in the effect source

    Raises:
        CodegenError: Always
    """
    logger.error(message)
    raise CodegenError(message, location)

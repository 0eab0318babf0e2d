"""
Railway-Oriented Programming (ROP) helpers.

Explicit, composable error handling for the generator pipeline — stages return
Result instead of raising, and the first failure short-circuits the rest.

    from railway import Result, ErrorCode

    result = (
        reader.read(path)
        .flat_map(decoder.decode_bundle)
        .map(len)
    )
"""

from railway.assertions import ResultAssertions
from railway.failure import ErrorCode, FailureDescription
from railway.result import Failure, Result, Success

__all__ = [
    "Result",
    "Success",
    "Failure",
    "ErrorCode",
    "FailureDescription",
    "ResultAssertions",
]

__version__ = "1.1.0"

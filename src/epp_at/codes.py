"""
EPP Result Codes

Result codes per RFC 5730 section 3.
"""

from typing import Union

# Success codes
SUCCESS = 1000
SUCCESS_ACTION_PENDING = 1001
SUCCESS_NO_MESSAGES = 1300
SUCCESS_ACK_TO_DEQUEUE = 1301
SUCCESS_ENDING_SESSION = 1500

# Protocol command errors
UNKNOWN_COMMAND = 2000
COMMAND_SYNTAX_ERROR = 2001
COMMAND_USE_ERROR = 2002
REQUIRED_PARAMETER_MISSING = 2003
PARAMETER_VALUE_RANGE_ERROR = 2004
PARAMETER_VALUE_SYNTAX_ERROR = 2005

# Implementation-specific errors
UNIMPLEMENTED_PROTOCOL_VERSION = 2100
UNIMPLEMENTED_COMMAND = 2101
UNIMPLEMENTED_OPTION = 2102
UNIMPLEMENTED_EXTENSION = 2103
BILLING_FAILURE = 2104
OBJECT_NOT_ELIGIBLE_FOR_RENEWAL = 2105
OBJECT_NOT_ELIGIBLE_FOR_TRANSFER = 2106

# Security errors
AUTHENTICATION_ERROR = 2200
AUTHORIZATION_ERROR = 2201
INVALID_AUTHORIZATION_INFO = 2202

# Object errors
OBJECT_PENDING_TRANSFER = 2300
OBJECT_NOT_PENDING_TRANSFER = 2301
OBJECT_EXISTS = 2302
OBJECT_DOES_NOT_EXIST = 2303
OBJECT_STATUS_PROHIBITS_OPERATION = 2304
OBJECT_ASSOCIATION_PROHIBITS_OPERATION = 2305
PARAMETER_VALUE_POLICY_ERROR = 2306
UNIMPLEMENTED_OBJECT_SERVICE = 2307
DATA_MANAGEMENT_POLICY_VIOLATION = 2308

# Server errors
COMMAND_FAILED = 2400
COMMAND_FAILED_SERVER_CLOSING = 2500
AUTHENTICATION_ERROR_SERVER_CLOSING = 2501
SESSION_LIMIT_EXCEEDED = 2502

SUCCESS_CODES = frozenset({
    SUCCESS,
    SUCCESS_ACTION_PENDING,
    SUCCESS_NO_MESSAGES,
    SUCCESS_ACK_TO_DEQUEUE,
    SUCCESS_ENDING_SESSION,
})


def is_success(code: Union[int, str]) -> bool:
    """
    Check whether a result code denotes success.

    Accepts the code as it appears on the wire ("1000") or as an int.
    Anything that is not one of the defined success codes is a failure.
    """
    try:
        return int(code) in SUCCESS_CODES
    except (TypeError, ValueError):
        return False


def is_pending(code: Union[int, str]) -> bool:
    """Check whether a success code leaves an action pending (1001)."""
    try:
        return int(code) == SUCCESS_ACTION_PENDING
    except (TypeError, ValueError):
        return False

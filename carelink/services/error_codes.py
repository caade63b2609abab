from enum import Enum


class ErrorCode(str, Enum):
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    EVENT_FULL = "EVENT_FULL"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    PARTICIPANT_NOT_FOUND = "PARTICIPANT_NOT_FOUND"
    VOLUNTEER_NOT_FOUND = "VOLUNTEER_NOT_FOUND"
    STAFF_NOT_FOUND = "STAFF_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    EMAIL_IN_USE = "EMAIL_IN_USE"
    PHONE_IN_USE = "PHONE_IN_USE"
    BIRTHDATE_MISMATCH = "BIRTHDATE_MISMATCH"

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    OTP_NOT_FOUND = "OTP_NOT_FOUND"
    OTP_EXPIRED = "OTP_EXPIRED"
    OTP_INVALID = "OTP_INVALID"
    STAFF_ONLY = "STAFF_ONLY"
    CAPACITY_BELOW_REGISTRATIONS = "CAPACITY_BELOW_REGISTRATIONS"

    VALIDATION_FAILED = "VALIDATION_FAILED"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    HTTP_ERROR = "HTTP_ERROR"
    STORAGE_FAILURE = "STORAGE_FAILURE"

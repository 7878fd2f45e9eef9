"""
Custom exceptions and error handling for Angkot Ledger.

Defines application-specific exceptions with error codes so the dispatcher
can turn any failure into one fixed, localized chat reply.

Usage:
    from core.errors import RosterError, ErrorCode

    raise RosterError("Driver 'Pak Ahmad' not found", code=ErrorCode.UNKNOWN_DRIVER)
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for user-facing chat replies."""

    # Roster errors
    UNKNOWN_DRIVER = "UNKNOWN_DRIVER"
    DUPLICATE_KEY = "DUPLICATE_KEY"

    # Validation errors
    MALFORMED_INPUT = "MALFORMED_INPUT"
    INVALID_DATE_FORMAT = "INVALID_DATE_FORMAT"

    # Report errors
    NO_DATA_FOR_DATE = "NO_DATA_FOR_DATE"

    # Store errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    STORE_WRITE_FAILED = "STORE_WRITE_FAILED"
    STORE_READ_FAILED = "STORE_READ_FAILED"

    # Access errors
    FORBIDDEN = "FORBIDDEN"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.UNKNOWN_DRIVER: "Driver tidak ditemukan. Daftarkan driver terlebih dahulu dengan /driver.",
    ErrorCode.DUPLICATE_KEY: "Nama tersebut sudah terdaftar.",
    ErrorCode.MALFORMED_INPUT: "Format pesan tidak sesuai. Ketik /antar atau /jemput untuk melihat contoh.",
    ErrorCode.INVALID_DATE_FORMAT: "Format tanggal tidak valid. Gunakan DD-MM-YYYY, contoh: /laporan 01-02-2025.",
    ErrorCode.NO_DATA_FOR_DATE: "Tidak ada data perjalanan pada tanggal tersebut.",
    ErrorCode.STORE_UNAVAILABLE: "Database sedang sibuk. Silakan coba lagi sebentar.",
    ErrorCode.STORE_WRITE_FAILED: "Maaf, terjadi kesalahan saat menyimpan data.",
    ErrorCode.STORE_READ_FAILED: "Maaf, terjadi kesalahan saat membaca data.",
    ErrorCode.FORBIDDEN: "Anda tidak memiliki izin untuk mengakses ini.",
    ErrorCode.INTERNAL_ERROR: "Maaf, terjadi kesalahan. Silakan coba lagi.",
}


class AngkotError(Exception):
    """Base exception for all Angkot Ledger errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        self.message = message
        self.code = code
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return USER_MESSAGES.get(self.code, USER_MESSAGES[ErrorCode.INTERNAL_ERROR])


class RosterError(AngkotError):
    """Driver or passenger lookup or registration failed."""

    pass


class ValidationError(AngkotError):
    """Chat input or date text could not be parsed."""

    pass


class ReportError(AngkotError):
    """Report could not be produced for the requested date."""

    pass


class StoreError(AngkotError):
    """The relational store could not begin, run or commit a transaction."""

    pass


class AuthorizationError(AngkotError):
    """Caller is not the administrative identity."""

    pass

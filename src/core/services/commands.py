"""Chat command dispatcher: turns bot messages into ledger, roster and report calls."""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from core.db.utils import local_timestamp
from core.errors import USER_MESSAGES, AngkotError, ErrorCode, ValidationError
from core.models.ledger import LegKind, LegRecord
from core.services.backup import ensure_admin
from core.services.ledger import TripLedger
from core.services.report import ReportBuilder, format_report, format_rupiah, parse_report_date
from core.services.roster import RosterService
from core.services.session import ChatSessionStore, PendingPrompt

logger = logging.getLogger(__name__)

LEG_KEYWORDS = {"antar": LegKind.DEPARTURE, "jemput": LegKind.RETURN}

_BULLET = re.compile(r"^\s*(?:[-*•+]|\d+[.)])\s*")
_DRIVER_PREFIX = re.compile(r"^\s*driver\s*:\s*", re.IGNORECASE)

HELP_TEXT = (
    "Selamat datang! Berikut adalah daftar perintah yang tersedia:\n"
    "/ping - Cek koneksi bot\n"
    "/driver - Tambah driver baru\n"
    "/drivers - Lihat daftar driver\n"
    "/santri - Tambah santri baru\n"
    "/daftarsantri - Lihat daftar santri\n"
    "/antar - Lihat format pencatatan antar\n"
    "/jemput - Lihat format pencatatan jemput\n"
    "/laporan - Lihat laporan harian (/laporan kemarin, /laporan DD-MM-YYYY)"
)


def leg_format_help(keyword: str) -> str:
    title = "antar" if keyword == "antar" else "jemput"
    return (
        f"Format pencatatan {title}:\n\n"
        f"{keyword}\n"
        "Driver: [nama_driver]\n"
        "- [nama_santri_1]\n"
        "- [nama_santri_2]\n"
        "- [nama_santri_3]\n\n"
        "Contoh:\n"
        f"{keyword}\n"
        "Driver: Pak Ahmad\n"
        "- Santri Ali\n"
        "- Santri Umar\n"
        "- Santri Hasan"
    )


@dataclass(frozen=True)
class LegMessage:
    kind: LegKind
    driver_name: str
    passenger_names: list[str]


def strip_bullet(line: str) -> str:
    return _BULLET.sub("", line, count=1).strip()


def parse_leg_message(text: str) -> LegMessage | None:
    """Parse an ``antar``/``jemput`` message; None when the text is not one.

    Raises:
        ValidationError: the keyword is present but the driver line or the
            passenger lines are missing
    """
    lines = [line.strip() for line in (text or "").splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return None
    words = lines[0].split()
    keyword = words[0].lower() if words else ""
    kind = LEG_KEYWORDS.get(keyword)
    if kind is None or len(words) > 1:
        return None

    if len(lines) < 2:
        raise ValidationError("Driver line missing", code=ErrorCode.MALFORMED_INPUT)
    driver_name = _DRIVER_PREFIX.sub("", lines[1], count=1).strip()
    passengers = [name for name in (strip_bullet(line) for line in lines[2:]) if name]
    if not driver_name or not passengers:
        raise ValidationError("Driver or passengers missing", code=ErrorCode.MALFORMED_INPUT)
    return LegMessage(kind=kind, driver_name=driver_name, passenger_names=passengers)


def format_leg_record(record: LegRecord) -> str:
    status = "diperbarui" if record.replaced else "berhasil disimpan"
    lines = [
        f"Data {record.kind.label.lower()} {status}",
        f"Tanggal: {record.trip_date.strftime('%d-%m-%Y')}",
        f"Driver: {record.driver_name}",
    ]
    lines.extend(f"- {item.passenger_name}: {format_rupiah(item.fare)}" for item in record.items)
    lines.append(f"Total: {format_rupiah(record.total)}")
    return "\n".join(lines)


class CommandDispatcher:
    def __init__(
        self,
        roster: RosterService,
        ledger: TripLedger,
        reports: ReportBuilder,
        sessions: ChatSessionStore,
        admin_chat_id: int | None = None,
        backup: Callable[[], str] | None = None,
        timezone: str = "Asia/Jakarta",
    ) -> None:
        self._roster = roster
        self._ledger = ledger
        self._reports = reports
        self._sessions = sessions
        self._admin_chat_id = admin_chat_id
        self._backup = backup
        self._timezone = timezone

    def dispatch(self, chat_id: int, text: str) -> str | None:
        """Handle one message and return the reply, or None to stay silent."""
        try:
            return self._dispatch(chat_id, (text or "").strip())
        except AngkotError as e:
            logger.info("Chat %s: %s (%s)", chat_id, e.message, e.code.value)
            return e.user_message
        except Exception:
            logger.exception("Unexpected error handling message from chat %s", chat_id)
            return USER_MESSAGES[ErrorCode.INTERNAL_ERROR]

    def _dispatch(self, chat_id: int, text: str) -> str | None:
        if text.startswith("/"):
            return self._command(chat_id, text)

        leg = parse_leg_message(text)
        if leg is not None:
            record = self._ledger.record_leg(leg.kind, leg.driver_name, leg.passenger_names)
            return format_leg_record(record)

        prompt = self._sessions.pop_pending(chat_id)
        if prompt is PendingPrompt.DRIVER:
            entry = self._roster.register_driver(text)
            return f"Driver {entry.name} berhasil ditambahkan"
        if prompt is PendingPrompt.PASSENGER:
            entry = self._roster.register_passenger(text)
            return f"Santri {entry.name} berhasil ditambahkan"
        return None

    def _command(self, chat_id: int, text: str) -> str | None:
        command, _, argument = text.partition(" ")
        # Group chats append the bot username: /laporan@angkot_bot
        command = command.split("@", 1)[0].lower()

        if command == "/ping":
            return "pong"
        if command in ("/start", "/help"):
            return HELP_TEXT
        if command == "/driver":
            self._sessions.set_pending(chat_id, PendingPrompt.DRIVER)
            return "Silakan masukkan nama driver:"
        if command == "/santri":
            self._sessions.set_pending(chat_id, PendingPrompt.PASSENGER)
            return "Silakan masukkan nama santri:"
        if command == "/drivers":
            return self._list("driver", [(d.registered_at, d.name) for d in self._roster.list_drivers()])
        if command == "/daftarsantri":
            return self._list("santri", [(p.registered_at, p.name) for p in self._roster.list_passengers()])
        if command in ("/antar", "/jemput"):
            return leg_format_help(command[1:])
        if command == "/laporan":
            trip_date = parse_report_date(argument, self._reports.today())
            return format_report(self._reports.report_for_date(trip_date))
        if command == "/backupdb":
            return self._backup_db(chat_id)
        return None

    def _list(self, what: str, entries: list[tuple[datetime, str]]) -> str:
        if not entries:
            return f"Belum ada {what} terdaftar"
        lines = [f"Daftar {what}:"]
        for registered_at, name in entries:
            stamp = local_timestamp(registered_at, self._timezone).strftime("%Y-%m-%d %H:%M:%S")
            lines.append(f"{stamp} - {name}")
        return "\n".join(lines)

    def _backup_db(self, chat_id: int) -> str:
        ensure_admin(chat_id, self._admin_chat_id)
        if self._backup is None:
            raise AngkotError("Backup is not configured")
        key = self._backup()
        return f"Backup database berhasil disimpan: {key}"

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .clock.repository import ClockingLog, DocumentStaffDirectory
from .clock.service import ClockService
from .database.connection import DBConfig, DatabaseConnection
from .identity.allow_list import AllowList, DocumentAllowList, StaticAllowList
from .messages.service import BoardService
from .store.mysql_document_store import MySQLDocumentStore
from .store.repository import DocumentStore


@dataclass(frozen=True)
class Container:
    store: DocumentStore

    allow_list: AllowList
    verifier_allow_list: AllowList
    staff_directory: DocumentStaffDirectory

    board_service: BoardService
    clock_service: ClockService


def build_services(store: DocumentStore, *, clock_verifier_emails: Iterable[str] = ()) -> Container:
    allow_list = DocumentAllowList(store)
    verifiers = StaticAllowList(clock_verifier_emails)
    # No configured verifiers: anyone allowed on the board may verify clock events.
    verifier_allow_list: AllowList = verifiers if verifiers else allow_list
    staff_directory = DocumentStaffDirectory(store)

    return Container(
        store=store,
        allow_list=allow_list,
        verifier_allow_list=verifier_allow_list,
        staff_directory=staff_directory,
        board_service=BoardService(store),
        clock_service=ClockService(staff_directory, ClockingLog(store), verifier_allow_list),
    )


def build_container(*, db_config: dict, clock_verifier_emails: Optional[Iterable[str]] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return build_services(MySQLDocumentStore(conn), clock_verifier_emails=clock_verifier_emails or ())

"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/sync.py
Version:        1.0.0
Description:    Keeps the local document index in line with the device:
                lists the notes folder, reconciles and persists the diff one
                document at a time.
------------------------------------------------------------------------------
"""

import threading
import weakref
from typing import List, Optional

from inkplanner.interfaces import Clock, DeviceClient, DocumentStore, SettingsProvider, SystemClock
from inkplanner.logger import get_logger
from inkplanner.models.document import LocalDocumentRecord, SyncResult
from inkplanner.models.types import DEFAULT_NOTES_FOLDER
from inkplanner.reconciler import reconcile

logger = get_logger("sync")


class DocumentSyncService:
    """
    Synchronizes the device notes folder into the document store.

    Syncs of the same user are serialized within the process; across
    processes the store's unique (user, document) key turns a lost race into
    a per-document failure instead of a duplicate.
    """

    # Locks live only while a sync holds them, so idle users leave no entry
    _locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()
    _locks_guard = threading.Lock()

    def __init__(
        self,
        device: DeviceClient,
        documents: DocumentStore,
        settings: Optional[SettingsProvider] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.device = device
        self.documents = documents
        self.settings = settings
        self.clock = clock or SystemClock()

    @classmethod
    def _user_lock(cls, user_id: str) -> threading.Lock:
        with cls._locks_guard:
            lock = cls._locks.get(user_id)
            if lock is None:
                lock = cls._locks[user_id] = threading.Lock()
            return lock

    def _notes_folder(self) -> str:
        if self.settings is None:
            return DEFAULT_NOTES_FOLDER
        return self.settings.get_notes_folder() or DEFAULT_NOTES_FOLDER

    def sync_documents(self, user_id: str) -> SyncResult:
        """
        Lists remote notes and applies inserts, updates and deletes.

        A failure while listing propagates. A failure persisting one document
        is logged, its remote id lands in SyncResult.failures and the rest of
        the diff is still applied.
        """
        with self._user_lock(user_id):
            folder = self._notes_folder()
            remote = self.device.list_documents(folder)
            local = self.documents.list_for_user(user_id)

            diff = reconcile(remote, local, user_id=user_id, folder_path=folder, now=self.clock.now())
            result = SyncResult()

            for record in diff.added:
                try:
                    self.documents.insert(record)
                    result.added += 1
                except Exception as e:
                    logger.error(f"Failed to add document {record.document_id} ({record.document_name}): {e}")
                    result.failures.append(record.document_id)

            for record in diff.updated:
                try:
                    self.documents.update_version(record)
                    result.updated += 1
                except Exception as e:
                    logger.error(f"Failed to update document {record.document_id}: {e}")
                    result.failures.append(record.document_id)

            for record in diff.removed:
                try:
                    self.documents.delete(record.id)
                    result.removed += 1
                except Exception as e:
                    logger.error(f"Failed to remove document {record.document_id}: {e}")
                    result.failures.append(record.document_id)

            logger.info(
                f"Sync for user {user_id}: added={result.added} updated={result.updated} "
                f"removed={result.removed} failed={len(result.failures)}"
            )
            return result

    def list_notes(self, user_id: str, include_processed: bool = False) -> List[LocalDocumentRecord]:
        """
        Syncs, then returns the user's non-agenda notes. When the sync fails
        the cached index is returned.
        """
        try:
            self.sync_documents(user_id)
        except Exception as e:
            logger.warning(f"Sync before listing notes failed for user {user_id}, using cached index: {e}")

        notes = [r for r in self.documents.list_for_user(user_id) if not r.is_agenda]
        if not include_processed:
            notes = [r for r in notes if not r.is_processed]
        return notes

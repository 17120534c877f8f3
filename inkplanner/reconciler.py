"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/reconciler.py
Version:        1.0.0
Description:    Computes how the local document index must change to match
                the remote device listing. Pure: no I/O, no hidden state.
------------------------------------------------------------------------------
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Set

from inkplanner.models.document import LocalDocumentRecord, RemoteDocument
from inkplanner.models.types import LOCAL_TYPE_NOTEBOOK


@dataclass
class ReconcileDiff:
    """
    Records to insert, update and delete. The three lists never share a
    remote document id.
    """
    added: List[LocalDocumentRecord] = field(default_factory=list)
    updated: List[LocalDocumentRecord] = field(default_factory=list)
    removed: List[LocalDocumentRecord] = field(default_factory=list)

    @property
    def added_count(self) -> int:
        return len(self.added)

    @property
    def updated_count(self) -> int:
        return len(self.updated)

    @property
    def removed_count(self) -> int:
        return len(self.removed)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.updated or self.removed)

    def apply_to(self, local: Iterable[LocalDocumentRecord]) -> List[LocalDocumentRecord]:
        """Returns the local listing as it looks once this diff is persisted."""
        removed_ids = {r.id for r in self.removed}
        replacements = {r.id: r for r in self.updated}
        result = [replacements.get(r.id, r) for r in local if r.id not in removed_ids]
        result.extend(self.added)
        return result


def reconcile(
    remote: Iterable[RemoteDocument],
    local: Iterable[LocalDocumentRecord],
    *,
    user_id: str,
    folder_path: str,
    now: datetime,
) -> ReconcileDiff:
    """
    Diffs the remote listing against the local records of one user.

    Only remote entries of type 'DocumentType' become records; folders still
    count as present when deciding removals. A local record is removed when
    its remote id is gone, unless it is an agenda document. Each remote id is
    classified at most once.
    """
    remote = list(remote)
    local = list(local)

    by_remote_id: Dict[str, LocalDocumentRecord] = {r.document_id: r for r in local}
    remote_ids: Set[str] = {doc.id for doc in remote}

    diff = ReconcileDiff()
    seen: Set[str] = set()

    for doc in remote:
        # A listing may repeat an id; the first entry wins
        if not doc.is_note or doc.id in seen:
            continue
        seen.add(doc.id)

        existing = by_remote_id.get(doc.id)
        if existing is None:
            diff.added.append(LocalDocumentRecord(
                user_id=user_id,
                document_id=doc.id,
                document_version=doc.version,
                document_name=doc.name,
                document_type=LOCAL_TYPE_NOTEBOOK,
                folder_path=folder_path,
                last_modified_at=doc.last_modified,
                is_agenda=False,
                is_processed=False,
                created_at=now,
                updated_at=now,
            ))
        elif existing.document_version != doc.version:
            diff.updated.append(existing.model_copy(update={
                "document_version": doc.version,
                "document_name": doc.name,
                "last_modified_at": doc.last_modified,
                "is_processed": False,
                "updated_at": now,
            }))

    for record in local:
        if record.document_id not in remote_ids and not record.is_agenda:
            diff.removed.append(record)

    return diff

from datetime import datetime

from inkplanner.models.document import LocalDocumentRecord
from inkplanner.reconciler import reconcile

USER = "user-1"
NOW = datetime(2024, 1, 10, 8, 0)
FOLDER = "/Calendar/Notes"


def local_doc(doc_id, version="1", is_agenda=False, is_processed=True):
    return LocalDocumentRecord(
        id=f"local-{doc_id}",
        user_id=USER,
        document_id=doc_id,
        document_version=version,
        document_name=f"Note {doc_id}",
        is_agenda=is_agenda,
        is_processed=is_processed,
    )


def run(remote, local):
    return reconcile(remote, local, user_id=USER, folder_path=FOLDER, now=NOW)


def test_added_updated_removed(make_remote):
    remote = [make_remote("a", "1"), make_remote("b", "2"), make_remote("c", "1")]
    local = [local_doc("a", "1"), local_doc("b", "1"), local_doc("orphan", "1")]

    diff = run(remote, local)

    assert (diff.added_count, diff.updated_count, diff.removed_count) == (1, 1, 1)
    added = diff.added[0]
    assert added.document_id == "c"
    assert added.user_id == USER
    assert added.document_type == "notebook"
    assert added.folder_path == FOLDER
    assert added.is_processed is False and added.is_agenda is False

    updated = diff.updated[0]
    assert updated.id == "local-b"
    assert updated.document_version == "2"
    assert updated.is_processed is False
    assert updated.updated_at == NOW

    assert diff.removed[0].document_id == "orphan"


def test_outputs_are_disjoint(make_remote):
    remote = [make_remote("a", "2"), make_remote("new")]
    local = [local_doc("a", "1"), local_doc("gone")]
    diff = run(remote, local)

    ids = [r.document_id for r in diff.added + diff.updated + diff.removed]
    assert len(ids) == len(set(ids))


def test_folders_are_not_added_but_protect_local_records(make_remote):
    remote = [make_remote("folder", type_="CollectionType")]
    local = [local_doc("folder")]
    diff = run(remote, local)
    assert diff.is_empty


def test_agenda_documents_are_never_removed():
    diff = run([], [local_doc("agenda", is_agenda=True), local_doc("plain")])
    assert [r.document_id for r in diff.removed] == ["plain"]


def test_integer_versions_compare_as_strings(make_remote):
    diff = run([make_remote("a", 3)], [local_doc("a", "3")])
    assert diff.is_empty


def test_idempotent_after_apply(make_remote):
    remote = [make_remote("a", "1"), make_remote("b", "2"), make_remote("c", "1")]
    local = [local_doc("a", "1"), local_doc("b", "1"), local_doc("orphan", "1"), local_doc("agenda", is_agenda=True)]

    first = run(remote, local)
    second = run(remote, first.apply_to(local))

    assert second.is_empty


def test_inputs_are_not_mutated(make_remote):
    local = [local_doc("b", "1")]
    run([make_remote("b", "2")], local)
    assert local[0].document_version == "1"
    assert local[0].is_processed is True


def test_repeated_remote_entry_is_classified_once(make_remote):
    diff = run([make_remote("a"), make_remote("a", name="Copy")], [])
    assert diff.added_count == 1
    assert diff.added[0].document_name == "Note a"

    diff = run([make_remote("b", "2"), make_remote("b", "2")], [local_doc("b", "1")])
    assert diff.updated_count == 1

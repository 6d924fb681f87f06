from __future__ import annotations

import asyncio

from notes_restore.core.exceptions import (
    EntryDecodeError,
    MissingNoteContentError,
    PersistenceError,
    RecordValidationError,
)
from notes_restore.core.importer import Importer
from notes_restore.core.types import (
    Collection,
    ImportCompleted,
    ImportStarted,
    ImportStatus,
)
from tests.conftest import RecordingStore, zip_file


class TestNotes:
    async def test_body_read_from_markdown_sibling(self, importer, store):
        result = await importer.run(
            [
                zip_file(
                    {
                        "export/notes-db/notes/abc.json": {"id": "abc", "title": "T"},
                        "export/notes-db/notes/abc.md": "hello",
                    }
                )
            ]
        )

        assert result.status == ImportStatus.COMPLETED
        notes = await store.get_records(Collection.NOTES, "default")
        assert notes == [{"id": "abc", "title": "T", "content": "hello"}]
        assert store.calls == [("save_record", Collection.NOTES, "default")]

    async def test_encrypted_note_skips_sibling(self, importer, store):
        result = await importer.run(
            [
                zip_file(
                    {"export/p1/notes/n1.json": {"id": "n1", "encryptedData": "xyz"}}
                )
            ]
        )

        assert result.status == ImportStatus.COMPLETED
        notes = await store.get_records(Collection.NOTES, "p1")
        assert notes == [{"id": "n1", "encryptedData": "xyz"}]

    async def test_missing_sibling_fails(self, importer, store):
        result = await importer.run(
            [zip_file({"export/p1/notes/n1.json": {"id": "n1", "encryptedData": ""}})]
        )

        assert result.status == ImportStatus.FAILED
        assert isinstance(result.error, MissingNoteContentError)
        assert result.error.entry == "export/p1/notes/n1.md"
        assert store.calls == []

    async def test_notes_skip_store_validation(self, importer, store):
        # Notes without an id would be rejected by validation.
        result = await importer.run(
            [
                zip_file(
                    {
                        "export/p1/notes/n1.json": {"title": "no id"},
                        "export/p1/notes/n1.md": "body",
                    }
                )
            ]
        )
        assert result.status == ImportStatus.COMPLETED
        assert len(await store.get_records(Collection.NOTES, "p1")) == 1


class TestAttachmentsAndCollections:
    async def test_attachment_saved_for_profile(self, importer, store):
        result = await importer.run(
            [zip_file({"export/p1/files/f1.json": {"id": "f1", "name": "cat.png"}})]
        )

        assert result.status == ImportStatus.COMPLETED
        assert await store.get_records(Collection.FILES, "p1") == [
            {"id": "f1", "name": "cat.png"}
        ]
        assert result.breakdown == {"Files": 1}

    async def test_attachment_without_id_is_rejected(self, importer, store):
        result = await importer.run(
            [zip_file({"export/p1/files/f1.json": {"name": "cat.png"}})]
        )
        assert result.status == ImportStatus.FAILED
        assert isinstance(result.error, RecordValidationError)

    async def test_bulk_collections_saved_in_one_call(self, importer, store):
        tags = [{"id": "t1", "name": "work"}, {"id": "t2", "name": "home"}]
        result = await importer.run([zip_file({"export/p1/tags.json": tags})])

        assert result.status == ImportStatus.COMPLETED
        assert store.calls == [("save_batch", Collection.TAGS, "p1")]
        assert await store.get_records(Collection.TAGS, "p1") == tags
        assert result.records_imported == 2

    async def test_files_json_is_a_bulk_collection(self, importer, store):
        await importer.run([zip_file({"export/p1/files.json": [{"id": "f1"}]})])
        assert store.calls == [("save_batch", Collection.FILES, "p1")]

    async def test_unknown_collection_type_is_skipped(self, importer, store, events):
        result = await importer.run(
            [zip_file({"export/p1/unknowntype.json": [{"id": "x"}]})]
        )

        assert result.status == ImportStatus.COMPLETED
        assert result.skipped_entries == ["export/p1/unknowntype.json"]
        assert store.calls == []
        assert isinstance(events[-1], ImportCompleted)
        assert events[-1].error is None

    async def test_profiles_are_kept_apart(self, importer, store):
        await importer.run(
            [
                zip_file(
                    {
                        "export/notes-db/tags.json": [{"id": "t1"}],
                        "export/p2/tags.json": [{"id": "t2"}],
                    }
                )
            ]
        )
        assert await store.get_records(Collection.TAGS, "default") == [{"id": "t1"}]
        assert await store.get_records(Collection.TAGS, "p2") == [{"id": "t2"}]
        assert await store.list_profiles() == ["default", "p2"]

    async def test_directories_and_non_json_entries_ignored(self, importer, store):
        result = await importer.run(
            [
                zip_file(
                    {
                        "export/": "",
                        "export/p1/": "",
                        "export/p1/readme.txt": "hi",
                        "export/p1/notes/orphan.md": "body",
                    }
                )
            ]
        )
        assert result.status == ImportStatus.COMPLETED
        assert store.calls == []

    async def test_bad_json_fails(self, importer, store):
        result = await importer.run([zip_file({"export/p1/tags.json": "{not json]]"})])
        assert result.status == ImportStatus.FAILED
        assert isinstance(result.error, EntryDecodeError)
        assert result.error.entry == "export/p1/tags.json"

    async def test_bulk_file_must_hold_an_array(self, importer, store):
        result = await importer.run([zip_file({"export/p1/tags.json": {"id": "t1"}})])
        assert result.status == ImportStatus.FAILED
        assert isinstance(result.error, EntryDecodeError)


class TestPhases:
    async def test_config_waits_for_other_records(self, events):
        store = RecordingStore(delays={Collection.NOTEBOOKS: 0.05})
        importer = Importer(store)

        result = await importer.run(
            [
                zip_file(
                    {
                        "export/default/configs.json": [
                            {"name": "encrypt", "value": 1}
                        ],
                        "export/default/notebooks.json": [{"id": "nb1"}],
                    }
                )
            ]
        )

        assert result.status == ImportStatus.COMPLETED
        assert store.events.index("end:Notebooks") < store.events.index(
            "start:Configs"
        )
        assert store.events[-1] == "end:Configs"
        assert await store.get_config("encrypt") == 1

    async def test_phase_one_runs_concurrently(self):
        store = RecordingStore(
            delays={Collection.NOTEBOOKS: 0.05, Collection.TAGS: 0.05}
        )
        await Importer(store).run(
            [
                zip_file(
                    {
                        "export/p1/notebooks.json": [{"id": "nb1"}],
                        "export/p1/tags.json": [{"id": "t1"}],
                    }
                )
            ]
        )
        assert sorted(store.events[:2]) == ["start:Notebooks", "start:Tags"]

    async def test_phase_one_failure_blocks_config(self, events):
        store = RecordingStore(fail_on={Collection.NOTEBOOKS})
        importer = Importer(store)
        importer.subscribe(events.append)

        result = await importer.run(
            [
                zip_file(
                    {
                        "export/default/notebooks.json": [{"id": "nb1"}],
                        "export/default/configs.json": [{"name": "a", "value": 1}],
                    }
                )
            ]
        )

        assert result.status == ImportStatus.FAILED
        assert isinstance(result.error, PersistenceError)
        assert Collection.CONFIGS not in {c for _, c, _ in store.calls}
        assert isinstance(events[0], ImportStarted)
        assert isinstance(events[1], ImportCompleted)
        assert events[1].error is result.error

    async def test_siblings_are_not_cancelled(self):
        store = RecordingStore(
            fail_on={Collection.TAGS},
            delays={Collection.TAGS: 0.02, Collection.NOTEBOOKS: 0.1},
        )

        result = await Importer(store).run(
            [
                zip_file(
                    {
                        "export/p1/tags.json": [{"id": "t1"}],
                        "export/p1/notebooks.json": [{"id": "nb1"}],
                    }
                )
            ]
        )
        assert result.status == ImportStatus.FAILED
        assert "end:Notebooks" not in store.events

        await asyncio.sleep(0.2)
        assert "end:Notebooks" in store.events
        assert await store.get_records(Collection.NOTEBOOKS, "p1") == [{"id": "nb1"}]
        # The returned result is not updated by the late sibling.
        assert result.records_imported == 0
        assert result.breakdown == {}

    async def test_config_failure_fails_import(self):
        store = RecordingStore(fail_on={Collection.CONFIGS})

        result = await Importer(store).run(
            [
                zip_file(
                    {
                        "export/p1/tags.json": [{"id": "t1"}],
                        "export/p1/configs.json": [{"name": "a", "value": 1}],
                    }
                )
            ]
        )
        assert result.status == ImportStatus.FAILED
        assert await store.get_records(Collection.TAGS, "p1") == [{"id": "t1"}]

    async def test_config_only_archive(self, importer, store):
        result = await importer.run(
            [zip_file({"export/p1/configs.json": [{"name": "a", "value": 1}]})]
        )
        assert result.status == ImportStatus.COMPLETED
        assert store.calls == [("save_batch", Collection.CONFIGS, "p1")]

    async def test_every_profile_config_is_imported_last(self):
        store = RecordingStore(delays={Collection.TAGS: 0.03})

        result = await Importer(store).run(
            [
                zip_file(
                    {
                        "export/notes-db/configs.json": [{"name": "a", "value": 1}],
                        "export/p2/configs.json": [{"name": "a", "value": 2}],
                        "export/p2/tags.json": [{"id": "t1"}],
                    }
                )
            ]
        )

        assert result.status == ImportStatus.COMPLETED
        assert store.calls == [
            ("save_batch", Collection.TAGS, "p2"),
            ("save_batch", Collection.CONFIGS, "default"),
            ("save_batch", Collection.CONFIGS, "p2"),
        ]
        assert await store.get_config("a") == 1
        assert await store.get_config("a", "p2") == 2
        assert result.breakdown == {"Tags": 1, "Configs": 2}

import unittest

from src.application.reconciler_service import EntityReconciler
from src.domain.models import DesiredEntityState, EntityRecord
from src.infrastructure.acl import EntityInfoTranslator


def _record(id: int, num: int, **overrides) -> EntityRecord:
    fields = {
        "id": id,
        "entity_shard": 0,
        "entity_realm": 0,
        "entity_num": num,
        "auto_renew_period": 7776000,
        "deleted": False,
    }
    fields.update(overrides)
    return EntityRecord(**fields)


class _FakeRepository:
    def __init__(self, records, rowcount: int = 1) -> None:
        self.records = records
        self.rowcount = rowcount
        self.updated = []

    async def fetch(self, entity_id):
        return self.records.get(entity_id)

    async def update(self, entity) -> int:
        self.updated.append(entity)
        return self.rowcount


class TestEntityReconciler(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.states = [
            DesiredEntityState(entity_id="0.0.1", changes={"deleted": True}),
            DesiredEntityState(entity_id="0.0.2", changes={"auto_renew_period": 7776000}),
            DesiredEntityState(entity_id="0.0.3", changes={"deleted": True}),
        ]
        self.records = {"0.0.1": _record(1, 1), "0.0.2": _record(2, 2)}

    async def test_dry_run_does_not_write(self) -> None:
        repository = _FakeRepository(self.records)

        summary = await EntityReconciler(repository, dry_run=True).reconcile(self.states)

        self.assertEqual(repository.updated, [])
        self.assertTrue(summary.dry_run)
        self.assertEqual((summary.pending, summary.unchanged, summary.missing), (1, 1, 1))

    async def test_apply_writes_only_changed_records(self) -> None:
        repository = _FakeRepository(self.records)

        summary = await EntityReconciler(repository, dry_run=False).reconcile(self.states)

        self.assertEqual(len(repository.updated), 1)
        written = repository.updated[0]
        self.assertEqual(written.id, 1)
        self.assertTrue(written.deleted)
        self.assertEqual(written.auto_renew_period, 7776000)
        self.assertEqual((summary.updated, summary.unchanged, summary.missing), (1, 1, 1))

    async def test_zero_rows_affected_counts_as_missing(self) -> None:
        repository = _FakeRepository(self.records, rowcount=0)

        summary = await EntityReconciler(repository, dry_run=False).reconcile(self.states[:1])

        self.assertEqual((summary.updated, summary.missing), (0, 1))

    async def test_string_values_from_json_match_stored_values(self) -> None:
        state = EntityInfoTranslator.to_domain(
            {"entity_id": "0.0.1", "auto_renew_period": "7776000", "deleted": "false"}
        )
        repository = _FakeRepository(self.records)

        summary = await EntityReconciler(repository, dry_run=True).reconcile([state])

        self.assertEqual((summary.unchanged, summary.pending), (1, 0))

import logging
from typing import Any, Dict, Iterable

from src.domain.models import DesiredEntityState, EntityRecord, ReconciliationSummary
from src.infrastructure.database import PostgresEntityRepository

logger = logging.getLogger(__name__)


class EntityReconciler:
    """
    Compares desired entity state against the backup table and applies the differences.

    In dry-run mode differences are only logged. Entities are processed one at a time
    and any store error aborts the run.
    """

    def __init__(self, repository: PostgresEntityRepository, dry_run: bool = True):
        self.repository = repository
        self.dry_run = dry_run

    @staticmethod
    def _diff(record: EntityRecord, changes: Dict[str, Any]) -> Dict[str, Any]:
        return {name: value for name, value in changes.items() if getattr(record, name) != value}

    async def reconcile(self, states: Iterable[DesiredEntityState]) -> ReconciliationSummary:
        summary = ReconciliationSummary(dry_run=self.dry_run)
        mode = "dry run" if self.dry_run else "apply"
        logger.info(f"Starting reconciliation ({mode}).")

        for state in states:
            record = await self.repository.fetch(state.entity_id)
            if record is None:
                logger.warning(f"Entity {state.entity_id} not found.")
                summary.missing += 1
                continue

            diff = self._diff(record, state.changes)
            if not diff:
                summary.unchanged += 1
                continue

            logger.info(f"Entity {state.entity_id} differs: {sorted(diff)}")
            if self.dry_run:
                summary.pending += 1
                continue

            affected = await self.repository.update(record.model_copy(update=diff))
            if affected:
                summary.updated += 1
            else:
                summary.missing += 1

        logger.info(
            f"Reconciliation completed ({mode}). Unchanged: {summary.unchanged}, "
            f"pending: {summary.pending}, updated: {summary.updated}, missing: {summary.missing}."
        )
        return summary

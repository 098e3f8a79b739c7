"""Procedure step integrity: every step has an id and a distinct order."""

from __future__ import annotations

import time
from typing import Any, Dict, List

from ..utils.issues import Category, Issue, Remediation, RemediationKind, Severity
from ..utils.records import ARCHIVED_STATUS, ProcedureRecord
from .base import CheckContext, requires_configured_store


@requires_configured_store
async def run(context: CheckContext) -> List[Issue]:
    gateway = context.gateway
    procedures = await gateway.fetch_procedures(exclude_statuses=[ARCHIVED_STATUS])

    issues: List[Issue] = []
    for procedure in procedures:
        missing = [step for step in procedure.steps if not step.id]
        # Both fixes write this same list so applying them in either order
        # cannot bring back an empty id.
        repaired = repaired_steps(procedure)

        if missing:
            issues.append(
                Issue(
                    severity=Severity.ERROR,
                    category=Category.PROCEDURE,
                    title="Missing Step IDs",
                    description=f'Procedure "{procedure.title}" has {len(missing)} steps without IDs',
                    affected_records=[procedure.id],
                    remediation=Remediation(
                        kind=RemediationKind.ASSIGN_STEP_IDS,
                        collection=gateway.procedures_collection,
                        record_id=procedure.id,
                        changes={"steps": repaired},
                    ),
                )
            )

        orders = [step.order for step in procedure.steps]
        if len(orders) != len(set(orders)):
            issues.append(
                Issue(
                    severity=Severity.WARNING,
                    category=Category.PROCEDURE,
                    title="Duplicate Step Orders",
                    description=f'Procedure "{procedure.title}" has steps with duplicate order numbers',
                    affected_records=[procedure.id],
                    remediation=Remediation(
                        kind=RemediationKind.RENUMBER_STEPS,
                        collection=gateway.procedures_collection,
                        record_id=procedure.id,
                        changes={"steps": repaired},
                    ),
                )
            )
    return issues


def repaired_steps(procedure: ProcedureRecord) -> List[Dict[str, Any]]:
    """Steps with generated ids filled in and order renumbered from 1."""
    stamp = int(time.time() * 1000)
    repaired: List[Dict[str, Any]] = []
    for index, step in enumerate(procedure.steps):
        document = step.to_document()
        document["id"] = step.id or f"step_{stamp}_{index}"
        document["order"] = index + 1
        repaired.append(document)
    return repaired

"""
Submission Orchestrator - regenerates proofs for malicious messages and
submits them to the ledger one at a time.

Runs are sequential so that at most one submission is in flight and the
error list follows inbox order. A failure at any stage is recorded against
its message and the run moves on; nothing is retried.
"""

import logging
from typing import List, Optional, Sequence, Tuple, Union

from .adapters.base import ProofService
from .classification import ClassificationCache
from .exceptions import RunInProgressError
from .models import (
    BatchStatus,
    ClassificationResult,
    LedgerStatus,
    Message,
    RejectionReason,
    SubmissionError,
    SubmissionOutcome,
    SubmissionReport,
    SubmissionStage,
)
from .run_state import RunGuard

logger = logging.getLogger(__name__)

CLASSIFICATION_FAILED = "Unknown error"
PROOF_GENERATION_FAILED = "Failed to generate proof"
NO_SIGNATURE_RETURNED = "No signature returned"
SUBMISSION_FAILED = "Blockchain submission failed"


def error_text(error: BaseException, default: str) -> str:
    """Message text of ``error``, or ``default`` when it has none."""
    text = str(error).strip()
    return text or default


class SubmissionOrchestrator:
    """
    Drives proof generation and ledger submission for a message set:
    1. Checks the batch preconditions (active run, ledger identity)
    2. Classifies every message through the shared cache
    3. Rejects empty batches
    4. Generates and submits one proof per malicious message
    """

    def __init__(self, cache: ClassificationCache, proof_service: ProofService):
        self.cache = cache
        self.proof_service = proof_service
        self.guard = RunGuard("proof submission")

    async def submit_all(
        self,
        messages: Sequence[Message],
        ledger_status: LedgerStatus
    ) -> SubmissionReport:
        """
        Submit proofs for every malicious message in ``messages``.

        Args:
            messages: Inbox messages, in order
            ledger_status: Identity the submissions are made under

        Returns:
            SubmissionReport; batch-level rejections are reported, never raised
        """
        try:
            with self.guard.run():
                return await self._run(messages, ledger_status)
        except RunInProgressError:
            return SubmissionReport.rejected(RejectionReason.RUN_IN_PROGRESS)

    async def _run(self, messages: Sequence[Message], ledger_status: LedgerStatus) -> SubmissionReport:
        if not ledger_status.is_ready:
            logger.warning("Proof submission requested without an active ledger identity")
            return SubmissionReport.rejected(RejectionReason.NOT_READY)

        classified = await self._classify_all(messages)

        has_work = any(
            isinstance(result, Exception) or result.is_malicious
            for _, result in classified
        )
        if not has_work:
            logger.info("No threats detected to submit")
            return SubmissionReport.rejected(RejectionReason.EMPTY_BATCH)

        logger.info(f"Submitting proofs for {len(messages)} messages as {ledger_status.identity}")

        outcomes: List[SubmissionOutcome] = []
        success_count = 0

        for message, result in classified:
            if isinstance(result, Exception):
                outcomes.append(self._failure(
                    message, SubmissionStage.CLASSIFICATION, error_text(result, CLASSIFICATION_FAILED)
                ))
                continue

            if not result.is_malicious:
                continue

            outcome = await self._submit_one(message, result)
            if outcome.succeeded:
                success_count += 1
            outcomes.append(outcome)

        report = SubmissionReport(
            status=BatchStatus.ALL_SUCCEEDED if success_count == len(outcomes) else BatchStatus.PARTIAL_FAILURE,
            success_count=success_count,
            outcomes=outcomes
        )

        logger.info(
            f"Proof submission finished: {report.success_count} submitted, "
            f"{report.failure_count} failed ({report.status.value})"
        )
        return report

    async def _classify_all(
        self,
        messages: Sequence[Message]
    ) -> List[Tuple[Message, Union[ClassificationResult, Exception]]]:
        self.cache.bind(messages)
        classified = []
        for message in messages:
            try:
                classified.append((message, await self.cache.classify(message)))
            except Exception as e:
                logger.warning(f"Classification failed for message {message.id}: {e}")
                classified.append((message, e))
        return classified

    async def _submit_one(self, message: Message, analysis: ClassificationResult) -> SubmissionOutcome:
        try:
            proof = await self.proof_service.generate_proof(message, analysis)
        except Exception as e:
            return self._failure(message, SubmissionStage.PROOF_GENERATION, error_text(e, PROOF_GENERATION_FAILED))

        if proof is None:
            return self._failure(message, SubmissionStage.PROOF_GENERATION, PROOF_GENERATION_FAILED)

        try:
            confirmation: Optional[str] = await self.proof_service.submit(proof)
        except Exception as e:
            return self._failure(message, SubmissionStage.SUBMISSION, error_text(e, SUBMISSION_FAILED))

        if not confirmation:
            return self._failure(message, SubmissionStage.SUBMISSION, NO_SIGNATURE_RETURNED)

        logger.debug(f"Proof for message {message.id} confirmed: {confirmation}")
        return SubmissionOutcome(email_identifier=message.id, confirmation_id=confirmation)

    @staticmethod
    def _failure(message: Message, stage: SubmissionStage, text: str) -> SubmissionOutcome:
        logger.warning(f"Submission failed for message {message.id} at {stage.value}: {text}")
        return SubmissionOutcome(
            email_identifier=message.id,
            error=SubmissionError(
                email_identifier=message.id,
                error=text,
                sender=message.sender,
                stage=stage
            )
        )

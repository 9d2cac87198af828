"""
State transitions for transfers and disputes.

Views check who may call these; the functions here check whether the
record may move, apply the change atomically and write the audit entry.
"""

import logging

from django.db import transaction
from django.utils import timezone

from utils.exceptions import WorkflowError
from ..models import AuditLog, Dispute, OwnershipHistory, Parcel, Transfer
from .audit import record_event

logger = logging.getLogger(__name__)

_HISTORY_TYPES = {
    Transfer.TransferType.SALE: OwnershipHistory.TransactionType.SALE,
    Transfer.TransferType.GIFT: OwnershipHistory.TransactionType.GIFT,
    Transfer.TransferType.INHERITANCE: OwnershipHistory.TransactionType.INHERITANCE,
    Transfer.TransferType.EXPROPRIATION: OwnershipHistory.TransactionType.EXPROPRIATION,
    Transfer.TransferType.COURT_ORDER: OwnershipHistory.TransactionType.COURT_ORDER,
}


def _require_status(transfer, *allowed):
    if transfer.transfer_status not in allowed:
        raise WorkflowError(
            f"Transfer {transfer.transfer_id} is {transfer.transfer_status}; "
            f"expected {' or '.join(allowed)}"
        )


def _status_change(before, after):
    return {'before': {'transfer_status': before}, 'after': {'transfer_status': after}}


def submit_transfer(transfer, user, request=None):
    """Send an initiated transfer for approval, assessing the transfer tax if missing."""
    _require_status(transfer, Transfer.Status.INITIATED)

    if transfer.transfer_tax_amount is None:
        transfer.calculate_transfer_tax()
    transfer.transfer_status = Transfer.Status.PENDING_APPROVAL
    transfer.processing_stage = Transfer.ProcessingStage.APPROVAL_PENDING
    transfer.reviewed_by = user
    transfer.save()

    logger.info(f"Transfer {transfer.transfer_id} submitted for approval by {user}")
    record_event(
        request,
        user=user,
        event_type=AuditLog.EventType.OTHER,
        action=f"Submitted transfer {transfer.transfer_id} for approval",
        target=transfer,
        changes=_status_change(Transfer.Status.INITIATED, transfer.transfer_status),
    )
    return transfer


def approve_transfer(transfer, user, notes='', request=None):
    _require_status(transfer, Transfer.Status.PENDING_APPROVAL)

    transfer.transfer_status = Transfer.Status.APPROVED
    transfer.processing_stage = Transfer.ProcessingStage.REGISTRATION
    transfer.approved_by = user
    transfer.approval_date = timezone.now()
    if notes:
        transfer.processing_notes = notes
    transfer.save()

    logger.info(f"Transfer {transfer.transfer_id} approved by {user}")
    record_event(
        request,
        user=user,
        event_type=AuditLog.EventType.TRANSFER_APPROVED,
        action=f"Approved transfer {transfer.transfer_id}",
        target=transfer,
        severity=AuditLog.Severity.MEDIUM,
        changes=_status_change(Transfer.Status.PENDING_APPROVAL, transfer.transfer_status),
    )
    return transfer


def reject_transfer(transfer, user, reason, request=None):
    _require_status(transfer, Transfer.Status.INITIATED, Transfer.Status.PENDING_APPROVAL)

    before = transfer.transfer_status
    transfer.transfer_status = Transfer.Status.REJECTED
    transfer.rejection_reason = reason
    transfer.rejection_date = timezone.now()
    transfer.reviewed_by = user
    transfer.save()

    logger.info(f"Transfer {transfer.transfer_id} rejected by {user}: {reason}")
    record_event(
        request,
        user=user,
        event_type=AuditLog.EventType.TRANSFER_REJECTED,
        action=f"Rejected transfer {transfer.transfer_id}: {reason}",
        target=transfer,
        severity=AuditLog.Severity.MEDIUM,
        changes=_status_change(before, transfer.transfer_status),
    )
    return transfer


def complete_transfer(transfer, user, request=None):
    """
    Register an approved transfer: the buyer becomes the parcel's owner,
    the chain of title gains an approved entry and both owners' portfolio
    totals are refreshed.

    Raises:
        WorkflowError: if the transfer is not approved or the seller no
            longer holds the parcel
    """
    with transaction.atomic():
        # Re-read under row locks; the caller's instance may be stale
        transfer = (
            Transfer.objects.select_for_update()
            .select_related('seller', 'buyer')
            .get(pk=transfer.pk)
        )
        _require_status(transfer, Transfer.Status.APPROVED)

        parcel = Parcel.objects.select_for_update().get(pk=transfer.parcel_id)
        transfer.parcel = parcel
        if parcel.current_owner_id != transfer.seller_id:
            raise WorkflowError(
                f"Seller no longer owns parcel {parcel.parcel_id}; transfer cannot be completed"
            )

        now = timezone.now()
        history = OwnershipHistory.objects.create(
            parcel=parcel,
            previous_owner=transfer.seller,
            new_owner=transfer.buyer,
            transaction_type=_HISTORY_TYPES.get(
                transfer.transfer_type, OwnershipHistory.TransactionType.PURCHASE
            ),
            transaction_date=transfer.contract_date,
            registration_date=now,
            transaction_value=transfer.registered_price,
            tax_paid=transfer.transfer_tax_amount or 0,
            legal_basis=f"Transfer {transfer.transfer_id}",
            contract_number=transfer.contract_number,
            notary_id=transfer.notary_id,
            status=OwnershipHistory.Status.APPROVED,
            approved_by=user,
            approval_date=now,
            created_by=user,
        )

        parcel.current_owner = transfer.buyer
        parcel.save(update_fields=['current_owner', 'last_modified', 'updated_at'])

        transfer.ownership_history = history
        transfer.transfer_status = Transfer.Status.COMPLETED
        transfer.processing_stage = Transfer.ProcessingStage.COMPLETED
        transfer.registration_date = now
        transfer.completion_date = now
        transfer.save()

        transfer.seller.update_property_stats()
        transfer.buyer.update_property_stats()

    logger.info(
        f"Transfer {transfer.transfer_id} completed: parcel {parcel.parcel_id} "
        f"now owned by owner {transfer.buyer_id}"
    )
    record_event(
        request,
        user=user,
        event_type=AuditLog.EventType.OWNERSHIP_TRANSFERRED,
        action=f"Parcel {parcel.parcel_id} transferred under {transfer.transfer_id}",
        target=transfer,
        severity=AuditLog.Severity.HIGH,
        changes={
            'before': {'current_owner': transfer.seller_id},
            'after': {'current_owner': transfer.buyer_id},
        },
        fields_changed=['current_owner'],
        metadata={'ownership_history_id': history.pk, 'parcel_id': parcel.parcel_id},
    )
    return transfer


def resolve_dispute(dispute, user, outcome, description='', compensation_amount=None, request=None):
    if dispute.status not in Dispute.ACTIVE_STATUSES:
        raise WorkflowError(f"Dispute {dispute.dispute_id} is already {dispute.status}")

    before = dispute.status
    with transaction.atomic():
        dispute.status = Dispute.Status.RESOLVED
        dispute.resolution_outcome = outcome
        dispute.resolution_description = description
        dispute.compensation_amount = compensation_amount
        dispute.resolution_date = timezone.now()
        dispute.save()
        dispute.updates.create(
            updated_by=user,
            status_change=f"{before} -> {Dispute.Status.RESOLVED}",
            notes=description,
        )

    logger.info(f"Dispute {dispute.dispute_id} resolved by {user} ({outcome})")
    record_event(
        request,
        user=user,
        event_type=AuditLog.EventType.DISPUTE_RESOLVED,
        action=f"Resolved dispute {dispute.dispute_id} with outcome {outcome}",
        target=dispute,
        severity=AuditLog.Severity.MEDIUM,
        changes={
            'before': {'status': before},
            'after': {'status': dispute.status, 'resolution_outcome': outcome},
        },
    )
    return dispute

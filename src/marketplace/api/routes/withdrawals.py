"""Withdrawal request endpoints for wallet owners and administrators."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, status

from ...schemas.withdrawals import (
    ApproveWithdrawalRequest,
    RejectWithdrawalRequest,
    WithdrawalCreateRequest,
    WithdrawalModel,
)
from ...services.withdrawals import WithdrawalWorkflow
from ..dependencies import get_workflow

router = APIRouter(tags=["withdrawals"])


@router.post("/withdrawal-requests", response_model=WithdrawalModel, status_code=status.HTTP_201_CREATED)
def create_withdrawal_request(
    payload: WithdrawalCreateRequest,
    workflow: WithdrawalWorkflow = Depends(get_workflow),
) -> WithdrawalModel:
    request = workflow.create(
        payload.entity_type,
        payload.entity_id,
        payload.amount,
        account_number=payload.account_number,
        bank_name=payload.bank_name,
        account_holder=payload.account_holder,
        requested_by=payload.requested_by,
    )
    return WithdrawalModel.from_request(request)


@router.get("/withdrawal-requests/{request_id}", response_model=WithdrawalModel)
def get_withdrawal_request(
    request_id: str = Path(..., description="Withdrawal request identifier"),
    workflow: WithdrawalWorkflow = Depends(get_workflow),
) -> WithdrawalModel:
    return WithdrawalModel.from_request(workflow.get(request_id))


@router.get("/admin/withdrawal-requests/pending", response_model=list[WithdrawalModel])
def list_pending_withdrawals(
    workflow: WithdrawalWorkflow = Depends(get_workflow),
) -> list[WithdrawalModel]:
    """Pending requests, oldest first."""
    return [WithdrawalModel.from_request(request) for request in workflow.list_pending()]


@router.post("/admin/withdrawal-requests/{request_id}/approve", response_model=WithdrawalModel)
def approve_withdrawal(
    payload: ApproveWithdrawalRequest | None = None,
    request_id: str = Path(..., description="Withdrawal request identifier"),
    workflow: WithdrawalWorkflow = Depends(get_workflow),
) -> WithdrawalModel:
    """Approve and debit the wallet; fails with insufficient_balance if funds have since been spent."""
    approved_by = payload.approved_by if payload else None
    return WithdrawalModel.from_request(workflow.approve(request_id, approved_by))


@router.post("/admin/withdrawal-requests/{request_id}/reject", response_model=WithdrawalModel)
def reject_withdrawal(
    payload: RejectWithdrawalRequest | None = None,
    request_id: str = Path(..., description="Withdrawal request identifier"),
    workflow: WithdrawalWorkflow = Depends(get_workflow),
) -> WithdrawalModel:
    reason = payload.reason if payload else None
    return WithdrawalModel.from_request(workflow.reject(request_id, reason))


@router.post("/admin/withdrawal-requests/{request_id}/complete", response_model=WithdrawalModel)
def complete_withdrawal(
    request_id: str = Path(..., description="Withdrawal request identifier"),
    workflow: WithdrawalWorkflow = Depends(get_workflow),
) -> WithdrawalModel:
    """Mark an approved request as paid out."""
    return WithdrawalModel.from_request(workflow.complete(request_id))

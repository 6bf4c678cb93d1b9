"""Withdrawal request API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import OwnerType, WithdrawalRequest


class WithdrawalCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    entity_type: OwnerType = Field(..., alias='entityType')
    entity_id: str = Field(..., alias='entityId')
    amount: float
    account_number: Optional[str] = Field(None, alias='accountNumber')
    bank_name: Optional[str] = Field(None, alias='bankName')
    account_holder: Optional[str] = Field(None, alias='accountHolder')
    requested_by: Optional[str] = Field(None, alias='requestedBy')


class ApproveWithdrawalRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    approved_by: Optional[str] = Field(None, alias='approvedBy')


class RejectWithdrawalRequest(BaseModel):
    reason: Optional[str] = Field(default=None, description="Shown to the requester.")


class WithdrawalModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    entity_type: str = Field(..., alias='entityType')
    entity_id: str = Field(..., alias='entityId')
    amount: float
    status: str
    account_number: Optional[str] = Field(None, alias='accountNumber')
    bank_name: Optional[str] = Field(None, alias='bankName')
    account_holder: Optional[str] = Field(None, alias='accountHolder')
    requested_by: Optional[str] = Field(None, alias='requestedBy')
    approved_by: Optional[str] = Field(None, alias='approvedBy')
    rejection_reason: Optional[str] = Field(None, alias='rejectionReason')
    created_at: datetime = Field(..., alias='createdAt')
    approved_at: Optional[datetime] = Field(None, alias='approvedAt')
    completed_at: Optional[datetime] = Field(None, alias='completedAt')

    @classmethod
    def from_request(cls, request: WithdrawalRequest) -> "WithdrawalModel":
        return cls(
            id=request.id,
            entity_type=request.entity_type.value,
            entity_id=request.entity_id,
            amount=float(request.amount),
            status=request.status.value,
            account_number=request.account_number,
            bank_name=request.bank_name,
            account_holder=request.account_holder,
            requested_by=request.requested_by,
            approved_by=request.approved_by,
            rejection_reason=request.rejection_reason,
            created_at=request.created_at,
            approved_at=request.approved_at,
            completed_at=request.completed_at,
        )

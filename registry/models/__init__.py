from .owners import Owner
from .parcels import Parcel, ParcelRestriction
from .transfers import OwnershipHistory, Transfer
from .disputes import Dispute, DisputeUpdate
from .mortgages import Mortgage, MortgagePayment
from .subsidies import Subsidy, SubsidyDisbursement, SubsidyFraudFlag
from .audit import AuditLog, ImmutableAuditLogError

__all__ = [
    'Owner',
    'Parcel',
    'ParcelRestriction',
    'OwnershipHistory',
    'Transfer',
    'Dispute',
    'DisputeUpdate',
    'Mortgage',
    'MortgagePayment',
    'Subsidy',
    'SubsidyDisbursement',
    'SubsidyFraudFlag',
    'AuditLog',
    'ImmutableAuditLogError',
]

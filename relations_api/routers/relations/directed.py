import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from relations_api.init_db import get_db
from relations_api.common import get_current_account
from relations_api.models import User
from relations_api.schemas.relations import (
    DirectedRelationEnvelope,
    DirectedRelationKind,
    DirectedRelationListEnvelope,
    DirectedRelationResponse,
    DirectedRelationView,
    RelationTarget,
)
from relations_api.schemas.users import MessageResponse
from relations_api.services.relationship_service import establish, list_directed, revoke

logger = logging.getLogger(__name__)

# Trust and one-shot friend share these routes, selected by the {kind} segment
router = APIRouter(prefix="/relations", tags=["directed relations"])


@router.get("/{kind}", response_model=DirectedRelationListEnvelope)
async def get_directed_relations_api(
    kind: DirectedRelationKind,
    view: DirectedRelationView = DirectedRelationView.GIVEN,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    """
    List the relations of one kind that the current user gave or received,
    most recent first.
    """
    relations = await list_directed(db, kind, account.id, view)
    prefix = f"You (username: {account.username})"
    if view == DirectedRelationView.RECEIVED:
        message = f"{prefix} received {kind.value} from:"
    else:
        message = f"{prefix} gave {kind.value} to:"
    return DirectedRelationListEnvelope(
        message=message,
        relations=[DirectedRelationResponse.from_model(r) for r in relations]
    )

@router.post("/{kind}", response_model=DirectedRelationEnvelope, status_code=status.HTTP_201_CREATED)
async def establish_directed_relation_api(
    kind: DirectedRelationKind,
    target: RelationTarget,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    """
    Give trust (or a one-shot friend mark) to another user.

    Raises:
        404: The receiver does not exist
        405: The caller targets themself
        409: The caller already gave this relation to the receiver
    """
    relation = await establish(db, kind, account.id, target.username)
    return DirectedRelationEnvelope(
        message=f"Hooray, you gave {kind.value} to {target.username}.",
        relation=DirectedRelationResponse.from_model(relation)
    )

@router.delete("/{kind}/{username}", response_model=MessageResponse)
async def revoke_directed_relation_api(
    kind: DirectedRelationKind,
    username: str,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    await revoke(db, kind, account.id, username)
    return MessageResponse(message=f"You removed your {kind.value} for {username}.")

"""Persistence for the relation entities.

Repositories only read and write; they never decide whether a write is
allowed. That is the job of :mod:`relations_api.services.relationship_service`.
"""
from .directed_relation_repository import DirectedRelationRepository
from .mutual_relation_repository import MutualRelationRepository
from .relation_request_repository import RelationRequestRepository

__all__ = [
    "DirectedRelationRepository",
    "MutualRelationRepository",
    "RelationRequestRepository",
]

from .user import User
from .relations.directed_relations import DirectedRelation
from .relations.relation_requests import RelationRequest
from .relations.mutual_relations import MutualRelation

__all__ = ["User", "DirectedRelation", "RelationRequest", "MutualRelation"]

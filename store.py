from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from database import Base


class Store:
    """Persistence operations for one model, bound to a request session."""

    def __init__(self, db: Session, model):
        self.db = db
        self.model = model

    def _query(self, criteria: Iterable = ()):
        return self.db.query(self.model).filter(*criteria)

    def find(self, criteria: Iterable = (), order_by: Sequence = (), skip: int = 0,
             limit: Optional[int] = None) -> List[Any]:
        query = self._query(criteria).order_by(*order_by).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def find_one(self, criteria: Iterable = ()):
        return self._query(criteria).first()

    def count(self, criteria: Iterable = ()) -> int:
        return self._query(criteria).count()

    def find_by_id(self, entity_id: str):
        return self.db.get(self.model, entity_id)

    def exists_by_id(self, entity_id: str) -> bool:
        return self._query([self.model.id == entity_id]).first() is not None

    def insert(self, entity: Base):
        self.db.add(entity)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(entity)
        return entity

    def update_by_id(self, entity_id: str, patch: Dict[str, Any]):
        entity = self.find_by_id(entity_id)
        if entity is None:
            return None
        for field, value in patch.items():
            setattr(entity, field, value)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(entity)
        return entity

    def delete_by_id(self, entity_id: str) -> bool:
        entity = self.find_by_id(entity_id)
        if entity is None:
            return False
        self.db.delete(entity)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return True

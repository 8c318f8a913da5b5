"""
SQLAlchemy implementation of the Base Repository.
"""

from typing import Any, Generic, Mapping, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from qrbites.core.pagination import Page, QueryPolicy, build_query_filters, paginate
from qrbites.domain.repositories.base import BaseRepository
from qrbites.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)


def _as_dict(obj_in: Any, **dump_options: Any) -> dict:
    if hasattr(obj_in, "model_dump"):
        return obj_in.model_dump(**dump_options)
    return dict(obj_in)


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Generic repository implementation for SQLAlchemy models."""

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, id: int) -> Optional[ModelType]:
        return self.db.get(self.model, id)

    def query(self):
        return self.db.query(self.model)

    def find_page(self, params: Mapping[str, Any], policy: QueryPolicy, *criteria: Any) -> Page[ModelType]:
        query = self.query().filter(*build_query_filters(self.model, params, policy), *criteria)
        return paginate(query, self.model, params, policy)

    def create(self, obj_in: Any) -> ModelType:
        obj_data = {key: value for key, value in _as_dict(obj_in).items() if value is not None}
        db_obj = self.model(**obj_data)
        self.db.add(db_obj)
        self.db.commit()
        self.db.refresh(db_obj)
        return db_obj

    def update(self, db_obj: ModelType, obj_in: Any) -> ModelType:
        update_data = _as_dict(obj_in, exclude_unset=True)
        columns = self.model.__table__.columns

        for field, value in update_data.items():
            if field not in columns:
                continue
            # null only clears nullable columns
            if value is None and not columns[field].nullable:
                continue
            setattr(db_obj, field, value)

        self.db.add(db_obj)
        self.db.commit()
        self.db.refresh(db_obj)
        return db_obj

    def delete(self, db_obj: ModelType) -> None:
        self.db.delete(db_obj)
        self.db.commit()

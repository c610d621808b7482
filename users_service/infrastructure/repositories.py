from typing import Any

from sqlalchemy.orm import Session

from .metrics import db_queries_total
from .models import UserORM, utcnow
from ..domain.entities import Papel, User
from ..application.user_service import IUserRepository


def to_domain(u: UserORM) -> User:
    return User(
        id=u.id,
        nome=u.nome,
        email=u.email,
        papel=Papel(u.papel),
        foto=u.foto,
        created_at=u.created_at,
        updated_at=u.updated_at,
    )


class UserRepository(IUserRepository):
    def __init__(self, db: Session): self.db = db

    def find_all(self, papel: str | None = None) -> list[User]:
        db_queries_total.inc()
        query = self.db.query(UserORM)
        if papel:
            query = query.filter(UserORM.papel == papel)
        rows = query.order_by(UserORM.created_at.desc(), UserORM.id.desc()).all()
        return [to_domain(row) for row in rows]

    def get_by_id(self, user_id: int) -> User | None:
        db_queries_total.inc()
        row = self.db.get(UserORM, user_id)
        return to_domain(row) if row else None

    def get_by_email(self, email: str) -> User | None:
        db_queries_total.inc()
        row = self.db.query(UserORM).filter(UserORM.email == email).first()
        return to_domain(row) if row else None

    def create(self, nome: str, email: str, senha: str, papel: str, foto: str | None) -> User:
        db_queries_total.inc()
        row = UserORM(nome=nome, email=email, senha=senha, papel=papel, foto=foto)
        self.db.add(row); self.db.commit(); self.db.refresh(row)
        return to_domain(row)

    def update(self, user_id: int, changes: dict[str, Any]) -> User:
        db_queries_total.inc()
        # .one() бросает NoResultFound, если строку удалили между проверкой и записью
        row = self.db.query(UserORM).filter(UserORM.id == user_id).one()
        for field, value in changes.items():
            setattr(row, field, value)
        row.updated_at = utcnow()
        self.db.commit(); self.db.refresh(row)
        return to_domain(row)

    def delete(self, user_id: int) -> None:
        db_queries_total.inc()
        row = self.db.query(UserORM).filter(UserORM.id == user_id).one()
        self.db.delete(row); self.db.commit()

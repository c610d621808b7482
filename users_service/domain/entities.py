from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Papel(str, Enum):
    PROFESSOR = "PROFESSOR"
    ADMIN = "ADMIN"


# верхняя граница колонки users.id (INTEGER)
MAX_ID = 2**31 - 1


# senha намеренно отсутствует: сущность уходит наружу как есть
@dataclass(frozen=True)
class User:
    id: int | None
    nome: str
    email: str
    papel: Papel = Papel.PROFESSOR
    foto: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

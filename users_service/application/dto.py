from dataclasses import dataclass


@dataclass
class CreateUserInput:
    nome: str
    email: str
    senha: str
    papel: str | None = None
    foto: str | None = None

import os
import sys

import pytest

CURRENT_DIR = os.path.dirname(__file__)
SERVICE_ROOT = os.path.dirname(CURRENT_DIR)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

# До импорта приложения: settings читаются один раз
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Тестовая БД в памяти, одно соединение на все сессии
test_engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

# Переопределяем engine в infrastructure.db для тестов
from users_service.infrastructure import db as db_module
db_module.engine = test_engine
db_module.SessionLocal = TestingSessionLocal

from users_service.infrastructure.db import get_db
from users_service.infrastructure.models import Base
from users_service.main import app


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def tables():
    """Чистые таблицы для каждого теста"""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session(tables):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(tables):
    """Фикстура для тестового клиента"""
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    # Очищаем после теста
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def make_user(client):
    """Создаёт пользователя через API и возвращает data из ответа"""
    counter = {"n": 0}

    def _make_user(**overrides):
        counter["n"] += 1
        payload = {
            "nome": f"Usuario {counter['n']}",
            "email": f"user{counter['n']}@escola.com",
            "senha": "senha123",
        }
        payload.update(overrides)
        response = client.post("/users", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _make_user

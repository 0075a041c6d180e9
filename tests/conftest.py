import os
from datetime import datetime
from decimal import Decimal

import pytest

# Configuración de pruebas antes de importar la aplicación
os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('SECRET_KEY', 'test-secret-key')
os.environ['SCHEDULER_ENABLED'] = 'false'
os.environ['SALES_COMMISSION_PERCENTAGE'] = '0.03'
os.environ['MAIL_SUPPRESS_SEND'] = 'true'

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.database import Base, get_db
from app.core.auth.security import create_access_token, hash_password
from app.main import app
from app.shared.database.models import Product, Sale, User
from app.shared.notifications import NotificationQueue
from app.shared.notifications.dependencies import get_notification_queue

engine = create_engine(
    'sqlite://',
    connect_args={'check_same_thread': False},
    poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

RATE = Decimal('0.03')


@pytest.fixture(scope='function')
def session():
    """Base de datos en memoria, creada y destruida por prueba."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope='function')
def notification_queue():
    return NotificationQueue()


@pytest.fixture(scope='function')
def client(session, notification_queue):
    """Cliente HTTP con la base de datos y la cola de pruebas."""
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_queue] = lambda: notification_queue
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(session, name, email, role='agent', password='secret123'):
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=role
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def make_sale(session, agent, product, amount, created_at=None, paid=False, rate=RATE):
    amount = Decimal(str(amount))
    sale = Sale(
        amount=amount,
        commission=amount * rate,
        is_commission_paid=paid,
        agent_id=agent.id,
        product_id=product.id
    )
    if created_at is not None:
        sale.created_at = created_at
        sale.updated_at = created_at
    session.add(sale)
    session.commit()
    session.refresh(sale)
    return sale


@pytest.fixture(scope='function')
def agent(session):
    """Agente de ventas de prueba."""
    return make_user(session, 'Ana Agente', 'ana@acme.com')


@pytest.fixture(scope='function')
def other_agent(session):
    return make_user(session, 'Bruno Agente', 'bruno@acme.com')


@pytest.fixture(scope='function')
def admin(session):
    return make_user(session, 'Admin', 'admin@acme.com', role='admin')


@pytest.fixture(scope='function')
def product(session):
    product = Product(name='Laptop', description='Laptop 14 pulgadas', price=Decimal('45999.00'))
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


@pytest.fixture(scope='function')
def cheap_product(session):
    product = Product(name='Mouse <USB>', description='Mouse inalámbrico', price=Decimal('250.00'))
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


def auth_headers(user):
    token = create_access_token({'sub': str(user.id), 'email': user.email})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def agent_headers(agent):
    return auth_headers(agent)


@pytest.fixture(scope='function')
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def january():
    """Fechas fijas de un periodo de prueba."""
    return {
        'start': datetime(2024, 1, 1),
        'mid': datetime(2024, 1, 15, 10, 30),
        'end': datetime(2024, 1, 31, 23, 59, 59),
        'next': datetime(2024, 2, 1)
    }


@pytest.fixture
def sale_factory(session):
    """Crear ventas directamente en la base (fecha y estado controlados)."""
    def factory(agent, product, amount, created_at=None, paid=False):
        return make_sale(session, agent, product, amount, created_at=created_at, paid=paid)
    return factory


@pytest.fixture
def headers_for():
    return auth_headers

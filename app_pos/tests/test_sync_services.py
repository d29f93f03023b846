from decimal import Decimal

import pytest

from app_pos.errors import ConflictError, GatewayError, NotFoundError, ValidationError
from app_pos.models import Product, Sale
from app_pos.services import (
    ProductService,
    ProviderService,
    SalesService,
    SyncState,
    UserService,
)


@pytest.fixture
def products(gateway, store):
    return ProductService(gateway, store)


@pytest.fixture
def providers(gateway, store):
    return ProviderService(gateway, store)


@pytest.fixture
def users(gateway, store):
    return UserService(gateway, store)


@pytest.fixture
def sales(gateway, store):
    return SalesService(gateway, store)


# =============================================================================
# CARGA
# =============================================================================

def test_load_replaces_collection(api, products, store):
    api.add_product('Café', 1000)
    api.add_product('Té', 800.5)
    store.products.upsert_one(Product(id=99, nombre='Viejo'))

    loaded = products.load()

    assert products.state == SyncState.READY
    assert [p.nombre for p in loaded] == ['Café', 'Té']
    assert store.products.get(2).precio == Decimal('800.5')
    assert 99 not in store.products


def test_failed_load_empties_collection(api, products, store):
    store.products.upsert_one(Product(id=1, nombre='Café'))
    api.fail('GET', '/api/productos', 500)

    with pytest.raises(GatewayError) as exc:
        products.load()

    assert products.state == SyncState.FAILED
    assert products.last_error is exc.value
    assert store.products.list() == []
    assert 'Error al cargar los productos (500' in exc.value.message


def test_load_can_be_retried_after_failure(api, products):
    api.add_product('Café', 1000)
    api.fail('GET', '/api/productos', 503)
    with pytest.raises(GatewayError):
        products.load()
    assert len(products.load()) == 1
    assert products.last_error is None


# =============================================================================
# PRODUCTOS
# =============================================================================

def test_create_product_uses_server_record(api, products, store):
    product = products.create('  Café  ', '1000', 'Tostado medio')
    assert product.id in api.products
    assert product.nombre == 'Café'
    assert store.products.require(product.id) == product


def test_invalid_product_never_reaches_api(products, transport, store):
    with pytest.raises(ValidationError) as exc:
        products.create('', '-5')
    assert set(exc.value.errors) == {'nombre', 'precio'}
    assert transport.calls == []
    assert len(store.products) == 0


def test_rejected_create_leaves_store_untouched(api, products, store):
    api.fail('POST', '/api/productos', 400, {'error': 'Nombre duplicado'})
    with pytest.raises(GatewayError) as exc:
        products.create('Café', 1000)
    assert exc.value.message == 'Nombre duplicado'
    assert len(store.products) == 0


def test_update_product_keeps_key(api, products, store):
    created = products.create('Café', 1000)
    updated = products.update(created.id, 'Café doble', 1500)
    assert updated.id == created.id
    assert store.products.require(created.id).precio == Decimal('1500')
    assert len(store.products) == 1


def test_delete_product_does_not_touch_sales(api, products, store):
    created = products.create('Café', 1000)
    store.sales.upsert_one(Sale(id=10, fecha='2024-05-01', total=Decimal('1000')))
    products.delete(created.id)
    assert created.id not in store.products
    assert len(store.sales) == 1


def test_delete_missing_product_keeps_store(api, products, store):
    store.products.upsert_one(Product(id=42, nombre='Fantasma'))
    with pytest.raises(NotFoundError):
        products.delete(42)
    assert 42 in store.products


# =============================================================================
# PROVEEDORES
# =============================================================================

def test_create_provider_rebuilt_from_id_response(api, providers, store):
    provider = providers.create('Lácteos Sur', 3)
    assert provider.id in api.providers
    assert provider.nombre == 'Lácteos Sur'
    assert provider.id_producto == 3
    assert store.providers.require(provider.id) == provider


def test_update_provider_with_empty_response(api, providers, store):
    created = providers.create('Lácteos Sur', 3)
    updated = providers.update(created.id, 'Lácteos del Sur', 4)
    assert updated.id == created.id
    assert store.providers.require(created.id).nombre == 'Lácteos del Sur'
    assert store.providers.require(created.id).id_producto == 4


def test_create_provider_without_id_in_response(api, providers, store):
    api.fail('POST', '/api/proveedores', 201, {'ok': True})
    with pytest.raises(GatewayError):
        providers.create('Lácteos Sur', 3)
    assert len(store.providers) == 0


def test_provider_requires_product(providers, transport):
    with pytest.raises(ValidationError) as exc:
        providers.create('Lácteos Sur', None)
    assert 'id_producto' in exc.value.errors
    assert transport.calls == []


# =============================================================================
# USUARIOS
# =============================================================================

def test_loaded_users_have_no_password(api, users):
    api.add_user('12345678', 'ana@example.com')
    loaded = users.load()
    assert loaded[0].to_dict() == {'documento': '12345678', 'email': 'ana@example.com'}
    assert not hasattr(loaded[0], 'contraseña')


def test_register_new_user(api, users, store):
    user = users.register('12345678', 'Ana@Example.com', 'secreto1', 'secreto1')
    assert user.email == 'ana@example.com'
    assert api.users['12345678']['contraseña'] == 'secreto1'
    assert store.users.require('12345678') == user


def test_register_duplicate_document(api, users, store):
    api.add_user('12345678', 'ana@example.com')
    with pytest.raises(ConflictError) as exc:
        users.register('12345678', 'otra@example.com', 'secreto1', 'secreto1')
    assert exc.value.field == 'documento'
    assert len(store.users) == 0


def test_register_duplicate_email(api, users, transport):
    api.add_user('12345678', 'ana@example.com')
    with pytest.raises(ConflictError) as exc:
        users.register('87654321', 'ANA@example.com', 'secreto1', 'secreto1')
    assert exc.value.field == 'email'
    assert ('POST', '/api/usuarios') not in transport.calls


def test_register_password_mismatch_makes_no_call(users, transport):
    with pytest.raises(ValidationError) as exc:
        users.register('12345678', 'ana@example.com', 'secreto1', 'secreto2')
    assert exc.value.errors == {'confirmacion': 'Las contraseñas no coinciden'}
    assert transport.calls == []


def test_create_duplicate_reported_by_api(api, users):
    api.add_user('12345678', 'ana@example.com')
    with pytest.raises(ConflictError):
        users.create('12345678', 'nueva@example.com', 'secreto1')


def test_update_user_without_password(api, users, store):
    users.create('12345678', 'ana@example.com', 'secreto1')
    updated = users.update('12345678', 'ana.nueva@example.com')
    assert updated.documento == '12345678'
    assert store.users.require('12345678').email == 'ana.nueva@example.com'
    assert api.users['12345678']['contraseña'] == 'secreto1'


def test_delete_user(api, users, store):
    users.create('12345678', 'ana@example.com', 'secreto1')
    users.delete('12345678')
    assert '12345678' not in store.users
    assert '12345678' not in api.users


def test_exists_checks_document(api, users):
    api.add_user('12345678', 'ana@example.com')
    assert users.exists('12345678') is True
    assert users.exists('99999999') is False


# =============================================================================
# VENTAS
# =============================================================================

def _seed_sale(api):
    product = api.add_product('Café', 1000)
    sale_id = 50
    api.sales[sale_id] = {'id_venta': sale_id, 'fecha': '2024-05-01T10:00:00', 'total': 2000}
    api.details[sale_id] = [{'id_producto': product['id_producto'], 'cantidad': 2,
                             'precio_unitario': 1000, 'subtotal': 2000}]
    return sale_id


def test_load_sales_with_embedded_details(api, sales, store):
    sale_id = _seed_sale(api)
    loaded = sales.load()
    assert loaded[0].id == sale_id
    assert loaded[0].items[0].nombre == 'Café'
    assert loaded[0].items_total == Decimal('2000')


def test_sale_detail(api, sales, store):
    sale_id = _seed_sale(api)
    sale = sales.get_detail(sale_id)
    assert sale.total == Decimal('2000')
    assert [(i.nombre, i.cantidad) for i in sale.items] == [('Café', 2)]
    assert len(store.sales) == 0


def test_sale_detail_falls_back_when_details_fail(api, sales):
    sale_id = _seed_sale(api)
    api.fail('GET', f'/api/detalle_venta/{sale_id}', 500)
    sale = sales.get_detail(sale_id)
    assert sale.id == sale_id
    assert sale.items == ()


def test_missing_sale_detail(sales):
    with pytest.raises(NotFoundError):
        sales.get_detail(404)


def test_statistics(store, sales):
    store.sales.replace_all([
        Sale(id=1, fecha='2024-05-01', total=Decimal('1000')),
        Sale(id=2, fecha='2024-05-02', total=Decimal('2500')),
        Sale(id=3, fecha='2024-05-03', total=Decimal('500')),
    ])
    assert sales.statistics() == {
        'cantidad': 3,
        'total': 4000,
        'promedio': 1333.33,
        'maximo': 2500,
    }


def test_statistics_without_sales(sales):
    assert sales.statistics() == {'cantidad': 0, 'total': 0, 'promedio': 0, 'maximo': 0}


def test_record_without_key_fails_load(api, products, store):
    store.products.upsert_one(Product(id=99, nombre='Viejo'))
    api.products[1] = {'nombre': 'sin id', 'precio': 10}

    with pytest.raises(GatewayError):
        products.load()

    assert products.state == SyncState.FAILED
    assert store.products.list() == []

import logging

from app_pos import profiling
from app_pos.app_container import AppContainer
from app_pos.config import Settings, configure_logging
from app_pos.gateway import RemoteGateway, UrllibTransport


def test_settings_defaults():
    settings = Settings.from_env({})
    assert settings.api_url == 'http://localhost:3000'
    assert settings.api_timeout == 10.0
    assert settings.enable_profiling is True
    assert settings.slow_call_warning_ms == 300
    assert settings.slow_call_critical_ms == 700
    assert settings.log_level == 'INFO'


def test_settings_from_environment():
    settings = Settings.from_env({
        'POS_API_URL': 'http://api.local:8080/',
        'POS_API_TIMEOUT': '2.5',
        'POS_ENABLE_PROFILING': 'no',
        'POS_LOG_LEVEL': 'debug',
    })
    assert settings.api_url == 'http://api.local:8080'
    assert settings.api_timeout == 2.5
    assert settings.enable_profiling is False
    assert settings.log_level == 'DEBUG'


def test_invalid_number_falls_back_to_default(caplog):
    with caplog.at_level(logging.WARNING, logger='app_pos.config'):
        settings = Settings.from_env({'POS_API_TIMEOUT': 'rápido'})
    assert settings.api_timeout == 10.0
    assert 'POS_API_TIMEOUT' in caplog.text


def test_container_builds_urllib_transport_by_default():
    container = AppContainer(Settings(api_url='http://api.local', api_timeout=3))
    gateway = container.gateway
    assert isinstance(gateway, RemoteGateway)
    assert isinstance(gateway.transport, UrllibTransport)
    assert gateway.transport.base_url == 'http://api.local'
    assert gateway.transport.timeout == 3


def test_container_shares_state_between_services(container):
    assert container.product_service.store is container.store
    assert container.sale_committer.store is container.store
    assert container.sale_committer.cart is container.cart
    assert container.product_service is container.product_service


def test_containers_are_independent(transport):
    a = AppContainer(Settings(), transport=transport)
    b = AppContainer(Settings(), transport=transport)
    assert a.store is not b.store
    assert a.cart is not b.cart


def test_reset_discards_state(container):
    store = container.store
    container.reset()
    assert container.store is not store
    assert container.sales_service.store is container.store


def test_container_applies_profiling_settings(transport):
    AppContainer(Settings(enable_profiling=False), transport=transport)
    assert profiling.is_enabled() is False


def test_full_checkout_flow(api, container):
    api.add_product('Café', 1000)
    api.add_product('Medialuna', 500)
    container.product_service.load()

    cafe, medialuna = container.store.products.list()
    container.cart.add_item(cafe, cantidad=2)
    container.cart.add_item(medialuna)
    sale = container.sale_committer.commit()

    container.sales_service.load()
    loaded = container.store.sales.require(sale.id)
    assert loaded.total == sale.total
    assert [i.nombre for i in loaded.items] == ['Café', 'Medialuna']
    assert container.cart.is_empty()


def test_from_env_configures_logging(transport, monkeypatch):
    calls = []
    monkeypatch.setattr(logging, 'basicConfig', lambda **kwargs: calls.append(kwargs))

    container = AppContainer.from_env(
        {'POS_API_URL': 'http://api.local', 'POS_LOG_LEVEL': 'warning'},
        transport=transport,
    )

    assert container.settings.api_url == 'http://api.local'
    assert calls[0]['level'] == logging.WARNING
    assert container.gateway.transport is transport


def test_configure_logging_unknown_level_defaults_to_info(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, 'basicConfig', lambda **kwargs: calls.append(kwargs))
    configure_logging(Settings(log_level='VERBOSO'))
    assert calls[0]['level'] == logging.INFO


def test_shutdown_logs_profiling_report(api, container, caplog):
    api.add_product('Café', 1000)
    container.product_service.load()

    with caplog.at_level(logging.INFO, logger='app_pos.profiling'):
        container.shutdown()

    assert 'GET /api/productos: 1 llamadas' in caplog.text


def test_shutdown_without_profiling_logs_nothing(transport, caplog):
    container = AppContainer(Settings(enable_profiling=False), transport=transport)
    with caplog.at_level(logging.INFO, logger='app_pos.profiling'):
        container.shutdown()
    assert caplog.records == []

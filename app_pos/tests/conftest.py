import itertools

import pytest
from flask import Flask, Response, jsonify, request

from app_pos import profiling
from app_pos.app_container import AppContainer
from app_pos.config import Settings
from app_pos.errors import TransportError
from app_pos.gateway import RemoteGateway, TransportResponse, encode_json
from app_pos.state import Cart, EntityStore


class FakeApi:
    """API remota en memoria, con las mismas rutas y formas de respuesta."""

    def __init__(self):
        self.products = {}
        self.providers = {}
        self.users = {}
        self.sales = {}
        self.details = {}
        self.failures = {}
        self._ids = itertools.count(1)
        self.app = self._build_app()

    # helpers para preparar datos
    def add_product(self, nombre, precio, descripcion=''):
        pid = next(self._ids)
        self.products[pid] = {'id_producto': pid, 'nombre': nombre,
                              'descripcion': descripcion, 'precio': precio}
        return self.products[pid]

    def add_user(self, documento, email, contrasena='secreto1'):
        self.users[documento] = {'documento': documento, 'email': email,
                                 'contraseña': contrasena}
        return self.users[documento]

    def fail(self, method, path, status, body=None):
        """El próximo request a (method, path) responde con este error."""
        self.failures[(method, path)] = (status, body)

    def _build_app(self):
        app = Flask(__name__)
        api = self

        @app.before_request
        def inject_failure():
            key = (request.method, request.path)
            if key not in api.failures:
                return None
            status, body = api.failures.pop(key)
            if body is None:
                return Response('', status=status)
            if isinstance(body, str):
                return Response(body, status=status)
            return jsonify(body), status

        # productos
        @app.route('/api/productos', methods=['GET'])
        def list_products():
            return jsonify(list(api.products.values()))

        @app.route('/api/productos', methods=['POST'])
        def create_product():
            data = request.get_json()
            pid = next(api._ids)
            api.products[pid] = dict(data, id_producto=pid)
            return jsonify(api.products[pid]), 201

        @app.route('/api/productos/<int:pid>', methods=['PUT'])
        def update_product(pid):
            if pid not in api.products:
                return jsonify({'error': 'Producto no encontrado'}), 404
            api.products[pid] = dict(request.get_json(), id_producto=pid)
            return jsonify(api.products[pid])

        @app.route('/api/productos/<int:pid>', methods=['DELETE'])
        def delete_product(pid):
            if api.products.pop(pid, None) is None:
                return jsonify({'error': 'Producto no encontrado'}), 404
            return jsonify({'mensaje': 'Producto eliminado'})

        # proveedores: POST devuelve solo {id}, PUT no devuelve cuerpo
        @app.route('/api/proveedores', methods=['GET'])
        def list_providers():
            return jsonify(list(api.providers.values()))

        @app.route('/api/proveedores', methods=['POST'])
        def create_provider():
            data = request.get_json()
            prov_id = next(api._ids)
            api.providers[prov_id] = dict(data, id_proveedor=prov_id)
            return jsonify({'id': prov_id}), 201

        @app.route('/api/proveedores/<int:prov_id>', methods=['PUT'])
        def update_provider(prov_id):
            api.providers[prov_id] = dict(request.get_json(), id_proveedor=prov_id)
            return Response('', status=204)

        @app.route('/api/proveedores/<int:prov_id>', methods=['DELETE'])
        def delete_provider(prov_id):
            api.providers.pop(prov_id, None)
            return Response('', status=204)

        # usuarios
        @app.route('/api/usuarios', methods=['GET'])
        def list_users():
            return jsonify(list(api.users.values()))

        @app.route('/api/usuarios', methods=['POST'])
        def create_user():
            data = request.get_json()
            if data['documento'] in api.users:
                return jsonify({'error': 'El documento ya está registrado'}), 409
            api.users[data['documento']] = data
            return jsonify(data), 201

        @app.route('/api/usuarios/<documento>', methods=['GET'])
        def get_user(documento):
            if documento not in api.users:
                return jsonify({'mensaje': 'Usuario no encontrado'}), 404
            return jsonify(api.users[documento])

        @app.route('/api/usuarios/<documento>', methods=['PUT'])
        def update_user(documento):
            user = api.users.setdefault(documento, {'documento': documento})
            user.update(request.get_json())
            return jsonify({'mensaje': 'Usuario actualizado'})

        @app.route('/api/usuarios/<documento>', methods=['DELETE'])
        def delete_user(documento):
            api.users.pop(documento, None)
            return Response('', status=204)

        # ventas
        @app.route('/api/ventas', methods=['GET'])
        def list_sales():
            result = []
            for sale in api.sales.values():
                detalles = [api._detail_row(d) for d in api.details.get(sale['id_venta'], [])]
                result.append(dict(sale, detalles_venta=detalles))
            return jsonify(result)

        @app.route('/api/ventas', methods=['POST'])
        def create_sale():
            data = request.get_json()
            sale_id = next(api._ids)
            api.sales[sale_id] = {'id_venta': sale_id, 'fecha': data['fecha'],
                                  'total': data['total']}
            api.details[sale_id] = list(data['detalles'])
            return jsonify(api.sales[sale_id]), 201

        @app.route('/api/ventas/<int:sale_id>', methods=['GET'])
        def get_sale(sale_id):
            if sale_id not in api.sales:
                return jsonify({'error': 'Venta no encontrada'}), 404
            return jsonify(api.sales[sale_id])

        @app.route('/api/detalle_venta/<int:sale_id>', methods=['GET'])
        def get_sale_details(sale_id):
            return jsonify([api._detail_row(d) for d in api.details.get(sale_id, [])])

        return app

    def _detail_row(self, detail):
        product = self.products.get(detail['id_producto'], {})
        return dict(detail, nombre_producto=product.get('nombre'))


class FlaskTestTransport:
    """Transporte sobre el test client de Flask; registra cada llamada."""

    def __init__(self, app):
        self.client = app.test_client()
        self.calls = []
        self.offline = False

    def request(self, method, path, payload=None):
        self.calls.append((method, path))
        if self.offline:
            raise TransportError('No se pudo conectar con el servidor: timed out')
        data = encode_json(payload) if payload is not None else None
        resp = self.client.open(
            path,
            method=method,
            data=data,
            content_type='application/json' if data is not None else None,
        )
        return TransportResponse(resp.status_code, resp.get_data())


@pytest.fixture(autouse=True)
def profiling_defaults():
    profiling.configure_profiling(Settings())
    profiling.reset_stats()
    yield
    profiling.reset_stats()


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def transport(api):
    return FlaskTestTransport(api.app)


@pytest.fixture
def gateway(transport):
    return RemoteGateway(transport)


@pytest.fixture
def store():
    return EntityStore()


@pytest.fixture
def cart():
    return Cart()


@pytest.fixture
def container(transport):
    return AppContainer(Settings(), transport=transport)

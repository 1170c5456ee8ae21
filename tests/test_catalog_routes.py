from app import create_app
from conftest import FakeResponse, FakeSession, ITEM
from errors import NotFoundError, UpstreamError
from services.square_client import SquareClient


def test_health(client):
    response = client.get('/api/health')
    assert response.status_code == 200
    data = response.get_json()
    assert data['status'] == 'ok'
    assert data['environment'] == 'sandbox'
    assert data['timestamp']


def test_list_products_maps_items(client, square):
    response = client.get('/api/products')
    assert response.status_code == 200
    data = response.get_json()
    assert data['success'] is True
    assert data['count'] == 1
    assert data['cached'] is False
    product = data['products'][0]
    assert product == {
        'id': 'ITEM_ROSE_SOAP',
        'name': 'Rose Shea Soap',
        'description': 'Handmade shea butter soap',
        'variations': ITEM['item_data']['variations'],
        'imageUrl': 'https://items-images.example.com/rose.jpg',
        'categoryId': 'CAT_SOAPS',
    }


def test_list_products_skips_non_items_and_sanitizes(client, square):
    square.objects = [
        {'type': 'CATEGORY', 'id': 'CAT_SOAPS', 'category_data': {'name': 'Soaps'}},
        {'type': 'ITEM', 'id': 'ITEM_NO_DATA'},
        {'type': 'ITEM', 'id': 'ITEM_X', 'item_data': {'name': '<b>"Lavender"</b>'}},
    ]
    data = client.get('/api/products').get_json()
    assert data['count'] == 1
    product = data['products'][0]
    assert product['name'] == 'bLavender/b'
    assert product['description'] == ''
    assert product['imageUrl'] is None
    assert product['categoryId'] is None


def test_list_products_caps_at_one_hundred(client, square):
    square.objects = [
        {'type': 'ITEM', 'id': f'ITEM_{i:04d}', 'item_data': {'name': f'Soap {i}'}}
        for i in range(150)
    ]
    data = client.get('/api/products').get_json()
    assert data['count'] == 100
    assert len(data['products']) == 100


def test_list_products_empty_catalog(client, square):
    square.objects = []
    data = client.get('/api/products').get_json()
    assert data['success'] is True
    assert data['count'] == 0
    assert data['products'] == []


def test_list_products_upstream_failure_is_generic(client, square):
    square.error = UpstreamError('Square API error (401)', detail='UNAUTHORIZED: bad token')
    response = client.get('/api/products')
    assert response.status_code == 500
    data = response.get_json()
    assert data['error'] == 'Failed to fetch products'
    assert data['message'] == 'Internal server error'
    assert 'UNAUTHORIZED' not in response.get_data(as_text=True)


def test_list_products_upstream_detail_in_development(config, square, verifier):
    config.APP_ENV = 'development'
    client = create_app(config, square_client=square, recaptcha_client=verifier).test_client()
    square.error = UpstreamError('Square API error (401)', detail='UNAUTHORIZED: bad token')
    data = client.get('/api/products').get_json()
    assert data['message'] == 'UNAUTHORIZED: bad token'


def test_list_products_requires_access_token(config, square, verifier):
    config.SQUARE_ACCESS_TOKEN = None
    client = create_app(config, square_client=square, recaptcha_client=verifier).test_client()
    response = client.get('/api/products')
    assert response.status_code == 500
    assert response.get_json()['error'] == 'Configuration Error'
    assert square.calls == []


def test_get_product(client, square):
    response = client.get('/api/products/ITEM_ROSE_SOAP')
    assert response.status_code == 200
    data = response.get_json()
    assert data['success'] is True
    assert data['product']['id'] == 'ITEM_ROSE_SOAP'
    assert data['product']['imageUrl'] == 'https://items-images.example.com/rose.jpg'
    assert square.calls == [('get_catalog_item', 'ITEM_ROSE_SOAP')]


def test_get_product_short_id_rejected_before_upstream(client, square):
    response = client.get('/api/products/abcd')
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Invalid product ID format'
    assert square.calls == []


def test_get_product_id_is_sanitized_before_length_check(client, square):
    response = client.get('/api/products/%3C%22ab%27%3E')
    assert response.status_code == 400
    assert square.calls == []


def test_get_product_non_item_is_not_found(client, square):
    square.item = {'object': {'type': 'CATEGORY', 'id': 'CAT_SOAPS'}, 'related_objects': []}
    response = client.get('/api/products/CAT_SOAPS')
    assert response.status_code == 404
    assert response.get_json()['error'] == 'Product not found'


def test_get_product_missing_upstream_is_not_found(client, square):
    square.error = NotFoundError('Product not found')
    response = client.get('/api/products/ITEM_GONE')
    assert response.status_code == 404


def test_get_product_upstream_failure(client, square):
    square.error = UpstreamError('Square request timed out')
    response = client.get('/api/products/ITEM_ROSE_SOAP')
    assert response.status_code == 500
    assert response.get_json()['error'] == 'Failed to fetch product'


def test_get_product_query_in_id_stays_in_path(config, verifier):
    session = FakeSession(FakeResponse(payload={'object': ITEM, 'related_objects': []}))
    square = SquareClient('sq-token', environment='sandbox', timeout=5, session=session)
    client = create_app(config, square_client=square, recaptcha_client=verifier).test_client()

    assert client.get('/api/products/ABCDE%3Fx%3D1').status_code == 200
    _, url, kwargs = session.calls[0]
    assert url == 'https://connect.squareupsandbox.com/v2/catalog/object/ABCDE%3Fx%3D1'
    assert kwargs['params'] == {'include_related_objects': 'true'}

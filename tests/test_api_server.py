import base64
import io

import pytest

import api_server
from triwarp.repositories.raster_repository import RasterRepository

from .helpers import WHITE, gradient_buffer


@pytest.fixture
def client():
    api_server.app.config['TESTING'] = True
    api_server.sessions.clear()
    with api_server.app.test_client() as client:
        yield client
    api_server.sessions.clear()


def upload(client, **form):
    png = RasterRepository.encode_png(gradient_buffer(10, 10))
    data = {'source_image': (io.BytesIO(png), 'source.png'), 'source_triangle': '0,0;0,10;10,10'}
    data.update(form)
    return client.post('/api/load-source', data=data, content_type='multipart/form-data')


def test_load_source_then_warp(client):
    loaded = upload(client, width='20', height='20')
    assert loaded.status_code == 200
    session_id = loaded.get_json()['session_id']
    assert loaded.get_json()['destination_size'] == [20, 20]

    warped = client.post('/api/warp', json={
        'session_id': session_id,
        'destination_triangle': [[0, 0], [0, 20], [20, 20]],
    })
    body = warped.get_json()

    assert warped.status_code == 200 and body['success']
    prefix = 'data:image/png;base64,'
    assert body['image'].startswith(prefix)
    result = RasterRepository.decode(base64.b64decode(body['image'][len(prefix):]))
    assert (result.width, result.height) == (20, 20)
    assert result.get_pixel(19, 0) == WHITE


def test_warp_accepts_text_triangle(client):
    session_id = upload(client).get_json()['session_id']
    warped = client.post('/api/warp', json={'session_id': session_id, 'destination_triangle': '9,0;0,0;0,9'})
    assert warped.status_code == 200


def test_degenerate_triangle_is_unprocessable(client):
    session_id = upload(client).get_json()['session_id']
    warped = client.post('/api/warp', json={
        'session_id': session_id,
        'destination_triangle': [[0, 0], [5, 5], [10, 10]],
    })
    assert warped.status_code == 422
    assert warped.get_json()['error'] == 'DegenerateTriangleError'
    assert client.get(f'/api/image/{session_id}').status_code == 404


def test_unknown_option_is_rejected(client):
    response = upload(client, fill_colour='0,0,0,0')
    assert response.status_code == 422
    assert response.get_json()['error'] == 'UnknownOptionError'


def test_missing_image_and_invalid_session(client):
    assert client.post('/api/load-source', data={}, content_type='multipart/form-data').status_code == 400
    assert client.post('/api/warp', json={'session_id': 'nope'}).status_code == 400


def test_image_and_preview_are_served_as_png(client):
    session_id = upload(client, sampling='bilinear').get_json()['session_id']
    client.post('/api/warp', json={'session_id': session_id, 'destination_triangle': [[0, 0], [0, 9], [9, 9]]})

    image = client.get(f'/api/image/{session_id}')
    preview = client.get(f'/api/preview/{session_id}')

    assert image.status_code == 200 and image.mimetype == 'image/png'
    assert preview.status_code == 200 and preview.mimetype == 'image/png'


def test_health_and_clear_session(client):
    session_id = upload(client).get_json()['session_id']
    assert client.get('/api/health').get_json()['active_sessions'] == 1

    assert client.post('/api/clear-session', json={'session_id': session_id}).get_json()['success']
    assert client.get('/api/health').get_json()['active_sessions'] == 0
    assert not client.post('/api/clear-session', json={'session_id': session_id}).get_json()['success']


@pytest.mark.parametrize("route", ['/api/warp', '/api/clear-session'])
@pytest.mark.parametrize("body", [[1, 2], "session", 7])
def test_non_object_json_body_is_a_bad_request(client, route, body):
    response = client.post(route, json=body)
    assert response.status_code == 400
    assert not response.get_json()['success']


@pytest.mark.parametrize("size", [{'width': '-5'}, {'height': '-1'}, {'width': '0', 'height': '10'}])
def test_non_positive_destination_size_is_rejected_up_front(client, size):
    response = upload(client, **size)
    assert response.status_code == 400
    assert api_server.sessions == {}

import pytest

from tritag import TaggerConfig, build_tagger
from web import app as web_app


@pytest.fixture
def client(toy_model, monkeypatch):
    monkeypatch.setattr(web_app, "model", toy_model)
    monkeypatch.setattr(web_app, "tagger", build_tagger(TaggerConfig(), toy_model))
    web_app.app.config['TESTING'] = True
    with web_app.app.test_client() as client:
        yield client


def test_tag(client):
    response = client.post('/api/tag', json={'sentence': 'the dog barks zebras'})
    assert response.status_code == 200

    data = response.get_json()
    assert [t['tag'] for t in data['tokens'][:3]] == ['DET', 'NOUN', 'VERB']
    assert [t['known'] for t in data['tokens']] == [True, True, True, False]
    assert data['log_probability'] < 0


def test_tag_without_sentence(client):
    response = client.post('/api/tag', json={'sentence': '   '})
    assert response.status_code == 400


def test_model_info(client):
    data = client.get('/api/model/info').get_json()

    assert data['stats']['tags'] == len(data['tags'])
    assert sum(data['lambdas']) == pytest.approx(1.0)
    assert data['beam_factor'] == 1000.0


def test_suffix(client):
    data = client.get('/api/suffix?word=zebras').get_json()

    assert data['class'] == 'lower'
    probs = [t['log_probability'] for t in data['tags']]
    assert probs == sorted(probs, reverse=True)
    assert len(probs) <= 10


def test_no_model(monkeypatch):
    monkeypatch.setattr(web_app, "tagger", None)
    with web_app.app.test_client() as client:
        response = client.post('/api/tag', json={'sentence': 'the dog'})
    assert response.status_code == 400
    assert response.get_json()['error'] == 'No model trained'


def test_status():
    with web_app.app.test_client() as client:
        data = client.get('/api/status').get_json()
    assert data['is_training'] is False


@pytest.mark.parametrize("payload", [
    {'beam_factor': 'wide'},
    {'beam_factor': [1, 2]},
    {'beam_factor': 0},
    {'unknown_handler': 'hash'},
])
def test_train_rejects_bad_settings(payload):
    with web_app.app.test_client() as client:
        response = client.post('/api/train', json=payload)
    assert response.status_code == 400
    assert 'error' in response.get_json()

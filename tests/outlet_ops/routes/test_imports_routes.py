"""Tests for outlet_ops.routes.imports — upload, preview, commit, discard."""
import io

import pytest

from outlet_ops.services.preview_store import KEY_PREFIX


CSV_BYTES = (
    b'Outlet Name,Brand,Cities,Pipeline Stage\n'
    b'Acme,,,CHEF APPROVAL\n'
    b'Dil Daily - Koramangala,Dil Daily,Bangalore,ID CREATION\n'
    b'Broken,,,NOT_A_REAL_STAGE\n'
)


def _upload(client, data=CSV_BYTES, filename='outlets.csv'):
    return client.post(
        '/api/imports/preview',
        data={'file': (io.BytesIO(data), filename)},
        content_type='multipart/form-data',
    )


@pytest.fixture
def existing(repository, make_outlet):
    o = make_outlet('Dil Daily - Koramangala')
    repository.save_all([o])
    return o


class TestPreview:

    def test_reports_counts_and_failures(self, client, mock_redis, existing):
        resp = _upload(client)
        assert resp.status_code == 200
        data = resp.json
        assert data['counts'] == {'new': 1, 'update': 1, 'failures': 1}
        assert data['failures'] == [{
            'row': 4, 'name': 'Broken', 'reason': 'Invalid Pipeline Stage',
            'offending_text': 'NOT_A_REAL_STAGE',
        }]
        assert [s['import_action'] for s in data['success']] == ['New', 'Update']
        assert f"{KEY_PREFIX}{data['token']}" in mock_redis.store

    def test_preview_changes_nothing(self, client, mock_redis, existing, repository):
        _upload(client)
        stored = repository.load()
        assert len(stored) == 1
        assert stored[0].current_stage.value == 'ONBOARDING REQUEST'

    def test_no_file(self, client, mock_redis):
        resp = client.post('/api/imports/preview', data={}, content_type='multipart/form-data')
        assert resp.status_code == 400
        mock_redis.setex.assert_not_called()

    def test_unreadable_file(self, client, mock_redis):
        resp = _upload(client, b'garbage', 'outlets.xlsx')
        assert resp.status_code == 400
        assert 'Critical error' in resp.json['error']
        mock_redis.setex.assert_not_called()

    def test_unsupported_file(self, client, mock_redis):
        resp = _upload(client, b'hello', 'outlets.pdf')
        assert resp.status_code == 400


class TestCommit:

    def test_applies_preview(self, client, mock_redis, existing, repository):
        token = _upload(client).json['token']
        resp = client.post(f'/api/imports/{token}/commit')
        assert resp.status_code == 200
        assert resp.json['committed'] == 2
        stored = {o.name: o for o in repository.load()}
        assert set(stored) == {'Dil Daily - Koramangala', 'Acme'}
        assert stored['Dil Daily - Koramangala'].id == existing.id
        assert stored['Dil Daily - Koramangala'].current_stage.value == 'ID CREATION'
        assert stored['Acme'].current_stage.value == 'CHEF APPROVAL'

    def test_token_is_consumed(self, client, mock_redis, existing):
        token = _upload(client).json['token']
        client.post(f'/api/imports/{token}/commit')
        assert client.post(f'/api/imports/{token}/commit').status_code == 404

    def test_unknown_token(self, client, mock_redis):
        assert client.post('/api/imports/nope/commit').status_code == 404

    def test_all_failures_commits_nothing(self, client, mock_redis, repository):
        token = _upload(client, b'Outlet Name,Cities\nX,Gotham\n').json['token']
        resp = client.post(f'/api/imports/{token}/commit')
        assert resp.json['committed'] == 0
        assert repository.load() == []


class TestDiscard:

    def test_discard(self, client, mock_redis, existing, repository):
        token = _upload(client).json['token']
        resp = client.delete(f'/api/imports/{token}')
        assert resp.status_code == 200
        assert client.post(f'/api/imports/{token}/commit').status_code == 404
        assert len(repository.load()) == 1

    def test_discard_unknown(self, client, mock_redis):
        assert client.delete('/api/imports/nope').status_code == 404


class TestTemplate:

    def test_download(self, client):
        resp = client.get('/api/imports/template')
        assert resp.status_code == 200
        assert 'Outlet_Import_Template.xlsx' in resp.headers['Content-Disposition']
        assert resp.data[:2] == b'PK'

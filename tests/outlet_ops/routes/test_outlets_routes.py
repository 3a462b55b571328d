"""Tests for outlet_ops.routes.outlets — board CRUD, moves, notes, lifecycle."""
from unittest.mock import patch

import pytest

from outlet_ops.services.repository import RepositoryError


@pytest.fixture
def outlet(repository, make_outlet):
    """One stored outlet at the first stage."""
    o = make_outlet('Dil Daily - Koramangala', brand='Dil Daily', city='Bangalore')
    repository.save_all([o])
    return o


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

class TestListOutlets:

    def test_empty(self, client):
        resp = client.get('/api/outlets')
        assert resp.status_code == 200
        assert resp.json == []

    def test_lists_active(self, client, outlet):
        data = client.get('/api/outlets').json
        assert [o['id'] for o in data] == [outlet.id]
        assert data[0]['current_stage'] == 'ONBOARDING REQUEST'

    def test_search(self, client, outlet):
        assert len(client.get('/api/outlets?q=koramangala').json) == 1
        assert client.get('/api/outlets?q=chennai').json == []

    def test_archived_listing(self, client, outlet):
        client.post(f'/api/outlets/{outlet.id}/archive')
        assert client.get('/api/outlets').json == []
        assert [o['id'] for o in client.get('/api/outlets/archived').json] == [outlet.id]


# ---------------------------------------------------------------------------
# Create / read / edit
# ---------------------------------------------------------------------------

class TestCreateOutlet:

    def test_returns_201(self, client, repository):
        resp = client.post('/api/outlets', json={
            'name': 'Aahar - HSR', 'description': 'South Indian tiffin', 'note': 'Referral',
            'brand': 'Aahar', 'city': 'Bangalore',
        })
        assert resp.status_code == 201
        assert resp.json['name'] == 'Aahar - HSR'
        assert resp.json['history'][0]['note'] == 'Referral'
        assert len(repository.load()) == 1

    def test_missing_name_is_400(self, client):
        resp = client.post('/api/outlets', json={'description': 'x'})
        assert resp.status_code == 400
        assert 'Name' in resp.json['error']

    def test_unknown_city_is_400(self, client):
        resp = client.post('/api/outlets', json={'name': 'X', 'city': 'Gotham'})
        assert resp.status_code == 400

    def test_non_text_name_is_400(self, client, repository):
        resp = client.post('/api/outlets', json={'name': 123})
        assert resp.status_code == 400
        assert resp.json == {'error': 'Name must be text'}
        assert repository.load() == []

    def test_priority(self, client):
        assert client.post('/api/outlets', json={'name': 'X'}).json['priority'] == 'medium'
        resp = client.post('/api/outlets', json={'name': 'Y', 'priority': 'High'})
        assert resp.json['priority'] == 'high'
        assert client.post('/api/outlets', json={'name': 'Z', 'priority': 'urgent'}).status_code == 400


class TestGetOutlet:

    def test_found(self, client, outlet):
        resp = client.get(f'/api/outlets/{outlet.id}')
        assert resp.status_code == 200
        assert resp.json['id'] == outlet.id

    def test_not_found(self, client):
        resp = client.get('/api/outlets/missing')
        assert resp.status_code == 404
        assert 'error' in resp.json


class TestUpdateOutlet:

    def test_patch_fields(self, client, outlet):
        resp = client.patch(f'/api/outlets/{outlet.id}', json={'status': 'Active', 'current_stage': 'OUTLET LIVE'})
        assert resp.status_code == 200
        assert resp.json['status'] == 'Active'
        assert resp.json['current_stage'] == 'ONBOARDING REQUEST'

    def test_bad_status_is_400(self, client, outlet):
        resp = client.patch(f'/api/outlets/{outlet.id}', json={'status': 'Paused'})
        assert resp.status_code == 400

    def test_non_text_name_is_400(self, client, outlet, repository):
        resp = client.patch(f'/api/outlets/{outlet.id}', json={'name': 123})
        assert resp.status_code == 400
        assert repository.load()[0].name == outlet.name

    def test_patch_priority(self, client, outlet):
        resp = client.patch(f'/api/outlets/{outlet.id}', json={'priority': 'low'})
        assert resp.status_code == 200
        assert resp.json['priority'] == 'low'


# ---------------------------------------------------------------------------
# Stage changes
# ---------------------------------------------------------------------------

class TestMoveOutlet:

    def test_forward(self, client, outlet):
        resp = client.post(f'/api/outlets/{outlet.id}/move', json={'direction': 'forward'})
        assert resp.status_code == 200
        assert resp.json['moved'] is True
        assert resp.json['outlet']['current_stage'] == 'OVERLAP CHECK'
        assert len(resp.json['outlet']['history']) == 2

    def test_backward_at_first_stage(self, client, outlet):
        resp = client.post(f'/api/outlets/{outlet.id}/move', json={'direction': 'backward'})
        assert resp.status_code == 200
        assert resp.json['moved'] is False
        assert resp.json['outlet']['current_stage'] == 'ONBOARDING REQUEST'

    def test_bad_direction(self, client, outlet):
        resp = client.post(f'/api/outlets/{outlet.id}/move', json={'direction': 'up'})
        assert resp.status_code == 400

    def test_unknown_outlet(self, client):
        resp = client.post('/api/outlets/missing/move', json={'direction': 'forward'})
        assert resp.status_code == 404


class TestSetStage:

    def test_jump(self, client, outlet):
        resp = client.put(f'/api/outlets/{outlet.id}/stage', json={'stage': 'HANDOVER'})
        assert resp.json['moved'] is True
        assert resp.json['outlet']['current_stage'] == 'HANDOVER'

    def test_same_stage(self, client, outlet):
        resp = client.put(f'/api/outlets/{outlet.id}/stage', json={'stage': 'ONBOARDING_REQUEST'})
        assert resp.json['moved'] is False

    def test_unknown_stage(self, client, outlet):
        resp = client.put(f'/api/outlets/{outlet.id}/stage', json={'stage': 'LAUNCHED'})
        assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Notes and timestamps
# ---------------------------------------------------------------------------

class TestNotes:

    def test_current_stage_note(self, client, outlet):
        resp = client.put(f'/api/outlets/{outlet.id}/notes', json={'note': 'Docs pending'})
        assert resp.status_code == 200
        assert resp.json['history'][0]['note'] == 'Docs pending'

    def test_other_stage_note(self, client, outlet):
        resp = client.put(f'/api/outlets/{outlet.id}/notes', json={'note': 'Early', 'stage': 'FASSI APPLY'})
        assert resp.json['history'][-1]['stage'] == 'FASSI APPLY'


class TestTimestamps:

    def test_backdate(self, client, outlet):
        resp = client.put(f'/api/outlets/{outlet.id}/timestamps',
                          json={'stage': 'ONBOARDING REQUEST', 'timestamp': '2025-12-01T09:00:00Z'})
        assert resp.status_code == 200
        assert resp.json['history'][0]['timestamp'] == '2025-12-01T09:00:00+00:00'

    def test_missing_stage(self, client, outlet):
        resp = client.put(f'/api/outlets/{outlet.id}/timestamps', json={'timestamp': '2025-12-01'})
        assert resp.status_code == 400

    def test_bad_timestamp(self, client, outlet):
        resp = client.put(f'/api/outlets/{outlet.id}/timestamps',
                          json={'stage': 'HANDOVER', 'timestamp': 'yesterday'})
        assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

class TestLifecycle:

    def test_archive_restore(self, client, outlet):
        resp = client.post(f'/api/outlets/{outlet.id}/archive')
        assert resp.json['is_archived'] is True
        assert resp.json['archived_at'] is not None
        resp = client.post(f'/api/outlets/{outlet.id}/restore')
        assert resp.json['is_archived'] is False
        assert resp.json['archived_at'] is None

    def test_delete(self, client, outlet, repository):
        resp = client.delete(f'/api/outlets/{outlet.id}')
        assert resp.status_code == 200
        assert resp.json == {'deleted': outlet.id}
        assert repository.load() == []

    def test_delete_unknown(self, client):
        assert client.delete('/api/outlets/missing').status_code == 404

    def test_save_failure_is_500(self, client, outlet, repository):
        with patch.object(repository, 'save_all', side_effect=RepositoryError('locked')):
            resp = client.post(f'/api/outlets/{outlet.id}/archive')
        assert resp.status_code == 500
        assert repository.load()[0].is_archived is False


# ---------------------------------------------------------------------------
# Description suggestions
# ---------------------------------------------------------------------------

class TestDescribe:

    @patch('outlet_ops.routes.outlets.generate_outlet_description', return_value='Tasty food.')
    def test_returns_description(self, mock_generate, client):
        resp = client.post('/api/outlets/describe', json={'name': 'Aahar'})
        assert resp.status_code == 200
        assert resp.json == {'description': 'Tasty food.'}
        mock_generate.assert_called_once_with('Aahar')

    def test_blank_name(self, client):
        assert client.post('/api/outlets/describe', json={'name': ' '}).status_code == 400

    def test_non_text_name(self, client):
        assert client.post('/api/outlets/describe', json={'name': 42}).status_code == 400

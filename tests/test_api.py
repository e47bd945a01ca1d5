"""
HTTP surface: authentication, role gates, payment submission and review,
notifications, teams, events, site content and family members.
"""
from datetime import date

import pytest

from conftest import PNG_DATA_URL
from models import UserRole, VerificationStatus


@pytest.fixture
def player(make_user):
    return make_user(first_name='Asha', last_name='Rao')


@pytest.fixture
def admin(make_user):
    return make_user(role=UserRole.ADMIN)


class TestHealthAndErrors:

    def test_health(self, client):
        resp = client.get('/health')
        assert resp.status_code == 200
        assert resp.get_json()['status'] == 'ok'

    def test_unknown_route_is_json_404(self, client):
        resp = client.get('/api/nothing-here')
        assert resp.status_code == 404
        assert resp.get_json()['success'] is False


class TestAuthentication:

    def test_missing_token(self, client):
        resp = client.get('/api/auth/me')
        assert resp.status_code == 401
        assert resp.get_json()['code'] == 'AUTH_REQUIRED'

    def test_garbage_token(self, client):
        resp = client.get('/api/auth/me', headers={'Authorization': 'Bearer not-a-token'})
        assert resp.status_code == 401
        assert resp.get_json()['code'] == 'TOKEN_INVALID'

    def test_expired_token(self, client, services, player, auth_header, monkeypatch):
        headers = auth_header(player)
        monkeypatch.setattr(services.tokens, 'player_ttl', -1.0)
        resp = client.get('/api/auth/me', headers=headers)
        assert resp.status_code == 401
        assert resp.get_json()['code'] == 'TOKEN_EXPIRED'

    def test_player_token_at_admin_route(self, client, player, auth_header):
        resp = client.get('/api/admin/players', headers=auth_header(player))
        assert resp.status_code == 403
        assert resp.get_json()['success'] is False

    def test_pending_admin_token_is_refused(self, client, make_user, auth_header):
        pending = make_user(role=UserRole.ADMIN, verification=VerificationStatus.PENDING)
        resp = client.get('/api/admin/players', headers=auth_header(pending))
        assert resp.status_code == 403
        assert resp.get_json()['code'] == 'ADMIN_PENDING_APPROVAL'

    def test_me(self, client, player, auth_header):
        resp = client.get('/api/auth/me', headers=auth_header(player))
        body = resp.get_json()
        assert body['user']['playerId'] == player.player_id
        assert body['user']['role'] == 'player'

    def test_register_and_login_player(self, client):
        resp = client.post('/api/auth/register-player', json={
            'firstName': 'Ravi', 'lastName': 'Kumar', 'mobile': '9123456780', 'dob': '01-02-2005',
        })
        assert resp.status_code == 201
        player_id = resp.get_json()['playerId']

        resp = client.post('/api/auth/login', json={'identifier': player_id, 'password': '01022005'})
        assert resp.status_code == 200
        assert resp.get_json()['token']

    def test_register_player_missing_fields(self, client):
        resp = client.post('/api/auth/register-player', json={'firstName': 'Ravi'})
        assert resp.status_code == 400
        assert resp.get_json()['code'] == 'VALIDATION_ERROR'

    def test_register_player_with_otp(self, client, otp_provider):
        resp = client.post('/api/auth/send-otp', json={'mobile': '9123456780'})
        session_id = resp.get_json()['sessionId']
        _, code = otp_provider.outbox[-1]

        resp = client.post('/api/auth/register-player', json={
            'firstName': 'Ravi', 'lastName': 'Kumar', 'mobile': '9123456780', 'dob': '2005-02-01',
            'otpSessionId': session_id, 'otp': code,
        })
        assert resp.status_code == 201
        assert resp.get_json()['user']['verification'] == 'verified'

    def test_register_admin_duplicate_email(self, client):
        form = {'name': 'Meera', 'email': 'meera@example.com', 'password': 'secret123'}
        assert client.post('/api/auth/register-admin', json=form).status_code == 201
        resp = client.post('/api/auth/register-admin', json=form)
        assert resp.status_code == 409
        assert resp.get_json()['code'] == 'CONFLICT'

    def test_admin_login_wrong_portal(self, client, player):
        resp = client.post('/api/auth/login-admin', json={'email': player.email, 'password': 'secret123'})
        assert resp.status_code == 403
        assert resp.get_json()['code'] == 'WRONG_LOGIN_PORTAL'

    @pytest.mark.parametrize('path, form', [
        ('/api/auth/login', {'identifier': '9876500001', 'password': 123456}),
        ('/api/auth/login-admin', {'email': 'admin1@example.com', 'password': 123456}),
        ('/api/auth/register-player', {'firstName': 'Ravi', 'lastName': 'Kumar', 'mobile': '9123456780',
                                       'dob': '2005-02-01', 'password': 12345678}),
        ('/api/auth/register-admin', {'name': 'Meera', 'email': 'meera@example.com', 'password': ['secret123']}),
    ])
    def test_non_string_password_is_a_validation_error(self, client, player, path, form):
        resp = client.post(path, json=form)
        assert resp.status_code == 400
        body = resp.get_json()
        assert body['code'] == 'VALIDATION_ERROR'
        assert body['field'] == 'password'


class TestStepUp:

    def test_email_change_needs_verification_header(self, client, player, auth_header, otp_provider):
        headers = auth_header(player)
        resp = client.put('/api/player/update-profile', headers=headers, json={'email': 'fresh@example.com'})
        assert resp.status_code == 401
        assert resp.get_json()['code'] == 'VERIFICATION_REQUIRED'

        resp = client.post('/api/auth/step-up/send', headers=headers, json={'channel': 'email'})
        session_id = resp.get_json()['sessionId']
        _, code = otp_provider.outbox[-1]
        resp = client.post('/api/auth/step-up/verify', headers=headers, json={'sessionId': session_id, 'code': code})
        body = resp.get_json()
        assert body['expiresIn'] == 300

        resp = client.put('/api/player/update-profile', json={'email': 'fresh@example.com'},
                          headers=dict(headers, **{'X-Verification-Token': body['verificationToken']}))
        assert resp.status_code == 200
        assert resp.get_json()['player']['email'] == 'fresh@example.com'

    def test_check_password(self, client, player, auth_header):
        headers = auth_header(player)
        resp = client.post('/api/player/check-password', headers=headers, json={'currentPassword': 'nope'})
        assert resp.status_code == 401
        assert resp.get_json()['correct'] is False
        resp = client.post('/api/player/check-password', headers=headers, json={'currentPassword': 'secret123'})
        assert resp.get_json()['correct'] is True

    def test_numeric_passwords_are_validation_errors(self, client, player, auth_header):
        headers = auth_header(player)
        resp = client.post('/api/player/check-password', headers=headers, json={'currentPassword': 123456})
        assert resp.status_code == 400
        assert resp.get_json()['field'] == 'currentPassword'

        resp = client.put('/api/player/change-password', headers=headers,
                          json={'currentPassword': 'secret123', 'newPassword': 12345678})
        assert resp.status_code == 400
        assert resp.get_json()['field'] == 'newPassword'

    def test_check_conflict(self, client, player, make_user, auth_header):
        other = make_user()
        resp = client.post('/api/player/check-conflict', headers=auth_header(player), json={'mobile': other.mobile})
        assert resp.status_code == 409
        assert resp.get_json()['field'] == 'mobile'


class TestPaymentFlow:

    def _submit(self, client, headers, event_id):
        return client.post('/api/payment/submit-manual-payment', headers=headers, json={
            'eventId': event_id, 'amount': 499, 'categories': ['U17 Singles'],
            'screenshot': PNG_DATA_URL, 'transactionId': 'UTR998877',
        })

    def test_submit_verify_and_read_notification(self, client, player, admin, make_event, auth_header):
        event = make_event(name='Monsoon Open')
        player_headers = auth_header(player)
        admin_headers = auth_header(admin)

        resp = self._submit(client, player_headers, event.id)
        assert resp.status_code == 201
        registration_id = resp.get_json()['registrationId']

        resp = client.get('/api/player/dashboard', headers=player_headers)
        registrations = resp.get_json()['registrations']
        assert registrations[0]['status'] == 'pending_verification'
        assert registrations[0]['transaction']['manual_transaction_id'] == 'UTR998877'

        resp = client.post(f'/api/admin/transactions/{registration_id}/verify', headers=admin_headers)
        assert resp.status_code == 200
        assert resp.get_json()['registration']['status'] == 'verified'

        resp = client.get('/api/notifications', headers=player_headers)
        body = resp.get_json()
        assert body['unreadCount'] == 1
        note = body['notifications'][0]
        assert note['title'] == 'Registration Verified'
        assert 'Monsoon Open' in note['message']

        resp = client.post('/api/notifications/mark-read', headers=player_headers,
                           json={'notificationId': note['id']})
        assert resp.status_code == 200
        assert client.get('/api/notifications/', headers=player_headers).get_json()['unreadCount'] == 0

    def test_mark_someone_elses_notification(self, client, player, make_user, admin, make_event, auth_header):
        event = make_event()
        registration_id = self._submit(client, auth_header(player), event.id).get_json()['registrationId']
        client.post(f'/api/admin/transactions/{registration_id}/reject', headers=auth_header(admin))

        other = make_user()
        note_id = client.get('/api/notifications', headers=auth_header(player)).get_json()['notifications'][0]['id']
        resp = client.post('/api/notifications/mark-read', headers=auth_header(other), json={'notificationId': note_id})
        assert resp.status_code == 404

    def test_admin_cannot_submit(self, client, admin, auth_header):
        resp = client.post('/api/payment/submit-manual-payment', headers=auth_header(admin), json={})
        assert resp.status_code == 403
        assert resp.get_json()['code'] == 'ADMIN_CANNOT_REGISTER'

    def test_submit_without_token(self, client, make_event):
        assert self._submit(client, {}, make_event().id).status_code == 401

    def test_bulk_update(self, client, store, player, admin, make_event, auth_header):
        event = make_event()
        ids = [self._submit(client, auth_header(player), event.id).get_json()['registrationId'] for _ in range(2)]

        resp = client.post('/api/admin/transactions/bulk-update', headers=auth_header(admin),
                           json={'ids': ids, 'status': 'rejected'})
        assert resp.status_code == 200
        assert resp.get_json()['updated'] == 2
        assert len(store.notifications_for(player.id)) == 2

    @pytest.mark.parametrize('payload', [
        {'ids': [], 'status': 'verified'},
        {'ids': [1], 'status': 'maybe'},
        {'status': 'verified'},
    ])
    def test_bulk_update_rejects_bad_input(self, client, store, admin, auth_header, payload):
        resp = client.post('/api/admin/transactions/bulk-update', headers=auth_header(admin), json=payload)
        assert resp.status_code == 400
        assert not store.notifications

    def test_admin_listings(self, client, player, admin, make_event, auth_header):
        event = make_event(assigned_to=admin.id)
        self._submit(client, auth_header(player), event.id)
        headers = auth_header(admin)

        registrations = client.get(f'/api/admin/registrations?eventId={event.id}', headers=headers).get_json()
        assert registrations['registrations'][0]['player']['id'] == player.id

        transactions = client.get(f'/api/admin/transactions?admin_id={admin.id}', headers=headers).get_json()
        assert transactions['transactions'][0]['transaction']['amount'] == 499.0

        stats = client.get('/api/admin/dashboard-stats', headers=headers).get_json()
        assert stats['stats']['totalPlayers'] == 1


class TestAdminAccounts:

    def test_verify_player(self, client, store, admin, make_user, auth_header):
        pending = make_user(verification=VerificationStatus.PENDING)
        resp = client.post(f'/api/admin/players/{pending.id}/verification', headers=auth_header(admin),
                           json={'status': 'verified'})
        assert resp.status_code == 200
        assert store.users[pending.id].verification == VerificationStatus.VERIFIED

    def test_list_pending_players(self, client, admin, make_user, auth_header):
        pending = make_user(verification=VerificationStatus.PENDING)
        make_user()
        resp = client.get('/api/admin/players?verification=pending', headers=auth_header(admin))
        assert [p['id'] for p in resp.get_json()['players']] == [pending.id]

    def test_admin_cannot_delete_admin(self, client, admin, make_user, auth_header):
        other = make_user(role=UserRole.ADMIN)
        resp = client.delete(f'/api/admin/admins/{other.id}', headers=auth_header(admin))
        assert resp.status_code == 403


class TestTeams:

    def test_create_and_update_own_team(self, client, player, make_user, auth_header):
        mate = make_user()
        headers = auth_header(player)
        resp = client.post('/api/teams/create', headers=headers, json={
            'team_name': 'Smashers', 'sport': 'Badminton',
            'members': [{'name': mate.name, 'mobile': mate.mobile}],
        })
        assert resp.status_code == 201
        team = resp.get_json()['team']
        assert team['captain_name'] == 'Asha Rao'

        resp = client.put(f"/api/teams/{team['id']}", headers=headers, json={'team_name': 'Smashers 2'})
        assert resp.get_json()['team']['team_name'] == 'Smashers 2'
        assert [t['id'] for t in client.get('/api/teams/my-teams', headers=headers).get_json()['teams']] == \
            [team['id']]

    def test_non_captain_cannot_edit_or_delete(self, client, player, make_user, auth_header):
        team = client.post('/api/teams/create', headers=auth_header(player),
                           json={'team_name': 'Smashers'}).get_json()['team']
        intruder = auth_header(make_user())

        resp = client.put(f"/api/teams/{team['id']}", headers=intruder, json={'team_name': 'Mine now'})
        assert resp.status_code == 403
        assert resp.get_json()['code'] == 'NOT_TEAM_CAPTAIN'
        assert client.delete(f"/api/teams/{team['id']}", headers=intruder).status_code == 403

    def test_player_lookup(self, client, player, make_user, auth_header):
        mate = make_user(dob=date(2000, 1, 1))
        resp = client.get(f'/api/teams/player-lookup/{mate.player_id.lower()}', headers=auth_header(player))
        assert resp.get_json()['player']['id'] == mate.id
        assert client.get('/api/teams/player-lookup/P999999', headers=auth_header(player)).status_code == 404


class TestEvents:

    def test_create_list_and_detail(self, client, admin, auth_header, blob_store):
        headers = auth_header(admin)
        resp = client.post('/api/events/create', headers=headers, json={
            'name': 'Spring Cup', 'sport': 'Tennis', 'start_date': '2026-04-10',
            'categories': ['Open'], 'banner_image': PNG_DATA_URL,
            'sponsors': [{'name': 'Acme', 'logo': PNG_DATA_URL}],
        })
        assert resp.status_code == 201
        event = resp.get_json()['event']
        assert event['created_by'] == admin.id
        assert event['banner_url'] in blob_store.objects
        assert event['sponsors'][0]['logo'] in blob_store.objects

        listed = client.get('/api/events/list').get_json()['events']
        assert [e['id'] for e in listed] == [event['id']]
        assert client.get(f"/api/events/list?created_by={admin.id + 100}").get_json()['events'] == []

        detail = client.get(f"/api/events/{event['id']}").get_json()['event']
        assert detail['start_date'] == '2026-04-10'
        assert detail['news'] == []
        assert client.get(f"/api/events/{event['id']}/sponsors").get_json()['sponsors'][0]['name'] == 'Acme'

    def test_player_cannot_create_event(self, client, player, auth_header):
        resp = client.post('/api/events/create', headers=auth_header(player),
                           json={'name': 'X', 'sport': 'Y', 'start_date': '2026-01-01'})
        assert resp.status_code == 403

    def test_update_and_delete(self, client, admin, make_event, auth_header):
        event = make_event()
        headers = auth_header(admin)
        resp = client.put(f'/api/events/{event.id}', headers=headers,
                          json={'venue': 'Stadium 2', 'registration_deadline': '2026-11-20'})
        body = resp.get_json()['event']
        assert body['venue'] == 'Stadium 2'
        assert body['registration_deadline'] == '2026-11-20'

        assert client.delete(f'/api/events/{event.id}', headers=headers).status_code == 200
        assert client.get(f'/api/events/{event.id}').status_code == 404

    def test_news_and_brackets(self, client, admin, make_event, auth_header):
        event = make_event()
        headers = auth_header(admin)

        resp = client.post('/api/admin/news', headers=headers,
                           json={'eventId': event.id, 'title': 'Day 1 results', 'isHighlight': True})
        assert resp.status_code == 201
        news_id = resp.get_json()['news']['id']
        assert client.get(f'/api/events/{event.id}').get_json()['event']['news'][0]['id'] == news_id

        bracket = {'eventId': event.id, 'category': 'Open', 'roundName': 'Final',
                   'drawType': 'manual', 'drawData': {'matches': [['A', 'B']]}}
        first = client.post('/api/admin/brackets', headers=headers, json=bracket).get_json()['bracket']
        bracket['drawData'] = {'matches': [['A', 'C']]}
        second = client.post('/api/admin/brackets', headers=headers, json=bracket).get_json()['bracket']
        assert first['id'] == second['id']

        brackets = client.get(f'/api/events/{event.id}/brackets').get_json()['brackets']
        assert [b['draw_data'] for b in brackets] == [{'matches': [['A', 'C']]}]

        assert client.delete(f'/api/admin/news/{news_id}', headers=headers).status_code == 200
        assert client.delete(f"/api/admin/brackets/{first['id']}", headers=headers).status_code == 200
        assert client.get(f'/api/admin/brackets?eventId={event.id}', headers=headers).get_json()['brackets'] == []


class TestSiteContent:

    def test_advertisement_lifecycle(self, client, admin, auth_header, blob_store):
        headers = auth_header(admin)
        resp = client.post('/api/advertisements', headers=headers,
                           json={'title': 'Summer Camp', 'image': PNG_DATA_URL, 'linkUrl': 'https://example.com'})
        assert resp.status_code == 201
        ad = resp.get_json()['advertisement']
        assert ad['image_url'] in blob_store.objects

        listed = client.get('/api/advertisements').get_json()['advertisements']
        assert [a['id'] for a in listed] == [ad['id']]

        resp = client.patch(f"/api/advertisements/{ad['id']}/toggle", headers=headers, json={'isActive': False})
        assert resp.get_json()['advertisement']['is_active'] is False

        resp = client.put(f"/api/advertisements/{ad['id']}", headers=headers,
                          json={'title': 'Winter Camp', 'image': ad['image_url']})
        assert resp.get_json()['advertisement']['title'] == 'Winter Camp'
        assert resp.get_json()['advertisement']['image_url'] == ad['image_url']

        resp = client.delete(f"/api/advertisements/{ad['id']}", headers=headers)
        assert resp.get_json()['message'] == 'Advertisement deleted'
        assert client.delete(f"/api/advertisements/{ad['id']}", headers=headers).status_code == 404

    def test_advertisement_writes_need_admin(self, client, player, auth_header):
        form = {'title': 'Mine', 'image': PNG_DATA_URL}
        assert client.post('/api/advertisements', json=form).status_code == 401
        assert client.post('/api/advertisements', headers=auth_header(player), json=form).status_code == 403

    def test_advertisement_requires_image(self, client, admin, auth_header):
        resp = client.post('/api/advertisements', headers=auth_header(admin), json={'title': 'No image'})
        assert resp.status_code == 400
        assert resp.get_json()['field'] == 'image'

    def test_settings_admin_and_public_views(self, client, admin, player, auth_header):
        assert client.get('/api/public/settings').get_json()['settings']['platform_name'] == 'Sports Paramount'
        assert client.get('/api/admin/settings', headers=auth_header(player)).status_code == 403

        headers = auth_header(admin)
        resp = client.post('/api/admin/settings', headers=headers, json={
            'platformName': 'City Sports', 'supportEmail': 'help@example.com', 'supportPhone': '9876543210',
        })
        assert resp.status_code == 200
        assert client.get('/api/admin/settings', headers=headers).get_json()['settings']['support_phone'] == '9876543210'

        public = client.get('/api/public/settings').get_json()['settings']
        assert public['platform_name'] == 'City Sports'
        assert public['support_email'] == 'help@example.com'
        assert 'support_phone' not in public

    def test_apartment_directory(self, client, admin, player, auth_header):
        headers = auth_header(admin)
        resp = client.post('/api/apartments', headers=headers, json={'name': 'Green Acres', 'zone': 'East'})
        assert resp.status_code == 201
        apartment_id = resp.get_json()['apartment']['id']

        resp = client.post('/api/apartments', headers=headers, json={'name': 'GREEN ACRES'})
        assert resp.status_code == 200
        assert resp.get_json()['message'] == 'Apartment already exists'
        assert client.post('/api/apartments', headers=auth_header(player), json={'name': 'X'}).status_code == 403

        resp = client.put(f'/api/apartments/{apartment_id}', headers=headers, json={'pincode': '560038'})
        assert resp.get_json()['apartment']['pincode'] == '560038'
        assert [a['name'] for a in client.get('/api/apartments').get_json()['apartments']] == ['Green Acres']

        assert client.delete(f'/api/apartments/{apartment_id}', headers=headers).status_code == 200
        assert client.get('/api/apartments').get_json()['apartments'] == []


class TestFamilyMembers:

    def test_add_update_delete_and_dashboard(self, client, player, auth_header):
        headers = auth_header(player)
        resp = client.post('/api/player/add-family-member', headers=headers,
                           json={'name': 'Ravi', 'relation': 'Brother', 'age': 12, 'gender': 'male'})
        assert resp.status_code == 201
        member_id = resp.get_json()['member']['id']

        resp = client.put(f'/api/player/update-family-member/{member_id}', headers=headers, json={'age': 13})
        assert resp.get_json()['member']['age'] == 13

        family = client.get('/api/player/dashboard', headers=headers).get_json()['familyMembers']
        assert [(m['name'], m['age']) for m in family] == [('Ravi', 13)]

        assert client.delete(f'/api/player/delete-family-member/{member_id}', headers=headers).status_code == 200
        assert client.get('/api/player/dashboard', headers=headers).get_json()['familyMembers'] == []

    def test_missing_relation(self, client, player, auth_header):
        resp = client.post('/api/player/add-family-member', headers=auth_header(player), json={'name': 'Ravi'})
        assert resp.status_code == 400
        assert resp.get_json()['field'] == 'relation'

    def test_other_players_member_is_not_found(self, client, player, make_user, auth_header):
        resp = client.post('/api/player/add-family-member', headers=auth_header(player),
                           json={'name': 'Ravi', 'relation': 'Brother'})
        member_id = resp.get_json()['member']['id']

        other = auth_header(make_user())
        assert client.put(f'/api/player/update-family-member/{member_id}', headers=other,
                          json={'name': 'Changed'}).status_code == 404
        assert client.delete(f'/api/player/delete-family-member/{member_id}', headers=other).status_code == 404

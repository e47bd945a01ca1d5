"""
Shared pytest fixtures.

The Flask app is built with TestingConfig and an in-memory Store, so no MySQL,
Redis, SMTP or 2factor account is needed. Side effects run on the inline
dispatcher, which makes notifications visible as soon as the request returns.
"""
import copy
import itertools
from collections import defaultdict
from decimal import Decimal

import pytest

from app import create_app
from extensions import EXTENSION_KEY
from models import User, UserRole, VerificationStatus, Event
from storage import Store
from utils.blob_store import BlobStore
from utils.errors import ConflictError
from utils.helpers import generate_password_hash, format_player_id
from utils.otp_service import ChallengeIssuer, CodeStore, DemoOTPProvider
from utils.task_queue import InlineDispatcher


PNG_DATA_URL = 'data:image/png;base64,iVBORw0KGgo='
PDF_DATA_URL = 'data:application/pdf;base64,JVBERi0xLjQK'


class InMemoryStore(Store):
    """Dict-backed Store with the same semantics as DatabaseManager."""

    def __init__(self):
        self.users = {}
        self.teams = {}
        self.events = {}
        self.news = {}
        self.brackets = {}
        self.transactions = {}
        self.registrations = {}
        self.notifications = {}
        self.family_members = {}
        self.advertisements = {}
        self.apartments = {}
        self.settings = None
        self.mutations = []
        self._ids = defaultdict(lambda: itertools.count(1))
        self._player_seq = itertools.count(1)

    def _insert(self, table, obj):
        obj.id = next(self._ids[table])
        getattr(self, table)[obj.id] = copy.deepcopy(obj)
        self.mutations.append(('insert', table, obj.id))
        return obj

    @staticmethod
    def _copy(obj):
        return copy.deepcopy(obj) if obj is not None else None

    # ---- users ----

    def create_user(self, user):
        conflict = self.find_user_conflict(mobile=user.mobile, email=user.email, aadhaar=user.aadhaar)
        if conflict:
            raise ConflictError('User with this mobile, email or aadhaar already exists')
        return self._insert('users', user)

    def get_user_by_id(self, user_id):
        return self._copy(self.users.get(user_id))

    def get_users_by_ids(self, user_ids):
        return {uid: self._copy(self.users[uid]) for uid in set(user_ids) if uid in self.users}

    def get_user_by_email(self, email):
        return self._copy(next((u for u in self.users.values() if u.email == email), None))

    def get_player_by_player_id(self, player_id):
        return self._copy(next(
            (u for u in self.users.values()
             if u.role == UserRole.PLAYER and (u.player_id or '').upper() == player_id.upper()),
            None,
        ))

    def find_player_for_login(self, identifier):
        return self._copy(next(
            (u for u in self.users.values()
             if identifier in (u.mobile, u.aadhaar) or (u.player_id or '').upper() == identifier.upper()),
            None,
        ))

    def find_user_conflict(self, mobile=None, email=None, aadhaar=None, exclude_user_id=None):
        for column, value in (('mobile', mobile), ('email', email), ('aadhaar', aadhaar)):
            if not value:
                continue
            for user in self.users.values():
                if user.id != exclude_user_id and getattr(user, column) == value:
                    return column
        return None

    def next_player_number(self):
        return next(self._player_seq)

    def update_user(self, user_id, fields):
        user = self.users.get(user_id)
        if user is not None:
            for key, value in fields.items():
                if key not in ('role', 'player_id'):
                    setattr(user, key, value)
            self.mutations.append(('update', 'users', user_id))
        return self.get_user_by_id(user_id)

    def list_users(self, role=None, verification=None):
        users = [
            u for u in self.users.values()
            if (role is None or u.role == role) and (verification is None or u.verification == verification)
        ]
        return [self._copy(u) for u in sorted(users, key=lambda u: u.id, reverse=True)]

    def count_users_by_verification(self, role):
        counts = defaultdict(int)
        for user in self.users.values():
            if user.role == role:
                counts[user.verification.value] += 1
        return dict(counts)

    def delete_player_account(self, user_id):
        user = self.users.get(user_id)
        if user is None or user.role != UserRole.PLAYER:
            return False
        for reg in [r for r in self.registrations.values() if r.player_id == user_id]:
            self.transactions.pop(reg.transaction_id, None)
            del self.registrations[reg.id]
        for tx in [t for t in self.transactions.values() if t.user_id == user_id]:
            del self.transactions[tx.id]
        for team in [t for t in self.teams.values() if t.captain_id == user_id]:
            del self.teams[team.id]
        for member in [m for m in self.family_members.values() if m.user_id == user_id]:
            del self.family_members[member.id]
        for n in [n for n in self.notifications.values() if n.user_id == user_id]:
            del self.notifications[n.id]
        del self.users[user_id]
        self.mutations.append(('delete', 'users', user_id))
        return True

    def delete_admin_account(self, admin_id, successor_id):
        for event in self.events.values():
            if event.created_by == admin_id:
                event.created_by = successor_id
            if event.assigned_to == admin_id:
                event.assigned_to = successor_id
        for n in [n for n in self.notifications.values() if n.user_id == admin_id]:
            del self.notifications[n.id]
        user = self.users.get(admin_id)
        if user is None or user.role != UserRole.ADMIN:
            return False
        del self.users[admin_id]
        self.mutations.append(('delete', 'users', admin_id))
        return True

    # ---- teams ----

    def create_team(self, team):
        return self._insert('teams', team)

    def get_team(self, team_id):
        return self._copy(self.teams.get(team_id))

    def update_team(self, team):
        self.teams[team.id] = copy.deepcopy(team)
        self.mutations.append(('update', 'teams', team.id))
        return self.get_team(team.id)

    def delete_team(self, team_id):
        self.mutations.append(('delete', 'teams', team_id))
        return self.teams.pop(team_id, None) is not None

    def list_teams_by_captain(self, captain_id):
        return [self._copy(t) for t in self.teams.values() if t.captain_id == captain_id]

    def list_all_teams(self):
        return [self._copy(t) for t in self.teams.values()]

    # ---- events ----

    def create_event(self, event):
        return self._insert('events', event)

    def get_event(self, event_id):
        return self._copy(self.events.get(event_id))

    def update_event(self, event_id, fields):
        event = self.events.get(event_id)
        if event is not None:
            for key, value in fields.items():
                if key != 'created_by':
                    setattr(event, key, value)
        return self.get_event(event_id)

    def delete_event(self, event_id):
        if event_id not in self.events:
            return False
        for reg in [r for r in self.registrations.values() if r.event_id == event_id]:
            self.transactions.pop(reg.transaction_id, None)
            del self.registrations[reg.id]
        self.news = {k: v for k, v in self.news.items() if v.event_id != event_id}
        self.brackets = {k: v for k, v in self.brackets.items() if v.event_id != event_id}
        del self.events[event_id]
        return True

    def list_events(self, created_by=None, admin_id=None):
        events = [
            e for e in self.events.values()
            if (created_by is None or e.created_by == created_by)
            and (admin_id is None or admin_id in (e.created_by, e.assigned_to))
        ]
        return [self._copy(e) for e in sorted(events, key=lambda e: (str(e.start_date), e.id))]

    def get_event_names(self, event_ids):
        return {eid: self.events[eid].name for eid in set(event_ids) if eid in self.events}

    def create_news(self, news):
        return self._insert('news', news)

    def get_news(self, news_id):
        return self._copy(self.news.get(news_id))

    def update_news(self, news_id, fields):
        news = self.news.get(news_id)
        if news is not None:
            for key, value in fields.items():
                setattr(news, key, value)
        return self.get_news(news_id)

    def delete_news(self, news_id):
        return self.news.pop(news_id, None) is not None

    def list_news(self, event_id=None):
        items = [n for n in self.news.values() if event_id is None or n.event_id == event_id]
        return [self._copy(n) for n in sorted(items, key=lambda n: n.id, reverse=True)]

    def save_bracket(self, bracket):
        for existing in self.brackets.values():
            if (existing.event_id, existing.category, existing.round_name) == \
                    (bracket.event_id, bracket.category, bracket.round_name):
                existing.draw_type = bracket.draw_type
                existing.draw_data = copy.deepcopy(bracket.draw_data)
                return self._copy(existing)
        return self._copy(self._insert('brackets', bracket))

    def list_brackets(self, event_id, category=None):
        return [
            self._copy(b) for b in sorted(self.brackets.values(), key=lambda b: b.id)
            if b.event_id == event_id and (not category or b.category == category)
        ]

    def delete_bracket(self, bracket_id):
        return self.brackets.pop(bracket_id, None) is not None

    # ---- registrations & transactions ----

    def create_transaction(self, transaction):
        return self._insert('transactions', transaction)

    def delete_transaction(self, transaction_id):
        self.mutations.append(('delete', 'transactions', transaction_id))
        self.transactions.pop(transaction_id, None)

    def get_transactions_by_ids(self, transaction_ids):
        return {tid: self._copy(self.transactions[tid]) for tid in set(transaction_ids) if tid in self.transactions}

    def create_registration(self, registration):
        if any(r.registration_no == registration.registration_no for r in self.registrations.values()):
            raise ConflictError('Registration number collision, please retry')
        return self._insert('registrations', registration)

    def _joined(self, registration):
        if registration is None:
            return None
        result = copy.deepcopy(registration)
        event = self.events.get(registration.event_id)
        result.event_name = event.name if event else None
        return result

    def get_registration(self, registration_id):
        return self._joined(self.registrations.get(registration_id))

    def get_registrations_by_ids(self, registration_ids):
        return [self._joined(self.registrations[i]) for i in dict.fromkeys(registration_ids)
                if i in self.registrations]

    def set_registration_status(self, registration_id, status):
        registration = self.registrations.get(registration_id)
        if registration is None:
            return None
        registration.status = status
        self.mutations.append(('update', 'registrations', registration_id))
        return self.get_registration(registration_id)

    def bulk_set_registration_status(self, registration_ids, status):
        ids = [i for i in dict.fromkeys(registration_ids) if i in self.registrations]
        for registration_id in ids:
            self.registrations[registration_id].status = status
        self.mutations.append(('bulk_update', 'registrations', tuple(ids)))
        return self.get_registrations_by_ids(ids)

    def list_registrations(self, event_id=None, event_ids=None):
        if event_ids is not None and not event_ids:
            return []
        items = [
            r for r in self.registrations.values()
            if (event_id is None or r.event_id == event_id)
            and (event_ids is None or r.event_id in event_ids)
        ]
        return [self._joined(r) for r in sorted(items, key=lambda r: r.id, reverse=True)]

    def list_registrations_for_player(self, user_id, team_ids):
        team_ids = set(team_ids or [])
        items = [r for r in self.registrations.values() if r.player_id == user_id or r.team_id in team_ids]
        return [self._joined(r) for r in sorted(items, key=lambda r: r.id, reverse=True)]

    def registration_totals(self):
        totals = {}
        for registration in self.registrations.values():
            entry = totals.setdefault(registration.status.value, {'count': 0, 'amount': 0.0})
            entry['count'] += 1
            entry['amount'] += float(Decimal(str(registration.amount_paid or 0)))
        return totals

    # ---- notifications ----

    def create_notification(self, notification):
        return self._insert('notifications', notification)

    def list_notifications(self, user_id, limit=50):
        items = [n for n in self.notifications.values() if n.user_id == user_id]
        return [self._copy(n) for n in sorted(items, key=lambda n: n.id, reverse=True)[:limit]]

    def count_unread_notifications(self, user_id):
        return sum(1 for n in self.notifications.values() if n.user_id == user_id and not n.is_read)

    def mark_notification_read(self, user_id, notification_id):
        notification = self.notifications.get(notification_id)
        if notification is None or notification.user_id != user_id:
            return False
        notification.is_read = True
        return True

    def mark_all_notifications_read(self, user_id):
        count = 0
        for notification in self.notifications.values():
            if notification.user_id == user_id and not notification.is_read:
                notification.is_read = True
                count += 1
        return count

    # ---- family members ----

    def create_family_member(self, member):
        return self._insert('family_members', member)

    def get_family_member(self, member_id):
        return self._copy(self.family_members.get(member_id))

    def update_family_member(self, member_id, fields):
        member = self.family_members.get(member_id)
        if member is not None:
            for key, value in fields.items():
                setattr(member, key, value)
        return self.get_family_member(member_id)

    def delete_family_member(self, member_id):
        return self.family_members.pop(member_id, None) is not None

    def list_family_members(self, user_id):
        return [self._copy(m) for m in sorted(self.family_members.values(), key=lambda m: m.id)
                if m.user_id == user_id]

    # ---- site content ----

    def create_advertisement(self, advertisement):
        return self._insert('advertisements', advertisement)

    def get_advertisement(self, advertisement_id):
        return self._copy(self.advertisements.get(advertisement_id))

    def update_advertisement(self, advertisement_id, fields):
        advertisement = self.advertisements.get(advertisement_id)
        if advertisement is not None:
            for key, value in fields.items():
                setattr(advertisement, key, value)
        return self.get_advertisement(advertisement_id)

    def delete_advertisement(self, advertisement_id):
        return self.advertisements.pop(advertisement_id, None) is not None

    def list_advertisements(self):
        return [self._copy(a) for a in sorted(self.advertisements.values(), key=lambda a: a.id, reverse=True)]

    def get_platform_settings(self):
        return self._copy(self.settings)

    def save_platform_settings(self, settings):
        self.settings = copy.deepcopy(settings)
        return self.get_platform_settings()

    def create_apartment(self, apartment):
        return self._insert('apartments', apartment)

    def get_apartment(self, apartment_id):
        return self._copy(self.apartments.get(apartment_id))

    def find_apartment_by_name(self, name):
        return self._copy(next(
            (a for a in self.apartments.values() if a.name.lower() == name.lower()), None
        ))

    def update_apartment(self, apartment_id, fields):
        apartment = self.apartments.get(apartment_id)
        if apartment is not None:
            for key, value in fields.items():
                setattr(apartment, key, value)
        return self.get_apartment(apartment_id)

    def delete_apartment(self, apartment_id):
        return self.apartments.pop(apartment_id, None) is not None

    def list_apartments(self):
        return [self._copy(a) for a in sorted(self.apartments.values(), key=lambda a: a.id, reverse=True)]

    # ---- helpers for assertions ----

    def notifications_for(self, user_id):
        return [n for n in self.notifications.values() if n.user_id == user_id]


class RecordingBlobStore(BlobStore):
    """Keeps uploads in memory; set fail=True to simulate a storage outage."""

    def __init__(self):
        self.objects = {}
        self.fail = False

    def put(self, payload, content_type, location_hint):
        if self.fail:
            raise OSError('blob store unavailable')
        url = f"/uploads/{location_hint}/{len(self.objects) + 1}"
        self.objects[url] = (payload, content_type)
        return url


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def blob_store():
    return RecordingBlobStore()


@pytest.fixture
def otp_provider():
    return DemoOTPProvider()


@pytest.fixture
def challenges(otp_provider):
    return ChallengeIssuer(CodeStore(), {'mobile': otp_provider, 'email': otp_provider}, resend_interval=0)


@pytest.fixture
def app(store, blob_store, challenges, tmp_path, monkeypatch):
    monkeypatch.setattr('config.TestingConfig.UPLOAD_FOLDER', str(tmp_path / 'uploads'))
    app = create_app('testing', store=store, blob_store=blob_store,
                     dispatcher=InlineDispatcher(), challenges=challenges)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return app.extensions[EXTENSION_KEY]


@pytest.fixture
def make_user(store):
    """Factory: insert a user directly into the store."""
    counter = itertools.count(1)

    def _make(role=UserRole.PLAYER, verification=VerificationStatus.VERIFIED, password='secret123', **fields):
        n = next(counter)
        if role == UserRole.PLAYER:
            fields.setdefault('player_id', format_player_id(store.next_player_number()))
            fields.setdefault('first_name', f'Player{n}')
            fields.setdefault('last_name', 'Test')
            fields.setdefault('mobile', f'98765{n:05d}')
            fields.setdefault('email', f'player{n}@example.com')
        else:
            fields.setdefault('name', f'Admin {n}')
            fields.setdefault('email', f'admin{n}@example.com')
        user = User(role=role, verification=verification,
                    password_hash=generate_password_hash(password), **fields)
        return store.create_user(user)

    return _make


@pytest.fixture
def make_event(store):
    def _make(name='City Open', **fields):
        fields.setdefault('sport', 'Badminton')
        fields.setdefault('start_date', '2026-12-01')
        fields.setdefault('categories', ['U17 Singles', 'Open Doubles'])
        return store.create_event(Event(name=name, **fields))

    return _make


@pytest.fixture
def auth_header(services):
    """Build an Authorization header for a stored user."""
    def _header(user):
        return {'Authorization': f'Bearer {services.tokens.issue_session(user)}'}

    return _header


@pytest.fixture
def principal_for(services):
    """Session principal for a stored user, as the auth decorator would build it."""
    def _principal(user):
        return services.tokens.authenticate(services.tokens.issue_session(user))

    return _principal

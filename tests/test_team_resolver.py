"""
Team membership resolution and member descriptor parsing.
"""
from models import Team, MemberRef, MemberRefKind
from team_resolver import TeamMembershipResolver


def _team(store, captain_id, members, name='Smashers'):
    return store.create_team(Team(team_name=name, sport='Badminton', captain_id=captain_id, members=members))


class TestMemberRef:

    def test_kind_is_derived_from_identifiers(self):
        assert MemberRef.from_raw({'mobile': '9876500001'}).kind == MemberRefKind.MOBILE
        assert MemberRef.from_raw({'playerId': 'P100001'}).kind == MemberRefKind.PLAYER_ID
        assert MemberRef.from_raw({'phone': '9876500001', 'player_number': 'P1'}).kind == MemberRefKind.BOTH
        assert MemberRef.from_raw({'name': 'Only A Name'}).kind == MemberRefKind.NONE

    def test_name_only_member_never_matches(self):
        ref = MemberRef.from_raw({'name': 'Ravi'})
        assert not ref.matches(mobile='9876500001', player_id='P100001')

    def test_match_is_exact(self):
        ref = MemberRef.from_raw({'mobile': '9876500001'})
        assert ref.matches(mobile='9876500001')
        assert not ref.matches(mobile='9876500002')
        assert not ref.matches(player_id='9876500001')


class TestTeamMembershipResolver:

    def test_owned_teams(self, store):
        resolver = TeamMembershipResolver(store)
        mine = _team(store, captain_id=1, members=[])
        _team(store, captain_id=2, members=[])
        assert resolver.teams_owned_by(1) == {mine.id}

    def test_member_teams_by_mobile_or_player_id(self, store):
        resolver = TeamMembershipResolver(store)
        by_mobile = _team(store, 2, [{'name': 'A', 'mobile': '9876500001'}])
        by_player_id = _team(store, 3, [{'name': 'A', 'player_id': 'P100001'}])
        _team(store, 4, [{'name': 'A'}, 'free text member', {'mobile': '9000000000'}])

        assert resolver.teams_containing_member(mobile='9876500001') == {by_mobile.id}
        assert resolver.teams_containing_member(player_id='P100001') == {by_player_id.id}
        assert resolver.teams_containing_member(mobile='9876500001', player_id='P100001') == \
            {by_mobile.id, by_player_id.id}

    def test_no_identifiers_means_no_teams(self, store):
        _team(store, 2, [{'name': 'A', 'mobile': '9876500001'}])
        assert TeamMembershipResolver(store).teams_containing_member() == set()

    def test_visible_team_ids_is_union(self, store, make_user):
        player = make_user(mobile='9876500001')
        resolver = TeamMembershipResolver(store)
        owned = _team(store, player.id, [])
        member_of = _team(store, 99, [{'mobile': '9876500001'}])
        _team(store, 99, [{'mobile': '9876500002'}])
        assert resolver.visible_team_ids(player) == {owned.id, member_of.id}

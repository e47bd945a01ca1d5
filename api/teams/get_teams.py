from flask import jsonify, g

from extensions import get_services
from models import UserRole
from utils.decorators import auth_required, handle_errors

from . import teams_bp


@teams_bp.route('/my-teams', methods=['GET'])
@handle_errors
@auth_required(UserRole.PLAYER)
def get_my_teams():
    """当前运动员担任队长的队伍"""
    teams = get_services().teams.my_teams(g.principal)
    return jsonify({'success': True, 'teams': [t.to_dict() for t in teams]})


@teams_bp.route('/player-lookup/<player_id>', methods=['GET'])
@handle_errors
@auth_required(UserRole.PLAYER)
def lookup_player(player_id):
    """组队时按运动员编号查找队员"""
    return jsonify({'success': True, 'player': get_services().teams.lookup_player(player_id)})

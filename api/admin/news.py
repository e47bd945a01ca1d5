from flask import request, jsonify, g

from extensions import get_services
from utils.decorators import auth_required, validate_json, log_action, handle_errors

from . import admin_bp, ADMIN_ROLES


@admin_bp.route('/news', methods=['GET'])
@handle_errors
@auth_required(*ADMIN_ROLES)
def list_news():
    news = get_services().events.list_news(request.args.get('eventId'))
    return jsonify({'success': True, 'news': [n.to_dict() for n in news]})


@admin_bp.route('/news', methods=['POST'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@validate_json(['eventId', 'title'])
@log_action('新增赛事新闻')
def create_news():
    news = get_services().events.create_news(g.principal, request.get_json())
    return jsonify({'success': True, 'news': news.to_dict(), 'message': 'News added successfully'}), 201


@admin_bp.route('/news/<int:news_id>', methods=['PUT'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@validate_json()
@log_action('更新赛事新闻')
def update_news(news_id):
    news = get_services().events.update_news(g.principal, news_id, request.get_json())
    return jsonify({'success': True, 'news': news.to_dict(), 'message': 'News updated successfully'})


@admin_bp.route('/news/<int:news_id>', methods=['DELETE'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@log_action('删除赛事新闻')
def delete_news(news_id):
    get_services().events.delete_news(g.principal, news_id)
    return jsonify({'success': True, 'message': 'News deleted successfully'})

from flask import Blueprint
import logging


player_bp = Blueprint('player', __name__)

logger = logging.getLogger(__name__)

from . import (
    dashboard,
    profile,
    delete_account,
    family_members,
)

__all__ = ['player_bp']

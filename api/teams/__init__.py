from flask import Blueprint
import logging


teams_bp = Blueprint('teams', __name__)

logger = logging.getLogger(__name__)

from . import (
    get_teams,
    manage_team,
)

__all__ = ['teams_bp']

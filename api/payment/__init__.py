from flask import Blueprint
import logging


payment_bp = Blueprint('payment', __name__)

logger = logging.getLogger(__name__)

from . import submit_manual_payment

__all__ = ['payment_bp']

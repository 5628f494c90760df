"""
Error taxonomy of the ledger API.

Every error carries the HTTP status it maps to and a message that is safe to
show to the user. Storage failures are logged server-side and answered with a
generic message.
"""

import logging

from flask import jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    status_code = 500
    default_message = 'Server error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(LedgerError):
    status_code = 400
    default_message = 'Validation failed'


class InvalidQuantity(ValidationError):
    default_message = 'Return quantity must be greater than 0'


class RefundExceedsProportionalCap(ValidationError):
    default_message = 'Refund amount exceeds the amount paid for the returned units'


class InvalidPartialPayment(ValidationError):
    default_message = 'Invalid partial payment amount'


class InsufficientStock(ValidationError):
    default_message = 'Insufficient stock'


class InsufficientCash(ValidationError):
    default_message = 'Insufficient cash'


class NotFound(LedgerError):
    status_code = 404
    default_message = 'Resource not found'


class ConflictError(LedgerError):
    status_code = 409
    default_message = 'Record was modified by another request, please retry'


class StorageError(LedgerError):
    status_code = 500
    default_message = 'Server error'


def error_response(message, status_code):
    return jsonify({'error': message}), status_code


def register_error_handlers(app):
    from models import db

    @app.errorhandler(LedgerError)
    def handle_ledger_error(exc):
        db.session.rollback()
        if exc.status_code >= 500:
            logger.error('%s %s failed: %s', request.method, request.path, exc.message)
        return error_response(exc.message, exc.status_code)

    @app.errorhandler(StaleDataError)
    def handle_stale_data(exc):
        db.session.rollback()
        logger.warning('Concurrent modification on %s: %s', request.path, exc)
        return error_response(ConflictError.default_message, ConflictError.status_code)

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(exc):
        db.session.rollback()
        logger.exception('Storage failure on %s %s', request.method, request.path)
        return error_response(StorageError.default_message, StorageError.status_code)

    @app.errorhandler(404)
    def handle_not_found(exc):
        if request.path.startswith('/api/'):
            return error_response('API endpoint not found', 404)
        return error_response('Not found', 404)

    @app.errorhandler(405)
    def handle_method_not_allowed(exc):
        return error_response('Method not allowed', 405)

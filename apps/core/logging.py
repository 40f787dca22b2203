"""
Structured JSON logging and security event logging.
"""
import json
import logging
import re
import traceback
from datetime import datetime, timezone as dt_timezone
from django.utils import timezone
import sentry_sdk


class PIIMasker:
    """
    Utility class to mask credentials in logs.
    """

    API_KEY_PATTERN = re.compile(r'(token|secret|password|auth)["\']?\s*[:=]\s*["\']?([^"\'\s,}]+)', re.IGNORECASE)

    # Sensitive field names that should be masked
    SENSITIVE_FIELDS = {
        'password', 'password_hash', 'passwd', 'raw_password',
        'token', 'access_token', 'bearer_token',
        'secret', 'secret_key',
        'authorization',
    }

    @classmethod
    def mask_text(cls, text):
        """Mask tokens, secrets and passwords in text."""
        if not isinstance(text, str):
            return text
        return cls.API_KEY_PATTERN.sub(r'\1: ********', text)

    @classmethod
    def mask_dict(cls, data):
        """Recursively mask sensitive data in dictionaries."""
        if not isinstance(data, dict):
            return data

        masked = {}
        for key, value in data.items():
            if any(sensitive in key.lower() for sensitive in cls.SENSITIVE_FIELDS):
                if value and not isinstance(value, (dict, list)):
                    masked[key] = '********'
                else:
                    masked[key] = value
            elif isinstance(value, dict):
                masked[key] = cls.mask_dict(value)
            elif isinstance(value, list):
                masked[key] = [cls.mask_dict(item) if isinstance(item, dict) else cls.mask_text(item) for item in value]
            elif isinstance(value, str):
                masked[key] = cls.mask_text(value)
            else:
                masked[key] = value

        return masked


class JSONFormatter(logging.Formatter):
    """
    Format log records as JSON for structured logging.
    Includes request_id from extra fields if available.
    Automatically masks credentials.
    """

    RESERVED = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName',
        'levelname', 'levelno', 'lineno', 'module', 'msecs', 'message',
        'pathname', 'process', 'processName', 'relativeCreated',
        'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
        'taskName', 'request_id',
    }

    def format(self, record):
        log_data = {
            'timestamp': datetime.now(dt_timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': PIIMasker.mask_text(record.getMessage()),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if hasattr(record, 'request_id'):
            log_data['request_id'] = record.request_id

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': PIIMasker.mask_text(str(record.exc_info[1])),
                'traceback': [PIIMasker.mask_text(line) for line in traceback.format_exception(*record.exc_info)],
            }

        # Add any extra fields
        for key, value in record.__dict__.items():
            if key in self.RESERVED or key.startswith('_'):
                continue
            try:
                if isinstance(value, dict):
                    masked_value = PIIMasker.mask_dict(value)
                elif isinstance(value, str):
                    masked_value = PIIMasker.mask_text(value)
                else:
                    masked_value = value

                json.dumps(masked_value)  # Test if serializable
                log_data[key] = masked_value
            except (TypeError, ValueError):
                log_data[key] = PIIMasker.mask_text(str(value))

        return json.dumps(log_data)


class SecurityLogger:
    """
    Centralized security event logging.

    All security events go to the 'security' logger with:
    - Event type
    - Timestamp
    - IP address
    - User information (if available)
    - Additional context

    Critical events are also sent to Sentry for real-time alerting.
    """

    CRITICAL_EVENTS = {
        'invalid_token_signature',
        'default_admin_created',
    }

    @staticmethod
    def log_event(event_type: str, level: str = 'warning', **context):
        """
        Log a security event with structured data.

        Args:
            event_type: Type of security event (e.g., 'failed_login')
            level: Log level ('info', 'warning', 'error', 'critical')
            **context: Additional context data (ip_address, username, etc.)
        """
        logger = logging.getLogger('security')

        log_data = {
            'event_type': event_type,
            'timestamp': timezone.now().isoformat(),
        }
        log_data.update(context)
        log_data = PIIMasker.mask_dict(log_data)

        log_method = getattr(logger, level, logger.warning)
        log_method(
            f"Security event: {event_type}",
            extra=log_data
        )

        if event_type in SecurityLogger.CRITICAL_EVENTS:
            sentry_sdk.capture_message(
                f"Critical security event: {event_type}",
                level='error',
            )

    @staticmethod
    def log_failed_login(username: str, ip_address: str, user_agent: str = None):
        """
        Log a failed login attempt.

        The reason is never recorded so the log cannot be used to tell
        unknown usernames from wrong passwords.
        """
        SecurityLogger.log_event(
            'failed_login',
            level='warning',
            username=username,
            ip_address=ip_address,
            user_agent=user_agent,
        )

    @staticmethod
    def log_permission_denied(user, required_roles: set, ip_address: str):
        SecurityLogger.log_event(
            'permission_denied',
            level='warning',
            username=user.username if user else None,
            user_id=str(user.id) if user else None,
            role=user.role if user else None,
            required_roles=sorted(required_roles),
            ip_address=ip_address
        )

    @staticmethod
    def log_invalid_token(ip_address: str, reason: str = None):
        """
        Log a rejected bearer token.

        Bad signatures are critical: they indicate forged tokens or a
        rotated JWT secret.
        """
        event_type = 'invalid_token_signature' if reason and 'signature' in reason.lower() else 'invalid_token'
        SecurityLogger.log_event(
            event_type,
            level='warning',
            ip_address=ip_address,
            reason=reason,
        )

    @staticmethod
    def log_rate_limit_exceeded(endpoint: str, ip_address: str, username: str = None, limit: str = None):
        SecurityLogger.log_event(
            'rate_limit_exceeded',
            level='warning',
            endpoint=endpoint,
            ip_address=ip_address,
            username=username,
            limit=limit
        )

    @staticmethod
    def log_default_admin_created(username: str, stock_password: bool):
        SecurityLogger.log_event(
            'default_admin_created',
            level='warning' if stock_password else 'info',
            username=username,
            stock_password=stock_password,
        )

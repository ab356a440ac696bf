"""
Game Logger Module for the Wordle chat bot

This module provides structured logging for chat commands, bot replies
and game events. Every entry is a JSON document on a single line so logs
can be grepped or shipped without extra parsing rules.
"""

import logging
import json
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path

from ..config.app_config import Config


class GameLogger:
    """
    Centralized logging system for the Wordle chat bot.

    Features:
    - Command tracking with group/user identification
    - Bot reply logging
    - Game lifecycle event logging
    - JSON structured logs for easy parsing
    """

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, str(level).upper(), logging.INFO)

        # Setup main game logger
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Setup the main game logger with file handler."""
        logger = logging.getLogger('wordle_game')
        logger.setLevel(self.level)

        # Prevent duplicate handlers
        if logger.handlers:
            logger.handlers.clear()

        # Create log file with date
        log_file = self.log_dir / f"game_log_{datetime.now().strftime('%Y-%m-%d')}.log"

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(self.level)

        # Console handler for only important messages (WARNING and above)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)

        file_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_formatter = logging.Formatter(
            '%(levelname)s: %(message)s'
        )

        file_handler.setFormatter(file_formatter)
        console_handler.setFormatter(console_formatter)

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)

        return logger

    def _get_sender_identity(self, message) -> Dict[str, Optional[str]]:
        """Extract sender identity information from a chat message."""
        if message is None:
            return {'group_id': None, 'user_id': 'system', 'sender_name': None}
        return {
            'group_id': getattr(message, 'group_id', None),
            'user_id': getattr(message, 'user_id', None) or 'unknown',
            'sender_name': getattr(message, 'sender_name', None),
        }

    def _create_log_entry(self,
                          event_type: str,
                          action: str,
                          user_info: Dict[str, Optional[str]],
                          details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'user': user_info,
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def log_user_action(self,
                        message,
                        action: str,
                        group_id: Optional[str] = None,
                        **kwargs):
        """
        Log a user command with full context.

        Args:
            message: ChatMessage that triggered the action (None for system actions)
            action: Type of action (e.g., 'start_game', 'submit_guess', 'abandon_game')
            group_id: Group identifier if different from the message's
            **kwargs: Additional details to log
        """
        user_info = self._get_sender_identity(message)

        details = {
            'group_id': group_id or user_info['group_id'],
            'text': getattr(message, 'text', None),
            **kwargs
        }

        log_message = self._create_log_entry('USER_ACTION', action, user_info, details)
        self.logger.info(log_message)

    def log_server_response(self,
                            message,
                            action: str,
                            success: bool,
                            response_data: Dict[str, Any],
                            group_id: Optional[str] = None,
                            **kwargs):
        """
        Log bot replies with full context.

        Args:
            message: ChatMessage being answered
            action: Action that was performed
            success: Whether the action succeeded
            response_data: Data being returned to the transport
            group_id: Group identifier if applicable
            **kwargs: Additional details to log
        """
        user_info = self._get_sender_identity(message)

        safe_response = self._sanitize_response_data(response_data)

        details = {
            'group_id': group_id or user_info['group_id'],
            'success': success,
            'response_size': len(str(response_data)),
            'response_data': safe_response,
            **kwargs
        }

        event_type = 'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR'
        log_message = self._create_log_entry(event_type, action, user_info, details)

        if success:
            self.logger.info(log_message)
        else:
            self.logger.error(log_message)

    def log_game_event(self,
                       group_id: Optional[str],
                       event: str,
                       user_id: Optional[str] = None,
                       **kwargs):
        """
        Log game lifecycle events.

        Args:
            group_id: Group identifier
            event: Type of game event (e.g., 'game_won', 'game_lost', 'game_deleted')
            user_id: User who triggered the event, 'system' for timers
            **kwargs: Additional game details
        """
        user_info = {'group_id': group_id, 'user_id': user_id or 'system', 'sender_name': None}

        details = {
            'group_id': group_id,
            **kwargs
        }

        log_message = self._create_log_entry('GAME_EVENT', event, user_info, details)
        self.logger.info(log_message)

    def log_error(self,
                  message,
                  error: Exception,
                  action: str,
                  group_id: Optional[str] = None):
        """
        Log errors with full context.

        Args:
            message: ChatMessage being processed (may be None)
            error: Exception that occurred
            action: Action that was being performed
            group_id: Group identifier if applicable
        """
        user_info = self._get_sender_identity(message)

        details = {
            'group_id': group_id or user_info['group_id'],
            'error_type': type(error).__name__,
            'error_message': str(error),
            'action': action
        }

        log_message = self._create_log_entry('ERROR', action, user_info, details)
        self.logger.error(log_message)

    def _sanitize_response_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Mask the answer of running games and shrink image payloads."""
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}

        sanitized = data.copy()

        if 'state' in sanitized and isinstance(sanitized['state'], dict):
            state = sanitized['state']
            sanitized['state'] = {
                'letter_count': state.get('letter_count'),
                'max_attempts': state.get('max_attempts'),
                'attempts': state.get('attempts'),
                'finished': state.get('finished'),
                'outcome': state.get('outcome'),
                'guesses_count': len(state.get('guesses', [])),
                'answer_revealed': state.get('answer') is not None
            }

        if 'replies' in sanitized and isinstance(sanitized['replies'], list):
            sanitized['replies'] = [
                {'type': 'image', 'bytes': len(reply.get('data', ''))}
                if isinstance(reply, dict) and reply.get('type') == 'image' else reply
                for reply in sanitized['replies']
            ]

        return sanitized

    def get_log_stats(self) -> Dict[str, Any]:
        """Get statistics about logged events (useful for monitoring)."""
        try:
            log_file = self.log_dir / f"game_log_{datetime.now().strftime('%Y-%m-%d')}.log"
            if not log_file.exists():
                return {'error': 'No log file found for today'}

            stats = {
                'log_file': str(log_file),
                'file_size_mb': round(log_file.stat().st_size / (1024 * 1024), 2),
                'total_entries': 0,
                'user_actions': 0,
                'server_responses': 0,
                'game_events': 0,
                'errors': 0
            }

            with open(log_file, 'r', encoding='utf-8') as f:
                for line in f:
                    if line.strip():
                        stats['total_entries'] += 1
                        if 'USER_ACTION' in line:
                            stats['user_actions'] += 1
                        elif 'SERVER_RESPONSE' in line:
                            stats['server_responses'] += 1
                        elif 'GAME_EVENT' in line:
                            stats['game_events'] += 1
                        elif 'ERROR' in line:
                            stats['errors'] += 1

            return stats

        except Exception as e:
            return {'error': f'Failed to get stats: {str(e)}'}


# Global logger instance
game_logger = GameLogger(Config.LOG_DIR, Config.LOG_LEVEL)

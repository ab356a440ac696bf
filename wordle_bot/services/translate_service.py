"""
Translation Service

Optional enrichment: translates a target word through the Baidu translate
API when the word list has no definition for it. Every failure, including
timeouts, results in an empty string.
"""

import hashlib
import random
import re
from typing import Optional

import requests

from ..config.game_settings import TRANSLATE_TIMEOUT_SECONDS
from ..utils.game_logger import game_logger

BAIDU_TRANSLATE_URL = 'https://fanyi-api.baidu.com/api/trans/vip/translate'

BAIDU_ERROR_MESSAGES = {
    '52001': 'Request timed out, check the network connection',
    '52002': 'System error, please retry',
    '52003': 'Unauthorized user, check the appid',
    '54000': 'Required parameter missing',
    '54001': 'Signature error, check the appkey',
    '54003': 'Access frequency limited, slow down requests',
    '54004': 'Insufficient account balance',
    '54005': 'Too many long queries, slow down',
    '58000': 'Client IP not allowed',
    '58001': 'Translation direction not supported',
    '58002': 'Service is currently closed',
    '90107': 'Authentication not passed or not yet effective',
}


class BaiduTranslator:
    """Thin client for the Baidu general translation API."""

    def __init__(self,
                 appid: str = '',
                 appkey: str = '',
                 from_lang: str = 'en',
                 to_lang: str = 'zh',
                 enabled: bool = True,
                 timeout: float = TRANSLATE_TIMEOUT_SECONDS,
                 session: Optional[requests.Session] = None):
        self.appid = appid
        self.appkey = appkey
        self.from_lang = from_lang
        self.to_lang = to_lang
        self.enabled = enabled
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config) -> 'BaiduTranslator':
        return cls(
            appid=config.BAIDU_TRANSLATE_APPID,
            appkey=config.BAIDU_TRANSLATE_APPKEY,
            from_lang=config.BAIDU_TRANSLATE_FROM,
            to_lang=config.BAIDU_TRANSLATE_TO,
            enabled=config.TRANSLATE_ENABLED,
        )

    @property
    def configured(self) -> bool:
        return bool(self.appid and self.appkey)

    def __call__(self, text: str) -> str:
        return self.translate(text)

    def sign(self, text: str, salt: str) -> str:
        return hashlib.md5(f"{self.appid}{text}{salt}{self.appkey}".encode('utf-8')).hexdigest()

    def translate(self, text: str, from_lang: Optional[str] = None, to_lang: Optional[str] = None) -> str:
        """
        Translate text, returning '' on any failure.

        Args:
            text: Text to translate
            from_lang: Source language (defaults to the configured one)
            to_lang: Target language (defaults to the configured one)
        """
        if not self.enabled:
            game_logger.logger.debug("Translation disabled")
            return ''
        if not self.configured:
            game_logger.logger.warning("Baidu translate appid/appkey not configured, skipping translation")
            return ''
        if not text or not isinstance(text, str) or not text.strip():
            game_logger.logger.warning(f"Invalid text for translation: {text!r}")
            return ''

        text = text.strip()
        salt = str(random.randint(32768, 65536))
        params = {
            'q': text,
            'from': from_lang or self.from_lang,
            'to': to_lang or self.to_lang,
            'appid': self.appid,
            'salt': salt,
            'sign': self.sign(text, salt),
        }

        try:
            response = self.session.get(
                BAIDU_TRANSLATE_URL,
                params=params,
                headers={'Accept': 'application/json'},
                timeout=self.timeout
            )
        except requests.Timeout:
            game_logger.logger.warning(f"Baidu translate request timed out for '{text}'")
            return ''
        except requests.RequestException as e:
            game_logger.logger.warning(f"Baidu translate request failed: {e}")
            return ''

        if response.status_code != 200:
            game_logger.logger.warning(f"Baidu translate HTTP error {response.status_code}: {response.text[:80]}")
            return ''

        try:
            data = response.json()
        except ValueError:
            game_logger.logger.warning("Baidu translate returned a non-JSON body")
            return ''

        if data.get('error_code'):
            code = str(data['error_code'])
            reason = BAIDU_ERROR_MESSAGES.get(code) or data.get('error_msg') or 'Unknown error'
            game_logger.logger.warning(f"Baidu translate API error [{code}]: {reason}")
            return ''

        results = data.get('trans_result') or []
        if results and results[0].get('dst'):
            translation = results[0]['dst']
            game_logger.logger.debug(f"Translated '{text}' -> '{translation}'")
            return translation

        game_logger.logger.warning(f"Unexpected Baidu translate payload: {data}")
        return ''

    def detect_language(self, text: str) -> str:
        """Best-effort language code for text, '' when detection fails."""
        if not text or not isinstance(text, str) or not text.strip():
            return ''
        text = text.strip()
        if not self.translate(text, 'auto', 'zh'):
            return ''
        if re.fullmatch(r'[a-zA-Z\s]+', text):
            return 'en'
        if re.search(r'[\u4e00-\u9fff]', text):
            return 'zh'
        if re.search(r'[\u3040-\u309f\u30a0-\u30ff]', text):
            return 'jp'
        if re.search(r'[\uac00-\ud7af]', text):
            return 'kor'
        return 'auto'

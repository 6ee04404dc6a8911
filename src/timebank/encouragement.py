"""Encouragement messages shown after a child logs study or screen time."""

from __future__ import annotations

import textwrap
from typing import Any, Protocol

from google import genai
from google.genai import errors, types

from .exceptions import EncouragementAuthError, EncouragementError
from .i18n import Translator
from .models import TransactionType

_AUTH_MARKERS = ("Requested entity was not found", "API_KEY", "project", "permission")

_LANGUAGE_NAMES = {"ko": "Korean", "en": "English"}


class EncouragementProvider(Protocol):
    def get_encouragement(self, name: str, amount: int, kind: TransactionType) -> str:
        ...


def fallback_message(translator: Translator, name: str, kind: TransactionType) -> str:
    key = "fallback.deposit" if kind is TransactionType.DEPOSIT else "fallback.withdraw"
    return translator.translate(key, name=name)


class CannedEncouragement:
    """Return the translated fallback message without any network access."""

    def __init__(self, translator: Translator | None = None) -> None:
        self.translator = translator or Translator()

    def get_encouragement(self, name: str, amount: int, kind: TransactionType) -> str:
        return fallback_message(self.translator, name, kind)


def build_prompt(name: str, amount: int, kind: TransactionType, *, locale: str = "ko") -> str:
    language = _LANGUAGE_NAMES.get(locale, "English")
    if kind is TransactionType.DEPOSIT:
        prompt = f"""
            You are a cheerful, encouraging older sibling or guardian figure.
            {name} just studied for {amount} minutes!
            Write a very short, enthusiastic message (1-2 sentences) in {language} praising them.
            Use emojis. Make them feel proud.
            Don't be too formal.
            """
    else:
        prompt = f"""
            You are a friendly guardian.
            {name} is using {amount} minutes of their saved time to watch TV.
            Write a very short, friendly message (1 sentence) in {language} saying "Enjoy your break!" or "Have fun!".
            Remind them gently that resting is important too. Use emojis.
            """
    return textwrap.dedent(prompt).strip()


def _is_auth_failure(exc: errors.APIError) -> bool:
    if exc.code in (401, 403):
        return True
    detail = " ".join(str(part) for part in (exc.status, exc.message, exc.details) if part)
    return any(marker in detail for marker in _AUTH_MARKERS)


class GeminiEncouragement:
    """Generate messages through the ``google-genai`` client.

    Credential problems surface as :class:`EncouragementAuthError` so the
    caller can ask a parent for a new key; every other failure becomes
    :class:`EncouragementError`.
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gemini-3-flash-preview",
        locale: str = "ko",
        timeout: float = 6,
        client: Any | None = None,
    ) -> None:
        if not api_key:
            raise EncouragementAuthError("A Gemini API key is required.")
        self.model = model
        self.locale = locale
        self.timeout = timeout
        self._client = client or genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )

    def get_encouragement(self, name: str, amount: int, kind: TransactionType) -> str:
        if kind is TransactionType.INTEREST:
            raise ValueError("Interest payments do not request encouragement.")
        prompt = build_prompt(name, amount, kind, locale=self.locale)
        try:
            response = self._client.models.generate_content(model=self.model, contents=prompt)
            text = (response.text or "").strip()
        except errors.APIError as exc:
            if _is_auth_failure(exc):
                raise EncouragementAuthError(f"Gemini rejected the credentials ({exc.code}).") from exc
            raise EncouragementError(f"Gemini request failed with HTTP {exc.code}.") from exc
        except Exception as exc:
            raise EncouragementError(f"Gemini request failed: {exc!r}") from exc
        if not text:
            raise EncouragementError("Gemini returned an empty message.")
        return text


__all__ = [
    "CannedEncouragement",
    "EncouragementProvider",
    "GeminiEncouragement",
    "build_prompt",
    "fallback_message",
]

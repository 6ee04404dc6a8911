"""Internationalisation helpers for TimeBank."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class Translator:
    """Store translations for labels and canned messages."""

    def __init__(self, default_locale: str = "ko", *, translations: Optional[Mapping[str, Mapping[str, str]]] = None) -> None:
        self.default_locale = default_locale
        self._translations: Dict[str, Dict[str, str]] = {
            "en": {
                "study.workbook": "Workbook",
                "study.book": "Reading",
                "study.video": "Video lesson",
                "usage.youtube_game": "YouTube/Games",
                "usage.tv_watch": "TV",
                "interest.note": "No TV for {hours} hours! {percent}% interest paid",
                "interest.message": "Amazing patience! Your time is growing! 📈",
                "fallback.deposit": "{name}, that's amazing! You worked so hard today! 👏",
                "fallback.withdraw": "{name}, enjoy your TV time! 📺",
            },
            "ko": {
                "study.workbook": "문제집 풀기",
                "study.book": "책 읽기",
                "study.video": "영상 공부",
                "usage.youtube_game": "유튜브/게임",
                "usage.tv_watch": "TV 시청",
                "interest.note": "📺 TV 안 본지 {hours}시간 경과! 이자 {percent}% 지급",
                "interest.message": "참을성이 대단해요! 시간이 불어나고 있어요! 📈",
                "fallback.deposit": "{name}, 정말 대단해! 오늘도 열심히 했구나! 👏",
                "fallback.withdraw": "{name}, 즐거운 TV 시간 보내! 📺",
            },
        }
        if translations:
            for locale, mapping in translations.items():
                self._translations.setdefault(locale, {}).update(mapping)
        if self.default_locale not in self._translations:
            raise ValueError(f"Unknown default locale: {default_locale!r}")

    def translate(self, key: str, *, locale: Optional[str] = None, **params: Any) -> str:
        target_locale = locale or self.default_locale
        language = self._translations.get(target_locale) or self._translations[self.default_locale]
        template = language.get(key, key)
        return template.format(**params) if params else template


__all__ = ["Translator"]

"""User-facing strings per locale."""

from typing import Dict

MESSAGES: Dict[str, Dict[str, str]] = {
    "ko": {
        "title": "음성 메모",
        "start_label": "인식 시작",
        "stop_label": "인식 중지",
        "empty": "아직 저장된 음성 메모가 없습니다.",
        "please_speak": "말씀해 주세요",
        "recognition_unavailable": "이 기기에서 음성 인식을 사용할 수 없습니다",
        "start_failed": "인식을 시작할 수 없습니다: {reason}",
        "recognition_error": "인식 오류: {code}",
        "permission_denied": "마이크 권한이 없어 음성 인식을 사용할 수 없습니다.",
        "permission_prompt": "음성 메모가 마이크를 사용하도록 허용하시겠습니까?",
        "save_failed": "메모를 저장할 수 없습니다: {reason}",
        "controls": "[Space/Enter] 시작/중지   [q] 종료",
    },
    "en": {
        "title": "Voice Notes",
        "start_label": "Start recognition",
        "stop_label": "Stop recognition",
        "empty": "No voice notes saved yet.",
        "please_speak": "Please speak",
        "recognition_unavailable": "Speech recognition is not available on this device",
        "start_failed": "Cannot start recognition: {reason}",
        "recognition_error": "Recognition error: {code}",
        "permission_denied": "Speech recognition cannot be used without microphone permission.",
        "permission_prompt": "Allow Voice Notes to use the microphone?",
        "save_failed": "Cannot save note: {reason}",
        "controls": "[Space/Enter] start/stop   [q] quit",
    },
}

DEFAULT_LOCALE = "ko"


class MessageCatalog:
    """Looks up and formats messages for one locale."""

    def __init__(self, locale: str = DEFAULT_LOCALE):
        # Accept full tags like "en-US"
        language = locale.split("-")[0].split("_")[0].lower()
        self.locale = language if language in MESSAGES else DEFAULT_LOCALE
        self.messages = MESSAGES[self.locale]

    def get(self, key: str, **kwargs) -> str:
        return self.messages[key].format(**kwargs)

from __future__ import annotations

from typing import Callable, Optional

MIN_TITLE_LENGTH = 2
MAX_TITLE_LENGTH = 30


def validate_title(value: str | None) -> str:
    """Return the error message for a simulation title, or "" when valid."""
    title = (value or "").strip()
    if not title:
        return "시뮬레이션 제목을 입력해주세요."
    if len(title) < MIN_TITLE_LENGTH:
        return f"제목은 {MIN_TITLE_LENGTH}글자 이상 입력해주세요."
    if len(title) > MAX_TITLE_LENGTH:
        return f"제목은 {MAX_TITLE_LENGTH}글자 이하로 입력해주세요."
    return ""


class SimulationForm:
    def __init__(
        self,
        on_create: Callable[[str], None] | None = None,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        self.on_create = on_create
        self.on_close = on_close
        self.is_open = False
        self.title = ""
        self.error = ""

    def open(self) -> None:
        self.is_open = True
        self.title = ""
        self.error = ""

    def set_title(self, value: str) -> str:
        self.title = value
        self.error = validate_title(value)
        return self.error

    def create(self) -> Optional[str]:
        self.error = validate_title(self.title)
        if self.error:
            return None
        title = self.title.strip()
        if self.on_create:
            self.on_create(title)
        return title

    def close(self) -> None:
        self.is_open = False
        self.title = ""
        self.error = ""
        if self.on_close:
            self.on_close()

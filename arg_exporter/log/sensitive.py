import re
from typing import Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from loguru import Record

secret_patterns = {
    "Bearer token": r"[Bb]earer\s+[A-Za-z0-9\-_\.=]{20,}",
    "JSON Web Token": r"eyJ[A-Za-z0-9\-_]{10,}\.[A-Za-z0-9\-_]{10,}\.[A-Za-z0-9\-_]*",
    "Client secret": r"[c|C][l|L][i|I][e|E][n|N][t|T][_\-]?[s|S][e|E][c|C][r|R][e|E][t|T]['\"]?\s*[:=]\s*['\"]?[^\s'\",]{8,}",
    "Storage account key": r"AccountKey=[A-Za-z0-9+/=]{40,}",
    "SAS signature": r"[?&]sig=[A-Za-z0-9%+/=]{20,}",
}


class SensitiveLogFilter:
    def __init__(self) -> None:
        self.compiled_patterns = [
            re.compile(pattern) for pattern in secret_patterns.values()
        ]

    def hide_sensitive_strings(self, *tokens: str | None) -> None:
        self.compiled_patterns.extend(
            [
                re.compile(re.escape(token.strip()))
                for token in tokens
                if token and token.strip()
            ]
        )

    def mask_string(self, string: str, full_hide: bool = False) -> str:
        masked_string = string
        for pattern in self.compiled_patterns:
            replace: Callable[[re.Match[str]], str] | str = (
                "[REDACTED]"
                if full_hide
                else lambda match: match.group()[:6] + "[REDACTED]"
            )
            masked_string = pattern.sub(replace, masked_string)
        return masked_string

    def create_filter(self, full_hide: bool = False) -> Callable[["Record"], bool]:
        def _filter(record: "Record") -> bool:
            record["message"] = self.mask_string(record["message"], full_hide)
            return True

        return _filter


sensitive_log_filter = SensitiveLogFilter()

import json
from typing import Any, Dict


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant: {name}")


class Response:
    def __init__(self, status: int = 0, headers: Dict[str, str] = None, body: str = None):
        """Hold the outcome of one Request.send() call."""
        self.status = status
        self.headers = headers or {}
        self.body = body

    def get_body(self) -> Any:
        """Return the body decoded as JSON when it parses, else the raw text."""
        if not self.body:
            return ""
        try:
            return json.loads(self.body, parse_constant=_reject_constant)
        except (ValueError, RecursionError):
            return self.body

    def __repr__(self) -> str:
        return f"<Response [{self.status}]>"

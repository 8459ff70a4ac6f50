# tests/helpers.py
"""Shared test doubles for the model endpoint and the clock."""

VALID_API_KEY = "AIzaSyTestKey0123456789abcdef"


class FakeClock:
    """
    Controllable clock plus matching async sleep.

    sleep() records the requested delay and advances the clock by it.
    Only suitable for sequential callers; concurrent tests use the real clock.
    """

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds

    async def sleep(self, seconds: float):
        self.sleeps.append(seconds)
        self.now += seconds


def gemini_success(text: str = "The document says hello.") -> dict:
    return {
        "candidates": [
            {
                "content": {"parts": [{"text": text}], "role": "model"},
                "finishReason": "STOP",
            }
        ]
    }


def gemini_error(code: int, message: str, status: str) -> dict:
    return {"error": {"code": code, "message": message, "status": status}}

import time

from oko.builtin_function import BuiltinFunction, Module
from oko.std.common import expect_finite
from oko.types import Value


# seconds slept per call, within what time.sleep accepts
MAX_SLEEP_CHUNK = 3600.0


def populate_time_module() -> Module:
    def std_now() -> Value:
        return Value.number(time.time_ns() // 1_000_000)

    def std_sleep(ms: Value) -> None:
        expect_finite('sleep', ms)
        deadline = time.monotonic() + ms.value / 1000
        # blocks the only thread until the deadline has passed
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            time.sleep(min(remaining, MAX_SLEEP_CHUNK))

    return {
        'now': BuiltinFunction('now', 0, std_now),
        'sleep': BuiltinFunction('sleep', 1, std_sleep),
    }

import os


def parity_enabled() -> bool:
    return os.getenv("BETAJAX_RUN_PARITY", "0") == "1"


def parity_dps() -> int:
    return int(os.getenv("BETAJAX_PARITY_DPS", "64"))


__all__ = ["parity_enabled", "parity_dps"]

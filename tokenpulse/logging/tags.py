# tokenpulse/logging/tags.py
"""
Log tags.

Every log line starts with one of these so grep can isolate a subsystem:

    logger.info(f"{LOADER} start (timeout=2000ms)")
"""

LOADER = "[LOADER]"
DIFF = "[DIFF]"
REALTIME = "[REALTIME]"
SESSION = "[SESSION]"
VALIDATION = "[VALIDATION]"
CONFIG = "[CONFIG]"
API = "[API]"
CLI = "[CLI]"

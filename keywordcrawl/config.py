import os
import logging
from pathlib import Path
from typing import Callable, Optional, TypeVar

try:
	from dotenv import load_dotenv
except ImportError:
	logging.warning("python-dotenv not available; using environment variables only")
else:
	loaded = load_dotenv()
	if not loaded and Path(".env").exists():
		raise RuntimeError(".env file present but failed to load")

T = TypeVar("T")


def _read(name: str) -> Optional[str]:
	"""Return the variable with surrounding blanks removed; unset and empty both read as None."""
	raw = os.getenv(name)
	if raw is None or not raw.strip():
		return None
	return raw.strip()


def _convert(name: str, default: T, cast: Callable[[str], T]) -> T:
	raw = _read(name)
	if raw is None:
		return default
	try:
		return cast(raw)
	except ValueError:
		logging.exception("Invalid %s: %r", name, raw)
		return default


def get_str_env(name: str, default: str) -> str:
	return _convert(name, default, str)


def get_optional_str_env(name: str) -> Optional[str]:
	return _read(name)


def get_int_env(name: str, default: int) -> int:
	return _convert(name, default, int)


def get_float_env(name: str, default: float) -> float:
	return _convert(name, default, float)


# Read once at import; the container re-reads it through get_optional_str_env.
DATABASE_URL = get_optional_str_env("DATABASE_URL")

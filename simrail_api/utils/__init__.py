from .helpers import remove_accents, safe_str, station_code

__all__ = ["remove_accents", "safe_str", "station_code"]

from .normalize import normalize_samples

__all__ = ["normalize_samples"]

from specguard.drift.comparator import compare_models

__all__ = ["compare_models"]
